"""Background thread helpers."""

import logging
import threading

logger = logging.getLogger(__name__)


def start_thread(target, name: str, on_fatal=None) -> threading.Thread:
    """
    Run ``target`` on a daemon thread.

    An exception escaping ``target`` is logged and passed to ``on_fatal``
    so the main thread can shut the session down.
    """

    def runner() -> None:
        try:
            target()
        except Exception as e:
            logger.critical(f"{name} thread failed: {e}", exc_info=True)
            if on_fatal is not None:
                on_fatal(name, e)

    thread = threading.Thread(target=runner, name=name, daemon=True)
    thread.start()
    return thread
