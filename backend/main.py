"""
Piano Session: application entry point.

Binds the network sockets, starts the dispatcher (and optional playback
and monitor) threads, announces this participant to the host and runs the
local keyboard until quit.
"""

import logging
import sys
import threading

from config import LOG_FILE, ConfigError, Options, load_options
from game.keyboard import PianoKeyboard
from game.notefile import NoteReader
from network.receiver import Receiver
from network.sender import Sender
from render.base import HeadlessRenderer
from session.dispatcher import Dispatcher
from session.input_loop import InputLoop
from session.playback import PlaybackFeeder
from session.threads import start_thread

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(options: Options) -> None:
    log_file = options.log_file
    if log_file is None and not options.headless:
        # curses owns the terminal
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        log_file = LOG_FILE

    if log_file is not None:
        logging.basicConfig(level=options.log_level, format=LOG_FORMAT, filename=str(log_file))
    else:
        logging.basicConfig(level=options.log_level, format=LOG_FORMAT)


def create_renderer(options: Options):
    if options.headless:
        return HeadlessRenderer()
    from render.terminal import TerminalRenderer
    return TerminalRenderer()


def run_session(options: Options) -> int:
    """Run one session. Returns the process exit code."""
    receiver = Receiver(options.receiver_address)
    sender = Sender(options.sender_address, options.host_address)

    stop = threading.Event()
    failures: list[str] = []

    def on_fatal(name: str, error: Exception) -> None:
        failures.append(f"{name}: {error}")
        stop.set()

    renderer = create_renderer(options)
    try:
        keyboard = PianoKeyboard(
            renderer,
            sequence=options.sequence,
            volume=options.volume,
            note_duration=options.note_duration,
            mark_duration=options.mark_duration,
        )
        keyboard.draw()

        if options.monitor_port is not None:
            from api.server import start_monitor
            start_monitor(sender, keyboard, options.monitor_port, on_fatal=on_fatal)

        dispatcher = Dispatcher(receiver, sender, keyboard)
        start_thread(lambda: dispatcher.run(stop), "dispatcher", on_fatal)

        sender.register_self(receiver.local_port)

        if options.record_file is not None:
            keyboard.set_record_file(options.record_file)

        if options.play_file is not None:
            feeder = PlaybackFeeder(NoteReader(options.play_file), options.play_file_tempo, keyboard, sender)
            start_thread(feeder.run, "playback", on_fatal)

        if options.headless:
            stop.wait()
        else:
            InputLoop(renderer, keyboard, sender, stop).run()
        keyboard.close()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        renderer.close()

    # Background threads are daemons and end with the process.
    if failures:
        for failure in failures:
            print(f"piano-session: {failure}", file=sys.stderr)
        return 1
    return 0


def run(argv: list[str] | None = None) -> int:
    try:
        options = load_options(argv)
    except ConfigError as e:
        print(f"piano-session: invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_logging(options)
    logger.info("Starting piano session...")
    try:
        return run_session(options)
    except OSError as e:
        logger.critical(f"Startup failed: {e}", exc_info=True)
        print(f"piano-session: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(run())
