"""Local keyboard input loop."""

import logging
import threading

from config import POLL_TIMEOUT
from game.models import GameEvent, Note
from network.sender import BroadcastError

logger = logging.getLogger(__name__)


class InputLoop:
    """Polls the render backend for keys and sends the resulting notes."""

    def __init__(self, renderer, keyboard, sender, stop: threading.Event, poll_timeout: float = POLL_TIMEOUT) -> None:
        self.renderer = renderer
        self.keyboard = keyboard
        self.sender = sender
        self.stop = stop
        self.poll_timeout = poll_timeout

    def run(self) -> None:
        """Run until the quit key is pressed or ``stop`` is set. Polling errors propagate."""
        while not self.stop.is_set():
            key = self.renderer.poll_key()
            if key is None:
                self.stop.wait(self.poll_timeout)
                continue

            event = self.keyboard.process_key(key)
            if event is GameEvent.QUIT:
                logger.info("Quit requested")
                break
            if isinstance(event, Note):
                try:
                    self.sender.tick(event)
                except BroadcastError as e:
                    logger.warning(f"Note {event.pitch} not delivered everywhere: {e}")
