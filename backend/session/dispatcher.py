"""
Network receive handling.

A single consumer loop pulls events off the receiver and applies them to
the sender's peer directory and the shared keyboard.
"""

import logging
import threading

from game.models import color_for_id
from network.codec import DecodeError
from network.models import NoteEvent, Peers, PlayerId, PlayerJoin, ReceivedEvent
from network.sender import DirectoryFullError

logger = logging.getLogger(__name__)


class Dispatcher:
    """Applies received network events to session state."""

    def __init__(self, receiver, sender, keyboard) -> None:
        self.receiver = receiver
        self.sender = sender
        self.keyboard = keyboard

    def handle(self, received: ReceivedEvent) -> None:
        event = received.event
        src_ip = received.src[0]

        if isinstance(event, PlayerJoin):
            remote_addr = (src_ip, event.port)
            try:
                self.sender.register_remote_socket(self.receiver.local_port, remote_addr)
            except DirectoryFullError as e:
                logger.warning(str(e))
            except OSError as e:
                logger.warning(f"Join of {src_ip}:{event.port} not fully announced: {e}")
        elif isinstance(event, Peers):
            self.sender.replace_peers(event.port, event.peers, src_ip)
        elif isinstance(event, PlayerId):
            logger.info(f"Assigned player id {event.id} by {src_ip}")
            self.keyboard.set_note_color(color_for_id(event.id))
        elif isinstance(event, NoteEvent):
            self.keyboard.play_note(event.note)
        else:
            logger.debug(f"Ignoring {type(event).__name__} from {src_ip}")

    def run(self, stop: threading.Event | None = None) -> None:
        """
        Receive and handle events until ``stop`` is set.

        Malformed datagrams are dropped. Socket errors from the receiver
        propagate to the caller.
        """
        while stop is None or not stop.is_set():
            try:
                received = self.receiver.poll_event()
            except DecodeError as e:
                logger.debug(f"Dropping undecodable datagram: {e}")
                continue
            self.handle(received)
