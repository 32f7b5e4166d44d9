"""UDP receiver that turns datagrams into network events."""

import logging
import socket

from network.codec import decode_event
from network.models import Address, ReceivedEvent

logger = logging.getLogger(__name__)

RECV_BUFFER_SIZE = 65535


class Receiver:
    """Owns the listening socket. Only the dispatcher thread polls it."""

    def __init__(self, address: Address, sock: socket.socket | None = None) -> None:
        if sock is None:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(address)
        self.socket = sock
        logger.info(f"Receiving note events on {self.socket.getsockname()}")

    @property
    def local_port(self) -> int:
        return self.socket.getsockname()[1]

    def poll_event(self) -> ReceivedEvent:
        """
        Block until a datagram arrives and decode it.

        Raises DecodeError for payloads that are not a known event and
        OSError when the socket itself fails.
        """
        data, src = self.socket.recvfrom(RECV_BUFFER_SIZE)
        event = decode_event(data)
        return ReceivedEvent(event=event, src=(src[0], src[1]))

    def close(self) -> None:
        self.socket.close()
