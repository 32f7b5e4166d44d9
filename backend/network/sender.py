"""
UDP sender: join announcements, join handling and note fan-out.

Delivery is best effort. Every operation that touches the peer directory
runs under the sender lock so a fan-out never sees a half-updated list.
"""

import logging
import socket
import threading

from game.models import Note
from network.codec import encode_event
from network.directory import PeerDirectory, is_resolved
from network.models import Address, NoteEvent, Peers, PlayerId, PlayerJoin

logger = logging.getLogger(__name__)


class BroadcastError(OSError):
    """One or more destinations of a fan-out could not be sent to."""

    def __init__(self, failures: dict[Address, OSError]) -> None:
        self.failures = failures
        targets = ", ".join(f"{host}:{port}" for host, port in failures)
        super().__init__(f"Send failed for {len(failures)} peer(s): {targets}")


class DirectoryFullError(Exception):
    """A join was refused because the peer list would not fit in one datagram."""


class Sender:
    """Owns the sending socket, the host address and the peer directory."""

    def __init__(
        self,
        sender_address: Address,
        host_address: Address,
        sock: socket.socket | None = None,
    ) -> None:
        if sock is None:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(sender_address)
        self.socket = sock
        self.host_address = tuple(host_address)
        self.directory = PeerDirectory()
        self._lock = threading.Lock()
        self._on_peers_change: list = []  # callbacks: fn(peers)

    def on_peers_change(self, callback) -> None:
        """Register a callback invoked with the new peer list after each change."""
        self._on_peers_change.append(callback)

    def peers(self) -> list[Address]:
        with self._lock:
            return self.directory.snapshot()

    def register_self(self, local_listen_port: int) -> None:
        """Announce ourselves to the host. The reply arrives via the receiver."""
        data = encode_event(PlayerJoin(port=local_listen_port))
        with self._lock:
            self.socket.sendto(data, self.host_address)
        logger.info(f"Sent join request to host {self.host_address[0]}:{self.host_address[1]}")

    def register_remote_socket(self, local_port: int, remote_addr: Address) -> int:
        """
        Add a joining peer, send it its id and share the new peer list.

        Re-registering a known address keeps its slot. Returns the id
        assigned to the peer. Raises DirectoryFullError, leaving the
        directory untouched, when the new peer list would not fit in one
        datagram, and BroadcastError if any send failed.
        """
        remote_addr = tuple(remote_addr)
        with self._lock:
            is_new = remote_addr not in self.directory
            peers = self.directory.snapshot()
            if is_new:
                peers.append(remote_addr)
            try:
                peers_data = encode_event(Peers(port=local_port, peers=peers))
            except ValueError:
                raise DirectoryFullError(
                    f"Refusing {remote_addr[0]}:{remote_addr[1]}: {len(peers)} peers do not fit in one datagram"
                ) from None
            player_id = self.directory.add(remote_addr)

            failures: dict[Address, OSError] = {}
            try:
                self.socket.sendto(encode_event(PlayerId(id=player_id)), remote_addr)
            except OSError as e:
                failures[remote_addr] = e
            failures.update(self._fan_out(peers_data, peers))

        if is_new:
            logger.info(f"Peer {remote_addr[0]}:{remote_addr[1]} joined as player {player_id}")
            self._emit_peers(peers)
        else:
            logger.debug(f"Peer {remote_addr[0]}:{remote_addr[1]} re-joined as player {player_id}")

        if failures:
            raise BroadcastError(failures)
        return player_id

    def replace_peers(self, port: int, peers: list[Address], src_ip: str) -> list[Address]:
        """
        Adopt the host's peer list, patching slot 0 with the host's
        observed IP and its reported receive port.
        """
        peers = [tuple(p) for p in peers]
        if peers:
            peers[0] = (src_ip, port)
        else:
            peers = [(src_ip, port)]
        with self._lock:
            self.directory.replace(peers)
        logger.info(f"Peer list updated: {len(peers)} peer(s)")
        self._emit_peers(peers)
        return peers

    def tick(self, note: Note) -> None:
        """Send a note to every resolved peer. Raises BroadcastError on partial failure."""
        event = NoteEvent(note=note)
        with self._lock:
            failures = self._fan_out(encode_event(event), self.directory.snapshot())
        if failures:
            raise BroadcastError(failures)

    def _fan_out(self, data: bytes, peers: list[Address]) -> dict[Address, OSError]:
        failures: dict[Address, OSError] = {}
        for peer in peers:
            if not is_resolved(peer):
                continue
            try:
                self.socket.sendto(data, peer)
            except OSError as e:
                logger.warning(f"Send to {peer[0]}:{peer[1]} failed: {e}")
                failures[peer] = e
        return failures

    def _emit_peers(self, peers: list[Address]) -> None:
        for cb in self._on_peers_change:
            try:
                cb(list(peers))
            except Exception as e:
                logger.error(f"Peer change callback error: {e}")

    def close(self) -> None:
        self.socket.close()
