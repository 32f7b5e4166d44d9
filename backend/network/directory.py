"""Ordered directory of peer receive addresses."""

from network.models import Address

UNSPECIFIED_HOSTS = {"", "0.0.0.0", "::"}


def is_resolved(addr: Address) -> bool:
    """Whether an address can actually be sent to."""
    host, port = addr
    return host not in UNSPECIFIED_HOSTS and port != 0


class PeerDirectory:
    """
    The peers a participant fans notes out to.

    Slot 0 holds the session host. Not thread-safe on its own; the Sender
    owns the directory and guards it with its lock.
    """

    def __init__(self, peers: list[Address] | None = None) -> None:
        self._peers: list[Address] = list(peers or [])

    def __len__(self) -> int:
        return len(self._peers)

    def __iter__(self):
        return iter(self.snapshot())

    def __contains__(self, addr: Address) -> bool:
        return tuple(addr) in self._peers

    def snapshot(self) -> list[Address]:
        return list(self._peers)

    def index_of(self, addr: Address) -> int | None:
        try:
            return self._peers.index(tuple(addr))
        except ValueError:
            return None

    def add(self, addr: Address) -> int:
        """Append ``addr`` unless already present. Returns its slot."""
        index = self.index_of(addr)
        if index is None:
            self._peers.append(tuple(addr))
            index = len(self._peers) - 1
        return index

    def replace(self, peers: list[Address]) -> None:
        self._peers = [tuple(p) for p in peers]
