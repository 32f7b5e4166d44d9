import threading

import pytest

from game.keyboard import PianoKeyboard
from network.codec import decode_event
from network.sender import Sender


class FakeSocket:
    """Records datagrams instead of sending them."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)
        self._lock = threading.Lock()

    def sendto(self, data, addr):
        if tuple(addr) in self.fail_for:
            raise ConnectionRefusedError(f"refused by {addr}")
        with self._lock:
            self.sent.append((data, tuple(addr)))
        return len(data)

    def decoded(self):
        return [(decode_event(data), addr) for data, addr in self.sent]

    def close(self):
        pass


class FakeRenderer:
    def __init__(self, keys=()):
        self.keys = list(keys)
        self.drawn = []
        self.played = []

    def draw_keyboard(self, state):
        self.drawn.append(state)

    def play_note(self, note, state):
        self.played.append(note)

    def poll_key(self):
        if self.keys:
            return self.keys.pop(0)
        return None

    def close(self):
        pass


@pytest.fixture
def fake_socket():
    return FakeSocket()


@pytest.fixture
def sender(fake_socket):
    return Sender(("0.0.0.0", 0), ("127.0.0.1", 9999), sock=fake_socket)


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def keyboard(renderer):
    return PianoKeyboard(renderer, sequence=3)
