import socket

import pytest

from game.models import Color, Note
from network.codec import DecodeError
from network.models import NoteEvent, PlayerJoin
from network.receiver import Receiver
from network.sender import Sender


@pytest.fixture
def receiver():
    receiver = Receiver(("127.0.0.1", 0))
    receiver.socket.settimeout(2)
    yield receiver
    receiver.close()


@pytest.fixture
def udp_sender(receiver):
    sender = Sender(("127.0.0.1", 0), ("127.0.0.1", receiver.local_port))
    yield sender
    sender.close()


def test_join_over_loopback(receiver, udp_sender):
    udp_sender.register_self(4321)
    received = receiver.poll_event()
    assert received.event == PlayerJoin(port=4321)
    assert received.src == udp_sender.socket.getsockname()


def test_note_over_loopback(receiver, udp_sender):
    udp_sender.directory.replace([("127.0.0.1", receiver.local_port)])
    note = Note(pitch="b3", duration=80, color=Color.RED)
    udp_sender.tick(note)
    assert receiver.poll_event().event == NoteEvent(note=note)


def test_garbage_datagram_is_decode_error(receiver):
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.sendto(b"\xff\xfe garbage", ("127.0.0.1", receiver.local_port))
    with pytest.raises(DecodeError):
        receiver.poll_event()


def test_closed_socket_raises_oserror(receiver):
    receiver.close()
    with pytest.raises(OSError):
        receiver.poll_event()
