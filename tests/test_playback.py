import pytest

from game.models import Color, NoteRecord
from network.models import NoteEvent
from session.playback import PlaybackFeeder


def test_tempo_scales_delay(keyboard, sender):
    feeder = PlaybackFeeder([], 2.0, keyboard, sender)
    assert feeder.delay_for(NoteRecord(pitch="c4", duration=100, delay=100)) == pytest.approx(0.05)


def test_sleeps_before_each_note_and_sends(keyboard, sender, fake_socket):
    sender.directory.replace([("10.0.0.2", 9000)])
    records = [
        NoteRecord(pitch="c4", duration=100, delay=0),
        NoteRecord(pitch="e4", duration=200, delay=300),
    ]
    sleeps = []

    def sleep(seconds):
        sleeps.append(seconds)
        assert len(fake_socket.sent) == len(sleeps) - 1

    count = PlaybackFeeder(records, 1.5, keyboard, sender, sleep=sleep).run()

    assert count == 2
    assert sleeps == [0, pytest.approx(0.2)]
    notes = [event.note for event, _ in fake_socket.decoded() if isinstance(event, NoteEvent)]
    assert [(n.pitch, n.duration) for n in notes] == [("c4", 100), ("e4", 200)]


def test_uses_color_current_at_send_time(keyboard, sender, fake_socket):
    sender.directory.replace([("10.0.0.2", 9000)])
    records = [NoteRecord(pitch="c4", duration=100, delay=0), NoteRecord(pitch="d4", duration=100, delay=10)]

    def sleep(seconds):
        if seconds:
            keyboard.set_note_color(Color.YELLOW)

    PlaybackFeeder(records, 1.0, keyboard, sender, sleep=sleep).run()
    colors = [event.note.color for event, _ in fake_socket.decoded()]
    assert colors == [Color.BLUE, Color.YELLOW]


def test_send_failures_do_not_stop_playback(keyboard, sender, fake_socket):
    sender.directory.replace([("10.0.0.2", 9000), ("10.0.0.3", 9000)])
    fake_socket.fail_for.add(("10.0.0.2", 9000))
    records = [NoteRecord(pitch="c4", duration=100, delay=0)] * 3
    assert PlaybackFeeder(records, 1.0, keyboard, sender, sleep=lambda s: None).run() == 3
    assert len(fake_socket.sent) == 3
