import logging

from game.models import Color, KeyboardState, Note
from render.base import HeadlessRenderer


def test_headless_renderer_logs_note_with_volume(caplog):
    state = KeyboardState(color=Color.BLUE, sequence=2, volume=0.7, note_duration=0, mark_duration=500)
    with caplog.at_level(logging.INFO, logger="render.base"):
        HeadlessRenderer().play_note(Note(pitch="c4", duration=120, color=Color.RED), state)
    assert "Note c4 (red, 120 ms, volume 0.7)" in caplog.text


def test_headless_renderer_has_no_input():
    assert HeadlessRenderer().poll_key() is None
