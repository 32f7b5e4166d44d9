import pytest
from pydantic import ValidationError

from game.models import FALLBACK_COLOR, Color, Note, color_for_id


def test_color_table():
    assert [color_for_id(i) for i in range(6)] == [
        Color.BLUE, Color.RED, Color.GREEN, Color.YELLOW, Color.CYAN, Color.MAGENTA,
    ]


@pytest.mark.parametrize("player_id", [6, 7, 100])
def test_color_fallback(player_id):
    assert color_for_id(player_id) is FALLBACK_COLOR is Color.BLACK


def test_color_is_deterministic():
    assert color_for_id(4) == color_for_id(4)


def test_note_pitch_is_normalized():
    assert Note(pitch=" A#3 ").pitch == "a#3"


@pytest.mark.parametrize("pitch", ["h4", "c", "c9", "cb4", ""])
def test_note_rejects_bad_pitch(pitch):
    with pytest.raises(ValidationError):
        Note(pitch=pitch)


def test_note_parts():
    note = Note(pitch="f#5")
    assert note.base == "f#"
    assert note.octave == 5
