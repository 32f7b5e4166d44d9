"""Pydantic models for notes and the keyboard."""

import re
from enum import Enum

from pydantic import BaseModel, Field, field_validator

PITCH_PATTERN = re.compile(r"^[a-g]#?[0-8]$")


class Color(str, Enum):
    """Colors a participant's notes are drawn in."""
    BLUE = "blue"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    CYAN = "cyan"
    MAGENTA = "magenta"
    BLACK = "black"


PLAYER_COLORS = (
    Color.BLUE,
    Color.RED,
    Color.GREEN,
    Color.YELLOW,
    Color.CYAN,
    Color.MAGENTA,
)
FALLBACK_COLOR = Color.BLACK


def normalize_pitch(value: str) -> str:
    normalized = value.strip().lower()
    if not PITCH_PATTERN.match(normalized):
        raise ValueError(f"invalid pitch name: {value!r}")
    return normalized


def color_for_id(player_id: int) -> Color:
    """Map a player id to its color. Ids outside the table get FALLBACK_COLOR."""
    if 0 <= player_id < len(PLAYER_COLORS):
        return PLAYER_COLORS[player_id]
    return FALLBACK_COLOR


class GameEvent(str, Enum):
    QUIT = "quit"


class Note(BaseModel):
    """A single played note."""
    pitch: str
    duration: int = Field(default=0, ge=0)  # ms
    color: Color = Color.BLUE
    delay: int = Field(default=0, ge=0)  # ms since the previous note, for replay

    @field_validator("pitch")
    @classmethod
    def validate_pitch(cls, value: str) -> str:
        return normalize_pitch(value)

    @property
    def octave(self) -> int:
        return int(self.pitch[-1])

    @property
    def base(self) -> str:
        return self.pitch[:-1]


class NoteRecord(BaseModel):
    """One timed line of a note file."""
    pitch: str
    duration: int = Field(ge=0)  # ms
    delay: int = Field(ge=0)  # ms

    @field_validator("pitch")
    @classmethod
    def validate_pitch(cls, value: str) -> str:
        return normalize_pitch(value)


class KeyboardState(BaseModel):
    """Snapshot of the shared keyboard, handed to renderers and the monitor."""
    color: Color
    sequence: int
    volume: float
    note_duration: int
    mark_duration: int
