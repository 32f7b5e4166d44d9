"""
Shared piano keyboard state.

The keyboard is touched by the input loop, the network dispatcher and the
playback thread, so every read-modify-write happens under one lock.
"""

import logging
import threading
from pathlib import Path

from config import DEFAULT_MARK_DURATION, DEFAULT_NOTE_DURATION, DEFAULT_SEQUENCE, DEFAULT_VOLUME, MAX_SEQUENCE
from game.models import Color, GameEvent, KeyboardState, Note
from game.notefile import NoteWriter

logger = logging.getLogger(__name__)

PITCHES = ("c", "c#", "d", "d#", "e", "f", "f#", "g", "g#", "a", "a#", "b")

# key -> semitones above C of the row's octave
LOWER_ROW = "zsxdcvgbhnjm,l.;/"
UPPER_ROW = "q2w3er5t6y7ui9o0p[=]"
KEY_OFFSETS: dict[str, tuple[int, int]] = {
    **{key: (0, i) for i, key in enumerate(LOWER_ROW)},
    **{key: (1, i) for i, key in enumerate(UPPER_ROW)},
}

VOLUME_STEP = 0.1
QUIT_KEYS = {"esc"}


def pitch_for_key(key: str, sequence: int) -> str | None:
    """Resolve a key to a pitch name at the given base octave."""
    offset = KEY_OFFSETS.get(key)
    if offset is None:
        return None
    row, semitones = offset
    octave = sequence + row + semitones // len(PITCHES)
    return f"{PITCHES[semitones % len(PITCHES)]}{octave}"


class PianoKeyboard:
    """The local keyboard: color, octave, volume and the render backend."""

    def __init__(
        self,
        renderer,
        sequence: int = DEFAULT_SEQUENCE,
        volume: float = DEFAULT_VOLUME,
        note_duration: int = DEFAULT_NOTE_DURATION,
        mark_duration: int = DEFAULT_MARK_DURATION,
        color: Color = Color.BLUE,
    ) -> None:
        self._lock = threading.Lock()
        self._renderer = renderer
        self._sequence = sequence
        self._volume = volume
        self._note_duration = note_duration
        self._mark_duration = mark_duration
        self._color = color
        self._recorder: NoteWriter | None = None
        self._on_note: list = []  # callbacks: fn(note)

    @property
    def color(self) -> Color:
        with self._lock:
            return self._color

    def on_note(self, callback) -> None:
        """Register a callback invoked with every note played on this keyboard."""
        self._on_note.append(callback)

    def state(self) -> KeyboardState:
        with self._lock:
            return self._state()

    def _state(self) -> KeyboardState:
        return KeyboardState(
            color=self._color,
            sequence=self._sequence,
            volume=self._volume,
            note_duration=self._note_duration,
            mark_duration=self._mark_duration,
        )

    def set_record_file(self, path: Path) -> None:
        with self._lock:
            if self._recorder is not None:
                self._recorder.close()
            self._recorder = NoteWriter(path)

    def set_note_color(self, color: Color) -> None:
        with self._lock:
            self._color = color
            self._renderer.draw_keyboard(self._state())
        logger.info(f"Note color set to {color.value}")

    def make_note(self, pitch: str, duration: int | None = None) -> Note:
        """Build a note in the keyboard's current color."""
        with self._lock:
            return self._make_note(pitch, duration)

    def _make_note(self, pitch: str, duration: int | None) -> Note:
        if duration is None:
            duration = self._note_duration
        return Note(pitch=pitch, duration=duration, color=self._color)

    def process_key(self, key: str) -> Note | GameEvent | None:
        """
        Translate a key press into a note to send, a quit request, or a
        local adjustment (octave, volume), which returns None.
        """
        if key in QUIT_KEYS:
            return GameEvent.QUIT

        with self._lock:
            if key in ("left", "right"):
                step = -1 if key == "left" else 1
                self._sequence = min(max(self._sequence + step, 0), MAX_SEQUENCE)
                self._renderer.draw_keyboard(self._state())
                return None
            if key in ("up", "down"):
                step = VOLUME_STEP if key == "up" else -VOLUME_STEP
                self._volume = round(min(max(self._volume + step, 0.0), 1.0), 2)
                self._renderer.draw_keyboard(self._state())
                return None

            pitch = pitch_for_key(key, self._sequence)
            if pitch is None:
                return None
            note = self._make_note(pitch, None)
            if self._recorder is not None:
                self._recorder.write(note)
            return note

    def play_note(self, note: Note) -> None:
        """Render a note, local or remote, against the keyboard."""
        with self._lock:
            self._renderer.play_note(note, self._state())
        for cb in self._on_note:
            try:
                cb(note)
            except Exception as e:
                logger.error(f"Note callback error: {e}")

    def draw(self) -> None:
        with self._lock:
            self._renderer.draw_keyboard(self._state())

    def close(self) -> None:
        with self._lock:
            if self._recorder is not None:
                self._recorder.close()
                self._recorder = None
