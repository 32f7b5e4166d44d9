"""
Note file reading and writing.

One record per line: ``pitch duration_ms delay_ms``. Blank lines and lines
starting with ``#`` are ignored.
"""

import logging
import time
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError

from game.models import Note, NoteRecord

logger = logging.getLogger(__name__)


def parse_line(line: str) -> NoteRecord | None:
    """Parse one line. Returns None for blanks and comments, raises ValueError if malformed."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    parts = line.split()
    if len(parts) != 3:
        raise ValueError(f"expected 3 fields, got {len(parts)}")
    pitch, duration, delay = parts
    try:
        return NoteRecord(pitch=pitch, duration=int(duration), delay=int(delay))
    except ValidationError as e:
        raise ValueError(str(e)) from e


def format_record(pitch: str, duration: int, delay: int) -> str:
    return f"{pitch} {duration} {delay}\n"


class NoteReader:
    """Lazy, restartable sequence of note records from a file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def __iter__(self) -> Iterator[NoteRecord]:
        with self.path.open("r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                try:
                    record = parse_line(line)
                except ValueError as e:
                    logger.warning(f"{self.path}:{lineno}: skipping bad record: {e}")
                    continue
                if record is not None:
                    yield record


class NoteWriter:
    """Writes locally played notes, timing each against the previous one."""

    def __init__(self, path: Path, clock=time.monotonic) -> None:
        self.path = Path(path)
        self._clock = clock
        self._last: float | None = None
        self._file = self.path.open("w", encoding="utf-8", buffering=1)
        logger.info(f"Recording notes to {self.path}")

    def write(self, note: Note) -> None:
        now = self._clock()
        delay = 0 if self._last is None else int((now - self._last) * 1000)
        self._last = now
        self._file.write(format_record(note.pitch, note.duration, delay))

    def close(self) -> None:
        self._file.close()
