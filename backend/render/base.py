"""Render backend interface and the headless implementation."""

import logging
from typing import Protocol

from game.models import KeyboardState, Note

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """What the session needs from a render backend."""

    def draw_keyboard(self, state: KeyboardState) -> None: ...

    def play_note(self, note: Note, state: KeyboardState) -> None: ...

    def poll_key(self) -> str | None:
        """Return the next pending key without blocking, or None."""
        ...

    def close(self) -> None: ...


class HeadlessRenderer:
    """Renders notes into the log. Has no local input."""

    def draw_keyboard(self, state: KeyboardState) -> None:
        logger.debug(f"Keyboard: color={state.color.value} octave={state.sequence} volume={state.volume}")

    def play_note(self, note: Note, state: KeyboardState) -> None:
        logger.info(f"Note {note.pitch} ({note.color.value}, {note.duration} ms, volume {state.volume:.1f})")

    def poll_key(self) -> str | None:
        return None

    def close(self) -> None:
        pass
