"""Paced playback of pre-recorded notes."""

import logging
import time
from typing import Iterable

from game.models import NoteRecord
from network.sender import BroadcastError

logger = logging.getLogger(__name__)


class PlaybackFeeder:
    """
    Sends notes from a note file as if they were played live.

    Each record's delay is divided by ``tempo``; the note takes the
    keyboard's color at the moment it is sent.
    """

    def __init__(self, records: Iterable[NoteRecord], tempo: float, keyboard, sender, sleep=time.sleep) -> None:
        self.records = records
        self.tempo = tempo
        self.keyboard = keyboard
        self.sender = sender
        self._sleep = sleep

    def delay_for(self, record: NoteRecord) -> float:
        """Seconds to wait before sending ``record``."""
        return record.delay / 1000 / self.tempo

    def run(self) -> int:
        """Play every record once. Returns the number of notes sent."""
        count = 0
        for record in self.records:
            self._sleep(self.delay_for(record))
            note = self.keyboard.make_note(record.pitch, record.duration)
            try:
                self.sender.tick(note)
            except BroadcastError as e:
                logger.warning(f"Playback note {note.pitch} not delivered everywhere: {e}")
            count += 1
        logger.info(f"Playback finished: {count} note(s)")
        return count
