"""Mastery recording for finished practice sessions."""

import logging

from .interfaces import MasteryWriter
from .models import Mastery

logger = logging.getLogger(__name__)


class MasteryRecorder:
    """Turns a finished session result into the list's stored mastery.

    Each completed session replaces the previous record; results are never
    accumulated across sessions.
    """

    def __init__(self, writer: MasteryWriter):
        self.writer = writer

    def record(self, list_id: str, correct: int, total: int) -> Mastery:
        if not 0 <= correct <= total:
            raise ValueError(f"Invalid mastery {correct}/{total} for list {list_id}")
        self.writer.record(list_id, correct, total)
        logger.info(f"Recorded mastery {correct}/{total} for list {list_id}")
        return Mastery(correct, total)
