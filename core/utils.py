"""Utility functions for spelldrill application."""

import random
import uuid


def shuffle(items, rng=None) -> list:
    """Return a shuffled copy of items (Fisher-Yates). The input is not modified.

    rng can be any object with randint(a, b), e.g. a seeded random.Random.
    """
    rng = rng or random
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def normalize_answer(text: str) -> str:
    """Normalize a spelling for comparison: trimmed and case-folded."""
    return (text or '').strip().casefold()


def is_correct_spelling(answer: str, target: str) -> bool:
    return normalize_answer(answer) == normalize_answer(target)


def new_id() -> str:
    """Short random identifier for lists, words and sessions."""
    return str(uuid.uuid4())[:8]
