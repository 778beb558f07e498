"""Abstract base classes for dependency injection."""

from abc import ABC, abstractmethod
from typing import Callable


class WordSource(ABC):
    """Supplies the words of a list for practice."""

    @abstractmethod
    def words(self, list_id: str) -> list:
        """Return the ordered words of a list. Raises KeyError for unknown lists."""
        pass


class MasteryWriter(ABC):
    """Durably stores mastery results."""

    @abstractmethod
    def record(self, list_id: str, correct: int, total: int) -> None:
        """Overwrite the mastery pair stored for a list."""
        pass


class AudioNotifier(ABC):
    """Plays short correct/wrong cues."""

    @abstractmethod
    def play(self, kind: str) -> None:
        """Play the cue for kind ('correct' or 'wrong'). Must not block."""
        pass


class SpeechNarrator(ABC):
    """Speaks words aloud."""

    @abstractmethod
    def speak(self, text: str) -> None:
        """Speak text, cancelling any narration still in progress. Must not block."""
        pass


class Scheduler(ABC):
    """Runs callbacks after a delay on the host's event loop."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        """Run callback once, delay_ms milliseconds from now."""
        pass

    @abstractmethod
    def next_due_ms(self) -> int | None:
        """Milliseconds until the next pending callback, or None if nothing is pending."""
        pass


class Storage(WordSource, MasteryWriter):
    """Abstract base class for word lists, profile and config storage."""

    @abstractmethod
    def load_config(self) -> dict:
        """Load optional configuration. Returns config dict (may be empty)."""
        pass

    @abstractmethod
    def list_word_lists(self) -> list:
        """Return all word lists in creation order."""
        pass

    @abstractmethod
    def get_word_list(self, list_id: str):
        """Return a WordList. Raises KeyError if not found."""
        pass

    @abstractmethod
    def create_word_list(self, title: str):
        """Create an empty list. Returns the new WordList."""
        pass

    @abstractmethod
    def delete_word_list(self, list_id: str) -> bool:
        """Delete a list. Returns True if it existed."""
        pass

    @abstractmethod
    def add_word(self, list_id: str, word) -> None:
        """Append a Word to a list. Raises KeyError for unknown lists."""
        pass

    @abstractmethod
    def update_word(self, list_id: str, word_id: str, field: str, value: str):
        """Change one editable field of a word. Returns the updated Word."""
        pass

    @abstractmethod
    def delete_word(self, list_id: str, word_id: str) -> bool:
        """Remove a word from a list. Returns True if it existed."""
        pass

    @abstractmethod
    def load_profile(self):
        """Return the StudentProfile (empty profile if none saved)."""
        pass

    @abstractmethod
    def save_profile(self, profile) -> None:
        """Save the StudentProfile."""
        pass
