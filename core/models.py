"""Domain models for spelldrill application."""

from .config import (
    MASTERY_GOOD_RATIO,
    DEFAULT_DEFINITION, DEFAULT_PART_OF_SPEECH, DEFAULT_SENTENCE_TEMPLATE,
    EDITABLE_WORD_FIELDS
)
from .utils import new_id


class Word:
    """A single spelling target with its hint material."""

    def __init__(self, word_id: str, text: str, definition: str = '',
                 part_of_speech: str = '', example_sentence: str = ''):
        self.id = word_id
        self.text = text
        self.definition = definition
        self.part_of_speech = part_of_speech
        self.example_sentence = example_sentence

    @classmethod
    def create(cls, text: str, definition: str = None, part_of_speech: str = None,
               example_sentence: str = None) -> 'Word':
        """Create a new word, filling placeholders for missing details."""
        term = text.strip().lower()
        return cls(
            new_id(),
            term,
            definition or DEFAULT_DEFINITION,
            part_of_speech or DEFAULT_PART_OF_SPEECH,
            example_sentence or DEFAULT_SENTENCE_TEMPLATE.format(word=term)
        )

    def with_field(self, field: str, value: str) -> 'Word':
        """Return a copy with one editable field replaced."""
        if field not in EDITABLE_WORD_FIELDS:
            raise ValueError(f"Field '{field}' cannot be edited")
        data = self.to_dict()
        data[field] = value
        return Word.from_dict(data)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'text': self.text,
            'definition': self.definition,
            'part_of_speech': self.part_of_speech,
            'example_sentence': self.example_sentence
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Word':
        return cls(
            str(data['id']),
            data['text'],
            data.get('definition', ''),
            data.get('part_of_speech', ''),
            data.get('example_sentence', '')
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Word):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Word({self.id!r}, {self.text!r})"


class Mastery:
    """Result of the last completed practice session for a list."""

    def __init__(self, correct: int = 0, total: int = 0):
        self.correct = correct
        self.total = total

    @property
    def practised(self) -> bool:
        return self.total > 0

    @property
    def ratio(self) -> float:
        if not self.total:
            return 0.0
        return self.correct / self.total

    @property
    def is_strong(self) -> bool:
        return self.practised and self.ratio > MASTERY_GOOD_RATIO

    def get_display(self) -> str:
        return f"Mastery: {self.correct}/{self.total}"

    def to_dict(self) -> dict:
        return {'correct': self.correct, 'total': self.total}

    @classmethod
    def from_dict(cls, data: dict | None) -> 'Mastery':
        data = data or {}
        return cls(int(data.get('correct', 0)), int(data.get('total', 0)))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Mastery):
            return NotImplemented
        return (self.correct, self.total) == (other.correct, other.total)

    def __repr__(self) -> str:
        return f"Mastery({self.correct}/{self.total})"


class WordList:
    """A titled list of words with its mastery record."""

    def __init__(self, list_id: str, title: str, words: list = None, mastery: Mastery = None):
        self.id = list_id
        self.title = title
        self.words = words or []
        self.mastery = mastery or Mastery()

    @classmethod
    def create(cls, title: str) -> 'WordList':
        return cls(new_id(), title.strip())

    def get_word(self, word_id: str) -> Word:
        for word in self.words:
            if word.id == word_id:
                return word
        raise KeyError(word_id)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'words': [w.to_dict() for w in self.words],
            'mastery': self.mastery.to_dict()
        }

    def to_summary(self) -> dict:
        """Compact form for list overviews."""
        return {
            'id': self.id,
            'title': self.title,
            'word_count': len(self.words),
            'mastery': self.mastery.to_dict(),
            'mastery_strong': self.mastery.is_strong
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WordList':
        return cls(
            str(data['id']),
            data['title'],
            [Word.from_dict(w) for w in data.get('words', [])],
            Mastery.from_dict(data.get('mastery'))
        )


class StudentProfile:
    """Name and class details shown on the home screen."""

    def __init__(self, name: str = '', s_class: str = '', class_num: str = ''):
        self.name = name
        self.s_class = s_class
        self.class_num = class_num

    @property
    def is_complete(self) -> bool:
        return bool(self.name.strip())

    def to_dict(self) -> dict:
        return {'name': self.name, 's_class': self.s_class, 'class_num': self.class_num}

    @classmethod
    def from_dict(cls, data: dict | None) -> 'StudentProfile':
        data = data or {}
        return cls(data.get('name', ''), data.get('s_class', ''), data.get('class_num', ''))
