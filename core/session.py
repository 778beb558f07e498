"""Practice session state machine.

Every transition takes the current PracticeSession (or None) and returns
(new_session, effects). The input session is never modified. Effects are
plain dicts describing what the host should do next:

    {'type': 'speak', 'text': str, 'delay_ms': int}
    {'type': 'play', 'kind': 'correct' | 'wrong'}
    {'type': 'schedule_advance', 'delay_ms': int, 'session_id': str, 'token': int}
    {'type': 'round_complete', 'delay_ms': int, 'retry_count': int}
    {'type': 'record_mastery', 'list_id': str, 'correct': int, 'total': int}

A returned session of None means no session is active.
"""

from enum import Enum

from .config import (
    CORRECT_PAUSE_MS, INCORRECT_PAUSE_MS,
    NARRATION_DELAY_MS, ROUND_COMPLETE_DELAY_MS
)
from .models import Word
from .utils import shuffle, is_correct_spelling, new_id


class Round(str, Enum):
    FIRST = 'first'
    RETRY = 'retry'


class Feedback(str, Enum):
    NONE = 'none'
    CORRECT = 'correct'
    INCORRECT = 'incorrect'


CUE_CORRECT = 'correct'
CUE_WRONG = 'wrong'


class PracticeSession:
    """State of one two-pass spelling quiz."""

    def __init__(self, list_id: str, queue: list[Word], total_words: int, session_id: str = None):
        self.list_id = list_id
        self.session_id = session_id or new_id()
        self.queue = list(queue)
        self.current_index = 0
        self.round = Round.FIRST
        self.mistakes_round1 = []  # Word ids missed in the first round
        self.retry_queue = []      # Words missed in the current round
        self.user_input = ''
        self.feedback = Feedback.NONE
        self.score = 0
        self.total_words = total_words
        self.last_correct = None
        self.advance_token = None
        self._token_counter = 0

    @property
    def current_word(self) -> Word:
        return self.queue[self.current_index]

    @property
    def awaiting_advance(self) -> bool:
        return self.feedback != Feedback.NONE

    def copy(self) -> 'PracticeSession':
        clone = PracticeSession(self.list_id, self.queue, self.total_words, self.session_id)
        clone.current_index = self.current_index
        clone.round = self.round
        clone.mistakes_round1 = list(self.mistakes_round1)
        clone.retry_queue = list(self.retry_queue)
        clone.user_input = self.user_input
        clone.feedback = self.feedback
        clone.score = self.score
        clone.last_correct = self.last_correct
        clone.advance_token = self.advance_token
        clone._token_counter = self._token_counter
        return clone

    def next_token(self) -> int:
        self._token_counter += 1
        return self._token_counter


def speak_effect(text: str, delay_ms: int = 0) -> dict:
    return {'type': 'speak', 'text': text, 'delay_ms': delay_ms}


def start_session(list_id: str, words: list[Word], rng=None) -> tuple[PracticeSession | None, list[dict]]:
    """Begin the first round over a shuffled copy of words.

    Returns (None, []) when there is nothing to practice.
    """
    if not words:
        return None, []
    session = PracticeSession(list_id, shuffle(words, rng), len(words))
    return session, [speak_effect(session.current_word.text, NARRATION_DELAY_MS)]


def update_input(session: PracticeSession | None, text: str) -> tuple[PracticeSession | None, list[dict]]:
    if session is None or session.awaiting_advance:
        return session, []
    session = session.copy()
    session.user_input = text
    return session, []


def submit_answer(session: PracticeSession | None, raw_input: str) -> tuple[PracticeSession | None, list[dict]]:
    """Judge raw_input against the current word and schedule the auto-advance.

    Ignored while a judged answer is still waiting for its auto-advance.
    """
    if session is None or session.awaiting_advance:
        return session, []

    session = session.copy()
    is_correct = is_correct_spelling(raw_input, session.current_word.text)
    session.user_input = raw_input
    session.last_correct = is_correct
    session.feedback = Feedback.CORRECT if is_correct else Feedback.INCORRECT
    session.advance_token = session.next_token()

    effects = [
        {'type': 'play', 'kind': CUE_CORRECT if is_correct else CUE_WRONG},
        {
            'type': 'schedule_advance',
            'delay_ms': CORRECT_PAUSE_MS if is_correct else INCORRECT_PAUSE_MS,
            'session_id': session.session_id,
            'token': session.advance_token
        }
    ]
    return session, effects


def advance(session: PracticeSession | None, token: int, rng=None) -> tuple[PracticeSession | None, list[dict]]:
    """Apply the judged answer and move to the next word, round, or finish.

    Only the token issued by the latest submit_answer is honoured; anything
    else (a timer from an abandoned session, a duplicate firing) is a no-op.
    """
    if session is None or not session.awaiting_advance or token != session.advance_token:
        return session, []

    session = session.copy()
    word = session.current_word
    if not session.last_correct:
        session.retry_queue.append(word)
        if session.round == Round.FIRST:
            session.mistakes_round1.append(word.id)
    elif session.round == Round.FIRST:
        session.score += 1

    session.advance_token = None
    session.last_correct = None
    session.user_input = ''
    session.feedback = Feedback.NONE

    if session.current_index + 1 < len(session.queue):
        session.current_index += 1
        return session, [speak_effect(session.current_word.text)]

    if session.round == Round.FIRST and session.retry_queue:
        retry_count = len(session.retry_queue)
        session.round = Round.RETRY
        session.queue = shuffle(session.retry_queue, rng)
        session.current_index = 0
        session.retry_queue = []
        return session, [
            {'type': 'round_complete', 'delay_ms': ROUND_COMPLETE_DELAY_MS, 'retry_count': retry_count},
            speak_effect(session.current_word.text, ROUND_COMPLETE_DELAY_MS)
        ]

    return finish(session)


def finish(session: PracticeSession) -> tuple[None, list[dict]]:
    """End the session, reporting the first-round score against the list size."""
    return None, [{
        'type': 'record_mastery',
        'list_id': session.list_id,
        'correct': session.score,
        'total': session.total_words
    }]


def repeat_word(session: PracticeSession | None) -> tuple[PracticeSession | None, list[dict]]:
    if session is None:
        return None, []
    return session, [speak_effect(session.current_word.text)]


def transition(session: PracticeSession | None, event: dict, rng=None) -> tuple[PracticeSession | None, list[dict]]:
    """Dispatch an event dict to the matching transition.

    Events: {'type': 'start', 'list_id', 'words'}, {'type': 'input', 'text'},
    {'type': 'submit', 'text'}, {'type': 'advance', 'token'}, {'type': 'repeat'}.
    """
    event_type = event.get('type')
    if event_type == 'start':
        new_session, effects = start_session(event['list_id'], event['words'], rng)
        if new_session is None:
            return session, effects
        return new_session, effects
    if event_type == 'input':
        return update_input(session, event['text'])
    if event_type == 'submit':
        return submit_answer(session, event['text'])
    if event_type == 'advance':
        return advance(session, event['token'], rng)
    if event_type == 'repeat':
        return repeat_word(session)
    raise ValueError(f"Unknown event type: {event_type}")


def build_view(session: PracticeSession | None) -> dict:
    """Snapshot of the session for display."""
    if session is None:
        return {
            'active': False,
            'list_id': None,
            'round': None,
            'current_word': None,
            'user_input': '',
            'feedback': Feedback.NONE.value,
            'progress': {'index': 0, 'length': 0},
            'score': 0,
            'total_words': 0
        }
    return {
        'active': True,
        'list_id': session.list_id,
        'round': session.round.value,
        'current_word': session.current_word.to_dict(),
        'user_input': session.user_input,
        'feedback': session.feedback.value,
        'progress': {'index': session.current_index, 'length': len(session.queue)},
        'score': session.score,
        'total_words': session.total_words
    }
