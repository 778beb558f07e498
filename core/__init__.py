from .models import Word, WordList, Mastery, StudentProfile
from .interfaces import WordSource, MasteryWriter, AudioNotifier, SpeechNarrator, Scheduler, Storage
from .utils import shuffle, normalize_answer
from .session import PracticeSession, Round, Feedback
from .controller import SessionController
from .mastery import MasteryRecorder
from .scheduling import ManualScheduler
from .config import (
    CORRECT_PAUSE_MS, INCORRECT_PAUSE_MS,
    NARRATION_DELAY_MS, ROUND_COMPLETE_DELAY_MS,
    MASTERY_GOOD_RATIO
)

__all__ = [
    'Word', 'WordList', 'Mastery', 'StudentProfile',
    'WordSource', 'MasteryWriter', 'AudioNotifier', 'SpeechNarrator', 'Scheduler', 'Storage',
    'shuffle', 'normalize_answer',
    'PracticeSession', 'Round', 'Feedback',
    'SessionController', 'MasteryRecorder', 'ManualScheduler',
    'CORRECT_PAUSE_MS', 'INCORRECT_PAUSE_MS',
    'NARRATION_DELAY_MS', 'ROUND_COMPLETE_DELAY_MS',
    'MASTERY_GOOD_RATIO'
]
