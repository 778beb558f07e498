"""Session controller: runs the practice state machine against real collaborators."""

import logging
from typing import Callable

from .interfaces import AudioNotifier, SpeechNarrator, Scheduler, WordSource
from .mastery import MasteryRecorder
from . import session as transitions

logger = logging.getLogger(__name__)


class SessionController:
    """Owns the active practice session and executes its effects.

    Narration, sound cues and listeners are best-effort: their failures are
    logged and never reach the state machine.
    """

    def __init__(self, narrator: SpeechNarrator, notifier: AudioNotifier,
                 recorder: MasteryRecorder, scheduler: Scheduler,
                 word_source: WordSource = None, rng=None):
        self.narrator = narrator
        self.notifier = notifier
        self.recorder = recorder
        self.scheduler = scheduler
        self.word_source = word_source
        self.rng = rng
        self.session = None
        self.last_result = None  # {list_id, correct, total} of the last finished session
        self._round_complete_listeners = []
        self._finish_listeners = []

    def on_round_complete(self, listener: Callable[[int], None]) -> None:
        """Register listener(retry_count) for the switch to the retry round."""
        self._round_complete_listeners.append(listener)

    def on_finish(self, listener: Callable[[dict], None]) -> None:
        """Register listener(result) called after the mastery is recorded."""
        self._finish_listeners.append(listener)

    @property
    def is_active(self) -> bool:
        return self.session is not None

    def view(self) -> dict:
        return transitions.build_view(self.session)

    def start(self, list_id: str, words: list) -> dict | None:
        """Start a new session, replacing any current one.

        Returns None (and leaves the current state alone) when words is empty.
        """
        session, effects = transitions.start_session(list_id, words, self.rng)
        if session is None:
            logger.info(f"Nothing to practice in list {list_id}")
            return None
        if self.session is not None:
            logger.info(f"Discarding session {self.session.session_id} for list {self.session.list_id}")
        self.session = session
        self.last_result = None
        logger.info(f"Started session {session.session_id} for list {list_id} with {session.total_words} words")
        self._run(effects)
        return self.view()

    def start_list(self, list_id: str) -> dict | None:
        """Start a session over the words the word source holds for list_id."""
        if self.word_source is None:
            raise RuntimeError("No word source configured")
        return self.start(list_id, self.word_source.words(list_id))

    def update_input(self, text: str) -> dict:
        self.session, effects = transitions.update_input(self.session, text)
        self._run(effects)
        return self.view()

    def submit_answer(self, raw_input: str) -> dict:
        before = self.session
        self.session, effects = transitions.submit_answer(self.session, raw_input)
        if self.session is not before:
            logger.info(f"Session {self.session.session_id}: '{raw_input}' judged {self.session.feedback.value}")
        self._run(effects)
        return self.view()

    def repeat_word(self) -> dict:
        self.session, effects = transitions.repeat_word(self.session)
        self._run(effects)
        return self.view()

    def _advance(self, session_id: str, token: int) -> None:
        if self.session is None or self.session.session_id != session_id:
            logger.debug(f"Ignoring advance for stale session {session_id}")
            return
        self.session, effects = transitions.advance(self.session, token, self.rng)
        self._run(effects)

    def _run(self, effects: list[dict]) -> None:
        session_id = self.session.session_id if self.session else None
        for effect in effects:
            effect_type = effect['type']
            if effect_type == 'speak':
                self._later(effect['delay_ms'], session_id, lambda text=effect['text']: self._speak(text))
            elif effect_type == 'play':
                self._safely('audio cue', self.notifier.play, effect['kind'])
            elif effect_type == 'schedule_advance':
                self.scheduler.call_later(
                    effect['delay_ms'],
                    lambda sid=effect['session_id'], token=effect['token']: self._advance(sid, token)
                )
            elif effect_type == 'round_complete':
                self._later(effect['delay_ms'], session_id,
                            lambda count=effect['retry_count']: self._notify_round_complete(count))
            elif effect_type == 'record_mastery':
                self._finish(effect)
            else:
                raise ValueError(f"Unknown effect type: {effect_type}")

    def _later(self, delay_ms: int, session_id: str, callback: Callable[[], None]) -> None:
        """Run callback after delay_ms, unless session_id is no longer the active session."""
        if not delay_ms:
            callback()
            return

        def run():
            if self.session is None or self.session.session_id != session_id:
                logger.debug(f"Dropping delayed callback for stale session {session_id}")
                return
            callback()

        self.scheduler.call_later(delay_ms, run)

    def _speak(self, text: str) -> None:
        self._safely('narration', self.narrator.speak, text)

    def _notify_round_complete(self, retry_count: int) -> None:
        logger.info(f"Round 1 complete, retrying {retry_count} words")
        for listener in self._round_complete_listeners:
            self._safely('round complete listener', listener, retry_count)

    def _finish(self, effect: dict) -> None:
        result = {'list_id': effect['list_id'], 'correct': effect['correct'], 'total': effect['total']}
        self.recorder.record(result['list_id'], result['correct'], result['total'])
        self.last_result = result
        logger.info(f"Finished practice for list {result['list_id']}: {result['correct']}/{result['total']}")
        for listener in self._finish_listeners:
            self._safely('finish listener', listener, result)

    def _safely(self, what: str, func: Callable, *args) -> None:
        try:
            func(*args)
        except Exception as e:
            logger.warning(f"{what} failed: {type(e).__name__}: {e}")
