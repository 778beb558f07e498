"""Server-side collaborators for hosting practice sessions.

The server cannot play sound or speak, so narration and cues are queued in
an outbox and handed to the client with the next practice response.
Auto-advance timers run on the asyncio event loop.
"""

import asyncio
import logging
from typing import Callable

from core.controller import SessionController
from core.interfaces import AudioNotifier, SpeechNarrator, Scheduler, Storage
from core.mastery import MasteryRecorder

logger = logging.getLogger(__name__)


class AsyncioScheduler(Scheduler):
    """Scheduler backed by loop.call_later on the running event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop = None):
        self._loop = loop
        self._handles = []

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        handle = None

        def run():
            self._handles.remove(handle)
            try:
                callback()
            except Exception as e:
                logger.error(f"Scheduled callback failed: {type(e).__name__}: {e}")

        handle = self.loop.call_later(delay_ms / 1000, run)
        self._handles.append(handle)

    def next_due_ms(self) -> int | None:
        if not self._handles:
            return None
        due = min(handle.when() for handle in self._handles)
        return max(0, int((due - self.loop.time()) * 1000))


class Outbox:
    """Commands waiting to be delivered to the client."""

    def __init__(self):
        self._items = []

    def put(self, item: dict) -> None:
        self._items.append(item)

    def drain(self) -> list[dict]:
        items, self._items = self._items, []
        return items


class OutboxNarrator(SpeechNarrator):
    def __init__(self, outbox: Outbox):
        self.outbox = outbox

    def speak(self, text: str) -> None:
        self.outbox.put({'type': 'speak', 'text': text})


class OutboxNotifier(AudioNotifier):
    def __init__(self, outbox: Outbox):
        self.outbox = outbox

    def play(self, kind: str) -> None:
        self.outbox.put({'type': 'play', 'kind': kind})


class PracticeHost:
    """One controller per word list, plus the outbox it reports through."""

    def __init__(self, list_id: str, storage: Storage, scheduler: Scheduler = None, rng=None):
        self.list_id = list_id
        self.outbox = Outbox()
        self.round_complete = False
        self.finished = None
        self.controller = SessionController(
            narrator=OutboxNarrator(self.outbox),
            notifier=OutboxNotifier(self.outbox),
            recorder=MasteryRecorder(storage),
            scheduler=scheduler or AsyncioScheduler(),
            word_source=storage,
            rng=rng
        )
        self.controller.on_round_complete(self._round_completed)
        self.controller.on_finish(self._finished)

    def _round_completed(self, retry_count: int) -> None:
        self.round_complete = True
        self.outbox.put({'type': 'round_complete', 'retry_count': retry_count})

    def _finished(self, result: dict) -> None:
        self.finished = result

    def start(self) -> dict | None:
        """Start a new session. An empty list leaves the current one untouched."""
        # The start narration is delayed, so the outbox only holds the replaced session's cues
        view = self.controller.start_list(self.list_id)
        if view is not None:
            self.round_complete = False
            self.finished = None
            self.outbox.drain()
        return view

    def snapshot(self) -> dict:
        """Current view plus everything the client has not seen yet."""
        snapshot = self.controller.view()
        snapshot['cues'] = self.outbox.drain()
        snapshot['pending_ms'] = self.controller.scheduler.next_due_ms()
        snapshot['round_complete'] = self.round_complete
        snapshot['result'] = self.finished
        return snapshot
