"""Deterministic scheduler for tests and the local console runner."""

from typing import Callable

from .interfaces import Scheduler


class ManualScheduler(Scheduler):
    """Scheduler driven by an explicit clock.

    Nothing runs until advance() moves the clock forward; callbacks then fire
    in due order (ties in scheduling order). Callbacks may schedule further
    callbacks, which fire in the same advance() if they fall due in time.
    """

    def __init__(self):
        self.now_ms = 0
        self._pending = []  # [(due_ms, seq, callback)]
        self._seq = 0

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self._seq += 1
        self._pending.append((self.now_ms + max(0, delay_ms), self._seq, callback))

    def next_due_ms(self) -> int | None:
        if not self._pending:
            return None
        due = min(entry[:2] for entry in self._pending)[0]
        return max(0, due - self.now_ms)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def advance(self, ms: int) -> int:
        """Move the clock forward by ms, running every callback that falls due.

        Returns the number of callbacks run.
        """
        target = self.now_ms + ms
        ran = 0
        while self._pending:
            entry = min(self._pending, key=lambda e: (e[0], e[1]))
            if entry[0] > target:
                break
            self._pending.remove(entry)
            self.now_ms = max(self.now_ms, entry[0])
            entry[2]()
            ran += 1
        self.now_ms = target
        return ran

    def run_all(self, limit: int = 1000) -> int:
        """Fast-forward until no callbacks remain. Returns the number run."""
        ran = 0
        while self._pending and ran < limit:
            ran += self.advance(self.next_due_ms())
        return ran
