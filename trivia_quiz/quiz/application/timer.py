import threading
from collections.abc import Callable
from typing import Protocol

from trivia_quiz.shared.telemetry import Telemetry


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class ThreadingScheduler:
    """Runs each callback once on a daemon `threading.Timer`."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class CountdownTimer:
    """
    A cancellable once-per-interval countdown.

    The timer is the only writer of `remaining`. Each start() bumps a
    generation counter; a tick scheduled by an earlier run sees a stale
    generation and does nothing, so a cancelled countdown can never call
    back into a discarded session.
    """

    def __init__(self, scheduler: Scheduler | None = None, interval: float = 1.0) -> None:
        self.scheduler = scheduler or ThreadingScheduler()
        self.interval = interval
        self.telemetry = Telemetry("CountdownTimer")
        self._lock = threading.Lock()
        self._generation = 0
        self._handle: Cancellable | None = None
        self._remaining = 0
        self._running = False
        self._on_tick: Callable[[int], None] | None = None
        self._on_expire: Callable[[], None] | None = None

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def is_running(self) -> bool:
        return self._running

    def start(
        self,
        duration: int,
        on_tick: Callable[[int], None],
        on_expire: Callable[[], None],
    ) -> None:
        """Restarts from `duration`; any previous countdown is cancelled."""
        self.cancel()
        with self._lock:
            self._generation += 1
            self._remaining = max(0, duration)
            self._on_tick = on_tick
            self._on_expire = on_expire
            self._running = self._remaining > 0
            generation = self._generation

        self.telemetry.log_info("Countdown started", duration=duration)
        if not self._running:
            on_expire()
            return
        self._schedule(generation)

    def cancel(self) -> None:
        """Idempotent. Safe to call from inside a tick or expiry callback."""
        with self._lock:
            was_running = self._running
            self._generation += 1
            self._running = False
            handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()
        if was_running:
            self.telemetry.log_info("Countdown cancelled", remaining=self._remaining)

    def _schedule(self, generation: int) -> None:
        handle = self.scheduler.call_later(self.interval, lambda: self._tick(generation))
        with self._lock:
            if generation == self._generation:
                self._handle = handle
                return
        # Cancelled while we were scheduling
        handle.cancel()

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or not self._running:
                return
            self._remaining = max(0, self._remaining - 1)
            remaining = self._remaining
            expired = remaining == 0
            if expired:
                self._running = False
                self._handle = None
            on_tick, on_expire = self._on_tick, self._on_expire

        if on_tick:
            on_tick(remaining)
        if expired:
            self.telemetry.log_info("Countdown expired")
            if on_expire:
                on_expire()
            return
        self._schedule(generation)
