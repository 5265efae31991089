"""
Timer scheduling for the auction engine.

The engine never sleeps or spawns tasks itself. It asks a Scheduler for
cancelable handles: one repeating countdown and a few one-shot deferred
AI passes. Two schedulers are provided:

- AsyncioScheduler: real time, on the running event loop (API server)
- VirtualScheduler: a virtual clock advanced by hand (tests, headless runs)
"""

import asyncio
import heapq
import itertools
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class ScheduledCall:
    """Handle to a scheduled callback."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Cancel the callback. Safe to call more than once."""
        self._cancelled = True


class Scheduler:
    """Interface for scheduling engine callbacks."""

    def time(self) -> float:
        """Current time in seconds on this scheduler's clock."""
        raise NotImplementedError

    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        """Run callback once after delay seconds."""
        raise NotImplementedError

    def call_every(self, interval: float, callback: Callback) -> ScheduledCall:
        """Run callback every interval seconds until cancelled."""
        raise NotImplementedError


# =============================================================================
# Real time (asyncio)
# =============================================================================

class _AsyncioCall(ScheduledCall):
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        super().__init__()
        self._handle = handle

    def cancel(self) -> None:
        super().cancel()
        self._handle.cancel()


class _AsyncioRepeat(ScheduledCall):
    def __init__(self) -> None:
        super().__init__()
        self._task: Optional[asyncio.Task] = None

    def cancel(self) -> None:
        super().cancel()
        if self._task:
            self._task.cancel()


class AsyncioScheduler(Scheduler):
    """Scheduler backed by the asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def time(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        call: Optional[_AsyncioCall] = None

        def run() -> None:
            if call is not None and call.cancelled:
                return
            try:
                callback()
            except Exception:
                logger.exception("Error in scheduled auction callback")

        call = _AsyncioCall(self.loop.call_later(delay, run))
        return call

    def call_every(self, interval: float, callback: Callback) -> ScheduledCall:
        call = _AsyncioRepeat()
        call._task = self.loop.create_task(self._repeat_loop(call, interval, callback))
        return call

    async def _repeat_loop(self, call: ScheduledCall, interval: float, callback: Callback) -> None:
        """Tick loop - runs until the handle is cancelled."""
        while not call.cancelled:
            try:
                await asyncio.sleep(interval)
                if call.cancelled:
                    break
                callback()
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Error in auction tick loop")


# =============================================================================
# Virtual time
# =============================================================================

class _VirtualCall(ScheduledCall):
    def __init__(self, callback: Callback, interval: Optional[float]) -> None:
        super().__init__()
        self.callback = callback
        self.interval = interval


class VirtualScheduler(Scheduler):
    """
    Deterministic scheduler with a hand-driven clock.

    Nothing runs until advance() or run_until_idle() is called. Calls due
    at the same instant run in the order they were scheduled.

    Example:
        scheduler = VirtualScheduler()
        engine = AuctionEngine(teams, scheduler=scheduler)
        engine.set_current_player(player)
        scheduler.advance(31)  # Whole round with no bids
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, _VirtualCall]] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of live scheduled calls."""
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        call = _VirtualCall(callback, None)
        self._push(self._now + max(0.0, delay), call)
        return call

    def call_every(self, interval: float, callback: Callback) -> ScheduledCall:
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        call = _VirtualCall(callback, interval)
        self._push(self._now + interval, call)
        return call

    def _push(self, when: float, call: _VirtualCall) -> None:
        # Rounded so float accumulation doesn't reorder same-instant calls
        heapq.heappush(self._queue, (round(when, 9), next(self._seq), call))

    def _run_next(self, deadline: Optional[float]) -> bool:
        """Run the earliest due call. Returns False when nothing is due."""
        while self._queue:
            when, _, call = self._queue[0]
            if deadline is not None and when > deadline:
                return False
            heapq.heappop(self._queue)
            if call.cancelled:
                continue

            self._now = max(self._now, when)
            if call.interval is not None:
                # Reschedule first so the callback may cancel its own handle
                self._push(when + call.interval, call)
            call.callback()
            return True
        return False

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every call that falls due.

        Returns:
            Number of callbacks run
        """
        deadline = round(self._now + seconds, 9)
        ran = 0
        while self._run_next(deadline):
            ran += 1
        self._now = max(self._now, deadline)
        return ran

    def run_until_idle(self, max_steps: int = 100_000) -> int:
        """
        Run calls in time order until none remain.

        Raises:
            RuntimeError: if max_steps calls run without going idle
        """
        ran = 0
        while self._run_next(None):
            ran += 1
            if ran >= max_steps:
                raise RuntimeError(f"Scheduler still busy after {max_steps} calls")
        return ran
