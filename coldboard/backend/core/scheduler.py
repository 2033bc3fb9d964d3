"""
Timer Scheduling.

Deferred callbacks for board sessions: the undo window on note deletion,
resize relayout coalescing and search debouncing. Everything that waits on
a timer goes through the Scheduler protocol so tests can drive a manual clock.

Usage:
    from coldboard.backend.core.scheduler import AsyncioScheduler, Debouncer

    scheduler = AsyncioScheduler()
    token = scheduler.schedule(4000, commit_delete)
    scheduler.cancel(token)

    relayout = Debouncer(scheduler, 50, apply_width)
    relayout.trigger(1280)
    relayout.trigger(1300)   # only this one fires

Callbacks may be plain functions or return a coroutine; coroutines are run
as tasks on the running loop and tracked until they finish.
"""

import asyncio
import itertools
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from coldboard.backend.core.logging import get_logger

logger = get_logger(__name__)

_token_ids = itertools.count(1)


@dataclass(frozen=True)
class CancelToken:
    """Handle returned by Scheduler.schedule."""

    id: int
    delay_ms: int


def new_token(delay_ms: int) -> CancelToken:
    return CancelToken(id=next(_token_ids), delay_ms=delay_ms)


class Scheduler(Protocol):
    def schedule(self, delay_ms: int, callback: Callable[[], Any]) -> CancelToken:
        """Run callback once after delay_ms milliseconds."""
        ...

    def cancel(self, token: CancelToken) -> bool:
        """Cancel a scheduled callback. Returns False if it already ran or was cancelled."""
        ...


class AsyncioScheduler:
    """Scheduler backed by the running event loop's call_later."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handles: dict[CancelToken, asyncio.TimerHandle] = {}
        self._tasks: set[asyncio.Task] = set()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def pending(self) -> int:
        """Number of timers that have not fired yet."""
        return len(self._handles)

    def schedule(self, delay_ms: int, callback: Callable[[], Any]) -> CancelToken:
        token = new_token(delay_ms)
        handle = self._get_loop().call_later(
            max(delay_ms, 0) / 1000, self._fire, token, callback,
        )
        self._handles[token] = handle
        return token

    def cancel(self, token: CancelToken) -> bool:
        handle = self._handles.pop(token, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def _fire(self, token: CancelToken, callback: Callable[[], Any]) -> None:
        self._handles.pop(token, None)
        try:
            result = callback()
        except Exception:
            logger.exception("Scheduled callback failed", extra={"token": token.id})
            return

        if asyncio.iscoroutine(result):
            task = self._get_loop().create_task(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "Scheduled task failed",
                extra={"error": str(task.exception())},
            )

    async def drain(self) -> None:
        """Wait for every coroutine started by a fired timer."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel all pending timers."""
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        logger.debug("Scheduler closed")


class Debouncer:
    """
    Coalesces bursts of calls into one call after a quiet period.

    Every trigger() cancels the previously scheduled call, so only the
    arguments of the last trigger within the window are delivered.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        delay_ms: int,
        callback: Callable[..., Any],
    ) -> None:
        self._scheduler = scheduler
        self._delay_ms = delay_ms
        self._callback = callback
        self._token: CancelToken | None = None

    @property
    def pending(self) -> bool:
        return self._token is not None

    def trigger(self, *args: Any) -> None:
        self.cancel()
        self._token = self._scheduler.schedule(self._delay_ms, lambda: self._run(args))

    def _run(self, args: tuple[Any, ...]) -> Any:
        self._token = None
        return self._callback(*args)

    def cancel(self) -> None:
        if self._token is not None:
            self._scheduler.cancel(self._token)
            self._token = None
