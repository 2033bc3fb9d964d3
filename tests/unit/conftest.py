"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests never touch the network; time is driven by a manual clock.
"""

import inspect
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import pytest

from coldboard.backend.core.scheduler import CancelToken, new_token
from coldboard.backend.schemas.board import SpecificBoard
from coldboard.backend.services.mutations import NoteMutationController
from coldboard.backend.services.notes_api import NotesAPIClient


# =============================================================================
# Clock Fixtures
# =============================================================================


class ManualScheduler:
    """
    Deterministic Scheduler for tests.

    Nothing fires until advance() is awaited. Timers fire in due-time order
    (scheduling order on ties), and coroutine callbacks are awaited before
    the next timer fires.
    """

    def __init__(self) -> None:
        self.now = 0
        self._timers: dict[CancelToken, tuple[int, Callable[[], Any]]] = {}

    @property
    def pending(self) -> int:
        return len(self._timers)

    def schedule(self, delay_ms: int, callback: Callable[[], Any]) -> CancelToken:
        token = new_token(delay_ms)
        self._timers[token] = (self.now + delay_ms, callback)
        return token

    def cancel(self, token: CancelToken) -> bool:
        return self._timers.pop(token, None) is not None

    async def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            due = [(at, token) for token, (at, _) in self._timers.items() if at <= target]
            if not due:
                break
            at, token = min(due, key=lambda d: (d[0], d[1].id))
            _, callback = self._timers.pop(token)
            self.now = at
            result = callback()
            if inspect.isawaitable(result):
                await result
        self.now = target


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Manual clock implementing the Scheduler protocol."""
    return ManualScheduler()


# =============================================================================
# Notes API Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_remote() -> AsyncMock:
    """
    Mock notes API client.

    Usage:
        async def test_load(mock_remote, make_note):
            mock_remote.fetch_notes.return_value = [make_note("n1")]
    """
    remote = AsyncMock(spec=NotesAPIClient)
    remote.fetch_notes.return_value = []
    remote.delete_note.return_value = None
    return remote


@pytest.fixture
def controller_factory(mock_remote: AsyncMock, scheduler: ManualScheduler) -> Callable[..., NoteMutationController]:
    """
    Build a NoteMutationController on the mock remote and manual clock.

    Usage:
        def test_x(controller_factory, make_note):
            controller = controller_factory([make_note("n1")], scope=AllNotes())
    """

    def _build(notes=(), scope=None, delete_delay_ms: int | None = None) -> NoteMutationController:
        return NoteMutationController(
            mock_remote,
            scheduler,
            scope or SpecificBoard("b1"),
            notes=notes,
            delete_delay_ms=delete_delay_ms,
        )

    return _build

