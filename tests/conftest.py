"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Tests run from the project root so that config/settings/*.yaml is found
through the .project_root marker.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from coldboard.backend.schemas.note import Author, ChecklistItem, Note


def build_note(
    note_id: str = "n1",
    content: str = "",
    author_id: str = "u1",
    author_name: str | None = "Alice",
    author_email: str = "alice@example.com",
    created_at: datetime | None = None,
    board_id: str | None = "b1",
    checklist: list[str] | None = None,
) -> Note:
    """Build a Note with sensible defaults. checklist=[] makes an empty checklist note."""
    items = None
    if checklist is not None:
        items = [
            ChecklistItem(id=f"{note_id}-i{i}", text=text, order=i)
            for i, text in enumerate(checklist)
        ]
    return Note(
        id=note_id,
        content=content,
        checklist_items=items,
        created_at=created_at or datetime(2024, 1, 1, 12, 0),
        author=Author(id=author_id, name=author_name, email=author_email),
        board_id=board_id,
    )


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """
    Note factory.

    Usage:
        def test_something(make_note):
            note = make_note("n1", content="hello", author_id="u2")
    """
    return build_note


@pytest.fixture
def wire_note() -> Callable[..., dict[str, Any]]:
    """Factory for note bodies as the notes API sends them (camelCase)."""

    def _wire(
        note_id: str = "n1",
        content: str = "",
        created_at: str = "2024-01-01T12:00:00Z",
        user_id: str = "u1",
        board_id: str = "b1",
        **extra: Any,
    ) -> dict[str, Any]:
        return {
            "id": note_id,
            "content": content,
            "color": "#fef3c7",
            "createdAt": created_at,
            "updatedAt": created_at,
            "archivedAt": None,
            "boardId": board_id,
            "user": {"id": user_id, "name": "Alice", "email": "alice@example.com"},
            **extra,
        }

    return _wire
