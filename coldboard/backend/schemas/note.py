"""
Note Schemas.

Pydantic models for notes as delivered by the notes REST API. Wire names
are camelCase (``checklistItems``, ``createdAt``, ``user``); Python code uses
the snake_case attribute names. Notes are frozen: every change produces a
new instance via ``model_copy(update=...)``.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_NOTE_COLOR = "#fef3c7"


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Author(_WireModel):
    """Denormalized note author. Read-only from the board's point of view."""

    id: str
    name: str | None = None
    email: str = ""

    @property
    def display_name(self) -> str:
        """Name shown in author pickers: name, else the email's local part."""
        return self.name or self.email.split("@")[0]

    @property
    def search_label(self) -> str:
        """Text matched by the search filter: name, else the full email."""
        return self.name or self.email


class ChecklistItem(_WireModel):
    id: str
    text: str = Field(default="", alias="content")
    completed: bool = Field(default=False, alias="checked")
    order: int = 0


class Note(_WireModel):
    """
    A note on a board.

    A note is rendered as a checklist whenever ``checklist_items`` is
    present, even if the list is empty; otherwise it is free text.
    """

    id: str
    content: str = ""
    checklist_items: list[ChecklistItem] | None = Field(default=None, alias="checklistItems")
    color: str = DEFAULT_NOTE_COLOR
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    archived_at: datetime | None = Field(default=None, alias="archivedAt")
    author: Author = Field(alias="user")
    board_id: str | None = Field(default=None, alias="boardId")

    @model_validator(mode="before")
    @classmethod
    def _board_id_from_nested_board(cls, data: Any) -> Any:
        # Cross-board listings carry board: {id, name} instead of boardId
        if isinstance(data, dict) and not (data.get("boardId") or data.get("board_id")):
            board = data.get("board")
            if isinstance(board, dict) and board.get("id"):
                data = {**data, "boardId": board["id"]}
        return data

    @property
    def is_checklist(self) -> bool:
        return self.checklist_items is not None

    def __repr__(self) -> str:
        return f"<Note(id={self.id!r}, board_id={self.board_id!r})>"


class NoteCreate(_WireModel):
    """Payload for creating a note. No content means a quick (empty) note."""

    content: str | None = Field(default=None, max_length=10000)
    color: str | None = None

    @property
    def is_quick(self) -> bool:
        return not self.content


class NoteUpdate(_WireModel):
    """Partial update. Only fields that were explicitly set are sent."""

    content: str | None = Field(default=None, max_length=10000)
    color: str | None = None
    archived_at: datetime | None = Field(default=None, alias="archivedAt")
    checklist_items: list[ChecklistItem] | None = Field(default=None, alias="checklistItems")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class NoteEnvelope(BaseModel):
    """``{"note": {...}}`` body returned by create and update routes."""

    note: Note


class NoteListEnvelope(BaseModel):
    """``{"notes": [...]}`` body returned by listing routes."""

    notes: list[Note]
