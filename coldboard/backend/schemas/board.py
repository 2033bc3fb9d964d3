"""
Board Schemas.

Board scope variants and the user-facing feedback objects a board session
produces (error dialogs and the undo toast).
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

ALL_NOTES_SLUG = "all-notes"
ARCHIVE_SLUG = "archive"


@dataclass(frozen=True)
class SpecificBoard:
    """A real board, addressed by id."""

    board_id: str

    @property
    def slug(self) -> str:
        return self.board_id


@dataclass(frozen=True)
class AllNotes:
    """Pseudo-board listing active notes from every board in the organization."""

    @property
    def slug(self) -> str:
        return ALL_NOTES_SLUG


@dataclass(frozen=True)
class Archive:
    """Pseudo-board listing archived notes from every board in the organization."""

    @property
    def slug(self) -> str:
        return ARCHIVE_SLUG


BoardScope = SpecificBoard | AllNotes | Archive


def parse_board_scope(value: str) -> BoardScope:
    """Map a route segment ("all-notes", "archive" or a board id) to a scope."""
    if not value:
        raise ValueError("board scope must not be empty")
    if value == ALL_NOTES_SLUG:
        return AllNotes()
    if value == ARCHIVE_SLUG:
        return Archive()
    return SpecificBoard(value)


def is_aggregate(scope: BoardScope) -> bool:
    """True for the pseudo-boards that span several real boards."""
    return not isinstance(scope, SpecificBoard)


class ErrorDialog(BaseModel):
    """Modal shown after a failed action. Stays until explicitly dismissed."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str


class Notification(BaseModel):
    """Transient toast, optionally carrying an action (e.g. Undo)."""

    model_config = ConfigDict(frozen=True)

    message: str
    action_label: str | None = None
    duration_ms: int
    note_id: str | None = None
