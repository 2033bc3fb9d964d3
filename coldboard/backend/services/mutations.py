"""
Optimistic Mutation Controller.

Owns one board session's note collection and applies create, update,
archive and delete locally before the notes API confirms them. Failed writes
roll the collection back to its pre-optimistic value and raise an
ErrorDialog; nothing is retried.

Deletes are deferred: the note disappears at once, a "Note deleted" toast
offers Undo, and the DELETE request is only sent when the undo window
(board.yaml timings.delete_undo_ms) runs out.

The collection is an immutable tuple replaced on every write, so views
memoized on it are invalidated by identity.

Usage:
    controller = NoteMutationController(get_notes_client(), AsyncioScheduler(), parse_board_scope(board_slug))
    await controller.load()
    controller.delete_note("n1")
    controller.undo_delete("n1")
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from coldboard.backend.core.config import get_board_config
from coldboard.backend.core.exceptions import ApplicationError, ExternalServiceError
from coldboard.backend.core.scheduler import CancelToken, Scheduler
from coldboard.backend.core.utils import utc_now
from coldboard.backend.schemas.board import (
    BoardScope,
    ErrorDialog,
    Notification,
    SpecificBoard,
    is_aggregate,
)
from coldboard.backend.schemas.note import Note, NoteCreate, NoteUpdate
from coldboard.backend.services.base import BaseService
from coldboard.backend.services.notes_api import NotesRemote

BOARD_SELECTION_REQUIRED = ErrorDialog(
    title="Board selection required",
    description="Please select a board to add the note to",
)
CREATE_FAILED_TITLE = "Failed to create note"
UPDATE_FAILED_TITLE = "Failed to update note"
DELETE_FAILED_TITLE = "Failed to delete note"
LOAD_FAILED_TITLE = "Failed to load notes"
ARCHIVE_FAILED = ErrorDialog(
    title="Archive Failed",
    description="Failed to archive note. Please try again.",
)
UNARCHIVE_FAILED = ErrorDialog(
    title="Unarchive Failed",
    description="Failed to unarchive note. Please try again.",
)


@dataclass(frozen=True)
class PendingDeletion:
    """A note hidden from the board while its delete waits out the undo window."""

    note_id: str
    original_note: Note
    token: CancelToken


def _description(error: ApplicationError, fallback: str) -> str:
    if isinstance(error, ExternalServiceError) and error.server_message:
        return error.server_message
    return fallback


class NoteMutationController(BaseService):
    """
    Optimistic note state for one board session.

    Attributes:
        error_dialog: Dialog to show, or None. Cleared by dismiss_error().
        notification: Latest toast (e.g. the Undo offer), or None.
        adding_checklist_item: Note that should open with a new checklist
            row focused (set after quick create).
        load_succeeded: Whether the most recent load() got the notes.
    """

    def __init__(
        self,
        remote: NotesRemote,
        scheduler: Scheduler,
        scope: BoardScope,
        notes: Iterable[Note] = (),
        delete_delay_ms: int | None = None,
    ) -> None:
        super().__init__(source="board", board_scope=scope.slug)
        self._remote = remote
        self._scheduler = scheduler
        self.scope = scope
        self._delete_delay_ms = (
            delete_delay_ms if delete_delay_ms is not None
            else get_board_config().timings.delete_undo_ms
        )
        self._notes: tuple[Note, ...] = tuple(notes)
        self._pending: dict[str, PendingDeletion] = {}

        self.error_dialog: ErrorDialog | None = None
        self.notification: Notification | None = None
        self.adding_checklist_item: str | None = None
        self.load_succeeded = False

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def notes(self) -> tuple[Note, ...]:
        return self._notes

    @property
    def pending_deletions(self) -> Mapping[str, PendingDeletion]:
        return MappingProxyType(self._pending)

    def get_note(self, note_id: str) -> Note | None:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def is_pending_delete(self, note_id: str) -> bool:
        return note_id in self._pending

    # -------------------------------------------------------------------------
    # State helpers (replace-on-write)
    # -------------------------------------------------------------------------

    def _without(self, note_id: str) -> tuple[Note, ...]:
        return tuple(n for n in self._notes if n.id != note_id)

    def _prepend(self, note: Note) -> None:
        self._notes = (note,) + self._without(note.id)

    def _append(self, note: Note) -> None:
        self._notes = self._without(note.id) + (note,)

    def _remove(self, note_id: str) -> None:
        self._notes = self._without(note_id)

    def _replace(self, note: Note) -> None:
        self._notes = tuple(note if n.id == note.id else n for n in self._notes)

    def _board_id_for(self, note: Note) -> str | None:
        if note.board_id:
            return note.board_id
        if isinstance(self.scope, SpecificBoard):
            return self.scope.board_id
        return None

    def _fail(self, dialog: ErrorDialog) -> None:
        self.error_dialog = dialog

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def replace_notes(self, notes: Iterable[Note]) -> None:
        """Replace the collection wholesale (full refetch). Pending deletes stay hidden."""
        self._notes = tuple(n for n in notes if n.id not in self._pending)

    async def load(self) -> tuple[Note, ...]:
        """Fetch the scope's notes. On failure the current collection is kept."""
        try:
            notes = await self._remote.fetch_notes(self.scope)
        except ApplicationError as e:
            self._log_failure("Loading notes failed", e)
            self.load_succeeded = False
            self._fail(ErrorDialog(title=LOAD_FAILED_TITLE, description=_description(e, LOAD_FAILED_TITLE)))
            return self._notes

        self.replace_notes(notes)
        self.load_succeeded = True
        self._log_debug("Notes loaded", count=len(self._notes))
        return self._notes

    # -------------------------------------------------------------------------
    # Create / update
    # -------------------------------------------------------------------------

    async def add_note(
        self,
        target_board_id: str | None = None,
        data: NoteCreate | None = None,
    ) -> Note | None:
        """
        Create a note and put it at the front of the board.

        Nothing is inserted until the API returns the canonical note, so a
        failure leaves the collection untouched.

        Args:
            target_board_id: Required on All notes / Archive; ignored on a
                specific board
            data: Content and color; None creates an empty quick note

        Returns:
            The created note, or None if the precondition or request failed
        """
        if is_aggregate(self.scope):
            if not target_board_id:
                self._fail(BOARD_SELECTION_REQUIRED)
                return None
            board_id = target_board_id
        else:
            board_id = self.scope.board_id

        self._log_operation("Creating note", board_id=board_id)
        try:
            note = await self._remote.create_note(board_id, data)
        except ApplicationError as e:
            self._log_failure("Creating note failed", e, board_id=board_id)
            self._fail(ErrorDialog(title=CREATE_FAILED_TITLE, description=_description(e, CREATE_FAILED_TITLE)))
            return None

        self._prepend(note)
        self.adding_checklist_item = note.id
        return note

    async def update_note(self, updated: Note, changes: NoteUpdate | None = None) -> bool:
        """
        Replace a note locally, then write the changes.

        The local replacement happens before the first await. When the write
        fails the previous version is restored, unless a newer local edit has
        already replaced the one written here.

        Returns:
            False if the note is unknown or the write failed
        """
        previous = self.get_note(updated.id)
        if previous is None:
            return False

        self._replace(updated)
        if changes is None:
            return True

        board_id = self._board_id_for(updated)
        if board_id is None:
            return True

        try:
            await self._remote.update_note(board_id, updated.id, changes)
        except ApplicationError as e:
            self._log_failure("Updating note failed", e, note_id=updated.id)
            if self.get_note(updated.id) is updated:
                self._replace(previous)
            self._fail(ErrorDialog(title=UPDATE_FAILED_TITLE, description=_description(e, UPDATE_FAILED_TITLE)))
            return False
        return True

    # -------------------------------------------------------------------------
    # Archive
    # -------------------------------------------------------------------------

    async def archive_note(self, note_id: str) -> bool:
        """Hide a note from the active view and mark it archived."""
        return await self._set_archived(note_id, archived=True)

    async def unarchive_note(self, note_id: str) -> bool:
        """Take a note out of the archive view and clear archivedAt."""
        return await self._set_archived(note_id, archived=False)

    async def _set_archived(self, note_id: str, archived: bool) -> bool:
        note = self.get_note(note_id)
        if note is None:
            return False
        board_id = self._board_id_for(note)
        if board_id is None:
            return False

        self._remove(note_id)
        changes = NoteUpdate(archived_at=utc_now() if archived else None)
        self._log_operation(
            "Archiving note" if archived else "Unarchiving note",
            note_id=note_id,
        )

        try:
            await self._remote.update_note(board_id, note_id, changes)
        except ApplicationError as e:
            self._log_failure("Archive toggle failed", e, note_id=note_id)
            self._append(note)
            self._fail(ARCHIVE_FAILED if archived else UNARCHIVE_FAILED)
            return False
        return True

    # -------------------------------------------------------------------------
    # Delete with undo
    # -------------------------------------------------------------------------

    def delete_note(self, note_id: str) -> bool:
        """
        Remove a note now and send the DELETE after the undo window.

        Returns:
            False if the note is unknown or already pending deletion
        """
        if note_id in self._pending:
            self._log_debug("Delete already pending", note_id=note_id)
            return False
        note = self.get_note(note_id)
        if note is None:
            return False

        self._remove(note_id)
        token = self._scheduler.schedule(
            self._delete_delay_ms,
            lambda: self._commit_delete(note_id),
        )
        self._pending[note_id] = PendingDeletion(note_id=note_id, original_note=note, token=token)
        self.notification = Notification(
            message="Note deleted",
            action_label="Undo",
            duration_ms=self._delete_delay_ms,
            note_id=note_id,
        )
        self._log_operation("Note deleted locally", note_id=note_id, undo_ms=self._delete_delay_ms)
        return True

    def undo_delete(self, note_id: str) -> bool:
        """
        Restore a pending deletion to the front of the board.

        The DELETE was never sent, so no request is made here.

        Returns:
            False if nothing was pending for note_id
        """
        pending = self._pending.pop(note_id, None)
        if pending is None:
            return False

        self._scheduler.cancel(pending.token)
        self._prepend(pending.original_note)
        if self.notification is not None and self.notification.note_id == note_id:
            self.notification = None
        self._log_operation("Delete undone", note_id=note_id)
        return True

    async def _commit_delete(self, note_id: str) -> None:
        pending = self._pending.pop(note_id, None)
        if pending is None:
            return

        note = pending.original_note
        board_id = self._board_id_for(note)
        try:
            if board_id is None:
                raise ExternalServiceError("Note has no board")
            await self._remote.delete_note(board_id, note_id)
        except ApplicationError as e:
            self._log_failure("Deleting note failed", e, note_id=note_id)
            self._prepend(note)
            self._fail(ErrorDialog(title=DELETE_FAILED_TITLE, description=_description(e, DELETE_FAILED_TITLE)))
            return

        self._log_debug("Delete committed", note_id=note_id)

    # -------------------------------------------------------------------------
    # UI acknowledgements
    # -------------------------------------------------------------------------

    def dismiss_error(self) -> None:
        self.error_dialog = None

    def dismiss_notification(self) -> None:
        self.notification = None

    def stop_adding_checklist_item(self) -> None:
        self.adding_checklist_item = None
