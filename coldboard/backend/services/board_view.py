"""
Board View Session.

Ties one board session together: the mutation controller's note collection,
the viewport width, the toolbar filters and the derived views (filtered
notes and their masonry layout).

Timing rules:
    - viewport changes are coalesced (board.yaml timings.resize_debounce_ms)
    - search text is applied after a quiet period (timings.search_debounce_ms)
      and only then mirrored into the URL
    - date range and author changes apply and sync the URL immediately

Derived views are memoized on their inputs and recomputed wholesale when any
input changes; the note tuple is compared by identity.

Usage:
    view = BoardView(controller, scheduler, current_user_id="u1", viewport_width=1280)
    await view.open()
    view.set_search_text("bug")
    for rect in view.layout.rects:
        ...
"""

from collections.abc import Callable, Mapping
from datetime import date, tzinfo
from typing import Any

from coldboard.backend.core.config import get_board_config
from coldboard.backend.core.config_schema import BoardSchema
from coldboard.backend.core.scheduler import Debouncer, Scheduler
from coldboard.backend.schemas.board import AllNotes
from coldboard.backend.schemas.layout import BoardLayout, DateRange, FilterState
from coldboard.backend.schemas.note import Author, Note
from coldboard.backend.services.base import BaseService
from coldboard.backend.services.filtering import apply_filters, unique_authors
from coldboard.backend.services.masonry import layout_notes
from coldboard.backend.services.mutations import NoteMutationController
from coldboard.backend.services.preferences import PreferencesStore

UrlSync = Callable[[str], Any]


class BoardView(BaseService):
    """
    Viewport, filters and memoized derived views for one board session.

    Attributes:
        search_input: Search box text as typed; filters.search_text lags
            behind it by the search debounce.
    """

    def __init__(
        self,
        controller: NoteMutationController,
        scheduler: Scheduler,
        current_user_id: str | None = None,
        viewport_width: int | None = None,
        preferences: PreferencesStore | None = None,
        on_url_change: UrlSync | None = None,
        tz: tzinfo | None = None,
        board: BoardSchema | None = None,
    ) -> None:
        super().__init__(source="board", board_scope=controller.scope.slug)
        self.controller = controller
        self.current_user_id = current_user_id
        self.viewport_width = viewport_width
        self.preferences = preferences
        self.tz = tz
        self._board = board or get_board_config()
        self._on_url_change = on_url_change

        self.filters = FilterState()
        self.search_input = ""

        timings = self._board.timings
        self._resize = Debouncer(scheduler, timings.resize_debounce_ms, self._apply_viewport_width)
        self._search = Debouncer(scheduler, timings.search_debounce_ms, self._apply_search_text)

        # Holding the keyed tuple keeps its id() from being reused
        self._notes_ref: tuple[Note, ...] | None = None
        self._filtered_key: tuple | None = None
        self._filtered: list[Note] = []
        self._layout_filtered: list[Note] | None = None
        self._layout_key: tuple | None = None
        self._layout: BoardLayout | None = None

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    async def open(self) -> tuple[Note, ...]:
        """
        Load the board's notes.

        Once the load succeeds the board is remembered as the last visited
        one; All notes is never remembered.
        """
        notes = await self.controller.load()
        scope = self.controller.scope
        if (
            self.controller.load_succeeded
            and self.preferences is not None
            and not isinstance(scope, AllNotes)
        ):
            self.preferences.record_last_visited(scope)
        return notes

    def close(self) -> None:
        """Drop pending debounced work. Pending deletes are left to the controller."""
        self._resize.cancel()
        self._search.cancel()

    # -------------------------------------------------------------------------
    # Viewport
    # -------------------------------------------------------------------------

    def set_viewport_width(self, width: int) -> None:
        """Viewport resized; relayout once resizing settles."""
        self._resize.trigger(width)

    def _apply_viewport_width(self, width: int) -> None:
        self.viewport_width = width
        self._log_debug("Viewport changed", viewport_width=width)

    # -------------------------------------------------------------------------
    # Filters
    # -------------------------------------------------------------------------

    def set_search_text(self, text: str) -> None:
        self.search_input = text
        self._search.trigger(text)

    def _apply_search_text(self, text: str) -> None:
        self.filters = self.filters.model_copy(update={"search_text": text})
        self._sync_url()

    def clear_search(self) -> None:
        """Clear the search box, applying it immediately."""
        self._search.cancel()
        self.search_input = ""
        self._apply_search_text("")

    def set_date_range(self, start: date | None = None, end: date | None = None) -> None:
        date_range = DateRange(start=start, end=end)
        self.filters = self.filters.model_copy(
            update={"date_range": None if date_range.is_open else date_range},
        )
        self._sync_url()

    def set_author(self, author_id: str | None) -> None:
        self.filters = self.filters.model_copy(update={"author_id": author_id or None})
        self._sync_url()

    def clear_filters(self) -> None:
        self._search.cancel()
        self.search_input = ""
        self.filters = FilterState()
        self._sync_url()

    def apply_query_params(self, params: Mapping[str, str]) -> None:
        """Initialise filters from the page URL. Does not write the URL back."""
        self._search.cancel()
        self.filters = FilterState.from_query_params(params)
        self.search_input = self.filters.search_text

    def _sync_url(self) -> None:
        if self._on_url_change is None:
            return
        # The URL carries the search box as typed, not the debounced value
        state = self.filters.model_copy(update={"search_text": self.search_input})
        self._on_url_change(state.to_query_string())

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    @property
    def filters_active(self) -> bool:
        return self.filters.is_active

    @property
    def unique_authors(self) -> list[Author]:
        return unique_authors(self.controller.notes)

    @property
    def filtered_notes(self) -> list[Note]:
        notes = self.controller.notes
        key = (id(notes), self.filters, self.current_user_id, self.tz)
        if key != self._filtered_key:
            self._filtered = apply_filters(notes, self.filters, self.current_user_id, self.tz)
            self._filtered_key = key
            self._notes_ref = notes
        return self._filtered

    @property
    def layout(self) -> BoardLayout | None:
        """Masonry layout of filtered_notes; None until a viewport width is known."""
        if self.viewport_width is None:
            return None
        filtered = self.filtered_notes
        key = (self.viewport_width, self.controller.adding_checklist_item)
        if filtered is not self._layout_filtered or key != self._layout_key:
            self._layout = layout_notes(
                filtered,
                self.viewport_width,
                editing_checklist_for=self.controller.adding_checklist_item,
                board=self._board,
            )
            self._layout_filtered = filtered
            self._layout_key = key
        return self._layout
