"""
Filter/Sort Pipeline.

Turns the raw note collection into the ordered list the board displays.
Pure functions: same input, same output, same order.

Stages (each a no-op when its input is empty):
    1. search   - case-insensitive substring over author name/email and content
    2. author   - exact author id
    3. dates    - inclusive calendar-day range, either bound open
    4. sort     - current user's notes first, then newest first (stable)
"""

from collections.abc import Iterable, Sequence
from datetime import tzinfo

from coldboard.backend.core.utils import local_date
from coldboard.backend.schemas.layout import DateRange, FilterState
from coldboard.backend.schemas.note import Author, Note


def _matches_search(note: Note, needle: str) -> bool:
    return needle in note.author.search_label.lower() or needle in note.content.lower()


def _within_range(note: Note, date_range: DateRange, tz: tzinfo | None) -> bool:
    day = local_date(note.created_at, tz)
    if date_range.start is not None and day < date_range.start:
        return False
    if date_range.end is not None and day > date_range.end:
        return False
    return True


def filter_and_sort(
    notes: Iterable[Note],
    search_text: str = "",
    date_range: DateRange | None = None,
    author_id: str | None = None,
    current_user_id: str | None = None,
    tz: tzinfo | None = None,
) -> list[Note]:
    """
    Filter and order notes for display.

    Args:
        notes: Notes in any order
        search_text: Free text; whitespace-only means no search
        date_range: Inclusive day range on created_at, or None
        author_id: Keep only this author's notes, or None
        current_user_id: Viewer's id; their notes sort first
        tz: Viewer's time zone for day boundaries (aware timestamps only)

    Returns:
        New list; the input is never mutated
    """
    filtered: list[Note] = list(notes)

    if search_text.strip():
        needle = search_text.lower()
        filtered = [n for n in filtered if _matches_search(n, needle)]

    if author_id:
        filtered = [n for n in filtered if n.author.id == author_id]

    if date_range is not None and not date_range.is_open:
        filtered = [n for n in filtered if _within_range(n, date_range, tz)]

    if current_user_id:
        return sorted(
            filtered,
            key=lambda n: (n.author.id != current_user_id, -n.created_at.timestamp()),
        )
    return sorted(filtered, key=lambda n: -n.created_at.timestamp())


def apply_filters(
    notes: Iterable[Note],
    filters: FilterState,
    current_user_id: str | None = None,
    tz: tzinfo | None = None,
) -> list[Note]:
    """filter_and_sort driven by a FilterState."""
    return filter_and_sort(
        notes,
        search_text=filters.search_text,
        date_range=filters.date_range,
        author_id=filters.author_id,
        current_user_id=current_user_id,
        tz=tz,
    )


def unique_authors(notes: Sequence[Note]) -> list[Author]:
    """Distinct note authors sorted by display name, for the author picker."""
    seen: dict[str, Author] = {}
    for note in notes:
        seen.setdefault(note.author.id, note.author)
    return sorted(seen.values(), key=lambda a: a.display_name.lower())
