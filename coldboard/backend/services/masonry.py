"""
Masonry Placement Engine.

Places variable-height note cards on a column grid by greedy shortest-column
packing. Each note, in display order, goes to the column whose running bottom
is lowest (ties go to the lowest column index).

Profiles:
    grid   - viewport >= mobile_breakpoint. Columns sized from the profile's
             card width; the actual card width fills the row and is clamped
             to [card_width - 40, card_width + 80].
    mobile - viewport < mobile_breakpoint. Columns sized from a narrower
             minimum (card_width - 20); the card width fills the row unclamped.

Usage:
    from coldboard.backend.services.masonry import layout_notes

    layout = layout_notes(ordered_notes, viewport_width=1280)
    for rect in layout.rects:
        ...

Complexity is O(notes x columns) per pass.
"""

from collections.abc import Sequence

from coldboard.backend.core.config import get_board_config
from coldboard.backend.core.config_schema import BoardSchema, HeightSchema, MasonrySchema
from coldboard.backend.schemas.layout import (
    BoardLayout,
    LayoutProfile,
    LayoutRect,
    ResponsiveConfig,
)
from coldboard.backend.schemas.note import Note
from coldboard.backend.services.height import estimate_height
from coldboard.backend.services.responsive import resolve_config, select_profile


def column_count(container_width: int, slot_width: int, gap: int) -> int:
    """How many slots of slot_width fit, with gaps between them. At least 1."""
    return max(1, (container_width + gap) // (slot_width + gap))


def _card_width(
    profile: LayoutProfile,
    container_width: int,
    columns: int,
    config: ResponsiveConfig,
    masonry: MasonrySchema,
) -> int:
    available = container_width - (columns - 1) * config.grid_gap
    fill = available // columns
    if profile == "mobile":
        return max(1, fill)
    low = config.card_width - masonry.grid_min_width_offset
    high = config.card_width + masonry.grid_max_width_offset
    return max(low, min(high, fill))


def _shortest_column(bottoms: list[int]) -> int:
    best = 0
    for col in range(1, len(bottoms)):
        if bottoms[col] < bottoms[best]:
            best = col
    return best


def place_cards(
    notes: Sequence[Note],
    columns: int,
    card_width: int,
    config: ResponsiveConfig,
    editing_checklist_for: str | None,
    height_constants: HeightSchema,
) -> tuple[list[LayoutRect], list[int]]:
    """
    Greedy shortest-column placement.

    Returns:
        (rects in input order, final running bottom of every column)
    """
    bottoms = [config.container_padding] * columns
    rects: list[LayoutRect] = []

    for note in notes:
        height = estimate_height(
            note,
            card_width,
            config.card_padding,
            editing_checklist_for,
            height_constants,
        )
        col = _shortest_column(bottoms)
        y = bottoms[col]
        rects.append(
            LayoutRect(
                note_id=note.id,
                x=config.container_padding + col * (card_width + config.grid_gap),
                y=y,
                width=card_width,
                height=height,
            )
        )
        bottoms[col] = y + height + config.grid_gap

    return rects, bottoms


def board_height(rects: Sequence[LayoutRect], profile: LayoutProfile, masonry: MasonrySchema) -> int:
    """Height of the board canvas: lowest card bottom plus footer margin, floored."""
    floor = masonry.min_board_height_mobile if profile == "mobile" else masonry.min_board_height
    if not rects:
        return floor
    return max(floor, max(r.bottom for r in rects) + masonry.footer_margin)


def layout_notes(
    notes: Sequence[Note],
    viewport_width: int,
    config: ResponsiveConfig | None = None,
    editing_checklist_for: str | None = None,
    board: BoardSchema | None = None,
) -> BoardLayout:
    """
    Lay out already filtered and ordered notes.

    Args:
        notes: Notes in display order (see filtering.filter_and_sort)
        viewport_width: Viewport width in CSS pixels
        config: Card profile; resolved from viewport_width when omitted
        editing_checklist_for: Note showing an in-progress checklist row
        board: Override for board.yaml settings

    Returns:
        BoardLayout with one rect per note, in input order
    """
    if board is None:
        board = get_board_config()
    if config is None:
        config = resolve_config(viewport_width, board.breakpoints)

    masonry = board.masonry
    profile = select_profile(viewport_width, masonry.mobile_breakpoint)
    container_width = viewport_width - config.container_padding * 2

    slot = config.card_width
    if profile == "mobile":
        slot -= masonry.mobile_min_width_offset

    columns = column_count(container_width, slot, config.grid_gap)
    card_width = _card_width(profile, container_width, columns, config, masonry)

    rects, bottoms = place_cards(
        notes, columns, card_width, config, editing_checklist_for, board.height,
    )

    return BoardLayout(
        profile=profile,
        columns=columns,
        card_width=card_width,
        rects=rects,
        column_bottoms=bottoms,
        board_height=board_height(rects, profile, masonry),
    )
