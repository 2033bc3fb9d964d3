"""
Card Height Estimator.

Predicts the rendered height of a note card without measuring the DOM, so
the masonry engine can place cards before they are painted. Runs on every
layout pass (including each debounced resize) and must stay deterministic.

Two sizing modes:
    checklist - the note has checklist_items (an empty list counts)
    text      - content wrapped at an estimated characters-per-line
"""

import math

from coldboard.backend.core.config import get_board_config
from coldboard.backend.core.config_schema import HeightSchema
from coldboard.backend.schemas.note import Note


def chars_per_line(card_width: int, card_padding: int, constants: HeightSchema) -> int:
    """Characters that fit on one line of a card, never less than 1."""
    content_width = card_width - card_padding * 2 - constants.content_inset
    return max(1, content_width // constants.average_char_width)


def wrapped_line_count(content: str, per_line: int, min_lines: int) -> int:
    """
    Count display lines after soft wrapping.

    Each newline-delimited line takes at least one row; long lines take
    ceil(length / per_line) rows. The total never drops below min_lines.
    """
    total = 0
    for line in content.split("\n"):
        if not line:
            total += 1
        else:
            total += max(1, math.ceil(len(line) / per_line))
    return max(min_lines, total)


def _checklist_content_height(
    note: Note,
    adding_item: bool,
    constants: HeightSchema,
) -> int:
    count = len(note.checklist_items or ())
    height = count * constants.checklist_item_height
    if count > 0:
        height += (count - 1) * constants.checklist_item_spacing
    if adding_item:
        height += constants.adding_item_height
    return max(constants.min_content_height, height)


def estimate_height(
    note: Note,
    card_width: int,
    card_padding: int,
    editing_checklist_for: str | None = None,
    constants: HeightSchema | None = None,
) -> int:
    """
    Estimate a card's rendered height in pixels.

    Args:
        note: Note to size
        card_width: Card width chosen by the layout pass
        card_padding: Inner padding on each side
        editing_checklist_for: Id of the note showing an in-progress
            checklist row, if any
        constants: Override for board.yaml height constants

    Returns:
        Height in pixels
    """
    if constants is None:
        constants = get_board_config().height

    chrome = constants.header_height + card_padding * 2

    if note.is_checklist:
        content = _checklist_content_height(
            note, editing_checklist_for == note.id, constants,
        )
        return chrome + content + constants.add_task_button_height

    lines = wrapped_line_count(
        note.content,
        chars_per_line(card_width, card_padding, constants),
        constants.min_text_lines,
    )
    return chrome + max(constants.min_content_height, lines * constants.line_height)
