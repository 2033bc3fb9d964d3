"""
Responsive Config Resolver.

Maps a viewport width to the card sizing profile from board.yaml.
"""

from collections.abc import Sequence

from coldboard.backend.core.config import get_board_config
from coldboard.backend.core.config_schema import BreakpointSchema
from coldboard.backend.schemas.layout import LayoutProfile, ResponsiveConfig


def _to_config(bp: BreakpointSchema) -> ResponsiveConfig:
    return ResponsiveConfig(
        card_width=bp.card_width,
        grid_gap=bp.grid_gap,
        container_padding=bp.container_padding,
        card_padding=bp.card_padding,
    )


def resolve_config(
    viewport_width: int | None,
    breakpoints: Sequence[BreakpointSchema] | None = None,
) -> ResponsiveConfig:
    """
    Resolve the card profile for a viewport width.

    Breakpoints are ordered widest first; the first one whose min_width the
    viewport meets wins. A width of None (no viewport known) resolves to the
    configured default profile.

    Args:
        viewport_width: Viewport width in CSS pixels, or None
        breakpoints: Override for board.yaml breakpoints

    Returns:
        ResponsiveConfig for that width
    """
    if viewport_width is None:
        return _to_config(get_board_config().default_profile)
    if breakpoints is None:
        breakpoints = get_board_config().breakpoints

    for bp in breakpoints:
        if viewport_width >= bp.min_width:
            return _to_config(bp)

    # Widths below every min_width (negative input) use the narrowest profile
    return _to_config(breakpoints[-1])


def select_profile(viewport_width: int, mobile_breakpoint: int | None = None) -> LayoutProfile:
    """
    Pick the placement profile.

    This threshold is independent of the resolver's breakpoints: a 768px
    viewport resolves to the 768-1199 card profile and uses grid placement,
    767px resolves to the 600-767 profile and uses mobile placement.
    """
    if mobile_breakpoint is None:
        mobile_breakpoint = get_board_config().masonry.mobile_breakpoint
    return "mobile" if viewport_width < mobile_breakpoint else "grid"
