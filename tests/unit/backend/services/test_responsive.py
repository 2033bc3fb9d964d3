"""
Unit Tests for the Responsive Config Resolver.

Runs against the real board.yaml breakpoints.
"""

import pytest

from coldboard.backend.core.config_schema import BreakpointSchema
from coldboard.backend.schemas.layout import ResponsiveConfig
from coldboard.backend.services.responsive import resolve_config, select_profile


class TestResolveConfig:
    """Tests for breakpoint selection."""

    @pytest.mark.parametrize(
        ("width", "expected"),
        [
            (2560, (340, 24, 32, 18)),
            (1920, (340, 24, 32, 18)),
            (1919, (320, 20, 24, 16)),
            (1200, (320, 20, 24, 16)),
            (1199, (300, 16, 20, 16)),
            (768, (300, 16, 20, 16)),
            (767, (280, 16, 16, 14)),
            (600, (280, 16, 16, 14)),
            (599, (260, 12, 12, 12)),
            (0, (260, 12, 12, 12)),
        ],
    )
    def test_breakpoint_boundaries(self, width, expected):
        config = resolve_config(width)
        assert (
            config.card_width,
            config.grid_gap,
            config.container_padding,
            config.card_padding,
        ) == expected

    def test_unknown_viewport_uses_default_profile(self):
        """No viewport (server render) gets the default profile, not a breakpoint."""
        assert resolve_config(None) == ResponsiveConfig(
            card_width=320, grid_gap=20, container_padding=20, card_padding=16,
        )

    def test_negative_width_falls_back_to_narrowest(self):
        assert resolve_config(-5).card_width == 260

    def test_custom_breakpoints(self):
        breakpoints = [
            BreakpointSchema(min_width=1000, card_width=400, grid_gap=10, container_padding=10, card_padding=10),
            BreakpointSchema(min_width=0, card_width=200, grid_gap=5, container_padding=5, card_padding=5),
        ]
        assert resolve_config(1000, breakpoints).card_width == 400
        assert resolve_config(999, breakpoints).card_width == 200


class TestSelectProfile:
    """Tests for the grid/mobile placement threshold."""

    def test_768_is_grid(self):
        assert select_profile(768) == "grid"

    def test_767_is_mobile(self):
        assert select_profile(767) == "mobile"

    def test_custom_threshold(self):
        assert select_profile(900, mobile_breakpoint=1000) == "mobile"
