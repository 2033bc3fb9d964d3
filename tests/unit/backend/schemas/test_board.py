"""
Unit Tests for Board Schemas.
"""

import pytest

from coldboard.backend.schemas.board import (
    AllNotes,
    Archive,
    SpecificBoard,
    is_aggregate,
    parse_board_scope,
)


class TestParseBoardScope:
    def test_all_notes(self):
        assert parse_board_scope("all-notes") == AllNotes()

    def test_archive(self):
        assert parse_board_scope("archive") == Archive()

    def test_board_id(self):
        scope = parse_board_scope("b-42")
        assert scope == SpecificBoard("b-42")
        assert scope.slug == "b-42"

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="must not be empty"):
            parse_board_scope("")

    @pytest.mark.parametrize("slug", ["all-notes", "archive", "b-42"])
    def test_slug_round_trips(self, slug):
        assert parse_board_scope(slug).slug == slug


class TestIsAggregate:
    def test_pseudo_boards_are_aggregate(self):
        assert is_aggregate(AllNotes())
        assert is_aggregate(Archive())

    def test_specific_board_is_not(self):
        assert not is_aggregate(SpecificBoard("b1"))
