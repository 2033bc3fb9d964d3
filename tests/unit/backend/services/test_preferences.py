"""
Unit Tests for the Preferences Store.
"""

from coldboard.backend.schemas.board import Archive, SpecificBoard
from coldboard.backend.services.preferences import PreferencesStore


class TestPreferencesStore:
    def test_missing_file_reads_as_empty(self, tmp_path):
        store = PreferencesStore(path=tmp_path / "prefs.json")
        assert store.last_visited_board is None

    def test_records_last_visited_board(self, tmp_path):
        store = PreferencesStore(path=tmp_path / "nested" / "prefs.json")

        assert store.record_last_visited(SpecificBoard("b1")) is True

        assert store.last_visited_board == "b1"
        assert PreferencesStore(path=tmp_path / "nested" / "prefs.json").last_visited_board == "b1"

    def test_archive_is_recorded_by_slug(self, tmp_path):
        store = PreferencesStore(path=tmp_path / "prefs.json")
        store.record_last_visited(Archive())
        assert store.last_visited_board == "archive"

    def test_uses_configured_key(self, tmp_path):
        store = PreferencesStore(path=tmp_path / "prefs.json")
        store.record_last_visited(SpecificBoard("b1"))
        assert store.get("Coldboard-last-visited-board") == "b1"

    def test_other_keys_are_preserved(self, tmp_path):
        store = PreferencesStore(path=tmp_path / "prefs.json")
        store.set("theme", "dark")
        store.record_last_visited(SpecificBoard("b1"))
        assert store.get("theme") == "dark"

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("{not json", encoding="utf-8")

        store = PreferencesStore(path=path)

        assert store.last_visited_board is None
        assert store.record_last_visited(SpecificBoard("b2")) is True
        assert store.last_visited_board == "b2"

    def test_unwritable_location_is_swallowed(self, tmp_path):
        # A directory where the file should be: reads and writes both fail
        store = PreferencesStore(path=tmp_path)

        assert store.record_last_visited(SpecificBoard("b1")) is False
        assert store.last_visited_board is None
