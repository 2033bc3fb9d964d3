"""
Preferences Store.

Small JSON key-value file for per-user UI preferences, currently only the
last visited board. Preferences are a convenience: a missing, unreadable or
unwritable file is logged and otherwise ignored.
"""

import json
from pathlib import Path

from coldboard.backend.core.config import find_project_root, get_board_config
from coldboard.backend.core.logging import get_logger
from coldboard.backend.schemas.board import BoardScope

logger = get_logger(__name__)


class PreferencesStore:
    """JSON file at board.yaml preferences.path, relative to the project root."""

    def __init__(self, path: Path | str | None = None, last_visited_key: str | None = None) -> None:
        prefs = get_board_config().preferences
        if path is None:
            path = prefs.path
        path = Path(path)
        if not path.is_absolute():
            path = find_project_root() / path
        self.path = path
        self.last_visited_key = last_visited_key or prefs.last_visited_key

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read preferences", extra={"path": str(self.path), "error": str(e)})
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> bool:
        """Store a value. Returns False if the file could not be written."""
        data = self._read()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save preferences", extra={"path": str(self.path), "error": str(e)})
            return False
        return True

    @property
    def last_visited_board(self) -> str | None:
        return self.get(self.last_visited_key)

    def record_last_visited(self, scope: BoardScope) -> bool:
        """Remember scope as the last visited board."""
        logger.debug("Recording last visited board", extra={"board": scope.slug})
        return self.set(self.last_visited_key, scope.slug)
