"""Generic JSON-backed settings store."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

WORKERS_KEY = "runner.max_workers"
DISABLED_OPTIONS_KEY = "options.disabled"


class Settings:
    """Persistent settings backed by a JSON file.

    Uses dot-notation keys for nested access:
        settings.get("runner.max_workers")  # reads data["runner"]["max_workers"]
        settings.set("options.disabled", ["Temp/Logs"])  # writes + saves
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._data: dict[str, Any] = {}
        self._load()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Set a value by dot-notation key and persist to disk."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            if part not in node or not isinstance(node[part], dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value
        self._save()

    @property
    def max_workers(self) -> int | None:
        value = self.get(WORKERS_KEY)
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return value
        return None

    @property
    def disabled_options(self) -> set[str]:
        """Labels ("Category/Option") the user switched off."""
        value = self.get(DISABLED_OPTIONS_KEY, [])
        if not isinstance(value, list):
            return set()
        return {str(label) for label in value}

    def set_option_enabled(self, label: str, enabled: bool) -> None:
        disabled = self.disabled_options
        if enabled:
            disabled.discard(label)
        else:
            disabled.add(label)
        self.set(DISABLED_OPTIONS_KEY, sorted(disabled))

    def _load(self) -> None:
        """Load settings from disk, gracefully handling errors."""
        if not self._path.exists():
            return
        try:
            self._data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            self._data = {}
        if not isinstance(self._data, dict):
            log.warning("Ignoring malformed settings in %s", self._path)
            self._data = {}

    def _save(self) -> None:
        """Persist settings to disk."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(self._data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self._path, e)
