"""Option id to filesystem target tables."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Union

log = logging.getLogger(__name__)


class _RecycleBinSentinel:
    """Marker target for the recycle bin, which has no path."""

    _instance: _RecycleBinSentinel | None = None

    def __new__(cls) -> _RecycleBinSentinel:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "RECYCLE_BIN"


RECYCLE_BIN = _RecycleBinSentinel()

Target = Union[Path, _RecycleBinSentinel]


class PathIndexError(LookupError):
    """Raised when an option id does not resolve to exactly one target."""


class PathIndex:
    """Stores the target of each registered option id."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._targets: dict[int, Target] = {}

    def register(self, option_id: int, target: Target) -> None:
        """Record the target of an option, replacing any previous one."""
        self._targets[option_id] = target
        log.debug("Registered %s target %d: %r", self.name, option_id, target)

    def remove(self, option_id: int) -> Target | None:
        return self._targets.pop(option_id, None)

    def get(self, option_id: int) -> Target | None:
        return self._targets.get(option_id)

    def paths(self) -> list[Path]:
        """All registered filesystem paths, in registration order."""
        return [t for t in self._targets.values() if isinstance(t, Path)]

    def clear(self) -> None:
        self._targets.clear()

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[int]:
        return iter(self._targets)

    def __contains__(self, option_id: int) -> bool:
        return option_id in self._targets


class PathTable:
    """The two id spaces of the engine.

    ``fixed`` holds targets rediscovered every session (browsers, temp,
    system, the recycle bin); ``custom`` holds user-nominated paths that
    persist across sessions.  Each option id lives in exactly one of them.
    """

    def __init__(self) -> None:
        self.fixed = PathIndex("fixed")
        self.custom = PathIndex("custom")

    def resolve(self, option_id: int) -> Target:
        """Return the single target registered for *option_id*."""
        in_fixed = option_id in self.fixed
        in_custom = option_id in self.custom
        if in_fixed and in_custom:
            raise PathIndexError(f"Option {option_id} is registered in both path tables")
        if in_fixed:
            return self.fixed.get(option_id)  # type: ignore[return-value]
        if in_custom:
            return self.custom.get(option_id)  # type: ignore[return-value]
        raise PathIndexError(f"Option {option_id} has no registered target")
