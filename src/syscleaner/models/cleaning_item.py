"""Cleaning categories and their toggleable options."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum

_option_ids = itertools.count(1)


def next_option_id() -> int:
    """Mint a process-wide unique option id."""
    return next(_option_ids)


class ItemKind(Enum):
    """Kind of category, used by frontends to group items into tabs."""

    NONE = "none"
    BROWSER = "browser"
    TEMP = "temp"
    SYSTEM = "system"
    CUSTOM_PATH = "custom_path"


@dataclass(slots=True)
class CleanOption:
    """One individually measurable/deletable target within a category.

    Identity is ``id``; display names repeat across categories
    (every browser has a "Cache").
    """

    display_name: str
    enabled: bool = True
    id: int = field(default_factory=next_option_id)


@dataclass(slots=True)
class CleaningItem:
    """Named category owning an ordered list of options."""

    name: str
    kind: ItemKind = ItemKind.NONE
    icon: str = ""
    options: list[CleanOption] = field(default_factory=list)

    def needs_cleaning(self) -> bool:
        """True if at least one option is enabled."""
        return any(option.enabled for option in self.options)

    def enabled_options(self) -> list[CleanOption]:
        return [option for option in self.options if option.enabled]

    def set_all(self, enabled: bool) -> None:
        """Enable or disable every option of this category."""
        for option in self.options:
            option.enabled = enabled


@dataclass(slots=True)
class PathAdditionResult:
    """Outcome of adding a custom path: a new option or a rejection reason."""

    option: CleanOption | None = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error

    @classmethod
    def success(cls, option: CleanOption) -> PathAdditionResult:
        return cls(option=option)

    @classmethod
    def failure(cls, reason: str) -> PathAdditionResult:
        return cls(error=reason)
