"""syscleaner data models."""

from syscleaner.models.cleaning_item import (
    CleaningItem,
    CleanOption,
    ItemKind,
    PathAdditionResult,
    next_option_id,
)
from syscleaner.models.clean_result import CleanerState, CleanResult, Summary, SummaryKind

__all__ = [
    "CleanerState",
    "CleaningItem",
    "CleanOption",
    "CleanResult",
    "ItemKind",
    "PathAdditionResult",
    "Summary",
    "SummaryKind",
    "next_option_id",
]
