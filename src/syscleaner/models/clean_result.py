"""Per-option results and the run summary."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class CleanerState(Enum):
    """Lifecycle of the orchestrator."""

    IDLE = "idle"
    ANALYZING = "analyzing"
    ANALYSIS_DONE = "analysis_done"
    CLEANING = "cleaning"
    CLEANING_DONE = "cleaning_done"

    @property
    def is_running(self) -> bool:
        return self in (CleanerState.ANALYZING, CleanerState.CLEANING)

    @property
    def is_done(self) -> bool:
        return self in (CleanerState.ANALYSIS_DONE, CleanerState.CLEANING_DONE)


class SummaryKind(Enum):
    NONE = "none"
    ANALYSIS = "analysis"
    CLEANING = "cleaning"


@dataclass(frozen=True, slots=True)
class CleanResult:
    """Outcome of one finished option."""

    category: str
    option: str
    file_count: int = 0
    byte_count: int = 0
    icon: str = ""


@dataclass(slots=True)
class Summary:
    """Aggregate of a completed analyze or clean run."""

    kind: SummaryKind = SummaryKind.NONE
    elapsed: float = 0.0
    total_files: int = 0
    total_bytes: int = 0
    results: list[CleanResult] = field(default_factory=list)

    def reset(self) -> None:
        self.kind = SummaryKind.NONE
        self.elapsed = 0.0
        self.total_files = 0
        self.total_bytes = 0
        self.results.clear()

    def add(self, result: CleanResult) -> None:
        """Append a result and fold it into the totals.

        Callers sharing a Summary between threads must hold a lock
        around this call.
        """
        self.total_files += result.file_count
        self.total_bytes += result.byte_count
        self.results.append(result)

    def copy(self) -> Summary:
        return replace(self, results=list(self.results))
