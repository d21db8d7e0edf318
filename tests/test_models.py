"""Tests for data models."""

from __future__ import annotations

import pytest

from syscleaner.models import (
    CleanerState,
    CleaningItem,
    CleanOption,
    CleanResult,
    ItemKind,
    PathAdditionResult,
    Summary,
    SummaryKind,
)


def _item(*enabled: bool) -> CleaningItem:
    return CleaningItem("Temp", ItemKind.TEMP, options=[CleanOption(f"opt{i}", enabled=e) for i, e in enumerate(enabled)])


class TestCleaningItem:
    @pytest.mark.parametrize(
        "flags, expected",
        [
            ((), False),
            ((False,), False),
            ((True,), True),
            ((False, False, True), True),
            ((False, False, False), False),
        ],
    )
    def test_needs_cleaning(self, flags, expected):
        assert _item(*flags).needs_cleaning() is expected

    def test_needs_cleaning_follows_toggles(self):
        item = _item(True, True)
        toggles = [(0, False), (1, False), (1, True), (0, True), (0, False), (1, False)]
        for index, enabled in toggles:
            item.options[index].enabled = enabled
            assert item.needs_cleaning() is any(o.enabled for o in item.options)

    def test_set_all(self):
        item = _item(True, False, True)
        item.set_all(False)
        assert not item.needs_cleaning()
        item.set_all(True)
        assert [o.display_name for o in item.enabled_options()] == ["opt0", "opt1", "opt2"]


class TestCleanOption:
    def test_ids_are_unique(self):
        ids = {CleanOption("Cache").id for _ in range(100)}
        assert len(ids) == 100

    def test_enabled_by_default(self):
        assert CleanOption("Cache").enabled is True

    def test_identity_is_id_not_name(self):
        a, b = CleanOption("Cache"), CleanOption("Cache")
        assert a.display_name == b.display_name
        assert a.id != b.id


class TestPathAdditionResult:
    def test_success(self):
        option = CleanOption("Downloads")
        result = PathAdditionResult.success(option)
        assert result.ok
        assert result.option is option

    def test_failure(self):
        result = PathAdditionResult.failure("Path not found")
        assert not result.ok
        assert result.option is None
        assert result.error == "Path not found"


class TestSummary:
    def test_add_folds_totals(self):
        summary = Summary()
        summary.add(CleanResult("Temp", "Temp files", 3, 300))
        summary.add(CleanResult("Temp", "Logs", 2, 50))
        assert summary.total_files == 5
        assert summary.total_bytes == 350
        assert [r.option for r in summary.results] == ["Temp files", "Logs"]

    def test_reset(self):
        summary = Summary(kind=SummaryKind.ANALYSIS, elapsed=1.5)
        summary.add(CleanResult("Temp", "Logs", 1, 1))
        summary.reset()
        assert summary == Summary()

    def test_copy_is_independent(self):
        summary = Summary()
        summary.add(CleanResult("Temp", "Logs", 1, 10))
        copy = summary.copy()
        summary.add(CleanResult("Temp", "Temp files", 1, 10))
        assert len(copy.results) == 1
        assert copy.total_files == 1


class TestCleanerState:
    def test_running_and_done(self):
        assert CleanerState.ANALYZING.is_running
        assert CleanerState.CLEANING.is_running
        assert CleanerState.ANALYSIS_DONE.is_done
        assert CleanerState.CLEANING_DONE.is_done
        assert not CleanerState.IDLE.is_running
        assert not CleanerState.IDLE.is_done
