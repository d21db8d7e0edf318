"""Scanning and cleaning orchestration engine."""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from syscleaner.core.catalog import CUSTOM_PATHS, discover_browsers, discover_system
from syscleaner.core.guard import validate
from syscleaner.core.measure import DirInfo, measure_path
from syscleaner.core.path_index import RECYCLE_BIN, PathIndexError, PathTable
from syscleaner.core.recycle_bin import RecycleBin, ShellRecycleBin
from syscleaner.core.recycle_bin import empty as empty_recycle_bin
from syscleaner.core.recycle_bin import measure as measure_recycle_bin
from syscleaner.core.runner import Runner
from syscleaner.models.cleaning_item import CleaningItem, CleanOption, ItemKind, PathAdditionResult
from syscleaner.models.clean_result import CleanerState, CleanResult, Summary, SummaryKind
from syscleaner.storage import load_custom_paths, save_custom_paths
from syscleaner.utils import SystemPaths

log = logging.getLogger(__name__)

REASON_DUPLICATE = "Duplicated path"

# Durations below this are reported as zero.
_MIN_ELAPSED = 0.001

ProgressFunc = Callable[[int], float]  # (finished task count) -> progress


class CleanerBusyError(Exception):
    """Raised when a run is started before the previous one was consumed."""


@dataclass(frozen=True)
class _Batch:
    """Snapshot of one category's enabled options, taken at submit time."""

    category: str
    icon: str
    options: tuple[tuple[int, str], ...]  # (option id, display name)


def _snapshot(items: Iterable[CleaningItem]) -> list[_Batch]:
    return [
        _Batch(item.name, item.icon, tuple((o.id, o.display_name) for o in item.enabled_options()))
        for item in items
        if item.needs_cleaning()
    ]


def _same_file(a: Path, b: Path) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


class CleanOrchestrator:
    """Analyzes and cleans the enabled options of a catalog concurrently.

    Every run goes ``IDLE -> ANALYZING -> ANALYSIS_DONE`` (analyze) or
    ``IDLE -> ANALYZING -> CLEANING -> CLEANING_DONE`` (clean; the analysis
    pass provides the baseline file count for progress).  The run returns
    to ``IDLE`` once the summary is consumed.

    ``analyze`` and ``clean`` return immediately: per-category work goes
    to the injected runner and a coordinator thread awaits it, updating
    :attr:`progress` and finally :attr:`state`.  Progress is approximate;
    during cleaning it is the number of files deleted so far over the
    baseline, which can be off when targets change between the passes.
    """

    poll_interval = 0.1

    def __init__(
        self,
        runner: Runner,
        paths: SystemPaths,
        recycle_bin: RecycleBin | None = None,
    ) -> None:
        self.runner = runner
        self.paths = paths
        self.recycle_bin = recycle_bin if recycle_bin is not None else ShellRecycleBin()
        self.table = PathTable()

        self._summary = Summary()
        self._summary_lock = threading.Lock()
        self._cleaned_files = 0
        self._cleaned_lock = threading.Lock()
        self._state = CleanerState.IDLE
        self._progress = 0.0

        self._coordinator = ThreadPoolExecutor(max_workers=1, thread_name_prefix="syscleaner-coordinator")
        self._run: Future | None = None
        self._store_loaded = False

    # ── observers ────────────────────────────────────────────────────────

    @property
    def state(self) -> CleanerState:
        return self._state

    @property
    def progress(self) -> float:
        """Approximate progress of the current run, in [0, 1]."""
        return max(0.0, min(self._progress, 1.0))

    def consume_summary(self) -> Summary:
        """Return a copy of the last summary and go back to IDLE.

        Reading a summary while a run is still in progress leaves the
        state untouched.
        """
        with self._summary_lock:
            if not self._state.is_running:
                self._state = CleanerState.IDLE
            return self._summary.copy()

    def wait(self, timeout: float | None = None) -> CleanerState:
        """Block until the current run's coordinator has finished."""
        run = self._run
        if run is not None:
            run.result(timeout=timeout)
        return self._state

    # ── catalog ──────────────────────────────────────────────────────────

    def discover(self) -> list[CleaningItem]:
        """Build the catalog: browsers, Temp, System and Custom paths.

        Fixed targets are rediscovered on every call; custom paths are
        loaded from the store on the first call only.
        """
        self.table.fixed.clear()
        items = discover_browsers(self.paths, self.table.fixed)
        items.extend(discover_system(self.paths, self.table.fixed))

        if not self._store_loaded:
            for raw in load_custom_paths(self.paths.custom_paths_file):
                result = self.add_custom_path(raw)
                if not result.ok:
                    log.info("Dropping stored custom path %s: %s", raw, result.error)
            self._store_loaded = True

        custom = CleaningItem(CUSTOM_PATHS, ItemKind.CUSTOM_PATH, icon="folder-symbolic")
        for option_id in self.table.custom:
            path = self.table.custom.get(option_id)
            custom.options.append(CleanOption(_display_name(path), id=option_id))
        items.append(custom)

        log.info("Discovered %d categories", len(items))
        return items

    def add_custom_path(self, path: Path | str) -> PathAdditionResult:
        """Register a user-nominated file or folder, or explain why not."""
        path = Path(os.path.abspath(path))

        reason = validate(path, self.paths)
        if reason is not None:
            log.info("Rejected custom path %s: %s", path, reason)
            return PathAdditionResult.failure(reason)

        for existing in self.table.custom.paths():
            if _same_file(path, existing):
                log.info("Rejected custom path %s: duplicate of %s", path, existing)
                return PathAdditionResult.failure(REASON_DUPLICATE)

        option = CleanOption(_display_name(path))
        self.table.custom.register(option.id, path)
        log.info("Added custom path %s", path)
        return PathAdditionResult.success(option)

    def remove_custom_path(self, option_id: int) -> None:
        """Forget a custom path; the file or folder itself is untouched."""
        if self.table.custom.remove(option_id) is not None:
            log.info("Removed custom path %d", option_id)

    def resolve_display_path(self, option_id: int) -> str | None:
        """Full path of a custom option, for tooltips."""
        target = self.table.custom.get(option_id)
        return str(target) if isinstance(target, Path) else None

    def save(self) -> None:
        """Persist the custom paths, if they were ever loaded."""
        if self._store_loaded:
            save_custom_paths(self.paths.custom_paths_file, [str(p) for p in self.table.custom.paths()])

    def close(self) -> None:
        """Wait for the running coordinator, then persist custom paths."""
        self._coordinator.shutdown(wait=True)
        self.save()

    def __enter__(self) -> CleanOrchestrator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ── runs ─────────────────────────────────────────────────────────────

    def analyze(self, items: Iterable[CleaningItem]) -> None:
        """Measure the enabled options without touching them."""
        self._start(items, self._finish_analysis)

    def clean(self, items: Iterable[CleaningItem]) -> None:
        """Delete the files of the enabled options.

        An analysis pass runs first to learn how many files there are.
        """
        self._start(items, self._finish_cleaning)

    def _start(self, items: Iterable[CleaningItem], finish: Callable[..., None]) -> None:
        start = time.monotonic()
        batches = self._begin(items)
        try:
            futures = self._submit(batches, delete=False)
            self._run = self._coordinator.submit(finish, batches, futures, start)
        except Exception:
            self._state = CleanerState.IDLE
            raise

    def _begin(self, items: Iterable[CleaningItem]) -> list[_Batch]:
        batches = _snapshot(items)
        with self._summary_lock:
            if self._state is not CleanerState.IDLE:
                raise CleanerBusyError(f"Cannot start a new run while {self._state.value}")
            self._summary.reset()
            self._progress = 0.0
            self._state = CleanerState.ANALYZING
        with self._cleaned_lock:
            self._cleaned_files = 0
        log.info("Analyzing %d categories", len(batches))
        return batches

    def _reset(self) -> None:
        with self._summary_lock:
            self._summary.reset()
        with self._cleaned_lock:
            self._cleaned_files = 0

    def _submit(self, batches: list[_Batch], delete: bool) -> list[Future]:
        return [self.runner.submit(self._run_batch, batch, delete) for batch in batches]

    def _run_batch(self, batch: _Batch, delete: bool) -> None:
        try:
            self._process_batch(batch, delete)
        except Exception:
            log.exception("Category '%s' failed during %s", batch.category, "cleaning" if delete else "analysis")

    def _process_batch(self, batch: _Batch, delete: bool) -> None:
        for option_id, option_name in batch.options:
            try:
                target = self.table.resolve(option_id)
            except PathIndexError as e:
                log.warning("Skipping '%s/%s': %s", batch.category, option_name, e)
                continue

            if target is RECYCLE_BIN:
                info = self._process_recycle_bin(delete)
            elif delete:
                info = measure_path(target, delete=True, on_file=self._file_deleted)
            else:
                info = measure_path(target)

            if info.skipped:
                log.debug("'%s/%s': %d files skipped", batch.category, option_name, info.skipped)
            self._accumulate(CleanResult(batch.category, option_name, info.file_count, info.byte_count, batch.icon))

    def _process_recycle_bin(self, delete: bool) -> DirInfo:
        if not delete:
            return measure_recycle_bin(self.recycle_bin)
        info = empty_recycle_bin(self.recycle_bin)
        with self._cleaned_lock:
            self._cleaned_files += info.file_count
        return info

    def _file_deleted(self, _size: int) -> None:
        with self._cleaned_lock:
            self._cleaned_files += 1

    def _accumulate(self, result: CleanResult) -> None:
        with self._summary_lock:
            self._summary.add(result)

    def _await(self, futures: list[Future], progress: ProgressFunc) -> None:
        """Wait for *futures*, recomputing progress on every wake-up."""
        pending = set(futures)
        while pending:
            _done, pending = wait(pending, timeout=self.poll_interval, return_when=FIRST_COMPLETED)
            self._progress = progress(len(futures) - len(pending))

    def _finish_analysis(self, _batches: list[_Batch], futures: list[Future], start: float) -> None:
        total = len(futures)
        try:
            self._await(futures, lambda finished: finished / total)
        except Exception:
            log.exception("Analysis run failed")
        finally:
            self._complete(SummaryKind.ANALYSIS, CleanerState.ANALYSIS_DONE, start)

    def _finish_cleaning(self, batches: list[_Batch], futures: list[Future], start: float) -> None:
        total = len(futures)
        try:
            self._await(futures, lambda finished: finished / total)

            with self._summary_lock:
                baseline = self._summary.total_files

            if baseline:
                self._reset()
                self._progress = 0.0
                self._state = CleanerState.CLEANING
                log.info("Cleaning %d files in %d categories", baseline, len(batches))
                self._await(self._submit(batches, delete=True), lambda _finished: self._cleaned_files / baseline)
        except Exception:
            log.exception("Cleaning run failed")
        finally:
            self._complete(SummaryKind.CLEANING, CleanerState.CLEANING_DONE, start)

    def _complete(self, kind: SummaryKind, state: CleanerState, start: float) -> None:
        elapsed = time.monotonic() - start
        with self._summary_lock:
            self._summary.kind = kind
            self._summary.elapsed = elapsed if elapsed >= _MIN_ELAPSED else 0.0
            log.info(
                "%s finished in %.3fs: %d files, %d bytes",
                kind.value.capitalize(),
                elapsed,
                self._summary.total_files,
                self._summary.total_bytes,
            )
        self._progress = 1.0
        self._state = state


def _display_name(path: Path | None) -> str:
    if path is None:
        return ""
    return path.name or str(path)
