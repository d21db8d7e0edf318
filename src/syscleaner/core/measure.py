"""Size/count measurement of a directory tree or file, with optional deletion."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

log = logging.getLogger(__name__)

FileCallback = Callable[[int], None]  # (size_bytes) of each counted file


class FileOutcome(Enum):
    """What happened to a single regular file during a walk."""

    COUNTED = "counted"
    STAT_FAILED = "stat_failed"
    DELETE_FAILED = "delete_failed"


@dataclass(slots=True)
class DirInfo:
    """Best-effort tally of a measured target."""

    file_count: int = 0
    byte_count: int = 0
    skipped: int = 0

    def record(self, outcome: FileOutcome, size: int) -> None:
        if outcome is FileOutcome.COUNTED:
            self.file_count += 1
            self.byte_count += size
        else:
            self.skipped += 1


def _process_file(path: str, size: int, delete: bool) -> FileOutcome:
    if not delete:
        return FileOutcome.COUNTED
    try:
        os.remove(path)
    except OSError as e:
        log.debug("Cannot delete %s: %s", path, e)
        return FileOutcome.DELETE_FAILED
    return FileOutcome.COUNTED


def _walk_files(root: Path | str):
    """Yield (path, size) for every regular file below *root*.

    Symlinks are neither followed nor reported.  Unreadable directories
    and entries are skipped; a size that cannot be read is reported as -1.
    """
    stack: list[Path | str] = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                for entry in it:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                        elif entry.is_file(follow_symlinks=False):
                            try:
                                size = entry.stat(follow_symlinks=False).st_size
                            except OSError:
                                size = -1
                            yield entry.path, size
                    except OSError:
                        log.debug("Cannot access: %s", entry.path)
        except OSError as e:
            log.debug("Cannot read directory %s: %s", current, e)


def measure_path(
    path: Path | str,
    delete: bool = False,
    on_file: FileCallback | None = None,
) -> DirInfo:
    """Count (and optionally delete) regular files at *path*.

    A symlink at *path* itself is followed, so the measured and deleted
    files are those of its target; links met inside the walk are not.
    Files are only counted when their size could be read and, with
    ``delete=True``, when removing them succeeded.  Never raises.
    """
    info = DirInfo()
    target = Path(path)

    try:
        if target.is_symlink():
            target = target.resolve(strict=True)
        if target.is_dir():
            files = _walk_files(target)
        elif target.is_file():
            try:
                files = iter([(str(target), target.stat().st_size)])
            except OSError:
                files = iter([(str(target), -1)])
        else:
            return info
    except (OSError, RuntimeError) as e:
        log.debug("Cannot access %s: %s", target, e)
        return info

    for file_path, size in files:
        if size < 0:
            outcome = FileOutcome.STAT_FAILED
        else:
            outcome = _process_file(file_path, size, delete)
        info.record(outcome, size)
        if outcome is FileOutcome.COUNTED and on_file is not None:
            on_file(size)

    return info
