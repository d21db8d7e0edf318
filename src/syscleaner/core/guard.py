"""Protection of operating-system critical locations.

Every path a user nominates for cleaning passes through :func:`validate`
before it is registered.  The rules run in a fixed order and stop at the
first failure:

1. the path exists and fits in ``MAX_PATH``;
2. it is not a drive/filesystem root;
3. it is not the Windows directory, one of its protected system
   folders, or anything below them;
4. it is not a program installation directory on the OS volume, or
   anything below one;
5. it does not carry both the HIDDEN and SYSTEM attributes.  If the
   attributes cannot be read, the path is treated as protected.

Paths are compared in canonical form (symlinks and junctions resolved,
case normalized) so alternate spellings of a protected directory are caught.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from syscleaner.utils import SystemPaths

log = logging.getLogger(__name__)

MAX_PATH = 260

SYSTEM_FOLDERS: tuple[str, ...] = (
    "System32",
    "SysWOW64",
    "WinSxS",
    "assembly",
    "Microsoft.NET",
    "boot",
    "SystemResources",
)

PROGRAM_FOLDERS: tuple[str, ...] = (
    "Program Files",
    "Program Files (x86)",
    "ProgramData",
)

PROTECTED_ATTRIBUTES = stat.FILE_ATTRIBUTE_HIDDEN | stat.FILE_ATTRIBUTE_SYSTEM

REASON_NOT_FOUND = "Path not found"
REASON_TOO_LONG = "Path is too long"
REASON_DRIVE_ROOT = "Cannot select drive root"
REASON_SYSTEM_FOLDER = "Windows system folder"
REASON_PROGRAM_FILES = "Program Files folder"
REASON_ATTRIBUTES = "File/Folder has protected system attributes"


def file_attributes(path: Path) -> int:
    """Return the Windows attribute bits of *path*.

    Raises OSError when the path cannot be queried.  Filesystems without
    Windows attributes report none.
    """
    return getattr(os.stat(path), "st_file_attributes", 0)


def _canonical(path: Path) -> Path:
    return Path(os.path.normcase(path.resolve()))


def _is_within(path: Path, root: Path) -> bool:
    """True if *path* equals *root* or lies below it (canonical comparison)."""
    try:
        canonical_root = _canonical(root)
        return _canonical(path).is_relative_to(canonical_root)
    except (OSError, RuntimeError, ValueError):
        return False


def _is_system_folder(path: Path, paths: SystemPaths) -> bool:
    windows_dir = paths.windows_dir
    if _is_within(path, windows_dir):
        return True
    # System folders may be relocated with junctions; their canonical
    # targets are protected too.
    return any(_is_within(path, windows_dir / folder) for folder in SYSTEM_FOLDERS)


def _is_program_files(path: Path, paths: SystemPaths) -> bool:
    drive = paths.system_drive
    return any(_is_within(path, drive / folder) for folder in PROGRAM_FOLDERS)


def _has_protected_attributes(path: Path) -> bool:
    try:
        attrs = file_attributes(path)
    except OSError as e:
        log.debug("Cannot read attributes of %s: %s", path, e)
        return True
    return attrs & PROTECTED_ATTRIBUTES == PROTECTED_ATTRIBUTES


def validate(path: Path | str, paths: SystemPaths) -> str | None:
    """Return why *path* must not be cleaned, or None if it is safe."""
    path = Path(os.path.abspath(path))

    if not path.exists():
        return REASON_NOT_FOUND
    if len(str(path)) > MAX_PATH:
        return REASON_TOO_LONG
    if path == Path(path.anchor):
        return REASON_DRIVE_ROOT
    if _is_system_folder(path, paths):
        return REASON_SYSTEM_FOLDER
    if _is_program_files(path, paths):
        return REASON_PROGRAM_FILES
    if _has_protected_attributes(path):
        return REASON_ATTRIBUTES
    return None


def is_safe(path: Path | str, paths: SystemPaths) -> bool:
    """Boolean form of :func:`validate`."""
    return validate(path, paths) is None
