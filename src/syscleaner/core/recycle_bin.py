"""Windows Recycle Bin access through the shell API."""

from __future__ import annotations

import ctypes
import logging
from dataclasses import dataclass
from typing import Protocol

from syscleaner.core.measure import DirInfo

log = logging.getLogger(__name__)

SHERB_NOCONFIRMATION = 0x00000001
SHERB_NOPROGRESSUI = 0x00000002
SHERB_NOSOUND = 0x00000004

_EMPTY_FLAGS = SHERB_NOCONFIRMATION | SHERB_NOPROGRESSUI | SHERB_NOSOUND


@dataclass(frozen=True, slots=True)
class RecycleBinInfo:
    item_count: int
    total_bytes: int


class RecycleBin(Protocol):
    """System recycle bin, treated as one opaque resource."""

    def query(self) -> RecycleBinInfo | None:
        """Return item count and size, or None if the query failed."""

    def empty_bin(self) -> bool:
        """Permanently empty the bin without UI. Return True on success."""


class _SHQUERYRBINFO(ctypes.Structure):
    _fields_ = [
        ("cbSize", ctypes.c_uint32),
        ("i64Size", ctypes.c_int64),
        ("i64NumItems", ctypes.c_int64),
    ]


def _shell32():
    # AttributeError on hosts without windll
    return ctypes.windll.shell32  # type: ignore[attr-defined]


class ShellRecycleBin:
    """Recycle bin of all drives via ``SHQueryRecycleBinW``/``SHEmptyRecycleBinW``."""

    def query(self) -> RecycleBinInfo | None:
        info = _SHQUERYRBINFO()
        info.cbSize = ctypes.sizeof(_SHQUERYRBINFO)
        try:
            hr = _shell32().SHQueryRecycleBinW(None, ctypes.byref(info))
        except (AttributeError, OSError) as e:
            log.debug("Recycle bin query unavailable: %s", e)
            return None
        if hr != 0:
            log.debug("Recycle bin query failed (HRESULT %#x)", hr & 0xFFFFFFFF)
            return None
        return RecycleBinInfo(item_count=int(info.i64NumItems), total_bytes=int(info.i64Size))

    def empty_bin(self) -> bool:
        try:
            hr = _shell32().SHEmptyRecycleBinW(None, None, _EMPTY_FLAGS)
        except (AttributeError, OSError) as e:
            log.debug("Recycle bin empty unavailable: %s", e)
            return False
        if hr != 0:
            log.debug("Emptying recycle bin failed (HRESULT %#x)", hr & 0xFFFFFFFF)
            return False
        return True


def measure(recycle_bin: RecycleBin) -> DirInfo:
    """Item count and size of the bin; zero if it cannot be queried."""
    info = recycle_bin.query()
    if info is None:
        return DirInfo()
    return DirInfo(file_count=info.item_count, byte_count=info.total_bytes)


def empty(recycle_bin: RecycleBin) -> DirInfo:
    """Empty the bin and return what was removed.

    The destructive call is only made when the query just before it
    found items.  A failed empty reports nothing removed.
    """
    info = recycle_bin.query()
    if info is None or info.item_count <= 0:
        return DirInfo()
    if not recycle_bin.empty_bin():
        return DirInfo()
    log.info("Emptied recycle bin: %d items, %d bytes", info.item_count, info.total_bytes)
    return DirInfo(file_count=info.item_count, byte_count=info.total_bytes)
