"""Binary storage of user-added custom paths.

The file is a flat stream of records, each a little-endian ``uint32``
byte length followed by that many bytes of UTF-8 path text.  A zero or
oversized length, a short read, or undecodable text ends parsing; the
records read so far are kept.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path

log = logging.getLogger(__name__)

MAX_RECORD_LENGTH = 10000

_LENGTH = struct.Struct("<I")


def load_custom_paths(store_file: Path) -> list[str]:
    """Read path strings from *store_file*; a missing file yields none."""
    if not store_file.exists():
        return []
    try:
        data = store_file.read_bytes()
    except OSError:
        log.exception("Failed to read custom paths file: %s", store_file)
        return []

    paths: list[str] = []
    offset = 0
    while offset + _LENGTH.size <= len(data):
        (length,) = _LENGTH.unpack_from(data, offset)
        offset += _LENGTH.size
        if length == 0 or length > MAX_RECORD_LENGTH:
            log.warning("Invalid record length %d in %s, ignoring the rest", length, store_file)
            break
        raw = data[offset : offset + length]
        if len(raw) < length:
            log.warning("Truncated record in %s, ignoring the rest", store_file)
            break
        try:
            paths.append(raw.decode("utf-8"))
        except UnicodeDecodeError:
            log.warning("Undecodable record in %s, ignoring the rest", store_file)
            break
        offset += length
    return paths


def save_custom_paths(store_file: Path, paths: list[str]) -> None:
    """Rewrite *store_file*, or delete it when there is nothing to store."""
    if not paths:
        store_file.unlink(missing_ok=True)
        return

    chunks: list[bytes] = []
    for path in paths:
        encoded = path.encode("utf-8")
        chunks.append(_LENGTH.pack(len(encoded)))
        chunks.append(encoded)

    try:
        store_file.parent.mkdir(parents=True, exist_ok=True)
        store_file.write_bytes(b"".join(chunks))
    except OSError:
        log.exception("Failed to save custom paths file: %s", store_file)
        return
    log.info("Saved %d custom paths to %s", len(paths), store_file)
