"""Shared utility functions."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

APP_DIR_NAME = "SystemCleaner"

_DEFAULT_WINDOWS_DIR = r"C:\Windows"


def _env_path(*names: str, default: Path | str) -> Path:
    """Return the first non-empty environment variable as a Path."""
    for name in names:
        value = os.environ.get(name)
        if value:
            return Path(value)
    return Path(default)


@dataclass(frozen=True)
class SystemPaths:
    """Well-known locations of the target system.

    Constructed once and passed to the components that need it, so tests
    can point every location into a temporary directory.
    """

    windows_dir: Path
    local_app_data: Path
    roaming_app_data: Path
    temp_dir: Path

    @classmethod
    def from_environ(cls) -> SystemPaths:
        """Derive all locations from the process environment."""
        home = Path.home()
        return cls(
            windows_dir=_env_path("SystemRoot", "WINDIR", default=_DEFAULT_WINDOWS_DIR),
            local_app_data=_env_path("LOCALAPPDATA", default=home / "AppData" / "Local"),
            roaming_app_data=_env_path("APPDATA", default=home / "AppData" / "Roaming"),
            temp_dir=_env_path("TEMP", "TMP", default=tempfile.gettempdir()),
        )

    @property
    def system_drive(self) -> Path:
        """Volume the OS is installed on (parent of the Windows directory)."""
        return self.windows_dir.parent

    @property
    def update_cache_dir(self) -> Path:
        return self.windows_dir / "SoftwareDistribution" / "Download"

    @property
    def logs_dir(self) -> Path:
        return self.windows_dir / "Logs"

    @property
    def prefetch_dir(self) -> Path:
        return self.windows_dir / "Prefetch"

    @property
    def app_data_dir(self) -> Path:
        """Per-user directory holding this application's own files."""
        return self.roaming_app_data / APP_DIR_NAME

    @property
    def custom_paths_file(self) -> Path:
        return self.app_data_dir / "custom_paths.bin"

    @property
    def settings_file(self) -> Path:
        return self.app_data_dir / "settings.json"


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string."""
    if size_bytes < 0:
        return f"-{bytes_to_human(-size_bytes)}"
    if size_bytes == 0:
        return "0 B"

    units = ("B", "KB", "MB", "GB", "TB")
    value = float(size_bytes)
    for unit in units[:-1]:
        if abs(value) < 1024:
            return f"{value:.1f} {unit}" if unit != "B" else f"{int(value)} B"
        value /= 1024
    return f"{value:.1f} {units[-1]}"


def format_elapsed(seconds: float) -> str:
    """Format an elapsed time as a human-readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds) // 60
    secs = seconds - minutes * 60
    return f"{minutes}m {secs:.0f}s"
