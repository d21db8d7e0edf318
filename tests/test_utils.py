"""Tests for shared utilities."""

from __future__ import annotations

from pathlib import Path

import pytest

from syscleaner.utils import SystemPaths, bytes_to_human, format_elapsed


class TestSystemPaths:
    def test_from_environ(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SystemRoot", str(tmp_path / "C" / "Windows"))
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "local"))
        monkeypatch.setenv("APPDATA", str(tmp_path / "roaming"))
        monkeypatch.setenv("TEMP", str(tmp_path / "temp"))

        paths = SystemPaths.from_environ()
        assert paths.windows_dir == tmp_path / "C" / "Windows"
        assert paths.system_drive == tmp_path / "C"
        assert paths.temp_dir == tmp_path / "temp"
        assert paths.custom_paths_file == tmp_path / "roaming" / "SystemCleaner" / "custom_paths.bin"

    def test_fallback_variables(self, monkeypatch, tmp_path):
        monkeypatch.delenv("SystemRoot", raising=False)
        monkeypatch.setenv("WINDIR", str(tmp_path / "win"))
        monkeypatch.delenv("TEMP", raising=False)
        monkeypatch.setenv("TMP", str(tmp_path / "tmp"))

        paths = SystemPaths.from_environ()
        assert paths.windows_dir == tmp_path / "win"
        assert paths.temp_dir == tmp_path / "tmp"

    def test_windows_locations(self):
        paths = SystemPaths(Path("/w"), Path("/l"), Path("/r"), Path("/t"))
        assert paths.update_cache_dir == Path("/w/SoftwareDistribution/Download")
        assert paths.prefetch_dir == Path("/w/Prefetch")
        assert paths.logs_dir == Path("/w/Logs")


@pytest.mark.parametrize(
    "size, expected",
    [(0, "0 B"), (512, "512 B"), (2048, "2.0 KB"), (5 * 1024**3, "5.0 GB"), (-2048, "-2.0 KB")],
)
def test_bytes_to_human(size, expected):
    assert bytes_to_human(size) == expected


@pytest.mark.parametrize("seconds, expected", [(0.25, "250 ms"), (3.5, "3.5s"), (125, "2m 5s")])
def test_format_elapsed(seconds, expected):
    assert format_elapsed(seconds) == expected
