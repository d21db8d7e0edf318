"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from syscleaner.core.orchestrator import CleanOrchestrator
from syscleaner.core.recycle_bin import RecycleBinInfo
from syscleaner.core.runner import InlineRunner, TaskRunner
from syscleaner.utils import SystemPaths


class FakeRecycleBin:
    """In-memory recycle bin recording every call."""

    def __init__(self, item_count: int = 0, total_bytes: int = 0, fail_query: bool = False, fail_empty: bool = False):
        self.item_count = item_count
        self.total_bytes = total_bytes
        self.fail_query = fail_query
        self.fail_empty = fail_empty
        self.queries = 0
        self.empties = 0

    def query(self) -> RecycleBinInfo | None:
        self.queries += 1
        if self.fail_query:
            return None
        return RecycleBinInfo(self.item_count, self.total_bytes)

    def empty_bin(self) -> bool:
        self.empties += 1
        if self.fail_empty:
            return False
        self.item_count = 0
        self.total_bytes = 0
        return True


def make_files(directory: Path, sizes: list[int], prefix: str = "file") -> list[Path]:
    """Create files of the given sizes in *directory*."""
    directory.mkdir(parents=True, exist_ok=True)
    created = []
    for i, size in enumerate(sizes):
        path = directory / f"{prefix}{i}.tmp"
        path.write_bytes(b"x" * size)
        created.append(path)
    return created


@pytest.fixture
def system_paths(tmp_path) -> SystemPaths:
    """A fake system drive with Windows, AppData and Temp directories."""
    drive = tmp_path / "C"
    windows = drive / "Windows"
    appdata = drive / "Users" / "alice" / "AppData"
    paths = SystemPaths(
        windows_dir=windows,
        local_app_data=appdata / "Local",
        roaming_app_data=appdata / "Roaming",
        temp_dir=appdata / "Local" / "Temp",
    )
    for directory in (paths.windows_dir, paths.local_app_data, paths.roaming_app_data, paths.temp_dir):
        directory.mkdir(parents=True)
    return paths


@pytest.fixture
def user_dir(system_paths) -> Path:
    """An ordinary user directory on the fake drive."""
    path = system_paths.system_drive / "Users" / "alice" / "Documents"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def fake_bin() -> FakeRecycleBin:
    return FakeRecycleBin()


@pytest.fixture(params=["inline", "threaded"])
def runner(request):
    """Both runner flavours: synchronous and thread pool."""
    if request.param == "inline":
        instance = InlineRunner()
    else:
        instance = TaskRunner(max_workers=3)
    yield instance
    instance.shutdown()


@pytest.fixture
def orchestrator(runner, system_paths, fake_bin):
    instance = CleanOrchestrator(runner, system_paths, recycle_bin=fake_bin)
    instance.poll_interval = 0.01
    yield instance
    instance.close()
