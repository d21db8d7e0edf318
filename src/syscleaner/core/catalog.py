"""Discovery of the built-in cleaning categories."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from syscleaner.core.guard import is_safe
from syscleaner.core.path_index import RECYCLE_BIN, PathIndex, Target
from syscleaner.models.cleaning_item import CleaningItem, CleanOption, ItemKind
from syscleaner.utils import SystemPaths

log = logging.getLogger(__name__)

CACHE = "Cache"
COOKIES = "Cookies"
HISTORY = "History"
RECYCLE_BIN_NAME = "Recycle bin"

TEMP = "Temp"
SYSTEM = "System"
CUSTOM_PATHS = "Custom paths"

_USER_DATA_DEFAULT = Path("User Data", "Default")


@dataclass(frozen=True)
class BrowserProfile:
    """Where a browser keeps its data and which files to offer for cleaning.

    ``folder`` is probed under both the local and roaming application data
    directories to decide whether the browser is installed.  ``profile``
    is the data directory relative to the ``roaming`` or local base; with
    ``multi_profile`` every subdirectory of it is a separate profile.
    """

    name: str
    folder: Path
    profile: Path
    roaming: bool = False
    multi_profile: bool = False
    cache: Path = Path("Cache")
    cookies: Path = Path("Network", "Cookies")
    history: Path = Path("History")
    icon: str = "web-browser-symbolic"


BROWSERS: tuple[BrowserProfile, ...] = (
    BrowserProfile("Google Chrome", Path("Google", "Chrome"), Path("Google", "Chrome") / _USER_DATA_DEFAULT),
    BrowserProfile(
        "Mozilla Firefox",
        Path("Mozilla", "Firefox"),
        Path("Mozilla", "Firefox", "Profiles"),
        roaming=True,
        multi_profile=True,
        cache=Path("cache2", "entries"),
        cookies=Path("cookies.sqlite"),
        history=Path("places.sqlite"),
    ),
    BrowserProfile(
        "Yandex Browser",
        Path("Yandex", "YandexBrowser"),
        Path("Yandex", "YandexBrowser") / _USER_DATA_DEFAULT,
    ),
    BrowserProfile("Microsoft Edge", Path("Microsoft", "Edge"), Path("Microsoft", "Edge") / _USER_DATA_DEFAULT),
    BrowserProfile("Opera", Path("Opera Software"), Path("Opera Software", "Opera Stable"), roaming=True),
)


def _is_installed(browser: BrowserProfile, paths: SystemPaths) -> bool:
    return (paths.local_app_data / browser.folder).exists() or (paths.roaming_app_data / browser.folder).exists()


def _profile_dirs(browser: BrowserProfile, paths: SystemPaths) -> list[Path]:
    base = paths.roaming_app_data if browser.roaming else paths.local_app_data
    profile = base / browser.profile
    if not browser.multi_profile:
        return [profile]
    try:
        return sorted(p for p in profile.iterdir() if p.is_dir())
    except OSError:
        log.debug("No %s profiles in %s", browser.name, profile)
        return []


def _browser_item(
    browser: BrowserProfile, profile_dir: Path, paths: SystemPaths, index: PathIndex
) -> CleaningItem | None:
    """Build a category from the browser files present in *profile_dir*."""
    name = f"{browser.name} ({profile_dir.name})" if browser.multi_profile else browser.name
    item = CleaningItem(name, ItemKind.BROWSER, icon=browser.icon)
    for display_name, relative in ((CACHE, browser.cache), (COOKIES, browser.cookies), (HISTORY, browser.history)):
        target = profile_dir / relative
        if not target.exists():
            continue
        if not is_safe(target, paths):
            log.info("Skipping protected browser target: %s", target)
            continue
        option = CleanOption(display_name)
        index.register(option.id, target)
        item.options.append(option)
    return item if item.options else None


def discover_browsers(paths: SystemPaths, index: PathIndex) -> list[CleaningItem]:
    """Return one category per installed browser profile that has data."""
    items: list[CleaningItem] = []
    for browser in BROWSERS:
        if not _is_installed(browser, paths):
            continue
        for profile_dir in _profile_dirs(browser, paths):
            item = _browser_item(browser, profile_dir, paths, index)
            if item is not None:
                items.append(item)
    return items


def _fixed_item(
    name: str, kind: ItemKind, icon: str, targets: list[tuple[str, Target]], index: PathIndex
) -> CleaningItem:
    item = CleaningItem(name, kind, icon=icon)
    for display_name, target in targets:
        option = CleanOption(display_name)
        index.register(option.id, target)
        item.options.append(option)
    return item


def discover_system(paths: SystemPaths, index: PathIndex) -> list[CleaningItem]:
    """Return the Temp and System categories.

    These are always offered; a missing directory simply measures empty.
    """
    temp = _fixed_item(
        TEMP,
        ItemKind.TEMP,
        "edit-clear-symbolic",
        [
            ("Temp files", paths.temp_dir),
            ("Update cache", paths.update_cache_dir),
            ("Logs", paths.logs_dir),
        ],
        index,
    )
    system = _fixed_item(
        SYSTEM,
        ItemKind.SYSTEM,
        "computer-symbolic",
        [
            ("Prefetch", paths.prefetch_dir),
            (RECYCLE_BIN_NAME, RECYCLE_BIN),
        ],
        index,
    )
    return [temp, system]


def option_label(item: CleaningItem, option: CleanOption, display_path: str | None = None) -> str:
    """Stable human label of an option, e.g. "Temp/Logs".

    Custom path options pass their full stored path as *display_path*.
    """
    return f"{item.name}/{display_path if display_path is not None else option.display_name}"
