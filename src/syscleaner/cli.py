"""CLI interface for syscleaner."""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import click

from syscleaner.core.catalog import option_label
from syscleaner.core.orchestrator import CleanOrchestrator
from syscleaner.core.path_index import RECYCLE_BIN, PathIndexError
from syscleaner.core.runner import make_runner
from syscleaner.models.cleaning_item import CleaningItem, CleanOption, ItemKind
from syscleaner.models.clean_result import Summary
from syscleaner.settings import Settings
from syscleaner.utils import SystemPaths, bytes_to_human, format_elapsed

_POLL_SECONDS = 0.1


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@contextmanager
def _session() -> Iterator[tuple[CleanOrchestrator, list[CleaningItem], Settings]]:
    """Discover the catalog with the user's saved toggles applied.

    Custom paths are written back to the store on exit.
    """
    paths = SystemPaths.from_environ()
    settings = Settings(paths.settings_file)
    runner = make_runner(settings.max_workers)
    orchestrator = CleanOrchestrator(runner, paths)
    try:
        items = orchestrator.discover()
        disabled = settings.disabled_options
        for item in items:
            for option in item.options:
                if _label(orchestrator, item, option) in disabled:
                    option.enabled = False
        yield orchestrator, items, settings
    finally:
        orchestrator.close()
        runner.shutdown()


def _label(orchestrator: CleanOrchestrator, item: CleaningItem, option: CleanOption) -> str:
    return option_label(item, option, orchestrator.resolve_display_path(option.id))


def _custom_item(items: list[CleaningItem]) -> CleaningItem:
    return next(item for item in items if item.kind is ItemKind.CUSTOM_PATH)


def _target_text(orchestrator: CleanOrchestrator, option_id: int) -> str:
    try:
        target = orchestrator.table.resolve(option_id)
    except PathIndexError:
        return "?"
    return "(system recycle bin)" if target is RECYCLE_BIN else str(target)


def _run_and_wait(orchestrator: CleanOrchestrator, items: list[CleaningItem], clean: bool, quiet: bool) -> Summary:
    """Start a run, poll its progress like a frontend would, consume the summary."""
    if clean:
        orchestrator.clean(items)
    else:
        orchestrator.analyze(items)

    if quiet:
        orchestrator.wait()
        return orchestrator.consume_summary()

    label = "Cleaning" if clean else "Analyzing"
    with click.progressbar(length=100, label=label) as bar:
        shown = 0
        while orchestrator.state.is_running:
            time.sleep(_POLL_SECONDS)
            # Progress restarts when cleaning follows the analysis pass.
            current = int(orchestrator.progress * 100)
            if current > shown:
                bar.update(current - shown)
                shown = current
        orchestrator.wait()
        bar.update(100 - shown)
    return orchestrator.consume_summary()


def _summary_dict(summary: Summary) -> dict:
    return {
        "kind": summary.kind.value,
        "elapsed": summary.elapsed,
        "total_files": summary.total_files,
        "total_bytes": summary.total_bytes,
        "results": [
            {
                "category": r.category,
                "option": r.option,
                "file_count": r.file_count,
                "byte_count": r.byte_count,
            }
            for r in summary.results
        ],
    }


def _print_summary(summary: Summary, cleaned: bool) -> None:
    verb = "Cleaned" if cleaned else "Found"
    for result in sorted(summary.results, key=lambda r: (r.category, r.option)):
        name = f"{result.category} - {result.option}"
        if result.file_count:
            click.echo(
                f"  {click.style('✓', fg='green')} {name:40s} — "
                f"{click.style(bytes_to_human(result.byte_count), fg='green', bold=True)} "
                f"({result.file_count:,} files)"
            )
        else:
            click.echo(f"  {click.style('·', fg='bright_black')} {name:40s} — nothing to clean")

    total = click.style(bytes_to_human(summary.total_bytes), fg="green", bold=True)
    click.echo(
        f"\n{verb} {total} in {summary.total_files:,} files ({format_elapsed(summary.elapsed)})\n"
    )


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """syscleaner — analyze and clean browser, temp, system and custom paths."""
    _setup_logging(verbose)


# ── list ─────────────────────────────────────────────────────────────────

@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_cmd(as_json: bool) -> None:
    """List cleaning categories and their options."""
    with _session() as (orchestrator, items, _settings):
        if as_json:
            data = [
                {
                    "name": item.name,
                    "kind": item.kind.value,
                    "options": [
                        {
                            "id": option.id,
                            "name": option.display_name,
                            "label": _label(orchestrator, item, option),
                            "enabled": option.enabled,
                            "target": _target_text(orchestrator, option.id),
                        }
                        for option in item.options
                    ],
                }
                for item in items
            ]
            click.echo(json.dumps(data, indent=2))
            return

        for item in items:
            click.echo(f"\n  {click.style(item.name, fg='blue', bold=True)}")
            if not item.options:
                click.echo(f"    {click.style('(empty)', fg='bright_black')}")
            for option in item.options:
                mark = click.style("[x]", fg="green") if option.enabled else "[ ]"
                target = click.style(_target_text(orchestrator, option.id), fg="bright_black")
                click.echo(f"    {mark} {option.display_name:20s} {target}")
        click.echo()


# ── analyze ──────────────────────────────────────────────────────────────

@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def analyze(as_json: bool) -> None:
    """Measure enabled options (preview only, never deletes)."""
    with _session() as (orchestrator, items, _settings):
        summary = _run_and_wait(orchestrator, items, clean=False, quiet=as_json)

    if as_json:
        click.echo(json.dumps(_summary_dict(summary), indent=2))
        return
    _print_summary(summary, cleaned=False)


# ── clean ────────────────────────────────────────────────────────────────

@main.command()
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def clean(yes: bool, as_json: bool) -> None:
    """Analyze, confirm and delete enabled options."""
    with _session() as (orchestrator, items, _settings):
        if not yes:
            preview = _run_and_wait(orchestrator, items, clean=False, quiet=as_json)
            if preview.total_files == 0:
                if as_json:
                    click.echo(json.dumps({"status": "nothing_to_clean", "summary": _summary_dict(preview)}))
                else:
                    click.echo("Nothing to clean.")
                return
            if not as_json:
                _print_summary(preview, cleaned=False)
            if not click.confirm("Permanently delete these files?", default=False, err=as_json):
                click.echo("Aborted.", err=as_json)
                return

        summary = _run_and_wait(orchestrator, items, clean=True, quiet=as_json)

    if as_json:
        click.echo(json.dumps({"status": "cleaned", "summary": _summary_dict(summary)}, indent=2))
        return
    _print_summary(summary, cleaned=True)


# ── toggle ───────────────────────────────────────────────────────────────

@main.command()
@click.argument("label")
@click.option("--on/--off", "enabled", default=True, help="Enable or disable the option")
def toggle(label: str, enabled: bool) -> None:
    """Enable or disable an option by its "Category/Option" label."""
    with _session() as (orchestrator, items, settings):
        labels = {_label(orchestrator, item, option) for item in items for option in item.options}
        if label not in labels:
            click.echo(f"Unknown option '{label}'.", err=True)
            sys.exit(1)
        settings.set_option_enabled(label, enabled)

    state = click.style("enabled", fg="green") if enabled else click.style("disabled", fg="yellow")
    click.echo(f"{label}: {state}")


# ── paths ────────────────────────────────────────────────────────────────

@main.group()
def paths() -> None:
    """Custom path management."""


@paths.command("list")
def paths_list() -> None:
    """List custom paths."""
    with _session() as (orchestrator, items, _settings):
        options = _custom_item(items).options
        if not options:
            click.echo("No custom paths.")
            return
        for option in options:
            click.echo(f"  {orchestrator.resolve_display_path(option.id)}")


@paths.command("add")
@click.argument("path", type=click.Path(path_type=Path))
def paths_add(path: Path) -> None:
    """Add a file or folder to clean."""
    with _session() as (orchestrator, _items, _settings):
        result = orchestrator.add_custom_path(path)
        if not result.ok:
            click.echo(f"Cannot add {path}: {result.error}", err=True)
            sys.exit(1)
    click.echo(f"Added {click.style(str(path), fg='cyan')}")


@paths.command("remove")
@click.argument("path", type=click.Path(path_type=Path))
def paths_remove(path: Path) -> None:
    """Stop cleaning a custom path (the path itself is not touched)."""
    wanted = os.path.normcase(os.path.abspath(path))
    with _session() as (orchestrator, items, _settings):
        for option in _custom_item(items).options:
            stored = orchestrator.resolve_display_path(option.id)
            if stored is not None and os.path.normcase(stored) == wanted:
                orchestrator.remove_custom_path(option.id)
                break
        else:
            click.echo(f"{path} is not a custom path.", err=True)
            sys.exit(1)
    click.echo(f"Removed {click.style(str(path), fg='cyan')}")


if __name__ == "__main__":
    main()
