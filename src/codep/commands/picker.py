"""Picker feed commands.

Provides the commands that print candidates for dmenu/rofi/fzf:
    - recent: the editor's "Open Recent" record
    - workspaces: the workspace-storage scan
    - list: both sources merged
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.markup import escape

from codep.core.collector import collect_entries
from codep.core.config import resolve_config_root
from codep.core.console import stderr_console
from codep.core.formatter import render_lines
from codep.core.models import Entry, EntryKind, EntrySource, KindOrder, OutputMode
from codep.core.result import Err, Ok
from codep.core.selection import filter_and_sort

if TYPE_CHECKING:
    from codep.main import AppState


def _fail(message: str) -> typer.Exit:
    stderr_console.print(f"[red]codep: {escape(message)}[/red]")
    return typer.Exit(code=1)


def _config_root(state: AppState) -> Path:
    match resolve_config_root(state.config, state.config_root):
        case Err(err):
            raise _fail(str(err))
        case Ok(root):
            state.logger.debug("Using config root %s", root)
            return root


def _collect(state: AppState, sources: tuple[EntrySource, ...]) -> list[Entry]:
    root = _config_root(state)
    match collect_entries(root, sources):
        case Err(err):
            raise _fail(str(err))
        case Ok(entries):
            return entries


def _max_age(days: int | None) -> timedelta | None:
    return timedelta(days=days) if days is not None else None


def _emit(state: AppState, entries: list[Entry], mode: OutputMode) -> None:
    for line in render_lines(entries, mode, null_terminated=state.null_terminated):
        typer.echo(line, nl=False)


def recent(
    ctx: typer.Context,
    files: bool = typer.Option(False, "--files", "-w", help="Include recent files."),
    folders: bool = typer.Option(False, "--folders", "-W", help="Include recent folders."),
    workspaces: bool = typer.Option(
        False, "--workspaces", help="Include recent .code-workspace files."
    ),
    all_kinds: bool = typer.Option(
        False, "--all", "-a", help="Include every kind (default when no kind flag is given)."
    ),
    order: KindOrder = typer.Option(
        KindOrder.RECENCY, "--order", "-d", help="Group files or folders first."
    ),
    mode: OutputMode | None = typer.Option(None, "--mode", "-m", help="Output format."),
    limit: int | None = typer.Option(None, "--limit", "-l", min=0, help="Maximum entries."),
    max_age_days: int | None = typer.Option(
        None, "--max-age-days", "-M", min=0, help="Skip entries older than this."
    ),
) -> None:
    """Print entries from the editor's recent-items record."""
    state: AppState = ctx.obj
    requested = {
        EntryKind.FILE: files,
        EntryKind.FOLDER: folders,
        EntryKind.WORKSPACE: workspaces,
    }
    kinds = {kind for kind, wanted in requested.items() if wanted} or None
    if all_kinds:
        kinds = None

    entries = _collect(state, (EntrySource.RECENT_ITEMS,))
    selected = filter_and_sort(
        entries,
        _max_age(max_age_days if max_age_days is not None else state.config.max_age_days),
        kinds,
        include_remote=state.config.include_remote,
        order=order,
        limit=limit if limit is not None else state.config.limit,
    )
    _emit(state, selected, mode or state.config.mode)


def workspaces(
    ctx: typer.Context,
    max_age_days: int | None = typer.Option(
        None, "--max-age-days", "-M", min=0, help="Skip workspaces not opened for this long."
    ),
    limit: int | None = typer.Option(None, "--limit", "-l", min=0, help="Maximum entries."),
    local: bool = typer.Option(False, "--local", "-W", help="Include local folders."),
    remote: bool = typer.Option(
        False, "--remote", "-r", help="Include vscode-remote and other non-file URIs."
    ),
    all_schemes: bool = typer.Option(
        False, "--all", "-a", help="Include local and remote (default when neither is given)."
    ),
    display: bool = typer.Option(
        False, "--display", "-D", help="Shortcut for --mode display (path<TAB>label)."
    ),
    mode: OutputMode | None = typer.Option(None, "--mode", "-m", help="Output format."),
) -> None:
    """Print workspaces found in the editor's workspace storage."""
    state: AppState = ctx.obj
    if all_schemes or not (local or remote):
        include_local, include_remote = True, state.config.include_remote or all_schemes
    else:
        include_local, include_remote = local, remote

    entries = _collect(state, (EntrySource.WORKSPACE_STORAGE,))
    selected = filter_and_sort(
        entries,
        _max_age(max_age_days if max_age_days is not None else state.config.max_age_days),
        include_local=include_local,
        include_remote=include_remote,
        limit=limit if limit is not None else state.config.limit,
    )
    chosen_mode = OutputMode.DISPLAY if display else mode or state.config.mode
    _emit(state, selected, chosen_mode)


def list_entries(
    ctx: typer.Context,
    kind: list[EntryKind] | None = typer.Option(
        None, "--kind", "-k", help="Restrict to a kind (repeatable)."
    ),
    mode: OutputMode | None = typer.Option(None, "--mode", "-m", help="Output format."),
    max_age_days: int | None = typer.Option(
        None, "--max-age-days", "-M", min=0, help="Skip entries older than this."
    ),
    limit: int | None = typer.Option(None, "--limit", "-l", min=0, help="Maximum entries."),
    no_remote: bool = typer.Option(False, "--no-remote", help="Only local paths."),
    order: KindOrder = typer.Option(
        KindOrder.RECENCY, "--order", "-d", help="Group files or folders first."
    ),
) -> None:
    """Print recent items and workspaces merged, most recent first."""
    state: AppState = ctx.obj
    entries = _collect(state, (EntrySource.RECENT_ITEMS, EntrySource.WORKSPACE_STORAGE))
    selected = filter_and_sort(
        entries,
        _max_age(max_age_days if max_age_days is not None else state.config.max_age_days),
        set(kind) if kind else None,
        include_remote=state.config.include_remote and not no_remote,
        order=order,
        limit=limit if limit is not None else state.config.limit,
    )
    _emit(state, selected, mode or state.config.mode)
