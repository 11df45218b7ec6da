"""Recent-items record reader.

The editor keeps its "Open Recent" list in ``User/globalStorage/storage.json``.
The layout is undocumented and has changed between releases, so every
nesting level is optional: groups that are recognized are read, anything
else is skipped. Two groups are understood:

    - ``lastKnownMenubarData``: the cached "File > Open Recent" submenu, in
      menu order (most recent first).
    - ``openedPathsList``: the history list (``entries`` in current releases,
      ``workspaces3``/``files2`` in older ones).
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from codep.core.models import Entry, EntryKind, EntrySource
from codep.core.result import (
    CodepError,
    Err,
    MalformedRecordError,
    Ok,
    Result,
    SourceUnreadableError,
)
from codep.core.selection import dedupe
from codep.core.uri import coerce_uri

logger = logging.getLogger(__name__)

# Newest location first; older releases kept storage.json at the root.
RECORD_CANDIDATES: tuple[Path, ...] = (
    Path("User") / "globalStorage" / "storage.json",
    Path("storage.json"),
)

RECENT_MENU_ID = "submenuitem.MenubarRecentMenu"

MENU_ITEM_KINDS: dict[str, EntryKind] = {
    "openRecentFolder": EntryKind.FOLDER,
    "openRecentFile": EntryKind.FILE,
    "openRecentWorkspace": EntryKind.WORKSPACE,
}

TIMESTAMP_KEYS = ("lastOpened", "timestamp", "lastAccessTime")

# Values above this are milliseconds since the epoch (1e11 s is the year 5138).
_MILLIS_THRESHOLD = 1e11


def recent_items_path(config_root: Path) -> Path:
    """Return the recent-items record for ``config_root``.

    Falls back to the current layout when no candidate exists so callers can
    report a stable path.
    """
    for candidate in RECORD_CANDIDATES:
        path = config_root / candidate
        if path.exists():
            return path
    return config_root / RECORD_CANDIDATES[0]


def _dig(node: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def _explicit_timestamp(item: Mapping[str, Any]) -> float | None:
    for key in TIMESTAMP_KEYS:
        value = item.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        try:
            seconds = float(value)
        except OverflowError:
            continue
        # finite and positive only
        if not math.isfinite(seconds) or seconds <= 0:
            continue
        return seconds / 1000.0 if seconds > _MILLIS_THRESHOLD else seconds
    return None


def _make_entry(
    kind: EntryKind, location: Any, item: Mapping[str, Any], fallback_recency: float
) -> Entry | None:
    uri = coerce_uri(location)
    if uri is None:
        return None
    timestamp = _explicit_timestamp(item)
    return Entry.from_uri(
        kind,
        uri,
        fallback_recency if timestamp is None else timestamp,
        EntrySource.RECENT_ITEMS,
        explicit_recency=timestamp is not None,
    )


def _menubar_entries(document: Mapping[str, Any], fallback_recency: float) -> Iterator[Entry]:
    file_menu = _dig(document, "lastKnownMenubarData", "menus", "File", "items")
    if file_menu is None:
        return
    if not isinstance(file_menu, list):
        logger.debug("Skipping menubar data: File menu items is %s", type(file_menu).__name__)
        return

    for menu_item in file_menu:
        if not isinstance(menu_item, Mapping) or menu_item.get("id") != RECENT_MENU_ID:
            continue
        submenu = _dig(menu_item, "submenu", "items")
        if not isinstance(submenu, list):
            logger.debug("Skipping recent submenu without an items list")
            continue
        for item in submenu:
            if not isinstance(item, Mapping):
                continue
            item_id = item.get("id")
            kind = MENU_ITEM_KINDS.get(item_id) if isinstance(item_id, str) else None
            if kind is None or item.get("enabled") is False:
                continue
            entry = _make_entry(kind, item.get("uri"), item, fallback_recency)
            if entry is not None:
                yield entry


def _history_item_entry(group: str, item: Any, fallback_recency: float) -> Entry | None:
    if isinstance(item, str):
        # Legacy lists held bare URIs.
        kind = EntryKind.FILE if group == "files2" else EntryKind.FOLDER
        return _make_entry(kind, item, {}, fallback_recency)
    if not isinstance(item, Mapping):
        return None

    if "folderUri" in item:
        return _make_entry(EntryKind.FOLDER, item["folderUri"], item, fallback_recency)
    if "fileUri" in item:
        return _make_entry(EntryKind.FILE, item["fileUri"], item, fallback_recency)

    workspace = item.get("workspace")
    if isinstance(workspace, Mapping):
        location = workspace.get("configPath")
        return _make_entry(EntryKind.WORKSPACE, location, item, fallback_recency)
    if "configURIPath" in item:
        return _make_entry(EntryKind.WORKSPACE, item["configURIPath"], item, fallback_recency)
    if "configPath" in item:
        return _make_entry(EntryKind.WORKSPACE, item["configPath"], item, fallback_recency)
    return None


def _history_entries(document: Mapping[str, Any], fallback_recency: float) -> Iterator[Entry]:
    opened = document.get("openedPathsList")
    if opened is None:
        return
    if not isinstance(opened, Mapping):
        logger.debug("Skipping openedPathsList: expected an object")
        return

    for group in ("entries", "workspaces3", "workspaces2", "files2"):
        items = opened.get(group)
        if items is None:
            continue
        if not isinstance(items, list):
            logger.debug("Skipping openedPathsList.%s: expected a list", group)
            continue
        for item in items:
            entry = _history_item_entry(group, item, fallback_recency)
            if entry is not None:
                yield entry


def parse_recent_items(document: Any, fallback_recency: float) -> list[Entry]:
    """Flatten a parsed storage.json document into entries.

    Args:
        document: The decoded JSON document.
        fallback_recency: Timestamp given to entries without an explicit one,
            normally the record's own mtime.

    Returns:
        Entries in record order, duplicates removed.
    """
    if not isinstance(document, Mapping):
        return []
    entries = list(_menubar_entries(document, fallback_recency))
    entries.extend(_history_entries(document, fallback_recency))
    return dedupe(entries)


def read_recent_items(config_root: Path) -> Result[list[Entry], CodepError]:
    """Read the recent-items record below ``config_root``.

    A missing record is a fresh install and yields ``Ok([])``. An unreadable
    record yields ``SourceUnreadableError``; an unparsable one
    ``MalformedRecordError``.
    """
    path = recent_items_path(config_root)
    try:
        mtime = path.stat().st_mtime
        raw = path.read_bytes()
    except FileNotFoundError:
        logger.debug("No recent-items record at %s", path)
        return Ok([])
    except OSError as exc:
        return Err(
            SourceUnreadableError(
                "Cannot read recent-items record", context={"path": str(path), "error": str(exc)}
            )
        )

    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        return Err(
            MalformedRecordError(
                "Recent-items record is not valid JSON",
                context={"path": str(path), "error": str(exc)},
            )
        )
    if not isinstance(document, Mapping):
        return Err(
            MalformedRecordError(
                "Recent-items record root is not an object", context={"path": str(path)}
            )
        )

    entries = parse_recent_items(document, mtime)
    logger.debug("Read %d recent items from %s", len(entries), path)
    return Ok(entries)
