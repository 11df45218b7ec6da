"""Reads every requested source for one config root.

Recoverable errors are logged and turned into an empty contribution; the
run only fails when no requested source could be read at all.
"""

from __future__ import annotations

import logging
from pathlib import Path

from codep.core.models import Entry, EntrySource
from codep.core.recent_items import read_recent_items
from codep.core.result import CodepError, Err, Ok, Result, SourceUnreadableError
from codep.core.selection import merge
from codep.core.workspace_storage import scan_workspace_storage

logger = logging.getLogger(__name__)


# Merge order: the recent-items record wins duplicate URIs.
ALL_SOURCES: tuple[EntrySource, ...] = (EntrySource.RECENT_ITEMS, EntrySource.WORKSPACE_STORAGE)

_READERS = {
    EntrySource.RECENT_ITEMS: read_recent_items,
    EntrySource.WORKSPACE_STORAGE: scan_workspace_storage,
}


def collect_entries(
    config_root: Path, sources: tuple[EntrySource, ...] = ALL_SOURCES
) -> Result[list[Entry], SourceUnreadableError]:
    """Read ``sources`` below ``config_root`` and merge them in the given order."""
    contributions: list[list[Entry]] = []
    failures: list[CodepError] = []

    for source in sources:
        match _READERS[source](config_root):
            case Ok(entries):
                contributions.append(entries)
            case Err(err):
                logger.warning("Ignoring %s: %s", source.value, err)
                failures.append(err)

    unreadable = [err for err in failures if isinstance(err, SourceUnreadableError)]
    if sources and len(unreadable) == len(sources):
        return Err(
            SourceUnreadableError(
                "No source could be read", context={"config_root": str(config_root)}
            )
        )
    return Ok(merge(*contributions))
