"""Workspace-storage scanner.

The editor creates ``User/workspaceStorage/<hash>/`` for every folder or
workspace it opens and touches the directory whenever the workspace is used.
A ``workspace.json`` inside names the opened location:

    {"folder": "file:///home/me/project"}
    {"workspace": "file:///home/me/app.code-workspace"}

The directory mtime is the recency signal.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from codep.core.models import Entry, EntryKind, EntrySource
from codep.core.result import (
    CodepError,
    Err,
    MalformedRecordError,
    Ok,
    Result,
    SourceUnreadableError,
)
from codep.core.uri import coerce_uri

logger = logging.getLogger(__name__)

STORAGE_DIR = Path("User") / "workspaceStorage"
METADATA_FILE = "workspace.json"

# Checked in order; "configuration" is written by older releases.
LOCATION_KEYS = ("folder", "workspace", "configuration")


def workspace_storage_path(config_root: Path) -> Path:
    return config_root / STORAGE_DIR


def read_workspace_metadata(directory: Path) -> Result[str, CodepError]:
    """Return the workspace root URI recorded in ``directory/workspace.json``."""
    path = directory / METADATA_FILE
    try:
        raw = path.read_bytes()
    except OSError as exc:
        return Err(
            SourceUnreadableError(
                "Cannot read workspace metadata",
                context={"path": str(path), "error": exc.strerror or str(exc)},
            )
        )

    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        return Err(
            MalformedRecordError(
                "Workspace metadata is not valid JSON",
                context={"path": str(path), "error": str(exc)},
            )
        )
    if not isinstance(document, dict):
        return Err(
            MalformedRecordError("Workspace metadata is not an object", context={"path": str(path)})
        )

    for key in LOCATION_KEYS:
        value = document.get(key)
        if isinstance(value, dict) and "configPath" in value:
            value = value["configPath"]
        uri = coerce_uri(value)
        if uri is not None:
            return Ok(uri)

    return Err(
        MalformedRecordError("Workspace metadata names no location", context={"path": str(path)})
    )


def _scan_entries(storage: Path) -> list[Entry]:
    found: list[tuple[str, Entry]] = []
    with os.scandir(storage) as it:
        for dir_entry in it:
            try:
                if not dir_entry.is_dir():
                    continue
                mtime = dir_entry.stat().st_mtime
            except OSError as exc:
                logger.debug("Skipping %s: %s", dir_entry.path, exc)
                continue

            match read_workspace_metadata(Path(dir_entry.path)):
                case Err(err):
                    logger.debug("Skipping %s: %s", dir_entry.name, err)
                case Ok(uri):
                    entry = Entry.from_uri(
                        EntryKind.WORKSPACE, uri, mtime, EntrySource.WORKSPACE_STORAGE
                    )
                    found.append((dir_entry.name, entry))

    # scandir order is arbitrary; name order keeps equal mtimes deterministic.
    found.sort(key=lambda pair: pair[0])
    return [entry for _, entry in found]


def scan_workspace_storage(config_root: Path) -> Result[list[Entry], CodepError]:
    """Build one entry per workspace-storage directory with usable metadata.

    A missing storage directory yields ``Ok([])``; one that cannot be listed
    yields ``SourceUnreadableError``. Individual directories that fail are
    skipped.
    """
    storage = workspace_storage_path(config_root)
    try:
        entries = _scan_entries(storage)
    except FileNotFoundError:
        logger.debug("No workspace storage at %s", storage)
        return Ok([])
    except OSError as exc:
        return Err(
            SourceUnreadableError(
                "Cannot list workspace storage", context={"path": str(storage), "error": str(exc)}
            )
        )

    logger.debug("Found %d workspaces in %s", len(entries), storage)
    return Ok(entries)
