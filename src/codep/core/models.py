"""Data model shared by the readers, the selection engine and the formatter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import unquote

from codep.core import uri as uri_utils


class EntryKind(str, Enum):
    FOLDER = "folder"
    FILE = "file"
    WORKSPACE = "workspace"


class EntrySource(str, Enum):
    RECENT_ITEMS = "recent-items"
    WORKSPACE_STORAGE = "workspace-storage"


class OutputMode(str, Enum):
    """Line formats understood by the formatter."""

    PATH = "path"
    URI = "uri"
    DISPLAY = "display"


class KindOrder(str, Enum):
    """Optional grouping applied after the recency sort."""

    RECENCY = "recency"
    FILES_FIRST = "files-first"
    FOLDERS_FIRST = "folders-first"


@dataclass(frozen=True, slots=True)
class Entry:
    """A single recently used location.

    Attributes:
        kind: Folder, file or workspace.
        uri: Location as stored by the editor, in URI form. Never empty.
        display_path: Native path for ``file`` URIs, the raw URI otherwise.
        label: Short human-readable name (last path segment).
        recency: POSIX timestamp used for ordering, newest first.
        source: Which storage area produced the entry.
        explicit_recency: True when ``recency`` is a timestamp recorded by the
            editor rather than a file or directory mtime.

    ``source`` and ``explicit_recency`` are informational. Deduplication
    only looks at input order, and the collector reads the recent-items
    record first, so its entry (and timestamp) wins a shared URI.
    """

    kind: EntryKind
    uri: str
    display_path: str
    label: str
    recency: float
    source: EntrySource
    explicit_recency: bool = False

    @classmethod
    def from_uri(
        cls,
        kind: EntryKind,
        uri: str,
        recency: float,
        source: EntrySource,
        *,
        explicit_recency: bool = False,
    ) -> Entry:
        """Derive ``display_path`` and ``label`` from ``uri``."""
        display_path = uri_utils.to_display_path(uri)
        if uri_utils.is_local(uri):
            label = uri_utils.label_of(display_path)
        else:
            label = uri_utils.label_of(unquote(uri))
            remote = uri_utils.describe_remote(uri)
            if remote:
                label = f"{label} [{remote}]"
        return cls(
            kind=kind,
            uri=uri,
            display_path=display_path,
            label=label,
            recency=recency,
            source=source,
            explicit_recency=explicit_recency,
        )

    @property
    def is_local(self) -> bool:
        return uri_utils.is_local(self.uri)

    def age(self, now: float) -> float:
        """Seconds elapsed between ``recency`` and ``now``."""
        return now - self.recency
