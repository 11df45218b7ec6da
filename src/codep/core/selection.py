"""Merging, deduplication, filtering and ordering of entries."""

from __future__ import annotations

import time
from collections.abc import Collection, Iterable
from datetime import timedelta

from codep.core.models import Entry, EntryKind, KindOrder
from codep.core.uri import normalize_uri


def merge(*sources: Iterable[Entry]) -> list[Entry]:
    """Concatenate sources; earlier sources win when duplicates are removed."""
    merged: list[Entry] = []
    for source in sources:
        merged.extend(source)
    return merged


def dedupe(entries: Iterable[Entry]) -> list[Entry]:
    """Drop entries whose normalized URI was already seen, keeping the first."""
    seen: set[str] = set()
    unique: list[Entry] = []
    for entry in entries:
        key = normalize_uri(entry.uri)
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique


def _group(entries: list[Entry], order: KindOrder) -> list[Entry]:
    if order is KindOrder.RECENCY:
        return entries
    files = [e for e in entries if e.kind is EntryKind.FILE]
    others = [e for e in entries if e.kind is not EntryKind.FILE]
    return files + others if order is KindOrder.FILES_FIRST else others + files


def filter_and_sort(
    entries: Iterable[Entry],
    max_age: timedelta | None = None,
    kinds: Collection[EntryKind] | None = None,
    *,
    now: float | None = None,
    include_local: bool = True,
    include_remote: bool = True,
    order: KindOrder = KindOrder.RECENCY,
    limit: int | None = None,
) -> list[Entry]:
    """Select the candidates to print, most recent first.

    Args:
        entries: Merged entries in source order.
        max_age: Drop entries older than this, measured against ``now``.
        kinds: Keep only these kinds; None keeps all.
        now: Reference time (defaults to the current time).
        include_local: Keep ``file`` URIs.
        include_remote: Keep every other scheme.
        order: Optional files/folders grouping applied after sorting.
        limit: Maximum number of entries returned.

    Returns:
        The surviving entries. Ties in recency keep their input order.
    """
    reference = time.time() if now is None else now
    max_age_seconds = max_age.total_seconds() if max_age is not None else None

    selected: list[Entry] = []
    for entry in dedupe(entries):
        if kinds is not None and entry.kind not in kinds:
            continue
        if not (include_local if entry.is_local else include_remote):
            continue
        if max_age_seconds is not None and entry.age(reference) > max_age_seconds:
            continue
        selected.append(entry)

    # sorted() is stable, so equal timestamps keep merge order
    selected = sorted(selected, key=lambda e: e.recency, reverse=True)
    selected = _group(selected, order)
    if limit is not None:
        selected = selected[:limit]
    return selected
