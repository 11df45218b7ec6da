from __future__ import annotations

from datetime import timedelta

from codep.core.models import Entry, EntryKind, EntrySource, KindOrder
from codep.core.selection import dedupe, filter_and_sort, merge

NOW = 1_700_000_000.0
DAY = 86_400.0


def _entry(
    uri: str,
    recency: float,
    kind: EntryKind = EntryKind.FOLDER,
    source: EntrySource = EntrySource.RECENT_ITEMS,
) -> Entry:
    return Entry.from_uri(kind, uri, recency, source)


def test_sorted_most_recent_first() -> None:
    entries = [
        _entry("file:///a", NOW - 30),
        _entry("file:///b", NOW),
        _entry("file:///c", NOW - 5),
    ]

    result = filter_and_sort(entries, now=NOW)

    assert [e.uri for e in result] == ["file:///b", "file:///c", "file:///a"]


def test_ties_keep_input_order() -> None:
    entries = [_entry(f"file:///{name}", NOW) for name in "dcab"]

    result = filter_and_sort(entries, now=NOW)

    assert [e.label for e in result] == ["d", "c", "a", "b"]


def test_max_age_is_inclusive() -> None:
    entries = [
        _entry("file:///fresh", NOW - DAY),
        _entry("file:///edge", NOW - 2 * DAY),
        _entry("file:///stale", NOW - 2 * DAY - 1),
    ]

    result = filter_and_sort(entries, timedelta(days=2), now=NOW)

    assert [e.label for e in result] == ["fresh", "edge"]


def test_kind_filter() -> None:
    entries = [
        _entry("file:///folder", NOW, EntryKind.FOLDER),
        _entry("file:///file.txt", NOW, EntryKind.FILE),
        _entry("file:///w.code-workspace", NOW, EntryKind.WORKSPACE),
    ]

    result = filter_and_sort(entries, kinds={EntryKind.FILE, EntryKind.WORKSPACE}, now=NOW)

    assert [e.kind for e in result] == [EntryKind.FILE, EntryKind.WORKSPACE]


def test_scheme_filters() -> None:
    entries = [
        _entry("file:///local", NOW),
        _entry("vscode-remote://ssh-remote+box/srv", NOW - 1),
    ]

    local_only = filter_and_sort(entries, now=NOW, include_remote=False)
    remote_only = filter_and_sort(entries, now=NOW, include_local=False)

    assert [e.uri for e in local_only] == ["file:///local"]
    assert [e.uri for e in remote_only] == ["vscode-remote://ssh-remote+box/srv"]


def test_dedup_first_occurrence_wins() -> None:
    recent = [_entry("file:///home/u/proj", NOW - 100)]
    storage = [
        _entry("file:///home/u/proj/", NOW, EntryKind.WORKSPACE, EntrySource.WORKSPACE_STORAGE)
    ]

    result = filter_and_sort(merge(recent, storage), now=NOW)

    assert len(result) == 1
    assert result[0].source is EntrySource.RECENT_ITEMS
    assert result[0].recency == NOW - 100


def test_later_explicit_timestamp_does_not_replace_first() -> None:
    first = _entry("file:///proj", NOW - 100)
    later = Entry.from_uri(
        EntryKind.FOLDER, "file:///proj", NOW, EntrySource.RECENT_ITEMS, explicit_recency=True
    )

    (kept,) = dedupe([first, later])

    assert kept is first


def test_kind_filter_sees_only_the_surviving_duplicate() -> None:
    recent = [_entry("file:///shared", NOW - 10, EntryKind.FOLDER)]
    storage = [
        _entry("file:///shared", NOW, EntryKind.WORKSPACE, EntrySource.WORKSPACE_STORAGE)
    ]

    workspaces = filter_and_sort(merge(recent, storage), kinds={EntryKind.WORKSPACE}, now=NOW)
    folders = filter_and_sort(merge(recent, storage), kinds={EntryKind.FOLDER}, now=NOW)

    assert workspaces == []
    assert [(e.kind, e.source) for e in folders] == [
        (EntryKind.FOLDER, EntrySource.RECENT_ITEMS)
    ]


def test_dedupe_is_case_sensitive() -> None:
    entries = [_entry("file:///Proj", NOW), _entry("file:///proj", NOW)]
    assert len(dedupe(entries)) == 2


def test_order_groups_after_sorting() -> None:
    entries = [
        _entry("file:///d1", NOW, EntryKind.FOLDER),
        _entry("file:///f1", NOW - 1, EntryKind.FILE),
        _entry("file:///d2", NOW - 2, EntryKind.FOLDER),
        _entry("file:///f2", NOW - 3, EntryKind.FILE),
    ]

    files_first = filter_and_sort(entries, now=NOW, order=KindOrder.FILES_FIRST)
    folders_first = filter_and_sort(entries, now=NOW, order=KindOrder.FOLDERS_FIRST)

    assert [e.label for e in files_first] == ["f1", "f2", "d1", "d2"]
    assert [e.label for e in folders_first] == ["d1", "d2", "f1", "f2"]


def test_limit() -> None:
    entries = [_entry(f"file:///{i}", NOW - i) for i in range(5)]
    assert [e.label for e in filter_and_sort(entries, now=NOW, limit=2)] == ["0", "1"]
    assert filter_and_sort(entries, now=NOW, limit=0) == []


def test_no_match_is_empty() -> None:
    entries = [_entry("file:///a", NOW - 10 * DAY)]
    assert filter_and_sort(entries, timedelta(days=1), now=NOW) == []
    assert filter_and_sort([], now=NOW) == []
