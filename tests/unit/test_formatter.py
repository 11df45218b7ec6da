from __future__ import annotations

from codep.core.formatter import format_entry, render_lines
from codep.core.models import Entry, EntryKind, EntrySource, OutputMode


def _entry(uri: str) -> Entry:
    return Entry.from_uri(EntryKind.FOLDER, uri, 0.0, EntrySource.RECENT_ITEMS)


def test_display_mode_is_path_tab_label() -> None:
    assert format_entry(_entry("file:///a/b/c"), OutputMode.DISPLAY) == "/a/b/c\tc"


def test_path_and_uri_modes() -> None:
    entry = _entry("file:///home/u/my%20proj")
    assert format_entry(entry, OutputMode.PATH) == "/home/u/my proj"
    assert format_entry(entry, OutputMode.URI) == "file:///home/u/my%20proj"


def test_remote_entry_in_display_mode() -> None:
    line = format_entry(_entry("vscode-remote://wsl+Ubuntu/home/me/app"), OutputMode.DISPLAY)
    assert line == "vscode-remote://wsl+Ubuntu/home/me/app\tapp [Ubuntu (wsl)]"


def test_empty_display_path_falls_back_to_uri() -> None:
    entry = Entry(
        kind=EntryKind.FILE,
        uri="untitled:Untitled-1",
        display_path="",
        label="Untitled-1",
        recency=0.0,
        source=EntrySource.RECENT_ITEMS,
    )
    assert format_entry(entry, OutputMode.PATH) == "untitled:Untitled-1"


def test_control_characters_never_split_lines() -> None:
    line = format_entry(_entry("file:///tmp/odd%0Aname%09x"), OutputMode.DISPLAY)
    assert "\n" not in line
    assert line.count("\t") == 1
    assert line.split("\t", 1)[0] == "/tmp/odd name x"


def test_render_lines_terminators() -> None:
    entries = [_entry("file:///a"), _entry("file:///b")]
    assert "".join(render_lines(entries, OutputMode.PATH)) == "/a\n/b\n"
    assert "".join(render_lines(entries, OutputMode.PATH, null_terminated=True)) == "/a\0/b\0"
