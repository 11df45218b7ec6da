"""Rendering of entries into picker lines."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from codep.core.models import Entry, OutputMode

FIELD_SEPARATOR = "\t"

_CONTROL = str.maketrans({"\n": " ", "\r": " ", "\t": " ", "\0": " "})


def _field(value: str) -> str:
    return value.translate(_CONTROL)


def format_entry(entry: Entry, mode: OutputMode) -> str:
    """Render one entry as a single line (without terminator).

    ``display`` lines carry the selectable location first and the label
    second, separated by a tab.
    """
    location = _field(entry.display_path or entry.uri)
    if mode is OutputMode.PATH:
        return location
    if mode is OutputMode.URI:
        return _field(entry.uri)
    return f"{location}{FIELD_SEPARATOR}{_field(entry.label)}"


def render_lines(
    entries: Iterable[Entry], mode: OutputMode, null_terminated: bool = False
) -> Iterator[str]:
    """Yield terminated records ready to be written to stdout."""
    terminator = "\0" if null_terminated else "\n"
    for entry in entries:
        yield format_entry(entry, mode) + terminator
