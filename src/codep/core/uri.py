"""Conversion between native paths and the URIs the editor stores.

The editor records locations as ``file:///...`` URIs (percent-encoded) or as
remote URIs such as ``vscode-remote://ssh-remote+host/path``. Pickers want
native paths for local entries and the untouched URI for everything else.
"""

from __future__ import annotations

import json
import re
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote, urlsplit

FILE_SCHEME = "file"
REMOTE_SCHEME = "vscode-remote"

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.-]*):")
_AUTHORITY_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.-]*://[^/]*)(/.*)?$")
_WINDOWS_DRIVE_RE = re.compile(r"^/[A-Za-z]:")

# Keys inside a hex-encoded remote authority, with the suffix shown after the remote type.
_REMOTE_DESCRIPTORS: tuple[tuple[str, str], ...] = (
    ("hostPath", ""),
    ("repositoryPath", ": repository"),
    ("volumeName", ": volume"),
)


def scheme_of(uri: str) -> str | None:
    """Return the lower-cased scheme of ``uri`` or None for a bare path."""
    match = _SCHEME_RE.match(uri)
    if match is None:
        return None
    scheme = match.group(1).lower()
    # A single letter followed by ':' is a Windows drive, not a scheme.
    return None if len(scheme) == 1 else scheme


def is_local(uri: str) -> bool:
    return scheme_of(uri) == FILE_SCHEME


def to_display_path(uri: str) -> str:
    """Render a ``file`` URI as a native path; return any other URI unchanged.

    Never raises: a ``file`` URI that cannot be split is returned as is.
    """
    if not is_local(uri):
        return uri

    try:
        parts = urlsplit(uri)
    except ValueError:
        # e.g. an unterminated "[" authority
        return uri
    path = unquote(parts.path)
    if parts.netloc and parts.netloc.lower() != "localhost":
        # UNC share, file://server/share/x
        return f"//{parts.netloc}{path}"
    if sys.platform.startswith("win") and _WINDOWS_DRIVE_RE.match(path):
        return path[1:]
    return path or "/"


def to_uri(path: str | Path) -> str:
    """Convert a native path into a percent-encoded ``file://`` URI."""
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = candidate.absolute()
    return candidate.as_uri()


def label_of(path_or_uri: str) -> str:
    """Return the final ``/``-delimited segment, ignoring trailing slashes."""
    trimmed = path_or_uri.rstrip("/")
    if not trimmed:
        return path_or_uri
    return trimmed.rpartition("/")[2]


def normalize_uri(uri: str) -> str:
    """Key used to detect duplicate locations.

    Percent-encoding is decoded, the scheme lower-cased and trailing slashes
    dropped (the root path keeps its slash). Everything else stays
    case-sensitive.
    """
    value = unquote(uri.strip())
    scheme = scheme_of(value)
    if scheme is not None:
        value = scheme + value[len(scheme) :]

    match = _AUTHORITY_RE.match(value)
    if match is None:
        return value.rstrip("/") or value

    prefix, path = match.group(1), match.group(2) or ""
    if path:
        path = path.rstrip("/") or "/"
    return prefix + path


def uri_from_components(components: Mapping[str, Any]) -> str | None:
    """Build a URI string from a serialized URI object (``{"scheme": ..., "path": ...}``)."""
    external = components.get("external")
    if isinstance(external, str) and external.strip():
        return external.strip()

    scheme = components.get("scheme")
    path = components.get("path")
    if not isinstance(scheme, str) or not isinstance(path, str) or not scheme or not path:
        return None

    authority = components.get("authority")
    authority = authority if isinstance(authority, str) else ""
    return f"{scheme}://{authority}{quote(path, safe='/')}"


def coerce_uri(value: Any) -> str | None:
    """Turn whatever the editor stored for a location into a URI string.

    Accepts URI strings, bare absolute paths and serialized URI objects.
    Returns None when nothing usable is present.
    """
    if isinstance(value, Mapping):
        return uri_from_components(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if scheme_of(text) is not None:
        return text
    if text.startswith(("/", "~")) or re.match(r"^[A-Za-z]:[\\/]", text):
        return to_uri(text)
    return None


def describe_remote(uri: str) -> str | None:
    """Describe a ``vscode-remote`` authority, e.g. ``/home/me/app (dev-container)``.

    Dev containers and similar remotes hex-encode a JSON object in the
    authority; ssh/wsl remotes carry a plain host name.
    """
    if scheme_of(uri) != REMOTE_SCHEME:
        return None

    rest = unquote(uri)[len(REMOTE_SCHEME) + 3 :]
    authority = rest.split("/", 1)[0]
    remote_type, plus, host = authority.partition("+")
    if not plus:
        return None
    if not host:
        return remote_type

    try:
        decoded = bytes.fromhex(host).decode("utf-8")
    except ValueError:
        return f"{host} ({remote_type})"
    if not decoded.isprintable():
        return f"{host} ({remote_type})"

    try:
        payload = json.loads(decoded)
    except json.JSONDecodeError:
        return f"{decoded} ({remote_type})"

    if isinstance(payload, dict):
        for key, suffix in _REMOTE_DESCRIPTORS:
            value = payload.get(key)
            if isinstance(value, str):
                return f"{value} ({remote_type}{suffix})"
    return f"{decoded} ({remote_type})"
