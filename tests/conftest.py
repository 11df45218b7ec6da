from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Callable

import pytest
from typer.testing import CliRunner

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

CODEP_ENV_VARS = (
    "CODEP_CONFIG_ROOT",
    "CODEP_MODE",
    "CODEP_MAX_AGE_DAYS",
    "CODEP_LIMIT",
    "CODEP_INCLUDE_REMOTE",
    "CODEP_NULL_TERMINATED",
    "CODEP_LOG_LEVEL",
)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolate_config(tmp_path: Path, monkeypatch: Any) -> Path:
    """Point config to a temp path so tests don't touch user state."""
    cfg_path = tmp_path / "codep.toml"
    monkeypatch.setenv("CODEP_CONFIG", str(cfg_path))
    for name in CODEP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return cfg_path


@pytest.fixture
def config_root(tmp_path: Path) -> Path:
    root = tmp_path / "Code"
    (root / "User" / "globalStorage").mkdir(parents=True)
    (root / "User" / "workspaceStorage").mkdir(parents=True)
    return root


@pytest.fixture
def write_storage(config_root: Path) -> Callable[..., Path]:
    """Write storage.json with the given document (or raw text) and optional mtime."""

    def _write(document: Any, mtime: float | None = None) -> Path:
        path = config_root / "User" / "globalStorage" / "storage.json"
        text = document if isinstance(document, str) else json.dumps(document)
        path.write_text(text, encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _write


@pytest.fixture
def make_workspace(config_root: Path) -> Callable[..., Path]:
    """Create a workspaceStorage/<name> directory with optional workspace.json."""

    def _make(name: str, metadata: Any = None, mtime: float | None = None) -> Path:
        directory = config_root / "User" / "workspaceStorage" / name
        directory.mkdir()
        if metadata is not None:
            text = metadata if isinstance(metadata, str) else json.dumps(metadata)
            (directory / "workspace.json").write_text(text, encoding="utf-8")
        if mtime is not None:
            # after writing, since creating the file bumps the directory mtime
            os.utime(directory, (mtime, mtime))
        return directory

    return _make


def menubar_document(*items: dict[str, Any]) -> dict[str, Any]:
    """Wrap submenu items in the editor's cached File > Open Recent structure."""
    return {
        "lastKnownMenubarData": {
            "menus": {
                "File": {
                    "items": [
                        {"id": "workbench.action.files.newUntitledFile", "label": "&&New File"},
                        {
                            "id": "submenuitem.MenubarRecentMenu",
                            "label": "Open &&Recent",
                            "submenu": {"items": list(items)},
                        },
                    ]
                }
            }
        }
    }


def uri_object(path: str, scheme: str = "file") -> dict[str, Any]:
    return {"$mid": 1, "path": path, "scheme": scheme}


@pytest.fixture
def menubar() -> Callable[..., dict[str, Any]]:
    return menubar_document


@pytest.fixture
def file_uri_object() -> Callable[..., dict[str, Any]]:
    return uri_object
