from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass
class CommandSpec:
    name: str
    handler: Callable[..., None]


_FUNCTION_COMMANDS: dict[str, dict[str, str]] = {
    "picker": {"recent": "recent", "workspaces": "workspaces", "list": "list_entries"},
}


def _import_module(module_name: str) -> object | None:
    try:
        return importlib.import_module(module_name)
    except ImportError as exc:
        logger.error("Failed to import command module %s: %s", module_name, exc)
        return None


def _build_function_commands(module_name: str, module: object) -> list[CommandSpec]:
    specs: list[CommandSpec] = []
    mapping = _FUNCTION_COMMANDS.get(module_name, {})
    for cmd_name, attr in mapping.items():
        handler = getattr(module, attr, None)
        if callable(handler):
            specs.append(CommandSpec(name=cmd_name, handler=handler))
        else:  # pragma: no cover - registry/module mismatch
            logger.error("Command %s.%s not found or not callable", module_name, attr)
    return specs


def discover_commands(package_path: Path, package: str = "codep.commands") -> list[CommandSpec]:
    """
    Discover standalone command callables in the commands package.

    Returns:
        Command specs in module-name order.
    """
    function_commands: list[CommandSpec] = []

    for file in sorted(package_path.glob("*.py")):
        if file.name.startswith("_"):
            continue
        module_name = file.stem
        module = _import_module(f"{package}.{module_name}")
        if module is None:
            continue
        function_commands.extend(_build_function_commands(module_name, module))

    return function_commands
