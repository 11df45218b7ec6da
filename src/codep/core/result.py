"""
Unified Result types and error hierarchy for codep.

This module provides:
1. Result[T, E] type for explicit error handling
2. Domain-specific exception hierarchy

Usage:
    from codep.core.result import Ok, Err, Result, SourceUnreadableError

    def read_source(path: Path) -> Result[list[Entry], SourceUnreadableError]:
        if not readable:
            return Err(SourceUnreadableError("Cannot read", context={"path": str(path)}))
        return Ok(entries)

    result = read_source(path)
    entries = result.unwrap_or([])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Return the contained value (ignores default for Ok)."""
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the contained error."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        """Return the default value."""
        return default


# Type alias for Result
Result = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Domain-specific error hierarchy
# ---------------------------------------------------------------------------


class CodepError(Exception):
    """Base exception for all codep errors.

    Carries an optional context mapping that is rendered alongside the
    message in diagnostics.
    """

    def __init__(self, message: str, *, context: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ConfigRootUnavailableError(CodepError):
    """Raised when the editor config root cannot be determined or does not exist.

    This is the only fatal condition: there is nothing to scan.
    """

    pass


class SourceUnreadableError(CodepError):
    """Raised when a whole source cannot be read.

    Examples:
    - storage.json exists but permission is denied
    - workspaceStorage cannot be listed
    """

    pass


class MalformedRecordError(CodepError):
    """Raised when a record cannot be parsed.

    Examples:
    - storage.json truncated by an editor crash
    - workspace.json root is not an object
    """

    pass


class ConfigError(CodepError):
    """Raised when the codep config file cannot be loaded or validated."""

    pass


__all__ = [
    # Result types
    "Ok",
    "Err",
    "Result",
    # Error hierarchy
    "CodepError",
    "ConfigRootUnavailableError",
    "SourceUnreadableError",
    "MalformedRecordError",
    "ConfigError",
]
