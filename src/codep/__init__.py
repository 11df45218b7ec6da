"""codep - recent VS Code locations for line-oriented pickers.

This package provides the core functionality for the `codep` command-line tool:
reading the editor's recent-items record and workspace storage, and printing
the results one candidate per line for dmenu, rofi or fzf.

Exports:
    __version__: Package version string.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.3.0"
