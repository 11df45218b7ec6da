"""Core shared infrastructure for codep.

This package contains the extraction pipeline and its foundations:
    - config: Application configuration management
    - console: Rich console output and logging
    - result: Error handling patterns
    - uri: Path/URI normalization
    - recent_items / workspace_storage: the two storage readers
    - selection / formatter: filtering, ordering and rendering
"""

from __future__ import annotations

from . import config, console

__all__ = ["config", "console"]
