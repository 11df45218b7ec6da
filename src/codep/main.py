from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter

import typer
from rich.markup import escape
from rich.panel import Panel

from . import __version__
from .core.config import AppConfig, ConfigLoadResult, load_config
from .core.console import setup_logging, stderr_console
from .core.registry import discover_commands

app = typer.Typer(
    help="codep: list recently opened editor folders, files and workspaces for pickers.",
    no_args_is_help=True,
)
logger = logging.getLogger(__name__)


@dataclass
class AppState:
    config: AppConfig
    config_meta: ConfigLoadResult
    logger: logging.Logger
    config_root: Path | None = None
    null_terminated: bool = False


@app.callback()
def main(
    ctx: typer.Context,
    config_root: Path | None = typer.Option(
        None,
        "--config-root",
        "-c",
        help="Editor config root (env: CODEP_CONFIG_ROOT, default: <config dir>/Code).",
    ),
    null_terminated: bool = typer.Option(
        False, "--null-terminated", "-0", help="Terminate records with NUL (for fzf --read0)."
    ),
    config: Path | None = typer.Option(
        None, "--config", help="Path to a codep config file (TOML or JSON)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging on stderr."),
) -> None:
    # load_config never raises; a broken file puts us in safe mode
    loaded_config, meta = load_config(config_path=config)
    logger = setup_logging(level=loaded_config.log_level, verbose=verbose)

    ctx.obj = AppState(
        config=loaded_config,
        config_meta=meta,
        logger=logger,
        config_root=config_root,
        null_terminated=null_terminated or loaded_config.null_terminated,
    )

    if meta.error:
        stderr_console.print(
            Panel(
                f"[bold red]Configuration Error - Safe Mode Active[/bold red]\n\n"
                f"Failed to load {escape(str(meta.path))}:\n{escape(meta.error)}\n\n"
                f"[yellow]Using default settings.[/yellow]",
                border_style="red",
            )
        )
    else:
        logger.debug(
            "Loaded configuration from %s (file: %s, env overrides: %s)",
            meta.path,
            meta.file_loaded,
            sorted(meta.env_overrides),
        )


@app.command("version")
def show_version() -> None:
    """Print the codep version."""
    typer.echo(__version__)


def _register_commands() -> None:
    commands_path = Path(__file__).resolve().parent / "commands"
    for spec in discover_commands(commands_path):
        app.command(spec.name)(spec.handler)


def _register_commands_with_timing() -> None:
    start = perf_counter()
    _register_commands()
    elapsed = perf_counter() - start
    logger.debug("Command registry initialized in %.3f seconds", elapsed)


_register_commands_with_timing()


def cli() -> None:
    app()


if __name__ == "__main__":
    cli()
