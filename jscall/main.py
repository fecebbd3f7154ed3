"""Main CLI entry point for jscall."""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from jscall import __app_name__, __version__
from jscall.cli import config, mailbox
from jscall.cli.exit_codes import ExitCode

# Create the main Typer app
app = typer.Typer(
    name=__app_name__,
    help="jscall - Place function calls into an embedded document's DOM mailbox.",
    add_completion=True,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Console for CLI output
console = Console()

# Register command groups
app.add_typer(mailbox.app, name="mailbox")
app.add_typer(config.app, name="config")

# Global state for CLI options
_global_state: dict[str, bool] = {
    "verbose": False,
    "debug": False,
    "quiet": False,
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"{__app_name__} v{__version__}")
        raise typer.Exit(code=ExitCode.SUCCESS)


def _setup_logging(
    verbose: bool = False,
    debug: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
    default_level: str = "WARNING",
    log_format: Optional[str] = None,
) -> None:
    """Set up logging configuration based on CLI options.

    Args:
        verbose: Enable INFO level logging
        debug: Enable DEBUG level logging
        quiet: Suppress non-error output
        log_file: Optional log file path
        default_level: Level used when no verbosity flag is given
        log_format: Format used outside debug mode
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.getLevelName(default_level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    if debug:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
    else:
        format_str = log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handlers: list[logging.Handler] = []

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)  # Always log debug to file
        handlers.append(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        handlers.append(console_handler)
    elif not log_file:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=logging.DEBUG if log_file else level,
        format=format_str,
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging configured: level={logging.getLevelName(level)}, debug={debug}")


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output (INFO level logging).",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode (DEBUG level logging).",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log to file (logs DEBUG level regardless of console settings).",
    ),
) -> None:
    """jscall - Place function calls into an embedded document's DOM mailbox.

    The host writes [cyan]<infunction call=... returnto=... args=.../>[/cyan]
    records under the document's single [cyan]<jscall>[/cyan] anchor; script
    code in the embedded runtime polls the anchor and runs them.

    [bold]Commands:[/bold]

    • [cyan]mailbox[/cyan] - Place, list and collect call records in a document file
    • [cyan]config[/cyan] - Manage configuration

    [bold]Examples:[/bold]

        jscall mailbox place page.xhtml --call add --args 1,2 --returnto req-1
        jscall mailbox pending page.xhtml
        jscall mailbox check page.xhtml
    """
    _global_state["verbose"] = verbose
    _global_state["debug"] = debug
    _global_state["quiet"] = quiet

    if quiet and (verbose or debug):
        console.print("[red]Error:[/red] --quiet cannot be combined with --verbose or --debug")
        raise typer.Exit(code=ExitCode.INVALID_ARGUMENT)

    from jscall.config import get_config
    logging_config = get_config().logging

    _setup_logging(
        verbose=verbose,
        debug=debug,
        quiet=quiet,
        log_file=log_file or logging_config.file,
        default_level=logging_config.level,
        log_format=logging_config.format,
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"jscall v{__version__} starting")


def is_verbose() -> bool:
    """Check if verbose or debug mode is enabled."""
    return _global_state.get("verbose", False) or _global_state.get("debug", False)


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return _global_state.get("debug", False)


def is_quiet() -> bool:
    """Check if quiet mode is enabled."""
    return _global_state.get("quiet", False)


__all__ = [
    "app",
    "console",
    "is_verbose",
    "is_debug",
    "is_quiet",
]


if __name__ == "__main__":
    app()
