"""Global exception handling for the jscall CLI.

This module provides centralized error handling through custom exception
classes and a decorator that ensures consistent error reporting and
exit codes across all CLI commands.
"""

from functools import wraps
from typing import Callable, TypeVar, Any
import logging

import typer
from rich.console import Console
from rich.markup import escape

from jscall.bridge.protocol import MailboxError, ResultChannelDisabled
from jscall.cli.exit_codes import ExitCode

# Console for error output (stderr)
console = Console(stderr=True)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class JSCallError(Exception):
    """Base exception for the jscall CLI.

    Attributes:
        message: Error message
        exit_code: Exit code to use when exiting
        details: Optional dictionary of additional error details
    """

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigurationError(JSCallError):
    """Configuration file or value is invalid."""

    exit_code = ExitCode.CONFIGURATION_ERROR


class ValidationError(JSCallError):
    """Validation error for user input.

    Examples:
        - Unknown record direction
        - Invalid option combination
    """

    exit_code = ExitCode.INVALID_ARGUMENT


class NothingToCollectError(JSCallError):
    """No result record is waiting in the mailbox."""

    exit_code = ExitCode.NOTHING_TO_COLLECT


def exit_code_for(error: MailboxError) -> int:
    """Map a mailbox protocol error to a CLI exit code."""
    if error.status is not None:
        return int(error.status)
    if isinstance(error, ResultChannelDisabled):
        return ExitCode.CHANNEL_DISABLED
    return ExitCode.INVALID_RECORD


def _report(message: str, details: dict[str, Any]) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")
    for key, value in details.items():
        console.print(f"  [dim]{key}:[/dim] {escape(str(value))}")


def handle_errors(func: F) -> F:
    """Decorator for consistent error handling across CLI commands.

    - JSCallError subclasses: error message with the class's exit code
    - MailboxError: error message with the placement status as exit code
    - KeyboardInterrupt: cancellation message with exit code 130
    - Other exceptions: generic error with exit code 70

    Example:
        @app.command()
        @handle_errors
        def my_command():
            raise ConfigurationError("Invalid config")
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except JSCallError as e:
            logger.error(
                f"JSCallError: {e.message}",
                extra={"exit_code": e.exit_code, "details": e.details},
            )
            _report(e.message, e.details)
            raise typer.Exit(code=e.exit_code)

        except MailboxError as e:
            code = exit_code_for(e)
            logger.error(
                f"MailboxError: {e.message}",
                extra={"exit_code": code, "details": e.details},
            )
            _report(e.message, e.details)
            raise typer.Exit(code=code)

        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user.[/yellow]")
            logger.info("Operation cancelled by user (KeyboardInterrupt)")
            raise typer.Exit(code=ExitCode.CANCELLED)

        except typer.Exit:
            raise

        except Exception as e:
            logger.exception("Unexpected error occurred")
            console.print(f"[red]Unexpected error:[/red] {e}")
            console.print("[dim]Run with --debug for more details[/dim]")
            raise typer.Exit(code=ExitCode.GENERAL_ERROR)

    return wrapper  # type: ignore[return-value]
