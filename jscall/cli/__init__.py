"""CLI command modules for jscall.

This package contains the CLI command implementations and their supporting
utilities for error handling, exit codes and output formatting.
"""

from jscall.cli import config, mailbox

from jscall.cli.exit_codes import ExitCode
from jscall.cli.error_handler import (
    JSCallError,
    ConfigurationError,
    ValidationError,
    NothingToCollectError,
    exit_code_for,
    handle_errors,
)
from jscall.cli.output import (
    print_json,
    print_table,
    print_result,
    print_key_value,
)

__all__ = [
    # Command modules
    "config",
    "mailbox",
    # Exit codes
    "ExitCode",
    # Error handling
    "JSCallError",
    "ConfigurationError",
    "ValidationError",
    "NothingToCollectError",
    "exit_code_for",
    "handle_errors",
    # Output
    "print_json",
    "print_table",
    "print_result",
    "print_key_value",
]
