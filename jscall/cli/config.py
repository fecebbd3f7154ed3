"""jscall config command - Configuration management."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from jscall.cli.error_handler import ConfigurationError, ValidationError, handle_errors
from jscall.cli.exit_codes import ExitCode

app = typer.Typer(help="Manage jscall configuration.")
console = Console()


@app.command("show")
@handle_errors
def show_config(
    section: Optional[str] = typer.Argument(
        None,
        help="Configuration section to show (mailbox, document, logging).",
    ),
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table, yaml, json).",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to configuration file.",
    ),
) -> None:
    """Show current configuration.

    Example:
        jscall config show
        jscall config show mailbox
        jscall config show --format yaml
    """
    from jscall.config import (
        SECTIONS,
        _config_to_dict,
        export_config_json,
        export_config_yaml,
        get_config,
        load_config,
    )

    config = load_config(config_file) if config_file else get_config()

    if section and section not in SECTIONS:
        raise ValidationError(
            f"Unknown section '{section}'. Choose from: {', '.join(SECTIONS)}"
        )

    if format == "yaml":
        console.print(Syntax(export_config_yaml(config, section), "yaml", theme="monokai"))
        return
    if format == "json":
        console.print(Syntax(export_config_json(config, section), "json", theme="monokai"))
        return
    if format != "table":
        raise ValidationError(f"Unknown format '{format}'. Choose from: table, yaml, json")

    data = _config_to_dict(config)
    sections = [section] if section else list(SECTIONS)

    for name in sections:
        table = Table(title=f"[{name}]", show_header=True)
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        for key, value in data[name].items():
            table.add_row(key, "" if value is None else escape(str(value)))
        console.print(table)


@app.command("validate")
@handle_errors
def validate(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to configuration file.",
    ),
) -> None:
    """Validate the configuration.

    Exits with the configuration error code if any error is found;
    warnings are reported but do not fail validation.
    """
    from jscall.config import load_config, validate_config

    errors = validate_config(load_config(config_file))
    if not errors:
        console.print("[green]✓[/green] Configuration is valid")
        return

    for error in errors:
        color = "red" if error.severity == "error" else "yellow"
        console.print(f"[{color}]{escape(str(error))}[/{color}]")

    if any(e.severity == "error" for e in errors):
        raise typer.Exit(code=ExitCode.CONFIGURATION_ERROR)


@app.command("set")
@handle_errors
def set_value(
    key: str = typer.Argument(
        ...,
        help="Dotted configuration key (e.g., mailbox.result_channel_enabled).",
    ),
    value: str = typer.Argument(..., help="New value."),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to configuration file.",
    ),
) -> None:
    """Set a configuration value and save it.

    Example:
        jscall config set mailbox.anchor_tag callbox
        jscall config set logging.level DEBUG
    """
    from jscall.config import set_config_value

    if "." not in key:
        raise ValidationError(f"Key must be of the form section.key, got '{key}'")
    section, name = key.split(".", 1)

    try:
        set_config_value(section, name, value, config_file)
    except ValueError as e:
        raise ConfigurationError(str(e))

    console.print(f"[green]✓[/green] Set {key} = {value}")
