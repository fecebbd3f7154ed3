"""jscall mailbox commands - Place, inspect and collect call records in a document file."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from jscall.bridge import (
    CallDirection,
    FileDocumentProvider,
    Mailbox,
    count_anchors,
)
from jscall.cli.error_handler import NothingToCollectError, ValidationError, handle_errors
from jscall.cli.exit_codes import ExitCode
from jscall.cli.output import print_json, print_key_value, print_result, print_table
from jscall.config import JSCallConfig, get_config, load_config

app = typer.Typer(help="Work with the call mailbox of a document file.")
console = Console()

RECORD_COLUMNS = ["call", "returnto", "args"]


def _load_config(config_file: Optional[Path]) -> JSCallConfig:
    if config_file is not None:
        return load_config(config_file)
    return get_config()


def _parse_direction(value: str) -> CallDirection:
    try:
        return CallDirection(value.lower())
    except ValueError:
        valid = ", ".join(d.value for d in CallDirection)
        raise ValidationError(f"Invalid direction '{value}'. Choose from: {valid}")


def _write_back(
    provider: FileDocumentProvider,
    config: JSCallConfig,
    output: Optional[Path],
) -> Optional[Path]:
    if output is None and not config.document.write_back:
        return None
    return provider.save(output)


@app.command("place")
@handle_errors
def place(
    document: Path = typer.Argument(
        ...,
        help="Path to the XML/XHTML document holding the mailbox anchor.",
    ),
    call: str = typer.Option(
        ...,
        "--call",
        "-c",
        help="Name of the function to invoke in the embedded script.",
    ),
    returnto: str = typer.Option(
        ...,
        "--returnto",
        "-r",
        help="Correlation token for routing the result back.",
    ),
    args: str = typer.Option(
        "",
        "--args",
        "-a",
        help="Serialized argument payload.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the updated document here instead of in place.",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to configuration file.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format.",
    ),
) -> None:
    """Place a function call request in the document's mailbox.

    The exit code is the placement status (0 on success).

    Example:
        jscall mailbox place page.xhtml --call add --args 1,2 --returnto req-1
    """
    config = _load_config(config_file)
    provider = FileDocumentProvider(document, config.document.encoding)

    mailbox = Mailbox.open(provider, config.mailbox)
    record = mailbox.place_call(call, args, returnto)
    saved = _write_back(provider, config, output)

    if json_output:
        print_json({
            "status": ExitCode.SUCCESS,
            "record": record.to_dict(),
            "document": str(saved) if saved else None,
        })
        return

    print_result(True, "Call placed", {
        "call": record.call,
        "returnto": record.returnto,
        "args": record.args,
        "document": saved,
    })


@app.command("pending")
@handle_errors
def pending(
    document: Path = typer.Argument(
        ...,
        help="Path to the XML/XHTML document holding the mailbox anchor.",
    ),
    direction: str = typer.Option(
        "request",
        "--direction",
        "-d",
        help="Record direction to list (request, result).",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to configuration file.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format.",
    ),
) -> None:
    """List call records waiting under the anchor, in document order.

    Example:
        jscall mailbox pending page.xhtml
        jscall mailbox pending page.xhtml --direction result --json
    """
    record_direction = _parse_direction(direction)
    config = _load_config(config_file)
    provider = FileDocumentProvider(document, config.document.encoding)

    records = Mailbox.open(provider, config.mailbox).pending(record_direction)

    if json_output:
        print_json([r.to_dict() for r in records])
        return

    if not records:
        console.print(f"[dim]No pending {record_direction.value} records.[/dim]")
        return

    print_table(
        [r.to_dict() for r in records],
        RECORD_COLUMNS,
        title=f"Pending {record_direction.value} records",
        column_styles={"call": "cyan", "returnto": "magenta"},
    )


@app.command("collect")
@handle_errors
def collect(
    document: Path = typer.Argument(
        ...,
        help="Path to the XML/XHTML document holding the mailbox anchor.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the updated document here instead of in place.",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to configuration file.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format.",
    ),
) -> None:
    """Read and remove the waiting result record (deprecated channel).

    Requires mailbox.result_channel_enabled in the configuration.

    Example:
        jscall mailbox collect page.xhtml --json
    """
    config = _load_config(config_file)
    provider = FileDocumentProvider(document, config.document.encoding)

    record = Mailbox.open(provider, config.mailbox).collect(CallDirection.RESULT)
    if record is None:
        raise NothingToCollectError(
            "No result record is waiting",
            details={"tag": config.mailbox.result_tag},
        )
    _write_back(provider, config, output)

    if json_output:
        print_json(record.to_dict())
        return

    print_result(True, "Result collected", {
        "call": record.call,
        "returnto": record.returnto,
        "args": record.args,
    })


@app.command("check")
@handle_errors
def check(
    document: Path = typer.Argument(
        ...,
        help="Path to the XML/XHTML document holding the mailbox anchor.",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to configuration file.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format.",
    ),
) -> None:
    """Check that the document has exactly one mailbox anchor.

    Exits with status 3 when the anchor is missing or duplicated.

    Example:
        jscall mailbox check page.xhtml
    """
    config = _load_config(config_file)
    provider = FileDocumentProvider(document, config.document.encoding)
    doc = provider.resolve_document()

    anchors = count_anchors(doc, config.mailbox.anchor_tag)
    report = {
        "document": str(document),
        "anchor_tag": config.mailbox.anchor_tag,
        "anchors": anchors,
        "valid": anchors == 1,
    }

    if anchors == 1:
        mailbox = Mailbox.open(provider, config.mailbox)
        report["pending_requests"] = len(mailbox.pending(CallDirection.REQUEST))
        report["pending_results"] = len(mailbox.pending(CallDirection.RESULT))

    if json_output:
        print_json(report)
    else:
        print_key_value(report, title="Mailbox")

    if anchors != 1:
        raise typer.Exit(code=ExitCode.ANCHOR_CARDINALITY)
