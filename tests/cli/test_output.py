"""Tests for output formatting module."""

from io import StringIO
from unittest.mock import Mock

from rich.console import Console

from jscall.cli.output import print_json, print_key_value, print_result, print_table


def make_console() -> tuple[Console, StringIO]:
    buffer = StringIO()
    return Console(file=buffer, width=120, color_system=None), buffer


class TestPrintJson:
    """Test print_json function."""

    def test_print_simple_dict(self) -> None:
        """Test printing simple dictionary as JSON."""
        mock_console = Mock()
        print_json({"call": "add", "returnto": "req-1"}, console_instance=mock_console)
        mock_console.print.assert_called_once()
        call_args = mock_console.print.call_args[0][0]
        assert "JSON" in type(call_args).__name__

    def test_output_is_json(self) -> None:
        console, buffer = make_console()
        print_json({"status": 0, "valid": True}, console_instance=console)
        assert '"status": 0' in buffer.getvalue()
        assert '"valid": true' in buffer.getvalue()


class TestPrintTable:
    """Test print_table function."""

    def test_rows_and_headers(self) -> None:
        console, buffer = make_console()
        print_table(
            [{"call": "add", "returnto": "req-1", "args": "1,2"}],
            ["call", "returnto", "args"],
            title="Pending",
            console_instance=console,
        )
        output = buffer.getvalue()
        assert "Returnto" in output
        assert "req-1" in output

    def test_markup_in_values_is_literal(self) -> None:
        console, buffer = make_console()
        print_table([{"args": "[red]x[/red]"}], ["args"], console_instance=console)
        assert "[red]x[/red]" in buffer.getvalue()


class TestPrintResult:
    """Test print_result function."""

    def test_success(self) -> None:
        console, buffer = make_console()
        print_result(True, "Call placed", {"call": "add", "document": None}, console_instance=console)
        output = buffer.getvalue()
        assert "✓ Call placed" in output
        assert "call: add" in output
        assert "document" not in output

    def test_failure(self) -> None:
        console, buffer = make_console()
        print_result(False, "Nothing placed", console_instance=console)
        assert "✗ Nothing placed" in buffer.getvalue()


class TestPrintKeyValue:
    """Test print_key_value function."""

    def test_values(self) -> None:
        console, buffer = make_console()
        print_key_value({"anchors": 1, "valid": False, "document": None}, title="Mailbox", console_instance=console)
        output = buffer.getvalue()
        assert "Mailbox" in output
        assert "anchors  : 1" in output
        assert "No" in output
        assert "N/A" in output
