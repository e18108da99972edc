"""
Utility functions for pteroctl output and logging.
"""

import csv
import json
import logging
import sys
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Union

import click
from pydantic import BaseModel


class OutputFormat(str, Enum):
    """Supported output formats."""
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure logging for CLI commands.

    Args:
        verbose: Enable debug output
        quiet: Only show warnings and errors
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
    # urllib3 is noisy at DEBUG
    if not verbose:
        logging.getLogger("urllib3").setLevel(logging.WARNING)


def print_success(message: str) -> None:
    """Print a success message."""
    click.secho(f"✓ {message}", fg="green")


def print_error(message: str, details: Optional[str] = None) -> None:
    """Print an error message to stderr."""
    click.secho(f"✗ {message}", fg="red", err=True)
    if details:
        click.echo(f"  {details}", err=True)


def print_warning(message: str) -> None:
    """Print a warning message."""
    click.secho(f"! {message}", fg="yellow")


def print_info(message: str) -> None:
    """Print an informational message."""
    click.echo(message)


def to_jsonable(value: Any) -> Any:
    """Convert entities, datetimes and containers into JSON-friendly values."""
    if isinstance(value, BaseModel):
        return {
            name: to_jsonable(getattr(value, name))
            for name in type(value).model_fields
        }
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def print_json(data: Any, indent: int = 2) -> None:
    """Print data as formatted JSON."""
    click.echo(json.dumps(to_jsonable(data), indent=indent, ensure_ascii=False))


def print_table(headers: List[str], rows: List[List[str]]) -> None:
    """Print rows as an aligned plain-text table."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(click.unstyle(str(cell))))

    def _format_row(cells: List[str]) -> str:
        parts = []
        for i, cell in enumerate(cells):
            text = str(cell)
            padding = widths[i] - len(click.unstyle(text))
            parts.append(text + " " * padding)
        return "  ".join(parts).rstrip()

    click.echo(_format_row(headers))
    click.echo("  ".join("-" * w for w in widths))
    for row in rows:
        click.echo(_format_row(row))


def print_csv(headers: List[str], rows: List[List[Any]]) -> None:
    """Print rows as CSV to stdout, stripping ANSI styling."""
    writer = csv.writer(sys.stdout)
    writer.writerow(headers)
    for row in rows:
        writer.writerow([click.unstyle(str(cell)) for cell in row])


def print_output(fmt: OutputFormat, headers: List[str], rows: List[List[Any]], data: Any) -> None:
    """Print a result in the requested format."""
    if fmt == OutputFormat.JSON:
        print_json(data)
    elif fmt == OutputFormat.CSV:
        print_csv(headers, rows)
    else:
        print_table(headers, rows)


def truncate_string(text: Optional[str], max_length: int = 50) -> str:
    """Truncate a string, adding an ellipsis when shortened."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def format_datetime(value: Optional[Union[str, datetime]]) -> str:
    """Format a datetime (or ISO string) for display."""
    if value is None:
        return "-"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value.strftime("%Y-%m-%d %H:%M:%S")


def format_bool(value: Optional[bool]) -> str:
    """Format a boolean as a colored Yes/No."""
    if value:
        return click.style("Yes", fg="green")
    return click.style("No", fg="red")


def confirm_action(message: str, default: bool = False) -> bool:
    """Ask the user to confirm an action."""
    return click.confirm(message, default=default)
