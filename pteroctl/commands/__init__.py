"""
Shared command infrastructure for pteroctl.

Provides the CLI context object, common option decorators and helpers used
by every command module.
"""

import functools
import sys
from typing import Any, Optional

import click

from ..config import ConfigManager
from ..options import PageParameters, include_from_names
from ..utils import (
    OutputFormat,
    print_error,
    print_info,
    print_success,
    print_warning,
)


class PteroContext:
    """CLI context object for sharing state between commands."""

    def __init__(self):
        self.config_manager: ConfigManager = None  # type: ignore[assignment]


pass_context = click.make_pass_decorator(PteroContext, ensure=True)


def common_options(f):
    """Common options for all commands."""
    f = click.option(
        '-v', '--verbose',
        is_flag=True,
        help='Enable verbose output'
    )(f)
    f = click.option(
        '-q', '--quiet',
        is_flag=True,
        help='Suppress non-essential output'
    )(f)
    f = click.option(
        '-f', '--format',
        'output_format',
        type=click.Choice([fmt.value for fmt in OutputFormat]),
        default=OutputFormat.TABLE.value,
        help='Output format'
    )(f)
    return f


def list_options(f):
    """Sorting and pagination options for list commands."""
    f = click.option(
        '--sort',
        default='',
        help='Sort key, prefix with - for descending (e.g. -id)'
    )(f)
    f = click.option(
        '--page',
        type=int,
        default=0,
        help='Page number'
    )(f)
    f = click.option(
        '--per-page',
        type=int,
        default=0,
        help='Items per page'
    )(f)
    f = click.option(
        '--all', 'fetch_all',
        is_flag=True,
        help='Fetch every page'
    )(f)
    return f


def include_option(section_cls: type):
    """Option accepting comma-separated relation names for ``section_cls``."""
    def callback(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Any:
        names = value.split(',') if value else []
        try:
            return include_from_names(section_cls, names)
        except ValueError as e:
            raise click.BadParameter(str(e))

    return click.option(
        '--include', '-i',
        callback=callback,
        help='Relations to embed, comma-separated'
    )


def page_parameters(page: int, per_page: int) -> PageParameters:
    """Build pagination parameters from CLI values."""
    return PageParameters(page=page, per_page=per_page)


def parse_id(value: str) -> int:
    """Parse a numeric panel ID given as a CLI argument."""
    try:
        return int(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a numeric ID (use --external for external IDs)")


def require_config(f):
    """Decorator to require a configured panel URL and API key."""
    @click.pass_context
    def wrapper(click_ctx, *args, **kwargs):
        ctx = click_ctx.ensure_object(PteroContext)
        config = ctx.config_manager.get()

        if not config.is_configured():
            print_error(
                "pteroctl is not configured.",
                "Run 'pteroctl configure --panel-url URL --api-key KEY' first."
            )
            sys.exit(1)

        return click_ctx.invoke(f, *args, **kwargs)

    return functools.update_wrapper(wrapper, f)


__all__ = [
    "PteroContext",
    "pass_context",
    "common_options",
    "list_options",
    "include_option",
    "page_parameters",
    "parse_id",
    "require_config",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
