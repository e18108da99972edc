"""
Location commands for pteroctl.
"""

import sys
from typing import Optional

import click

from ..api import PteroAPIClient
from ..exceptions import PteroError
from ..options import (
    GetLocationOptions,
    IncludeLocations,
    ListLocationsOptions,
    LocationFilters,
)
from ..utils import (
    OutputFormat,
    confirm_action,
    format_datetime,
    print_json,
    print_output,
    setup_logging,
)
from . import (
    PteroContext,
    common_options,
    include_option,
    list_options,
    page_parameters,
    pass_context,
    print_error,
    print_info,
    print_success,
    require_config,
)

LOCATION_HEADERS = ["ID", "Short", "Long", "Nodes", "Servers"]


def register_location_commands(cli: click.Group) -> None:
    """Register location commands with the CLI."""

    @cli.group('locations')
    def locations():
        """Manage locations."""
        pass

    @locations.command('list')
    @common_options
    @list_options
    @include_option(IncludeLocations)
    @click.option('--short', default='', help='Filter by short code')
    @click.option('--long', 'long_', default='', help='Filter by description')
    @pass_context
    @require_config
    def location_list(
        ctx: PteroContext,
        verbose: bool,
        quiet: bool,
        output_format: str,
        sort: str,
        page: int,
        per_page: int,
        fetch_all: bool,
        include: IncludeLocations,
        short: str,
        long_: str
    ):
        """List locations."""
        setup_logging(verbose, quiet)
        fmt = OutputFormat(output_format)

        options = ListLocationsOptions(
            include=include,
            filters=LocationFilters(short=short, long=long_),
            sort=sort,
            parameters=page_parameters(page, per_page),
        )

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                if fetch_all:
                    result = list(client.locations.iter_all(options))
                else:
                    result = client.locations.list(options)

                if not result and fmt == OutputFormat.TABLE:
                    print_info("No locations found.")
                    return

                rows = [
                    [str(loc.id), loc.short, loc.long, str(len(loc.nodes)), str(len(loc.servers))]
                    for loc in result
                ]
                print_output(fmt, LOCATION_HEADERS, rows, result)

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @locations.command('get')
    @common_options
    @include_option(IncludeLocations)
    @click.argument('location_id', type=int)
    @pass_context
    @require_config
    def location_get(
        ctx: PteroContext,
        verbose: bool,
        quiet: bool,
        output_format: str,
        include: IncludeLocations,
        location_id: int
    ):
        """Show location details."""
        setup_logging(verbose, quiet)

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                location = client.locations.get(location_id, GetLocationOptions(include=include))

                if output_format == OutputFormat.JSON.value:
                    print_json(location)
                    return

                click.echo(f"\nLocation: {location.short}")
                click.echo(f"  ID:       {location.id}")
                click.echo(f"  Long:     {location.long or '-'}")
                click.echo(f"  Created:  {format_datetime(location.created_at)}")
                if include.nodes:
                    click.echo(f"  Nodes ({len(location.nodes)}):")
                    for node in location.nodes:
                        click.echo(f"    - {node.id}: {node.name}")

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @locations.command('create')
    @click.argument('short')
    @click.option('--long', 'long_', help='Description')
    @common_options
    @pass_context
    @require_config
    def location_create(
        ctx: PteroContext,
        short: str,
        long_: Optional[str],
        verbose: bool,
        quiet: bool,
        output_format: str
    ):
        """Create a location with short code SHORT."""
        setup_logging(verbose, quiet)

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                location = client.locations.create(short, long_)
                if output_format == OutputFormat.JSON.value:
                    print_json(location)
                else:
                    print_success(f"Location created: {location.short} (ID {location.id})")

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @locations.command('delete')
    @click.argument('location_id', type=int)
    @click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
    @common_options
    @pass_context
    @require_config
    def location_delete(
        ctx: PteroContext,
        location_id: int,
        yes: bool,
        verbose: bool,
        quiet: bool,
        output_format: str
    ):
        """Delete a location."""
        setup_logging(verbose, quiet)

        if not yes and not confirm_action(f"Delete location {location_id}?"):
            print_info("Cancelled.")
            return

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                client.locations.delete(location_id)
                print_success(f"Location {location_id} deleted.")

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)
