"""
Nest and egg commands for pteroctl.
"""

import sys

import click

from ..api import PteroAPIClient
from ..exceptions import PteroError
from ..options import (
    GetEggOptions,
    GetNestOptions,
    IncludeEggs,
    IncludeNests,
    ListEggsOptions,
    ListNestsOptions,
)
from ..utils import (
    OutputFormat,
    print_json,
    print_output,
    setup_logging,
    truncate_string,
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
    require_config,
)

NEST_HEADERS = ["ID", "Name", "Author", "Description"]
EGG_HEADERS = ["ID", "Name", "Docker Image", "Author"]


def register_nest_commands(cli: click.Group) -> None:
    """Register nest and egg commands with the CLI."""

    @cli.group('nests')
    def nests():
        """Browse nests and eggs."""
        pass

    @nests.command('list')
    @common_options
    @list_options
    @include_option(IncludeNests)
    @pass_context
    @require_config
    def nest_list(
        ctx: PteroContext,
        verbose: bool,
        quiet: bool,
        output_format: str,
        sort: str,
        page: int,
        per_page: int,
        fetch_all: bool,
        include: IncludeNests
    ):
        """List nests."""
        setup_logging(verbose, quiet)
        fmt = OutputFormat(output_format)

        options = ListNestsOptions(
            include=include,
            sort=sort,
            parameters=page_parameters(page, per_page),
        )

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                if fetch_all:
                    result = list(client.nests.iter_all(options))
                else:
                    result = client.nests.list(options)

                if not result and fmt == OutputFormat.TABLE:
                    print_info("No nests found.")
                    return

                rows = [
                    [str(n.id), n.name, n.author, truncate_string(n.description or "-", 40)]
                    for n in result
                ]
                print_output(fmt, NEST_HEADERS, rows, result)

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @nests.command('get')
    @common_options
    @include_option(IncludeNests)
    @click.argument('nest_id', type=int)
    @pass_context
    @require_config
    def nest_get(
        ctx: PteroContext,
        verbose: bool,
        quiet: bool,
        output_format: str,
        include: IncludeNests,
        nest_id: int
    ):
        """Show nest details."""
        setup_logging(verbose, quiet)

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                nest = client.nests.get(nest_id, GetNestOptions(include=include))

                if output_format == OutputFormat.JSON.value:
                    print_json(nest)
                    return

                click.echo(f"\nNest: {nest.name}")
                click.echo(f"  ID:          {nest.id}")
                click.echo(f"  UUID:        {nest.uuid}")
                click.echo(f"  Author:      {nest.author}")
                click.echo(f"  Description: {nest.description or '-'}")
                if include.eggs:
                    click.echo(f"  Eggs ({len(nest.eggs)}):")
                    for egg in nest.eggs:
                        click.echo(f"    - {egg.id}: {egg.name}")

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @nests.command('eggs')
    @common_options
    @include_option(IncludeEggs)
    @click.argument('nest_id', type=int)
    @click.argument('egg_id', type=int, required=False)
    @pass_context
    @require_config
    def nest_eggs(
        ctx: PteroContext,
        verbose: bool,
        quiet: bool,
        output_format: str,
        include: IncludeEggs,
        nest_id: int,
        egg_id
    ):
        """
        List eggs of a nest, or show one egg when EGG_ID is given.

        \b
        Examples:
          pteroctl nests eggs 1
          pteroctl nests eggs 1 5 --include variables
        """
        setup_logging(verbose, quiet)
        fmt = OutputFormat(output_format)

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                if egg_id is not None:
                    egg = client.nests.get_egg(nest_id, egg_id, GetEggOptions(include=include))
                    if fmt == OutputFormat.JSON:
                        print_json(egg)
                        return

                    click.echo(f"\nEgg: {egg.name}")
                    click.echo(f"  ID:      {egg.id}")
                    click.echo(f"  Nest:    {egg.nest_id}")
                    click.echo(f"  Image:   {egg.docker_image}")
                    click.echo(f"  Startup: {egg.startup}")
                    if include.variables:
                        click.echo(f"  Variables ({len(egg.variables)}):")
                        for var in egg.variables:
                            click.echo(f"    - {var.env_variable}={var.default_value}")
                    return

                result = client.nests.list_eggs(nest_id, ListEggsOptions(include=include))
                if not result and fmt == OutputFormat.TABLE:
                    print_info("No eggs found.")
                    return

                rows = [[str(e.id), e.name, e.docker_image, e.author] for e in result]
                print_output(fmt, EGG_HEADERS, rows, result)

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)
