"""
Server commands for pteroctl.

Commands:
- servers list: List servers with filters
- servers get: Show one server
- servers suspend / unsuspend / reinstall: Lifecycle actions
- servers delete: Delete a server
"""

import sys
from typing import Any, List

import click

from ..api import PteroAPIClient
from ..exceptions import PteroError
from ..models import Server
from ..options import (
    GetServerOptions,
    IncludeServers,
    ListServersOptions,
    ServerFilters,
)
from ..utils import (
    OutputFormat,
    confirm_action,
    format_bool,
    format_datetime,
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
    parse_id,
    pass_context,
    print_error,
    print_info,
    print_success,
    require_config,
)

SERVER_HEADERS = ["ID", "Identifier", "Name", "Owner", "Node", "Memory", "Disk", "Suspended"]


def _server_row(server: Server) -> List[Any]:
    owner = server.user.username if server.user else str(server.user_id)
    node = server.node.name if server.node else str(server.node_id)
    return [
        str(server.id),
        server.identifier,
        truncate_string(server.name, 30),
        owner,
        node,
        f"{server.limits.memory} MiB",
        f"{server.limits.disk} MiB",
        format_bool(server.suspended),
    ]


def register_server_commands(cli: click.Group) -> None:
    """Register server commands with the CLI."""

    @cli.group('servers')
    def servers():
        """Manage servers."""
        pass

    @servers.command('list')
    @common_options
    @list_options
    @include_option(IncludeServers)
    @click.option('--name', default='', help='Filter by name')
    @click.option('--external-id', default='', help='Filter by external ID')
    @click.option('--uuid', default='', help='Filter by UUID')
    @pass_context
    @require_config
    def server_list(
        ctx: PteroContext,
        verbose: bool,
        quiet: bool,
        output_format: str,
        sort: str,
        page: int,
        per_page: int,
        fetch_all: bool,
        include: IncludeServers,
        name: str,
        external_id: str,
        uuid: str
    ):
        """
        List servers.

        \b
        Examples:
          pteroctl servers list --include user,node
          pteroctl servers list --name minecraft --sort -id
        """
        setup_logging(verbose, quiet)
        fmt = OutputFormat(output_format)

        options = ListServersOptions(
            include=include,
            filters=ServerFilters(name=name, external_id=external_id, uuid=uuid),
            sort=sort,
            parameters=page_parameters(page, per_page),
        )

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                if fetch_all:
                    result = list(client.servers.iter_all(options))
                else:
                    result = client.servers.list(options)

                if not result and fmt == OutputFormat.TABLE:
                    print_info("No servers found.")
                    return

                print_output(fmt, SERVER_HEADERS, [_server_row(s) for s in result], result)

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @servers.command('get')
    @common_options
    @include_option(IncludeServers)
    @click.option('--external', is_flag=True, help='Treat SERVER_ID as an external ID')
    @click.argument('server_id', type=str)
    @pass_context
    @require_config
    def server_get(
        ctx: PteroContext,
        verbose: bool,
        quiet: bool,
        output_format: str,
        include: IncludeServers,
        external: bool,
        server_id: str
    ):
        """Show server details."""
        setup_logging(verbose, quiet)
        options = GetServerOptions(include=include)

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                if external:
                    server = client.servers.get_external(server_id, options)
                else:
                    server = client.servers.get(parse_id(server_id), options)

                if output_format == OutputFormat.JSON.value:
                    print_json(server)
                    return

                click.echo(f"\nServer: {server.name}")
                click.echo(f"  ID:          {server.id} ({server.identifier})")
                click.echo(f"  UUID:        {server.uuid}")
                click.echo(f"  External ID: {server.external_id or '-'}")
                click.echo(f"  Status:      {server.status or '-'}")
                click.echo(f"  Suspended:   {format_bool(server.suspended)}")
                click.echo(f"  Memory:      {server.limits.memory} MiB")
                click.echo(f"  Disk:        {server.limits.disk} MiB")
                click.echo(f"  CPU:         {server.limits.cpu}%")
                click.echo(f"  Image:       {server.container.image}")
                click.echo(f"  Created:     {format_datetime(server.created_at)}")
                if server.user:
                    click.echo(f"  Owner:       {server.user.username} ({server.user.email})")
                if server.node:
                    click.echo(f"  Node:        {server.node.name} ({server.node.fqdn})")
                if server.location:
                    click.echo(f"  Location:    {server.location.short}")
                if include.allocations:
                    click.echo(f"  Allocations ({len(server.allocations)}):")
                    for alloc in server.allocations:
                        click.echo(f"    - {alloc.ip}:{alloc.port}")

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    def _lifecycle(action: str, server_id: int, verbose: bool, quiet: bool, ctx: PteroContext) -> None:
        setup_logging(verbose, quiet)
        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                getattr(client.servers, action)(server_id)
                print_success(f"Server {server_id}: {action} requested.")
        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @servers.command('suspend')
    @click.argument('server_id', type=int)
    @common_options
    @pass_context
    @require_config
    def server_suspend(ctx: PteroContext, server_id: int, verbose: bool, quiet: bool, output_format: str):
        """Suspend a server."""
        _lifecycle('suspend', server_id, verbose, quiet, ctx)

    @servers.command('unsuspend')
    @click.argument('server_id', type=int)
    @common_options
    @pass_context
    @require_config
    def server_unsuspend(ctx: PteroContext, server_id: int, verbose: bool, quiet: bool, output_format: str):
        """Unsuspend a server."""
        _lifecycle('unsuspend', server_id, verbose, quiet, ctx)

    @servers.command('reinstall')
    @click.argument('server_id', type=int)
    @common_options
    @pass_context
    @require_config
    def server_reinstall(ctx: PteroContext, server_id: int, verbose: bool, quiet: bool, output_format: str):
        """Reinstall a server."""
        _lifecycle('reinstall', server_id, verbose, quiet, ctx)

    @servers.command('delete')
    @click.argument('server_id', type=int)
    @click.option('--force', is_flag=True, help='Delete even if the node is unreachable')
    @click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
    @common_options
    @pass_context
    @require_config
    def server_delete(
        ctx: PteroContext,
        server_id: int,
        force: bool,
        yes: bool,
        verbose: bool,
        quiet: bool,
        output_format: str
    ):
        """Delete a server."""
        setup_logging(verbose, quiet)

        if not yes and not confirm_action(f"Delete server {server_id}?"):
            print_info("Cancelled.")
            return

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                client.servers.delete(server_id, force=force)
                print_success(f"Server {server_id} deleted.")

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)
