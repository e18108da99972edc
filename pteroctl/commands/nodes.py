"""
Node commands for pteroctl.

Commands:
- nodes list: List nodes
- nodes get: Show one node
- nodes config: Print the daemon configuration of a node
- nodes allocations: List allocations of a node
"""

import sys
from typing import Any, List

import click

from ..api import PteroAPIClient
from ..exceptions import PteroError
from ..models import Allocation, Node
from ..options import (
    GetNodeOptions,
    IncludeAllocations,
    IncludeNodes,
    ListNodeAllocationsOptions,
    ListNodesOptions,
    NodeFilters,
)
from ..utils import (
    OutputFormat,
    format_bool,
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
    require_config,
)

NODE_HEADERS = ["ID", "Name", "FQDN", "Location", "Memory", "Disk", "Public", "Maintenance"]
ALLOCATION_HEADERS = ["ID", "IP", "Port", "Alias", "Assigned", "Server"]


def _node_row(node: Node) -> List[Any]:
    location = node.location.short if node.location else str(node.location_id)
    return [
        str(node.id),
        node.name,
        node.fqdn,
        location,
        f"{node.memory} MiB",
        f"{node.disk} MiB",
        format_bool(node.public),
        format_bool(node.maintenance_mode),
    ]


def _allocation_row(alloc: Allocation) -> List[Any]:
    return [
        str(alloc.id),
        alloc.ip,
        str(alloc.port),
        alloc.alias or "-",
        format_bool(alloc.assigned),
        alloc.server.name if alloc.server else "-",
    ]


def register_node_commands(cli: click.Group) -> None:
    """Register node commands with the CLI."""

    @cli.group('nodes')
    def nodes():
        """Manage nodes and allocations."""
        pass

    @nodes.command('list')
    @common_options
    @list_options
    @include_option(IncludeNodes)
    @click.option('--name', default='', help='Filter by name')
    @click.option('--fqdn', default='', help='Filter by FQDN')
    @pass_context
    @require_config
    def node_list(
        ctx: PteroContext,
        verbose: bool,
        quiet: bool,
        output_format: str,
        sort: str,
        page: int,
        per_page: int,
        fetch_all: bool,
        include: IncludeNodes,
        name: str,
        fqdn: str
    ):
        """List nodes."""
        setup_logging(verbose, quiet)
        fmt = OutputFormat(output_format)

        options = ListNodesOptions(
            include=include,
            filters=NodeFilters(name=name, fqdn=fqdn),
            sort=sort,
            parameters=page_parameters(page, per_page),
        )

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                if fetch_all:
                    result = list(client.nodes.iter_all(options))
                else:
                    result = client.nodes.list(options)

                if not result and fmt == OutputFormat.TABLE:
                    print_info("No nodes found.")
                    return

                print_output(fmt, NODE_HEADERS, [_node_row(n) for n in result], result)

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @nodes.command('get')
    @common_options
    @include_option(IncludeNodes)
    @click.argument('node_id', type=int)
    @pass_context
    @require_config
    def node_get(
        ctx: PteroContext,
        verbose: bool,
        quiet: bool,
        output_format: str,
        include: IncludeNodes,
        node_id: int
    ):
        """Show node details."""
        setup_logging(verbose, quiet)

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                node = client.nodes.get(node_id, GetNodeOptions(include=include))

                if output_format == OutputFormat.JSON.value:
                    print_json(node)
                    return

                click.echo(f"\nNode: {node.name}")
                click.echo(f"  ID:          {node.id}")
                click.echo(f"  FQDN:        {node.scheme}://{node.fqdn}:{node.daemon_listen}")
                click.echo(f"  Memory:      {node.memory} MiB (+{node.memory_overallocate}%)")
                click.echo(f"  Disk:        {node.disk} MiB (+{node.disk_overallocate}%)")
                click.echo(f"  Public:      {format_bool(node.public)}")
                click.echo(f"  Maintenance: {format_bool(node.maintenance_mode)}")
                if node.location:
                    click.echo(f"  Location:    {node.location.short} ({node.location.long})")
                if include.servers:
                    click.echo(f"  Servers ({len(node.servers)}):")
                    for server in node.servers:
                        click.echo(f"    - {server.id}: {server.name}")

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @nodes.command('config')
    @click.argument('node_id', type=int)
    @common_options
    @pass_context
    @require_config
    def node_config(ctx: PteroContext, node_id: int, verbose: bool, quiet: bool, output_format: str):
        """Print the daemon configuration of a node as JSON."""
        setup_logging(verbose, quiet)

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                print_json(client.nodes.get_configuration(node_id))

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @nodes.command('allocations')
    @click.argument('node_id', type=int)
    @common_options
    @list_options
    @include_option(IncludeAllocations)
    @pass_context
    @require_config
    def node_allocations(
        ctx: PteroContext,
        node_id: int,
        verbose: bool,
        quiet: bool,
        output_format: str,
        sort: str,
        page: int,
        per_page: int,
        fetch_all: bool,
        include: IncludeAllocations
    ):
        """List allocations of a node."""
        setup_logging(verbose, quiet)
        fmt = OutputFormat(output_format)

        options = ListNodeAllocationsOptions(
            include=include,
            sort=sort,
            parameters=page_parameters(page, per_page),
        )

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                if fetch_all:
                    result = list(client.nodes.iter_allocations(node_id, options))
                else:
                    result = client.nodes.list_allocations(node_id, options)

                if not result and fmt == OutputFormat.TABLE:
                    print_info("No allocations found.")
                    return

                print_output(fmt, ALLOCATION_HEADERS, [_allocation_row(a) for a in result], result)

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)
