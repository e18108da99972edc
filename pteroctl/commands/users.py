"""
User commands for pteroctl.

Commands:
- users list: List users with filters
- users get: Show one user
- users create: Create a user
- users delete: Delete a user
"""

import sys
from typing import Any, List, Optional

import click

from ..api import PteroAPIClient
from ..exceptions import PteroError
from ..models import User
from ..options import (
    GetUserOptions,
    IncludeUsers,
    ListUsersOptions,
    UserFilters,
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

USER_HEADERS = ["ID", "Username", "Email", "Name", "Admin", "2FA", "Servers"]


def _user_row(user: User) -> List[Any]:
    return [
        str(user.id),
        user.username,
        truncate_string(user.email, 30),
        truncate_string(user.full_name, 30),
        format_bool(user.root_admin),
        format_bool(user.two_factor),
        str(len(user.servers)),
    ]


def register_user_commands(cli: click.Group) -> None:
    """Register user commands with the CLI."""

    @cli.group('users')
    def users():
        """Manage panel users."""
        pass

    @users.command('list')
    @common_options
    @list_options
    @include_option(IncludeUsers)
    @click.option('--email', default='', help='Filter by email')
    @click.option('--username', default='', help='Filter by username')
    @click.option('--uuid', default='', help='Filter by UUID')
    @click.option('--external-id', default='', help='Filter by external ID')
    @pass_context
    @require_config
    def user_list(
        ctx: PteroContext,
        verbose: bool,
        quiet: bool,
        output_format: str,
        sort: str,
        page: int,
        per_page: int,
        fetch_all: bool,
        include: IncludeUsers,
        email: str,
        username: str,
        uuid: str,
        external_id: str
    ):
        """
        List users.

        \b
        Examples:
          pteroctl users list --username admin
          pteroctl users list --include servers --sort -id
          pteroctl users list --all -f csv
        """
        setup_logging(verbose, quiet)
        fmt = OutputFormat(output_format)

        options = ListUsersOptions(
            include=include,
            filters=UserFilters(
                email=email,
                uuid=uuid,
                username=username,
                external_id=external_id,
            ),
            sort=sort,
            parameters=page_parameters(page, per_page),
        )

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                if fetch_all:
                    result = list(client.users.iter_all(options))
                else:
                    result = client.users.list(options)

                if not result and fmt == OutputFormat.TABLE:
                    print_info("No users found.")
                    return

                print_output(fmt, USER_HEADERS, [_user_row(u) for u in result], result)

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @users.command('get')
    @common_options
    @include_option(IncludeUsers)
    @click.option('--external', is_flag=True, help='Treat USER_ID as an external ID')
    @click.argument('user_id', type=str)
    @pass_context
    @require_config
    def user_get(
        ctx: PteroContext,
        verbose: bool,
        quiet: bool,
        output_format: str,
        include: IncludeUsers,
        external: bool,
        user_id: str
    ):
        """Show user details."""
        setup_logging(verbose, quiet)
        options = GetUserOptions(include=include)

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                if external:
                    user = client.users.get_external(user_id, options)
                else:
                    user = client.users.get(parse_id(user_id), options)

                if output_format == OutputFormat.JSON.value:
                    print_json(user)
                    return

                click.echo(f"\nUser: {user.username}")
                click.echo(f"  ID:          {user.id}")
                click.echo(f"  UUID:        {user.uuid}")
                click.echo(f"  External ID: {user.external_id or '-'}")
                click.echo(f"  Email:       {user.email}")
                click.echo(f"  Name:        {user.full_name}")
                click.echo(f"  Language:    {user.language}")
                click.echo(f"  Root admin:  {format_bool(user.root_admin)}")
                click.echo(f"  2FA:         {format_bool(user.two_factor)}")
                click.echo(f"  Created:     {format_datetime(user.created_at)}")
                if include.servers:
                    click.echo(f"  Servers ({len(user.servers)}):")
                    for server in user.servers:
                        click.echo(f"    - {server.id}: {server.name}")

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @users.command('create')
    @click.option('--email', '-e', required=True, help='Email address')
    @click.option('--username', '-u', required=True, help='Username')
    @click.option('--first-name', required=True, help='First name')
    @click.option('--last-name', required=True, help='Last name')
    @click.option('--password', help='Password (panel sends a setup email if omitted)')
    @click.option('--external-id', help='External ID')
    @click.option('--root-admin', is_flag=True, help='Grant root admin')
    @common_options
    @pass_context
    @require_config
    def user_create(
        ctx: PteroContext,
        email: str,
        username: str,
        first_name: str,
        last_name: str,
        password: Optional[str],
        external_id: Optional[str],
        root_admin: bool,
        verbose: bool,
        quiet: bool,
        output_format: str
    ):
        """Create a user."""
        setup_logging(verbose, quiet)

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                user = client.users.create(
                    email=email,
                    username=username,
                    first_name=first_name,
                    last_name=last_name,
                    password=password,
                    external_id=external_id,
                    root_admin=root_admin,
                )
                if output_format == OutputFormat.JSON.value:
                    print_json(user)
                else:
                    print_success(f"User created: {user.username} (ID {user.id})")

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

    @users.command('delete')
    @click.argument('user_id', type=int)
    @click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
    @common_options
    @pass_context
    @require_config
    def user_delete(
        ctx: PteroContext,
        user_id: int,
        yes: bool,
        verbose: bool,
        quiet: bool,
        output_format: str
    ):
        """Delete a user."""
        setup_logging(verbose, quiet)

        if not yes and not confirm_action(f"Delete user {user_id}?"):
            print_info("Cancelled.")
            return

        try:
            with PteroAPIClient(ctx.config_manager.get()) as client:
                client.users.delete(user_id)
                print_success(f"User {user_id} deleted.")

        except PteroError as e:
            print_error(str(e), e.details)
            sys.exit(1)

