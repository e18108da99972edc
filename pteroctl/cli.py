"""
pteroctl - Command Line Interface for the Pterodactyl panel application API.

This module provides the main CLI entry point, the configuration commands
and registration of the resource command groups:
- users, servers, nodes, locations, nests
"""

import sys
import logging
from pathlib import Path
from typing import Optional

import click

from . import __prog_name__, __version__
from .config import get_config_manager
from .commands import (
    PteroContext,
    pass_context,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from .commands.locations import register_location_commands
from .commands.nests import register_nest_commands
from .commands.nodes import register_node_commands
from .commands.servers import register_server_commands
from .commands.users import register_user_commands
from .utils import confirm_action

logger = logging.getLogger(__name__)


# ============================================================================
# Main CLI Group
# ============================================================================

@click.group()
@click.version_option(version=__version__, prog_name=__prog_name__)
@click.option(
    '--config-dir',
    type=click.Path(path_type=Path),
    envvar='PTEROCTL_CONFIG_DIR',
    help='Custom configuration directory'
)
@click.pass_context
def cli(ctx, config_dir: Optional[Path]):
    """
    pteroctl - Pterodactyl panel administration tool.

    Manage users, servers, nodes, locations and eggs through the
    panel's application API.

    \b
    Quick Start:
      1. Configure the panel:  pteroctl configure --panel-url URL --api-key KEY
      2. List users:           pteroctl users list
      3. Inspect a server:     pteroctl servers get 12 --include user,node

    \b
    Environment Variables:
      PTEROCTL_PANEL_URL   - Panel base URL
      PTEROCTL_API_KEY     - Application API key
      PTEROCTL_CONFIG_DIR  - Custom configuration directory
    """
    ctx.ensure_object(PteroContext)
    ctx.obj.config_manager = get_config_manager(config_dir)


# ============================================================================
# Configuration Commands
# ============================================================================

@cli.command('configure')
@click.option('--panel-url', '-u', help='Panel base URL, e.g. https://panel.example.com')
@click.option('--api-key', '-k', help='Application API key')
@click.option('--timeout', '-t', type=int, help='Request timeout in seconds')
@click.option('--max-retries', type=int, help='Retries for transient failures')
@click.option('--no-verify-ssl', is_flag=True, help='Disable SSL certificate verification')
@click.option('--show', is_flag=True, help='Show current configuration')
@pass_context
def configure(
    ctx: PteroContext,
    panel_url: Optional[str],
    api_key: Optional[str],
    timeout: Optional[int],
    max_retries: Optional[int],
    no_verify_ssl: bool,
    show: bool
):
    """
    Configure pteroctl settings.

    \b
    Examples:
      pteroctl configure --panel-url https://panel.example.com --api-key ptla_xxx
      pteroctl configure --timeout 60
      pteroctl configure --show
    """
    config_manager = ctx.config_manager

    if show:
        config = config_manager.get()
        click.echo("\nCurrent Configuration:")
        click.echo(f"  Panel URL:    {config.panel_url or '(not set)'}")
        click.echo(f"  API Key:      {'*' * 20 + '...' if config.api_key else '(not set)'}")
        click.echo(f"  Timeout:      {config.timeout}s")
        click.echo(f"  Max Retries:  {config.max_retries}")
        click.echo(f"  Verify SSL:   {config.verify_ssl}")
        click.echo(f"  Config Path:  {config_manager.get_config_path()}")
        return

    if not any([panel_url, api_key, timeout, max_retries is not None, no_verify_ssl]):
        click.echo("Interactive configuration setup:")

        current = config_manager.get()

        panel_url = click.prompt("Panel URL", default=current.panel_url or None)
        api_key = click.prompt(
            "Application API key",
            default=current.api_key or None,
            hide_input=True,
            show_default=False
        )
        timeout = click.prompt("Request timeout (seconds)", default=current.timeout, type=int)

    updates = {}
    if panel_url:
        updates['panel_url'] = panel_url.rstrip('/')
    if api_key:
        updates['api_key'] = api_key
    if timeout:
        updates['timeout'] = timeout
    if max_retries is not None:
        updates['max_retries'] = max_retries
    if no_verify_ssl:
        updates['verify_ssl'] = False
        print_warning("SSL certificate verification is disabled.")

    if updates:
        config_manager.update(**updates)
        print_success("Configuration saved successfully.")
    else:
        print_info("No changes made.")


@cli.command('reset-config')
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
@pass_context
def reset_config(ctx: PteroContext, yes: bool):
    """Remove the stored configuration file."""
    path = ctx.config_manager.get_config_path()

    if not yes and not confirm_action(f"Remove {path}?"):
        print_info("Cancelled.")
        return

    ctx.config_manager.clear()
    print_success("Configuration removed.")


register_user_commands(cli)
register_server_commands(cli)
register_node_commands(cli)
register_location_commands(cli)
register_nest_commands(cli)


def main():
    """Main entry point for the CLI."""
    try:
        cli(auto_envvar_prefix='PTEROCTL')
    except KeyboardInterrupt:
        click.echo("\nAborted.")
        sys.exit(130)
    except Exception as e:
        logger.exception("Unexpected error")
        print_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
