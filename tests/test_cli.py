"""
Tests for CLI commands.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from pteroctl.cli import cli
from pteroctl.exceptions import ResourceNotFoundError
from pteroctl.models import Allocation, Egg, EggVariable, Location, Nest, Node, Server, User
from pteroctl.options import IncludeServers, IncludeUsers, UserFilters


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def mock_config():
    """Create mock configuration."""
    with patch('pteroctl.cli.get_config_manager') as mock:
        config_manager = MagicMock()
        config_manager.get.return_value = MagicMock(
            panel_url="https://panel.example.com",
            api_key="ptla_test",
            timeout=30,
            max_retries=3,
            verify_ssl=True,
            is_configured=MagicMock(return_value=True)
        )
        mock.return_value = config_manager
        yield config_manager


def mock_client(module):
    """Patch PteroAPIClient in a command module and return the client."""
    patcher = patch(f'pteroctl.commands.{module}.PteroAPIClient')
    client_cls = patcher.start()
    instance = MagicMock()
    instance.__enter__ = MagicMock(return_value=instance)
    instance.__exit__ = MagicMock(return_value=False)
    client_cls.return_value = instance
    return patcher, instance


@pytest.fixture
def users_client():
    patcher, instance = mock_client('users')
    yield instance
    patcher.stop()


@pytest.fixture
def servers_client():
    patcher, instance = mock_client('servers')
    yield instance
    patcher.stop()


@pytest.fixture
def nodes_client():
    patcher, instance = mock_client('nodes')
    yield instance
    patcher.stop()


@pytest.fixture
def locations_client():
    patcher, instance = mock_client('locations')
    yield instance
    patcher.stop()


@pytest.fixture
def nests_client():
    patcher, instance = mock_client('nests')
    yield instance
    patcher.stop()


class TestCLI:
    """Tests for main CLI."""

    def test_version(self, runner):
        """Test version option."""
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert 'pteroctl' in result.output.lower()

    def test_help(self, runner):
        """Test help output lists command groups."""
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        for group in ('users', 'servers', 'nodes', 'locations', 'nests', 'configure'):
            assert group in result.output


class TestConfigureCommand:
    """Tests for configure command."""

    def test_configure_show(self, runner, mock_config):
        """Test showing current configuration hides the key."""
        mock_config.get_config_path.return_value = '/tmp/pteroctl/config.json'
        result = runner.invoke(cli, ['configure', '--show'])
        assert result.exit_code == 0
        assert 'https://panel.example.com' in result.output
        assert 'ptla_test' not in result.output

    def test_configure_with_options(self, runner, mock_config):
        """Test configuration with explicit options."""
        result = runner.invoke(cli, [
            'configure',
            '--panel-url', 'https://new.example.com/',
            '--api-key', 'ptla_new',
            '--max-retries', '0',
        ])
        assert result.exit_code == 0
        mock_config.update.assert_called_once_with(
            panel_url='https://new.example.com',
            api_key='ptla_new',
            max_retries=0,
        )

    def test_configure_interactive(self, runner, mock_config):
        """Test interactive prompts when no option is given."""
        result = runner.invoke(
            cli, ['configure'],
            input='https://panel.example.org\nptla_prompted\n45\n'
        )
        assert result.exit_code == 0
        mock_config.update.assert_called_once_with(
            panel_url='https://panel.example.org',
            api_key='ptla_prompted',
            timeout=45,
        )

    def test_reset_config(self, runner, mock_config):
        """Test removing the configuration."""
        result = runner.invoke(cli, ['reset-config', '--yes'])
        assert result.exit_code == 0
        mock_config.clear.assert_called_once()


class TestRequireConfig:
    """Tests for commands run without configuration."""

    def test_not_configured(self, runner):
        """Test commands refuse to run unconfigured."""
        with patch('pteroctl.cli.get_config_manager') as mock:
            config_manager = MagicMock()
            config_manager.get.return_value = MagicMock(
                panel_url="",
                api_key="",
                is_configured=MagicMock(return_value=False)
            )
            mock.return_value = config_manager

            result = runner.invoke(cli, ['users', 'list'])
            assert result.exit_code == 1
            assert 'not configured' in result.output.lower()


class TestUsersCommands:
    """Tests for users commands."""

    def test_list_builds_options(self, runner, mock_config, users_client):
        """Test flags are turned into request options."""
        users_client.users.list.return_value = [
            User.from_attributes({"id": 1, "username": "foo", "email": "foo@example.com"})
        ]

        result = runner.invoke(cli, [
            'users', 'list',
            '--include', 'servers',
            '--username', 'foo',
            '--external-id', 'bar',
            '--sort', '-id',
        ])

        assert result.exit_code == 0, result.output
        assert 'foo@example.com' in result.output
        opts = users_client.users.list.call_args.args[0]
        assert opts.include == IncludeUsers(servers=True)
        assert opts.filters == UserFilters(username='foo', external_id='bar')
        assert opts.encode() == (
            "filter%5Busername%5D=foo&filter%5Bexternal_id%5D=bar&include=servers&sort=-id"
        )

    def test_list_all_pages(self, runner, mock_config, users_client):
        """Test --all walks every page."""
        users_client.users.iter_all.return_value = iter([
            User.from_attributes({"id": 1, "username": "a"}),
            User.from_attributes({"id": 2, "username": "b"}),
        ])

        result = runner.invoke(cli, ['users', 'list', '--all', '-f', 'json'])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [u["username"] for u in data] == ["a", "b"]
        users_client.users.list.assert_not_called()

    def test_list_empty(self, runner, mock_config, users_client):
        """Test the empty result message."""
        users_client.users.list.return_value = []
        result = runner.invoke(cli, ['users', 'list'])
        assert result.exit_code == 0
        assert 'No users found' in result.output

    def test_list_unknown_include(self, runner, mock_config, users_client):
        """Test unknown relation names are a usage error."""
        result = runner.invoke(cli, ['users', 'list', '--include', 'nodes'])
        assert result.exit_code == 2
        assert 'Unknown relation' in result.output

    def test_get_with_servers(self, runner, mock_config, users_client):
        """Test showing a user with resolved servers."""
        user = User.from_attributes({"id": 1, "username": "foo", "first_name": "F", "last_name": "L"})
        user.servers = [Server.from_attributes({"id": 3, "name": "Survival"})]
        users_client.users.get.return_value = user

        result = runner.invoke(cli, ['users', 'get', '1', '--include', 'servers'])

        assert result.exit_code == 0, result.output
        assert 'Survival' in result.output
        assert users_client.users.get.call_args.args[0] == 1

    def test_get_external(self, runner, mock_config, users_client):
        """Test lookup by external ID."""
        users_client.users.get_external.return_value = User.from_attributes({"id": 1, "username": "ext"})
        result = runner.invoke(cli, ['users', 'get', 'crm-42', '--external'])
        assert result.exit_code == 0
        assert users_client.users.get_external.call_args.args[0] == 'crm-42'

    def test_get_non_numeric_id(self, runner, mock_config, users_client):
        """Test non-numeric IDs need --external."""
        result = runner.invoke(cli, ['users', 'get', 'crm-42'])
        assert result.exit_code == 2
        assert '--external' in result.output

    def test_get_not_found(self, runner, mock_config, users_client):
        """Test API errors exit with status 1."""
        users_client.users.get.side_effect = ResourceNotFoundError("Resource not found: user")
        result = runner.invoke(cli, ['users', 'get', '99'])
        assert result.exit_code == 1
        assert 'Resource not found' in result.output

    def test_create(self, runner, mock_config, users_client):
        """Test creating a user."""
        users_client.users.create.return_value = User.from_attributes({"id": 5, "username": "new"})
        result = runner.invoke(cli, [
            'users', 'create',
            '-e', 'new@example.com', '-u', 'new',
            '--first-name', 'New', '--last-name', 'User',
        ])
        assert result.exit_code == 0, result.output
        assert 'ID 5' in result.output
        assert users_client.users.create.call_args.kwargs['root_admin'] is False

    def test_delete_cancelled(self, runner, mock_config, users_client):
        """Test declining the confirmation."""
        result = runner.invoke(cli, ['users', 'delete', '4'], input='n\n')
        assert result.exit_code == 0
        assert 'Cancelled' in result.output
        users_client.users.delete.assert_not_called()

    def test_delete_confirmed(self, runner, mock_config, users_client):
        """Test deleting with --yes."""
        result = runner.invoke(cli, ['users', 'delete', '4', '--yes'])
        assert result.exit_code == 0
        users_client.users.delete.assert_called_once_with(4)


class TestServersCommands:
    """Tests for servers commands."""

    def test_list_with_owner(self, runner, mock_config, servers_client):
        """Test owner names come from the resolved user."""
        server = Server.from_attributes({"id": 3, "identifier": "abc123", "name": "Survival", "user": 1})
        server.user = User.from_attributes({"id": 1, "username": "owner"})
        servers_client.servers.list.return_value = [server]

        result = runner.invoke(cli, ['servers', 'list', '--include', 'user', '--name', 'Surv'])

        assert result.exit_code == 0, result.output
        assert 'owner' in result.output
        opts = servers_client.servers.list.call_args.args[0]
        assert opts.include == IncludeServers(user=True)
        assert opts.filters.name == 'Surv'

    def test_list_csv(self, runner, mock_config, servers_client):
        """Test CSV output."""
        servers_client.servers.list.return_value = [
            Server.from_attributes({"id": 3, "identifier": "abc123", "name": "Survival", "user": 1})
        ]
        result = runner.invoke(cli, ['servers', 'list', '-f', 'csv'])
        assert result.exit_code == 0
        assert result.output.splitlines()[0].startswith('ID,Identifier,Name')

    def test_get(self, runner, mock_config, servers_client):
        """Test server details with allocations."""
        server = Server.from_attributes({"id": 3, "name": "Survival", "limits": {"memory": 2048}})
        server.allocations = [Allocation.from_attributes({"ip": "10.0.0.1", "port": 25565})]
        servers_client.servers.get.return_value = server

        result = runner.invoke(cli, ['servers', 'get', '3', '--include', 'allocations'])

        assert result.exit_code == 0, result.output
        assert '2048 MiB' in result.output
        assert '10.0.0.1:25565' in result.output

    @pytest.mark.parametrize("action", ['suspend', 'unsuspend', 'reinstall'])
    def test_lifecycle(self, runner, mock_config, servers_client, action):
        """Test lifecycle commands call their endpoint."""
        result = runner.invoke(cli, ['servers', action, '3'])
        assert result.exit_code == 0, result.output
        getattr(servers_client.servers, action).assert_called_once_with(3)

    def test_force_delete(self, runner, mock_config, servers_client):
        """Test forced delete."""
        result = runner.invoke(cli, ['servers', 'delete', '3', '--force', '-y'])
        assert result.exit_code == 0
        servers_client.servers.delete.assert_called_once_with(3, force=True)


class TestNodesCommands:
    """Tests for nodes commands."""

    def test_list(self, runner, mock_config, nodes_client):
        """Test listing nodes with their location."""
        node = Node.from_attributes({"id": 1, "name": "node-1", "fqdn": "n1.example.com", "location_id": 2})
        node.location = Location.from_attributes({"id": 2, "short": "eu"})
        nodes_client.nodes.list.return_value = [node]

        result = runner.invoke(cli, ['nodes', 'list', '--include', 'location'])

        assert result.exit_code == 0, result.output
        assert 'n1.example.com' in result.output
        assert 'eu' in result.output

    def test_config(self, runner, mock_config, nodes_client):
        """Test configuration output is JSON."""
        from pteroctl.models import NodeConfiguration
        nodes_client.nodes.get_configuration.return_value = NodeConfiguration.from_attributes(
            {"uuid": "abc", "token_id": "t"}
        )
        result = runner.invoke(cli, ['nodes', 'config', '1'])
        assert result.exit_code == 0
        assert json.loads(result.output)["uuid"] == "abc"

    def test_allocations_all(self, runner, mock_config, nodes_client):
        """Test walking all allocation pages."""
        nodes_client.nodes.iter_allocations.return_value = iter([
            Allocation.from_attributes({"id": 1, "ip": "10.0.0.1", "port": 25565, "assigned": True}),
        ])
        result = runner.invoke(cli, ['nodes', 'allocations', '1', '--all'])
        assert result.exit_code == 0, result.output
        assert '25565' in result.output
        assert nodes_client.nodes.iter_allocations.call_args.args[0] == 1


class TestLocationsCommands:
    """Tests for locations commands."""

    def test_list_filters(self, runner, mock_config, locations_client):
        """Test location filters."""
        locations_client.locations.list.return_value = [
            Location.from_attributes({"id": 1, "short": "us", "long": "United States"})
        ]
        result = runner.invoke(cli, ['locations', 'list', '--short', 'us'])
        assert result.exit_code == 0, result.output
        assert 'United States' in result.output
        assert locations_client.locations.list.call_args.args[0].filters.short == 'us'

    def test_create(self, runner, mock_config, locations_client):
        """Test creating a location."""
        locations_client.locations.create.return_value = Location.from_attributes({"id": 4, "short": "de"})
        result = runner.invoke(cli, ['locations', 'create', 'de', '--long', 'Germany'])
        assert result.exit_code == 0, result.output
        locations_client.locations.create.assert_called_once_with('de', 'Germany')


class TestNestsCommands:
    """Tests for nests commands."""

    def test_list(self, runner, mock_config, nests_client):
        """Test listing nests."""
        nests_client.nests.list.return_value = [
            Nest.from_attributes({"id": 1, "name": "Minecraft", "author": "support@example.com"})
        ]
        result = runner.invoke(cli, ['nests', 'list'])
        assert result.exit_code == 0, result.output
        assert 'Minecraft' in result.output

    def test_egg_detail(self, runner, mock_config, nests_client):
        """Test showing a single egg with variables."""
        egg = Egg.from_attributes({"id": 5, "name": "Paper", "nest": 1})
        egg.variables = [EggVariable.from_attributes({"env_variable": "MC_VERSION", "default_value": "latest"})]
        nests_client.nests.get_egg.return_value = egg

        result = runner.invoke(cli, ['nests', 'eggs', '1', '5', '--include', 'variables'])

        assert result.exit_code == 0, result.output
        assert 'MC_VERSION=latest' in result.output
        assert nests_client.nests.get_egg.call_args.args[:2] == (1, 5)

    def test_egg_list(self, runner, mock_config, nests_client):
        """Test listing eggs of a nest."""
        nests_client.nests.list_eggs.return_value = [Egg.from_attributes({"id": 5, "name": "Paper"})]
        result = runner.invoke(cli, ['nests', 'eggs', '1'])
        assert result.exit_code == 0, result.output
        assert 'Paper' in result.output
