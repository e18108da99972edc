"""
Pterodactyl API Client - Main facade for all application API operations.
"""

from typing import Optional

from ..config import PteroConfig
from ._http import HTTPClient
from .databases import DatabasesAPI
from .locations import LocationsAPI
from .nests import NestsAPI
from .nodes import NodesAPI
from .servers import ServersAPI
from .users import UsersAPI


class PteroAPIClient:
    """
    Client for the Pterodactyl application API.

    Groups endpoints into domain-specific sub-clients sharing one HTTP
    session.

    Usage:
        with PteroAPIClient(config) as client:
            users = client.users.list(ListUsersOptions(include=IncludeUsers(servers=True)))
            server = client.servers.get(42, GetServerOptions(include=IncludeServers(node=True)))
    """

    def __init__(self, config: Optional[PteroConfig] = None):
        """
        Initialize the API client.

        Args:
            config: Optional configuration. Uses global config if not provided.

        Raises:
            ConfigurationError: If the panel URL or API key is missing
        """
        self._http = HTTPClient(config)

        # Domain-specific API modules
        self.users = UsersAPI(self._http)
        self.servers = ServersAPI(self._http)
        self.databases = DatabasesAPI(self._http)
        self.nodes = NodesAPI(self._http)
        self.locations = LocationsAPI(self._http)
        self.nests = NestsAPI(self._http)

    @property
    def config(self) -> PteroConfig:
        """Get the configuration."""
        return self._http.config

    @property
    def base_url(self) -> str:
        """Get the base URL for API requests."""
        return self._http.base_url

    def close(self) -> None:
        """Close the HTTP session."""
        self._http.close()

    def __enter__(self) -> "PteroAPIClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def get_client(config: Optional[PteroConfig] = None) -> PteroAPIClient:
    """
    Get an API client instance.

    Args:
        config: Optional configuration

    Returns:
        PteroAPIClient instance
    """
    return PteroAPIClient(config)
