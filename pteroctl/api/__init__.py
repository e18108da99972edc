"""
Pterodactyl application API client package.

Structure:
    - client.py: Main PteroAPIClient facade
    - _http.py: Base HTTP client with session, auth, and error handling
    - _pages.py: Page walking for list endpoints
    - users.py: User management
    - servers.py: Server provisioning and lifecycle
    - databases.py: Per-server databases
    - nodes.py: Nodes and allocations
    - locations.py: Locations
    - nests.py: Nests and eggs

Usage:
    from pteroctl.api import PteroAPIClient
    from pteroctl.options import ListUsersOptions, IncludeUsers

    with PteroAPIClient() as client:
        for user in client.users.iter_all(ListUsersOptions(include=IncludeUsers(servers=True))):
            print(user.username, [s.name for s in user.servers])
"""

from .client import PteroAPIClient, get_client
from ._http import HTTPClient
from .users import UsersAPI
from .servers import ServersAPI
from .databases import DatabasesAPI
from .nodes import NodesAPI
from .locations import LocationsAPI
from .nests import NestsAPI

__all__ = [
    # Main client
    "PteroAPIClient",
    "get_client",
    # HTTP layer
    "HTTPClient",
    # Domain APIs
    "UsersAPI",
    "ServersAPI",
    "DatabasesAPI",
    "NodesAPI",
    "LocationsAPI",
    "NestsAPI",
]
