"""
Databases API - Per-server database management.
"""

from typing import Optional, Iterator, List

from ..models import Database
from ..options import GetDatabaseOptions, ListDatabasesOptions, encode_options
from ..resolver import resolve_item, resolve_list
from ._http import HTTPClient
from ._pages import iter_pages


class DatabasesAPI:
    """
    API for server database operations.

    Handles:
    - Listing and lookup
    - Creation and deletion
    - Password reset
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Databases API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def list(self, server_id: int, options: Optional[ListDatabasesOptions] = None) -> List[Database]:
        """List databases of a server."""
        payload = self._http.request(
            "GET",
            f"servers/{server_id}/databases",
            query=encode_options(options)
        )
        return resolve_list(payload, Database)

    def iter_all(
        self,
        server_id: int,
        options: Optional[ListDatabasesOptions] = None
    ) -> Iterator[Database]:
        """Iterate over databases of a server across all pages."""
        return iter_pages(
            self._http,
            f"servers/{server_id}/databases",
            Database,
            options or ListDatabasesOptions()
        )

    def get(
        self,
        server_id: int,
        database_id: int,
        options: Optional[GetDatabaseOptions] = None
    ) -> Database:
        """Get a server database. Include ``password`` to receive credentials."""
        payload = self._http.request(
            "GET",
            f"servers/{server_id}/databases/{database_id}",
            query=encode_options(options)
        )
        return resolve_item(payload, Database)

    def create(self, server_id: int, database: str, remote: str, host: int) -> Database:
        """
        Create a database on a server.

        Args:
            server_id: Server ID
            database: Database name
            remote: Allowed remote connection pattern (e.g. ``%``)
            host: Database host ID
        """
        payload = self._http.request(
            "POST",
            f"servers/{server_id}/databases",
            json_data={"database": database, "remote": remote, "host": host},
            expected_status=[200, 201]
        )
        return resolve_item(payload, Database)

    def reset_password(self, server_id: int, database_id: int) -> None:
        """Generate a new password for a database."""
        self._http.request(
            "POST",
            f"servers/{server_id}/databases/{database_id}/reset-password",
            expected_status=204
        )

    def delete(self, server_id: int, database_id: int) -> None:
        """Delete a server database."""
        self._http.request(
            "DELETE",
            f"servers/{server_id}/databases/{database_id}",
            expected_status=204
        )
