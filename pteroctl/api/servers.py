"""
Servers API - Server provisioning and lifecycle.
"""

from typing import Optional, Dict, Any, Iterator, List

from ..exceptions import ValidationError
from ..models import Server
from ..options import GetServerOptions, ListServersOptions, encode_options
from ..resolver import resolve_item, resolve_list
from ._http import HTTPClient
from ._pages import iter_pages


class ServersAPI:
    """
    API for server operations.

    Handles:
    - Listing and lookup
    - Creation (explicit allocation or automatic deployment)
    - Details, build and startup updates
    - Suspension, reinstallation and deletion
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Servers API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def list(self, options: Optional[ListServersOptions] = None) -> List[Server]:
        """List servers (one page)."""
        payload = self._http.request("GET", "servers", query=encode_options(options))
        return resolve_list(payload, Server)

    def iter_all(self, options: Optional[ListServersOptions] = None) -> Iterator[Server]:
        """Iterate over servers across all pages."""
        return iter_pages(self._http, "servers", Server, options or ListServersOptions())

    def get(self, server_id: int, options: Optional[GetServerOptions] = None) -> Server:
        """Get server by ID."""
        payload = self._http.request("GET", f"servers/{server_id}", query=encode_options(options))
        return resolve_item(payload, Server)

    def get_external(self, external_id: str, options: Optional[GetServerOptions] = None) -> Server:
        """Get server by external ID."""
        payload = self._http.request(
            "GET",
            f"servers/external/{external_id}",
            query=encode_options(options)
        )
        return resolve_item(payload, Server)

    def create(
        self,
        name: str,
        user: int,
        egg: int,
        docker_image: str,
        startup: str,
        environment: Dict[str, Any],
        limits: Dict[str, Any],
        feature_limits: Dict[str, Any],
        allocation: Optional[Dict[str, Any]] = None,
        deploy: Optional[Dict[str, Any]] = None,
        external_id: Optional[str] = None,
        description: Optional[str] = None,
        skip_scripts: bool = False,
        oom_disabled: bool = False,
        start_on_completion: bool = False
    ) -> Server:
        """
        Create a server.

        Args:
            name: Server name
            user: Owner user ID
            egg: Egg ID
            docker_image: Container image
            startup: Startup command
            environment: Egg variable values
            limits: Resource limits (memory, swap, disk, io, cpu, threads)
            feature_limits: Feature limits (databases, allocations, backups)
            allocation: ``{"default": id, "additional": [ids]}``
            deploy: ``{"locations": [ids], "dedicated_ip": bool, "port_range": [..]}``
            external_id: External system identifier
            description: Server description
            skip_scripts: Skip egg install scripts
            oom_disabled: Disable the OOM killer
            start_on_completion: Start the server once installed

        Raises:
            ValidationError: If neither allocation nor deploy is given
        """
        if allocation is None and deploy is None:
            raise ValidationError("The allocation object or deploy object must be specified")

        data: Dict[str, Any] = {
            "name": name,
            "user": user,
            "egg": egg,
            "docker_image": docker_image,
            "startup": startup,
            "environment": environment,
            "limits": limits,
            "feature_limits": feature_limits,
            "oom_disabled": oom_disabled,
        }
        if allocation is not None:
            data["allocation"] = allocation
        if deploy is not None:
            data["deploy"] = deploy
        if external_id:
            data["external_id"] = external_id
        if description:
            data["description"] = description
        if skip_scripts:
            data["skip_scripts"] = True
        if start_on_completion:
            data["start_on_completion"] = True

        payload = self._http.request("POST", "servers", json_data=data, expected_status=[200, 201])
        return resolve_item(payload, Server)

    def update_details(
        self,
        server_id: int,
        name: Optional[str] = None,
        user: Optional[int] = None,
        external_id: Optional[str] = None,
        description: Optional[str] = None
    ) -> Server:
        """
        Update server details. Only provided fields are sent.

        Raises:
            ValidationError: If no field is provided
        """
        fields = {
            "name": name,
            "user": user,
            "external_id": external_id,
            "description": description,
        }
        data = {k: v for k, v in fields.items() if v is not None}
        if not data:
            raise ValidationError("No details fields specified")

        payload = self._http.request("PATCH", f"servers/{server_id}/details", json_data=data)
        return resolve_item(payload, Server)

    def update_build(self, server_id: int, build: Dict[str, Any]) -> Server:
        """
        Update server build configuration.

        Args:
            server_id: Server ID
            build: Build fields, e.g. from :meth:`Server.build_descriptor`

        Raises:
            ValidationError: If no field is provided
        """
        if not build:
            raise ValidationError("No build fields specified")

        payload = self._http.request("PATCH", f"servers/{server_id}/build", json_data=build)
        return resolve_item(payload, Server)

    def update_startup(self, server_id: int, startup: Dict[str, Any]) -> Server:
        """
        Update server startup configuration.

        Args:
            server_id: Server ID
            startup: Startup fields, e.g. from :meth:`Server.startup_descriptor`

        Raises:
            ValidationError: If no field is provided
        """
        if not startup:
            raise ValidationError("No startup fields specified")

        payload = self._http.request("PATCH", f"servers/{server_id}/startup", json_data=startup)
        return resolve_item(payload, Server)

    def suspend(self, server_id: int) -> None:
        """Suspend a server."""
        self._http.request("POST", f"servers/{server_id}/suspend", expected_status=204)

    def unsuspend(self, server_id: int) -> None:
        """Unsuspend a server."""
        self._http.request("POST", f"servers/{server_id}/unsuspend", expected_status=204)

    def reinstall(self, server_id: int) -> None:
        """Reinstall a server."""
        self._http.request("POST", f"servers/{server_id}/reinstall", expected_status=204)

    def delete(self, server_id: int, force: bool = False) -> None:
        """
        Delete a server.

        Args:
            server_id: Server ID
            force: Delete even if the daemon cannot be reached
        """
        endpoint = f"servers/{server_id}"
        if force:
            endpoint += "/force"
        self._http.request("DELETE", endpoint, expected_status=204)
