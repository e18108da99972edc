"""
Nodes API - Node and allocation management.
"""

from typing import Optional, Dict, Any, Iterator, List

from ..exceptions import ValidationError
from ..models import Allocation, Node, NodeConfiguration
from ..options import (
    GetNodeOptions,
    ListNodeAllocationsOptions,
    ListNodesOptions,
    encode_options,
)
from ..resolver import resolve_item, resolve_list
from ._http import HTTPClient
from ._pages import iter_pages


class NodesAPI:
    """
    API for node operations.

    Handles:
    - Node listing, lookup and CRUD
    - Daemon configuration retrieval
    - Allocation listing, creation and deletion
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Nodes API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def list(self, options: Optional[ListNodesOptions] = None) -> List[Node]:
        """List nodes (one page)."""
        payload = self._http.request("GET", "nodes", query=encode_options(options))
        return resolve_list(payload, Node)

    def iter_all(self, options: Optional[ListNodesOptions] = None) -> Iterator[Node]:
        """Iterate over nodes across all pages."""
        return iter_pages(self._http, "nodes", Node, options or ListNodesOptions())

    def get(self, node_id: int, options: Optional[GetNodeOptions] = None) -> Node:
        """Get node by ID."""
        payload = self._http.request("GET", f"nodes/{node_id}", query=encode_options(options))
        return resolve_item(payload, Node)

    def get_configuration(self, node_id: int) -> NodeConfiguration:
        """Get the daemon configuration of a node."""
        payload = self._http.request("GET", f"nodes/{node_id}/configuration")
        return NodeConfiguration.from_attributes(payload)

    def create(
        self,
        name: str,
        location_id: int,
        fqdn: str,
        memory: int,
        disk: int,
        scheme: str = "https",
        description: Optional[str] = None,
        public: bool = True,
        behind_proxy: bool = False,
        maintenance_mode: bool = False,
        memory_overallocate: int = 0,
        disk_overallocate: int = 0,
        upload_size: int = 100,
        daemon_base: str = "/var/lib/pterodactyl/volumes",
        daemon_sftp: int = 2022,
        daemon_listen: int = 8080
    ) -> Node:
        """
        Create a node.

        Args:
            name: Node name
            location_id: Location ID
            fqdn: Daemon host name
            memory: Total memory (MiB)
            disk: Total disk (MiB)
            scheme: ``https`` or ``http``
            description: Node description
            public: Allow automatic deployment
            behind_proxy: Daemon sits behind a proxy
            maintenance_mode: Start in maintenance mode
            memory_overallocate: Memory overallocation percentage
            disk_overallocate: Disk overallocation percentage
            upload_size: Max upload size (MiB)
            daemon_base: Server data directory
            daemon_sftp: SFTP port
            daemon_listen: Daemon API port
        """
        data: Dict[str, Any] = {
            "name": name,
            "location_id": location_id,
            "fqdn": fqdn,
            "scheme": scheme,
            "public": public,
            "behind_proxy": behind_proxy,
            "maintenance_mode": maintenance_mode,
            "memory": memory,
            "memory_overallocate": memory_overallocate,
            "disk": disk,
            "disk_overallocate": disk_overallocate,
            "upload_size": upload_size,
            "daemon_base": daemon_base,
            "daemon_sftp": daemon_sftp,
            "daemon_listen": daemon_listen,
        }
        if description:
            data["description"] = description

        payload = self._http.request("POST", "nodes", json_data=data, expected_status=[200, 201])
        return resolve_item(payload, Node)

    def update(self, node_id: int, fields: Dict[str, Any]) -> Node:
        """
        Update a node.

        Args:
            node_id: Node ID
            fields: Fields to update, e.g. from :meth:`Node.update_descriptor`

        Raises:
            ValidationError: If no field is provided
        """
        if not fields:
            raise ValidationError("No update fields specified")

        payload = self._http.request("PATCH", f"nodes/{node_id}", json_data=fields)
        return resolve_item(payload, Node)

    def delete(self, node_id: int) -> None:
        """Delete a node. The panel refuses while servers remain on it."""
        self._http.request("DELETE", f"nodes/{node_id}", expected_status=204)

    # Allocations

    def list_allocations(
        self,
        node_id: int,
        options: Optional[ListNodeAllocationsOptions] = None
    ) -> List[Allocation]:
        """List allocations of a node (one page)."""
        payload = self._http.request(
            "GET",
            f"nodes/{node_id}/allocations",
            query=encode_options(options)
        )
        return resolve_list(payload, Allocation)

    def iter_allocations(
        self,
        node_id: int,
        options: Optional[ListNodeAllocationsOptions] = None
    ) -> Iterator[Allocation]:
        """Iterate over allocations of a node across all pages."""
        return iter_pages(
            self._http,
            f"nodes/{node_id}/allocations",
            Allocation,
            options or ListNodeAllocationsOptions()
        )

    def create_allocations(
        self,
        node_id: int,
        ip: str,
        ports: List[str],
        alias: Optional[str] = None
    ) -> None:
        """
        Create allocations on a node.

        Args:
            node_id: Node ID
            ip: IP address
            ports: Ports or ranges, e.g. ``["25565", "25570-25580"]``
            alias: IP alias shown to users
        """
        if not ports:
            raise ValidationError("At least one port is required")

        data: Dict[str, Any] = {"ip": ip, "ports": ports}
        if alias:
            data["alias"] = alias

        self._http.request(
            "POST",
            f"nodes/{node_id}/allocations",
            json_data=data,
            expected_status=204
        )

    def delete_allocation(self, node_id: int, allocation_id: int) -> None:
        """Delete an allocation from a node."""
        self._http.request(
            "DELETE",
            f"nodes/{node_id}/allocations/{allocation_id}",
            expected_status=204
        )
