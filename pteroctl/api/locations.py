"""
Locations API - Location management.
"""

from typing import Optional, Dict, Any, Iterator, List

from ..exceptions import ValidationError
from ..models import Location
from ..options import GetLocationOptions, ListLocationsOptions, encode_options
from ..resolver import resolve_item, resolve_list
from ._http import HTTPClient
from ._pages import iter_pages


class LocationsAPI:
    """API for location operations."""

    def __init__(self, http: HTTPClient):
        self._http = http

    def list(self, options: Optional[ListLocationsOptions] = None) -> List[Location]:
        """List locations (one page)."""
        payload = self._http.request("GET", "locations", query=encode_options(options))
        return resolve_list(payload, Location)

    def iter_all(self, options: Optional[ListLocationsOptions] = None) -> Iterator[Location]:
        """Iterate over locations across all pages."""
        return iter_pages(self._http, "locations", Location, options or ListLocationsOptions())

    def get(self, location_id: int, options: Optional[GetLocationOptions] = None) -> Location:
        """Get location by ID."""
        payload = self._http.request(
            "GET",
            f"locations/{location_id}",
            query=encode_options(options)
        )
        return resolve_item(payload, Location)

    def create(self, short: str, long: Optional[str] = None) -> Location:
        """
        Create a location.

        Args:
            short: Short code, e.g. ``us``
            long: Description, e.g. ``United States``
        """
        data: Dict[str, Any] = {"short": short}
        if long:
            data["long"] = long

        payload = self._http.request("POST", "locations", json_data=data, expected_status=[200, 201])
        return resolve_item(payload, Location)

    def update(
        self,
        location_id: int,
        short: Optional[str] = None,
        long: Optional[str] = None
    ) -> Location:
        """Update a location. Only provided fields are sent."""
        data = {k: v for k, v in {"short": short, "long": long}.items() if v is not None}
        if not data:
            raise ValidationError("No location fields specified")

        payload = self._http.request("PATCH", f"locations/{location_id}", json_data=data)
        return resolve_item(payload, Location)

    def delete(self, location_id: int) -> None:
        """Delete a location."""
        self._http.request("DELETE", f"locations/{location_id}", expected_status=204)
