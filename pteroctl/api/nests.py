"""
Nests API - Nest and egg lookup.
"""

from typing import Optional, Iterator, List

from ..models import Egg, Nest
from ..options import GetEggOptions, GetNestOptions, ListEggsOptions, ListNestsOptions, encode_options
from ..resolver import resolve_item, resolve_list
from ._http import HTTPClient
from ._pages import iter_pages


class NestsAPI:
    """
    API for nest and egg operations (read-only).
    """

    def __init__(self, http: HTTPClient):
        self._http = http

    def list(self, options: Optional[ListNestsOptions] = None) -> List[Nest]:
        """List nests (one page)."""
        payload = self._http.request("GET", "nests", query=encode_options(options))
        return resolve_list(payload, Nest)

    def iter_all(self, options: Optional[ListNestsOptions] = None) -> Iterator[Nest]:
        """Iterate over nests across all pages."""
        return iter_pages(self._http, "nests", Nest, options or ListNestsOptions())

    def get(self, nest_id: int, options: Optional[GetNestOptions] = None) -> Nest:
        """Get nest by ID."""
        payload = self._http.request("GET", f"nests/{nest_id}", query=encode_options(options))
        return resolve_item(payload, Nest)

    def list_eggs(self, nest_id: int, options: Optional[ListEggsOptions] = None) -> List[Egg]:
        """List eggs of a nest."""
        payload = self._http.request("GET", f"nests/{nest_id}/eggs", query=encode_options(options))
        return resolve_list(payload, Egg)

    def iter_eggs(self, nest_id: int, options: Optional[ListEggsOptions] = None) -> Iterator[Egg]:
        """Iterate over eggs of a nest across all pages."""
        return iter_pages(self._http, f"nests/{nest_id}/eggs", Egg, options or ListEggsOptions())

    def get_egg(self, nest_id: int, egg_id: int, options: Optional[GetEggOptions] = None) -> Egg:
        """Get an egg of a nest."""
        payload = self._http.request(
            "GET",
            f"nests/{nest_id}/eggs/{egg_id}",
            query=encode_options(options)
        )
        return resolve_item(payload, Egg)
