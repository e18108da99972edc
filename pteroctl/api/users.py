"""
Users API - Panel user management.
"""

from typing import Optional, Dict, Any, Iterator, List

from ..exceptions import ValidationError
from ..models import User
from ..options import GetUserOptions, ListUsersOptions, encode_options
from ..resolver import resolve_item, resolve_list
from ._http import HTTPClient
from ._pages import iter_pages


class UsersAPI:
    """
    API for user management operations.

    Handles:
    - Listing and filtering users
    - Lookup by ID or external ID
    - User CRUD
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Users API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def list(self, options: Optional[ListUsersOptions] = None) -> List[User]:
        """
        List users (one page).

        Args:
            options: Includes, filters, sort and pagination

        Returns:
            Users with requested relationships resolved
        """
        payload = self._http.request("GET", "users", query=encode_options(options))
        return resolve_list(payload, User)

    def iter_all(self, options: Optional[ListUsersOptions] = None) -> Iterator[User]:
        """Iterate over users across all pages."""
        return iter_pages(self._http, "users", User, options or ListUsersOptions())

    def get(self, user_id: int, options: Optional[GetUserOptions] = None) -> User:
        """Get user by ID."""
        payload = self._http.request("GET", f"users/{user_id}", query=encode_options(options))
        return resolve_item(payload, User)

    def get_external(self, external_id: str, options: Optional[GetUserOptions] = None) -> User:
        """Get user by external ID."""
        payload = self._http.request(
            "GET",
            f"users/external/{external_id}",
            query=encode_options(options)
        )
        return resolve_item(payload, User)

    def create(
        self,
        email: str,
        username: str,
        first_name: str,
        last_name: str,
        password: Optional[str] = None,
        external_id: Optional[str] = None,
        language: Optional[str] = None,
        root_admin: bool = False
    ) -> User:
        """
        Create a new user.

        Args:
            email: Email address
            username: Username
            first_name: First name
            last_name: Last name
            password: Password (the panel emails a setup link when omitted)
            external_id: External system identifier
            language: Interface language code
            root_admin: Grant root admin rights
        """
        data: Dict[str, Any] = {
            "email": email,
            "username": username,
            "first_name": first_name,
            "last_name": last_name,
        }
        if password:
            data["password"] = password
        if external_id:
            data["external_id"] = external_id
        if language:
            data["language"] = language
        if root_admin:
            data["root_admin"] = True

        payload = self._http.request("POST", "users", json_data=data, expected_status=[200, 201])
        return resolve_item(payload, User)

    def update(
        self,
        user_id: int,
        email: Optional[str] = None,
        username: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        password: Optional[str] = None,
        external_id: Optional[str] = None,
        language: Optional[str] = None,
        root_admin: Optional[bool] = None
    ) -> User:
        """
        Update a user. Only provided fields are sent.

        Raises:
            ValidationError: If no field is provided
        """
        fields = {
            "email": email,
            "username": username,
            "first_name": first_name,
            "last_name": last_name,
            "password": password,
            "external_id": external_id,
            "language": language,
            "root_admin": root_admin,
        }
        data = {k: v for k, v in fields.items() if v is not None}
        if not data:
            raise ValidationError("No user fields specified")

        payload = self._http.request("PATCH", f"users/{user_id}", json_data=data)
        return resolve_item(payload, User)

    def delete(self, user_id: int) -> None:
        """Delete a user."""
        self._http.request("DELETE", f"users/{user_id}", expected_status=204)
