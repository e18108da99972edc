"""
Base HTTP client for the Pterodactyl application API.

Handles session management, authentication, retries, and error handling.
"""

import logging
from typing import Optional, Dict, Any, List, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .. import __version__
from ..config import PteroConfig, get_config
from ..envelope import decode_json
from ..exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    PermissionDeniedError,
    ResourceNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class HTTPClient:
    """
    Base HTTP client for the application API.

    Handles:
    - Session management with retry logic
    - Bearer API key authentication
    - Query string and JSON body handling
    - Error response handling
    """

    API_PREFIX = "api/application"

    def __init__(self, config: Optional[PteroConfig] = None):
        """
        Initialize the HTTP client.

        Args:
            config: Optional configuration. Uses global config if not provided.

        Raises:
            ConfigurationError: If the panel URL or API key is missing
        """
        self.config = config or get_config()
        if not self.config.panel_url:
            raise ConfigurationError("A valid panel URL is required")
        if not self.config.api_key:
            raise ConfigurationError("A valid application API key is required")
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create HTTP session with retry logic."""
        if self._session is None:
            self._session = requests.Session()

            retry_strategy = Retry(
                total=self.config.max_retries,
                backoff_factor=1,
                status_forcelist=[429, 502, 503, 504],
                allowed_methods=["HEAD", "GET", "OPTIONS", "PUT", "DELETE"],
                respect_retry_after_header=True,
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)

            self._session.headers.update({
                "User-Agent": f"pteroctl/{__version__}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            })

        return self._session

    @property
    def base_url(self) -> str:
        """Get the base URL for API requests."""
        return f"{self.config.panel_url.rstrip('/')}/{self.API_PREFIX}"

    def build_url(self, endpoint: str, query: str = "") -> str:
        """Build the full request URL, appending an encoded query string if any."""
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        if query:
            url = f"{url}?{query}"
        return url

    def _get_headers(self, extra_headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Get request headers including authentication."""
        headers = {"Authorization": f"Bearer {self.config.api_key}"}

        if extra_headers:
            headers.update(extra_headers)

        return headers

    def _handle_response(
        self,
        response: requests.Response,
        expected_status: Union[int, List[int]] = 200
    ) -> Any:
        """Handle API response and raise appropriate exceptions."""
        if isinstance(expected_status, int):
            expected_status = [expected_status]

        logger.debug(f"Request: {response.request.method} {response.request.url}")
        logger.debug(f"Response: {response.status_code}")

        if response.status_code in expected_status:
            if response.status_code == 204 or not response.content:
                return None
            return decode_json(response.content)

        try:
            error_data = response.json()
            if not isinstance(error_data, dict):
                error_data = {"data": error_data}
            error_msg = self._extract_error_message(error_data)
        except ValueError:
            error_msg = response.text or f"HTTP {response.status_code}"
            error_data = {}

        logger.error(
            "API error [%s %s] status=%d: %s",
            response.request.method,
            response.request.url,
            response.status_code,
            error_msg
        )

        if response.status_code == 401:
            raise AuthenticationError(
                "Authentication failed: " + (error_msg or "Please check your API key."),
                details=error_msg
            )
        elif response.status_code == 403:
            raise PermissionDeniedError(
                "Permission denied: " + (error_msg or "The API key has no access to this resource."),
                status_code=response.status_code,
                response_data=error_data
            )
        elif response.status_code == 404:
            raise ResourceNotFoundError(
                "Resource not found: " + (error_msg or "The requested resource does not exist."),
                status_code=response.status_code,
                response_data=error_data
            )
        elif response.status_code == 400:
            raise ValidationError(
                f"Invalid request: {error_msg}",
                details=str(error_data)
            )
        elif response.status_code == 422:
            raise ValidationError(
                f"Validation failed: {error_msg}",
                details=str(error_data)
            )
        else:
            raise APIError(
                f"API request failed: {error_msg}",
                status_code=response.status_code,
                response_data=error_data
            )

    def _extract_error_message(self, error_data: Dict[str, Any]) -> str:
        """Extract error message from the panel's ``errors`` array."""
        errors = error_data.get("errors")
        if isinstance(errors, list) and errors:
            error_messages = []
            for err in errors:
                if isinstance(err, dict):
                    code = err.get("code", "")
                    msg = err.get("detail") or err.get("message") or str(err)
                    if code:
                        error_messages.append(f"[{code}] {msg}")
                    else:
                        error_messages.append(msg)
                else:
                    error_messages.append(str(err))
            return "; ".join(error_messages)

        if "message" in error_data:
            return str(error_data["message"])
        if "data" in error_data:
            return str(error_data["data"])
        return str(error_data)

    def request(
        self,
        method: str,
        endpoint: str,
        query: str = "",
        json_data: Optional[Dict[str, Any]] = None,
        expected_status: Union[int, List[int]] = 200,
    ) -> Any:
        """
        Make an API request.

        Args:
            method: HTTP method
            endpoint: API endpoint (relative to the application API root)
            query: Already encoded query string
            json_data: JSON body data
            expected_status: Expected status code(s)

        Returns:
            Decoded JSON response, or None for empty responses
        """
        url = self.build_url(endpoint, query)
        headers = self._get_headers()

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=json_data,
                headers=headers,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.exceptions.ConnectionError as e:
            raise APIError(f"Connection failed: {e}")
        except requests.exceptions.Timeout as e:
            raise APIError(f"Request timed out: {e}")
        except requests.exceptions.RequestException as e:
            raise APIError(f"Request failed: {e}")

        return self._handle_response(response, expected_status)

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
