"""
Custom exceptions for pteroctl.
"""

from typing import Optional, Dict, Any


class PteroError(Exception):
    """Base exception for all pteroctl errors."""
    
    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
    
    def __str__(self) -> str:
        return self.message


class ConfigurationError(PteroError):
    """Raised when the client is missing required configuration."""
    pass


class ValidationError(PteroError):
    """Raised when a request is rejected before or by the panel as invalid."""
    pass


class ResponseShapeError(PteroError):
    """Raised when a response body does not have the expected envelope shape."""
    pass


class APIError(PteroError):
    """Raised when an API request fails."""
    
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
        details: Optional[str] = None
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.response_data = response_data or {}


class AuthenticationError(APIError):
    """Raised when the API key is missing, invalid or revoked."""
    
    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message, status_code=401, details=details)


class PermissionDeniedError(APIError):
    """Raised when the API key lacks permission for a resource."""
    pass


class ResourceNotFoundError(APIError):
    """Raised when the requested resource does not exist."""
    pass
