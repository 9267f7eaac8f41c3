"""
Shared error handling for the Frontegg client.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class FronteggSDKException(Exception):
    """Base exception for the Frontegg client."""

    def __init__(self, message: str, code: str = "SDK_ERROR", details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class AuthenticationException(FronteggSDKException):
    """Raised when no valid access token could be obtained."""

    def __init__(self, message: str = "Authentication failed", api_error: Any = None,
                 details: Optional[Dict[str, Any]] = None):
        self.api_error = api_error
        if api_error is not None and details is None:
            details = api_error.to_dict()
        super().__init__(message, "AUTHENTICATION_ERROR", details)


class UnauthorizedRequestException(FronteggSDKException):
    """Caller of the proxy service presented no valid credentials."""

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "UNAUTHORIZED", details)


class InvalidParameterException(FronteggSDKException):
    """Invalid argument passed to a client operation."""

    def __init__(self, message: str = "Invalid parameter", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "INVALID_PARAMETER", details)


class InvalidUrlConfigException(FronteggSDKException):
    """Requested service URL is not configured."""

    def __init__(self, message: str = "Invalid URL config", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "INVALID_URL_CONFIG", details)


class UnexpectedValueException(FronteggSDKException):
    """A collaborator returned a value of the wrong shape."""

    def __init__(self, message: str = "Unexpected value", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "UNEXPECTED_VALUE", details)


class EventTriggerException(FronteggSDKException):
    """Event could not be sent to the vendor API."""

    def __init__(self, message: str = "Event trigger failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "EVENT_TRIGGER_ERROR", details)


class FronteggAPIException(FronteggSDKException):
    """Vendor API answered with an error status."""

    def __init__(self, api_error: Any, message: Optional[str] = None):
        self.api_error = api_error
        super().__init__(
            message or f"Frontegg API error: {api_error.http_response_code}",
            "API_ERROR",
            api_error.to_dict()
        )


class FronteggTransportException(FronteggSDKException):
    """Request never produced an HTTP response."""

    def __init__(self, message: str = "Transport error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "TRANSPORT_ERROR", details)
