"""
Raw response and error records exchanged with the vendor API.
"""

import json
from typing import Any, Dict, Mapping, Optional, Union

import httpx


class ApiRawResponse:
    """Status, headers and body of a vendor API response."""

    def __init__(self,
                 headers: Optional[Mapping[str, str]] = None,
                 body: Union[str, bytes, None] = b"",
                 http_response_code: int = 200):
        self.headers = httpx.Headers(headers or {})
        if body is None:
            body = b""
        self.content = body.encode("utf-8") if isinstance(body, str) else body
        self.http_response_code = http_response_code

    @property
    def body(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def get_headers(self) -> Dict[str, str]:
        return dict(self.headers.items())

    def get_body(self) -> str:
        return self.body

    def get_http_response_code(self) -> int:
        return self.http_response_code

    def is_success(self) -> bool:
        return 200 <= self.http_response_code < 300

    def json(self) -> Any:
        """Decode the body; raises ``ValueError`` on malformed JSON."""
        return json.loads(self.content or b"null")

    def __repr__(self) -> str:
        return f"ApiRawResponse(status={self.http_response_code}, length={len(self.content)})"


class ApiError:
    """Failure captured from the last unsuccessful vendor API call."""

    def __init__(self, error: str, message: str, http_response_code: int, body: str = ""):
        self.error = error
        self.message = message
        self.http_response_code = http_response_code
        self.body = body

    @classmethod
    def from_response(cls, response: ApiRawResponse, error: str = "Frontegg API error") -> "ApiError":
        """Build an error from a response, reading ``message``/``error`` from a JSON body if present."""
        message = response.body
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict):
            errors = payload.get("errors")
            if isinstance(errors, list) and errors:
                message = "; ".join(str(e) for e in errors)
            else:
                message = str(payload.get("message") or payload.get("error") or message)

        return cls(error, message, response.http_response_code, response.body)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error,
            "message": self.message,
            "status_code": self.http_response_code,
        }

    def __repr__(self) -> str:
        return f"ApiError({self.error!r}, {self.message!r}, {self.http_response_code})"
