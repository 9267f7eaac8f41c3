"""
Test helpers: a scripted HttpClient and factories for vendor API payloads.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

import jwt

from frontegg.http import ApiRawResponse
from frontegg.http.client import Body, DEFAULT_TIMEOUT, normalize_method


@dataclass
class RecordedRequest:
    """A request seen by StubHttpClient."""
    url: str
    method: str
    body: Body
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT

    def json(self) -> Any:
        return json.loads(self.body)


class StubHttpClient:
    """HttpClient returning queued responses in order and recording every request."""

    def __init__(self, responses: Optional[List[Union[ApiRawResponse, Exception]]] = None):
        self.responses: List[Union[ApiRawResponse, Exception]] = list(responses or [])
        self.requests: List[RecordedRequest] = []

    def queue(self, *responses: Union[ApiRawResponse, Exception]) -> "StubHttpClient":
        self.responses.extend(responses)
        return self

    async def send(self,
                   url: str,
                   method: str = "GET",
                   body: Body = None,
                   headers: Optional[Mapping[str, str]] = None,
                   timeout: float = DEFAULT_TIMEOUT) -> ApiRawResponse:
        self.requests.append(RecordedRequest(url, normalize_method(method), body, dict(headers or {}), timeout))
        if not self.responses:
            raise AssertionError(f"No stub response queued for {method} {url}")

        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]


class MockTokenGenerator:
    """Generate vendor-like JWT access tokens for testing."""

    def __init__(self, issuer: str = "frontegg", secret: str = "mock-secret"):
        self.issuer = issuer
        self.secret = secret

    def generate_access_token(self, client_id: str = "clientTestID", expires_in: int = 86400) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "iss": self.issuer,
            "sub": client_id,
            "type": "vendor",
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm="HS256")


class TestDataFactory:
    """Factory for vendor API responses."""

    __test__ = False

    def __init__(self, token_generator: Optional[MockTokenGenerator] = None):
        self.token_generator = token_generator or MockTokenGenerator()

    def create_auth_response(self, expires_in: int = 86400, status_code: int = 200) -> ApiRawResponse:
        return ApiRawResponse(
            {"Content-Type": "application/json"},
            json.dumps({
                "token": self.token_generator.generate_access_token(expires_in=expires_in),
                "expiresIn": expires_in,
            }),
            status_code
        )

    @staticmethod
    def create_error_response(status_code: int = 401, message: str = "Unauthorized") -> ApiRawResponse:
        return ApiRawResponse(
            {"Content-Type": "application/json"},
            json.dumps({"statusCode": status_code, "message": message}),
            status_code
        )

    @staticmethod
    def create_audit_log(**overrides: Any) -> Dict[str, Any]:
        audit_log = {
            "user": "testuser@t.com",
            "resource": "Portal",
            "action": "Login",
            "severity": "Info",
            "ip": "123.1.2.3",
        }
        audit_log.update(overrides)
        return audit_log

    def create_audits_response(self, count: int = 2) -> ApiRawResponse:
        data = [
            {
                **self.create_audit_log(),
                "tenantId": "THE-TENANT-ID",
                "vendorId": "6da27373-1572-444f-b3c5-ef702ce65123",
                "createdAt": "2020-08-22 06:47:25.025",
                "frontegg_id": f"audit-{i}",
            }
            for i in range(count)
        ]
        return ApiRawResponse(
            {"Content-Type": "application/json"},
            json.dumps({"data": data, "total": count}),
            200
        )

    @staticmethod
    def create_event_response() -> ApiRawResponse:
        return ApiRawResponse(
            {"Content-Type": "application/json"},
            json.dumps({
                "eventKey": "event-key",
                "properties": {},
                "channels": {},
                "vendorId": "THE-VENDOR-ID",
                "tenantId": "THE-TENANT-ID",
            }),
            200
        )


test_data_factory = TestDataFactory()
