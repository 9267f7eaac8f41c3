"""
Client credentials authentication against the vendor API.
"""

import asyncio
import json
import time
from typing import Optional

from shared.errors import AuthenticationException
from shared.logging import get_logger
from shared.metrics import MetricsCollector, get_metrics_collector
from frontegg.authenticator.access_token import AccessToken
from frontegg.config import Config
from frontegg.http import ApiError, ApiRawResponse, HttpClient


class Authenticator:
    """Exchanges client id/secret for an access token and keeps it fresh."""

    SUCCESS_CODES = (200, 201)

    # Tokens this close to expiry are treated as expired.
    EXPIRY_MARGIN_SECONDS = 5.0

    def __init__(self, config: Config, client: HttpClient, metrics: Optional[MetricsCollector] = None):
        self.config = config
        self.client = client
        self.metrics = metrics or get_metrics_collector()
        self.logger = get_logger("frontegg.authenticator")

        self._access_token: Optional[AccessToken] = None
        self._api_error: Optional[ApiError] = None
        self._lock = asyncio.Lock()

    def get_config(self) -> Config:
        return self.config

    def get_client(self) -> HttpClient:
        return self.client

    def get_access_token(self) -> Optional[AccessToken]:
        return self._access_token

    def get_api_error(self) -> Optional[ApiError]:
        return self._api_error

    def has_valid_token(self) -> bool:
        token = self._access_token
        return token is not None and token.is_valid(margin_seconds=self.expiry_margin(token))

    def expiry_margin(self, token: AccessToken) -> float:
        lifetime = token.lifetime_seconds()
        if lifetime is None:
            return self.EXPIRY_MARGIN_SECONDS
        # Short-lived tokens keep at most half their lifetime as margin.
        return min(self.EXPIRY_MARGIN_SECONDS, lifetime / 2)

    def invalidate(self) -> None:
        """Forget the current token so the next call re-authenticates."""
        self._access_token = None

    async def authenticate(self) -> None:
        """
        Request a new access token.

        Failures are not raised: the token is cleared and the reason is kept
        in ``get_api_error()``.
        """
        url = self.config.get_service_url("authentication")
        body = json.dumps({
            "clientId": self.config.client_id,
            "secret": self.config.client_secret,
        })

        start_time = time.time()
        response = await self.client.send(
            url,
            "POST",
            body,
            {"Content-Type": "application/json"},
            self.config.http_timeout
        )
        self.metrics.record_api_request("authenticate", response.http_response_code, time.time() - start_time)

        self._access_token = None
        self._api_error = None

        if response.http_response_code not in self.SUCCESS_CODES:
            self._set_error(response, "Authentication failed")
            return

        try:
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError("Authentication response is not an object")
            self._access_token = AccessToken.from_response(payload)
        except ValueError as e:
            self._set_error(response, "Invalid authentication response")
            self._api_error.message = str(e)
            return

        self.metrics.record_authentication("success")
        self.logger.info(
            "Authenticated with Frontegg API",
            client_id=self.config.client_id,
            expires_at=self._access_token.expires_at.isoformat()
        )

    async def validate_authentication(self) -> AccessToken:
        """Return a valid access token, authenticating first when needed."""
        if self.has_valid_token():
            return self._access_token

        async with self._lock:
            # Another caller may have refreshed while we waited.
            if not self.has_valid_token():
                await self.authenticate()

        if not self.has_valid_token():
            raise AuthenticationException(
                "Unable to authenticate with the Frontegg API",
                api_error=self._api_error
            )

        return self._access_token

    def _set_error(self, response: ApiRawResponse, error: str) -> None:
        self._api_error = ApiError.from_response(response, error)
        self.metrics.record_authentication("failure")
        self.logger.warning(
            error,
            client_id=self.config.client_id,
            status_code=response.http_response_code,
            message=self._api_error.message
        )
