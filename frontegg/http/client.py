"""
HTTP transport used for every call to the vendor API.
"""

from typing import Mapping, Optional, Protocol, Union, runtime_checkable

import httpx

from shared.errors import FronteggTransportException, InvalidParameterException
from shared.logging import get_logger
from shared.retry import RetryConfig, RetryError, call_with_retry
from frontegg.http.response import ApiRawResponse


SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})
DEFAULT_TIMEOUT = 10.0

# httpx decodes the body, so these no longer describe it.
DECODED_BODY_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})

Body = Union[str, bytes, None]


@runtime_checkable
class HttpClient(Protocol):
    """Sends one request and returns the raw response."""

    async def send(self,
                   url: str,
                   method: str = "GET",
                   body: Body = None,
                   headers: Optional[Mapping[str, str]] = None,
                   timeout: float = DEFAULT_TIMEOUT) -> ApiRawResponse:
        ...


def normalize_method(method: str) -> str:
    normalized = (method or "").upper()
    if normalized not in SUPPORTED_METHODS:
        raise InvalidParameterException(
            f'HTTP method "{method}" is not supported',
            details={"method": method}
        )
    return normalized


class HttpxHttpClient:
    """Default transport on top of ``httpx.AsyncClient``."""

    def __init__(self,
                 timeout: float = DEFAULT_TIMEOUT,
                 retry_config: Optional[RetryConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig(max_attempts=3, base_delay=0.5)
        self.logger = get_logger("frontegg.http")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            # Redirects are returned to the caller, the proxy must not follow them.
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
                follow_redirects=False
            )
        return self._client

    async def send(self,
                   url: str,
                   method: str = "GET",
                   body: Body = None,
                   headers: Optional[Mapping[str, str]] = None,
                   timeout: float = DEFAULT_TIMEOUT) -> ApiRawResponse:
        method = normalize_method(method)

        async def _send() -> httpx.Response:
            return await self._get_client().request(
                method,
                url,
                content=body if body else None,
                headers=dict(headers or {}),
                timeout=timeout
            )

        try:
            response = await call_with_retry(
                _send,
                exceptions=(httpx.TransportError,),
                config=self.retry_config
            )
        except RetryError as e:
            self.logger.error(
                "Vendor API unreachable",
                method=method,
                url=url,
                attempts=e.attempts,
                error=str(e.last_exception)
            )
            raise FronteggTransportException(
                f"Request to {url} failed: {e.last_exception}",
                details={"url": url, "method": method, "attempts": e.attempts}
            ) from e.last_exception

        self.logger.debug(
            "Vendor API response",
            method=method,
            url=url,
            status_code=response.status_code
        )

        headers = httpx.Headers([
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in DECODED_BODY_HEADERS
        ])

        return ApiRawResponse(
            headers=headers,
            body=response.content,
            http_response_code=response.status_code
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
