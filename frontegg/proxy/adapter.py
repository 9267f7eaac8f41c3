"""
Adapter that sends prepared proxy requests through an HttpClient.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from frontegg.http import ApiRawResponse, HttpClient


@dataclass
class ProxyRequest:
    """Outbound request after path rewriting and header injection."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None


class FronteggAdapter:
    """Sends proxy requests with the client's HTTP transport."""

    def __init__(self, client: HttpClient, timeout: float = 10.0):
        self.client = client
        self.timeout = timeout

    async def send(self, request: ProxyRequest) -> ApiRawResponse:
        return await self.client.send(
            request.url,
            request.method,
            request.body,
            request.headers,
            self.timeout
        )
