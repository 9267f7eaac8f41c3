"""
Transparent proxy from an inbound request to the vendor API.
"""

import inspect
from typing import Any, Dict, Mapping, Optional

import httpx

from shared.errors import UnexpectedValueException
from shared.logging import get_logger, user_context
from shared.metrics import get_metrics_collector
from frontegg.authenticator import Authenticator
from frontegg.config import Config, ContextResolver
from frontegg.http import ApiRawResponse
from frontegg.proxy.adapter import FronteggAdapter, ProxyRequest


# Not forwarded in either direction by an intermediary.
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "proxy-connection",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
})

# Recomputed or injected by the proxy.
REPLACED_HEADERS = frozenset({
    "host",
    "content-length",
    "x-access-token",
    "frontegg-tenant-id",
    "frontegg-user-id",
    "frontegg-permissions",
    "frontegg-vendor-host",
})

CORS_HEADER_PREFIX = "access-control-"


class Proxy:
    """Forwards requests under ``Config.PROXY_URL`` to the vendor API."""

    MAX_RETRIES = 3

    def __init__(self,
                 authenticator: Authenticator,
                 adapter: FronteggAdapter,
                 context_resolver: ContextResolver,
                 disable_cors: Optional[bool] = None):
        self.authenticator = authenticator
        self.adapter = adapter
        self.context_resolver = context_resolver
        if disable_cors is None:
            disable_cors = authenticator.get_config().disable_cors
        self.disable_cors = disable_cors
        self.metrics = get_metrics_collector()
        self.logger = get_logger("frontegg.proxy")

    async def forward_to(self, request: httpx.Request, proxy_url: str) -> ApiRawResponse:
        """
        Forward ``request`` to ``proxy_url`` and return the vendor response.

        The ``/frontegg`` prefix is removed from the path, auth and context
        headers are injected, and on 401 the token is refreshed and the call
        retried up to MAX_RETRIES times in total.
        """
        await self.authenticator.validate_authentication()
        context = await self.resolve_context(request)

        with user_context(user_id=context.get("userId"), tenant_id=context.get("tenantId")):
            return await self._forward(request, proxy_url, context)

    async def _forward(self, request: httpx.Request, proxy_url: str, context: Mapping[str, Any]) -> ApiRawResponse:
        url = self.build_target_url(request, proxy_url)
        body = request.read() or None

        response = None
        for attempt in range(1, self.MAX_RETRIES + 1):
            token = await self.authenticator.validate_authentication()
            proxy_request = ProxyRequest(
                method=request.method,
                url=url,
                headers=self.build_headers(request, context, token.value),
                body=body
            )
            response = await self.adapter.send(proxy_request)

            if response.http_response_code != 401:
                break

            self.logger.warning(
                "Vendor rejected proxy token, re-authenticating",
                attempt=attempt,
                max_retries=self.MAX_RETRIES,
                url=url
            )
            self.authenticator.invalidate()

        self.metrics.record_proxy_request(request.method, response.http_response_code)
        self.logger.info(
            "Proxied request",
            method=request.method,
            url=url,
            status_code=response.http_response_code
        )

        if self.disable_cors:
            response = self.strip_cors_headers(response)

        return response

    async def resolve_context(self, request: httpx.Request) -> Dict[str, Any]:
        """Run the context resolver (sync or async) and validate its result."""
        context = self.context_resolver(request)
        if inspect.isawaitable(context):
            context = await context

        if context is None:
            return {}
        if not isinstance(context, Mapping):
            raise UnexpectedValueException(
                "Context resolver must return a mapping",
                details={"type": type(context).__name__}
            )
        return dict(context)

    @staticmethod
    def build_target_url(request: httpx.Request, proxy_url: str) -> str:
        # Still percent-encoded, so %2F and %3F reach the vendor unchanged.
        path, _, query = request.url.raw_path.decode("ascii").partition("?")
        prefix = Config.PROXY_URL
        if path == prefix or path.startswith(prefix + "/"):
            path = path[len(prefix):]

        url = Config.join(proxy_url, path)
        if query:
            url += "?" + query
        return url

    @staticmethod
    def build_headers(request: httpx.Request, context: Mapping[str, Any], token: str) -> Dict[str, str]:
        headers = {
            name: value
            for name, value in request.headers.items()
            if name.lower() not in HOP_BY_HOP_HEADERS and name.lower() not in REPLACED_HEADERS
        }

        headers["x-access-token"] = token
        headers["frontegg-vendor-host"] = request.headers.get("host") or request.url.netloc.decode("ascii")

        if context.get("tenantId"):
            headers["frontegg-tenant-id"] = str(context["tenantId"])
        if context.get("userId"):
            headers["frontegg-user-id"] = str(context["userId"])

        permissions = context.get("permissions")
        if permissions:
            if not isinstance(permissions, str):
                permissions = ",".join(str(p) for p in permissions)
            headers["frontegg-permissions"] = permissions

        return headers

    @staticmethod
    def strip_cors_headers(response: ApiRawResponse) -> ApiRawResponse:
        headers = [
            (name, value)
            for name, value in response.headers.multi_items()
            if not name.lower().startswith(CORS_HEADER_PREFIX)
        ]
        return ApiRawResponse(headers, response.content, response.http_response_code)
