"""
Client configuration: credentials, vendor URLs and the context resolver.
"""

from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from shared.errors import InvalidUrlConfigException


ContextResolver = Callable[[Any], Union[Mapping[str, Any], Awaitable[Mapping[str, Any]]]]


class Config:
    """Immutable-by-convention settings shared by all vendor API clients."""

    PROXY_URL = "/frontegg"

    AUTHENTICATION_URL = "/auth/vendor"
    AUDITS_URL = "/audits/"
    EVENTS_URL = "/event/resources/triggers/v2"

    DEFAULT_API_URLS = {
        "authentication": AUTHENTICATION_URL,
        "audits": AUDITS_URL,
        "events": EVENTS_URL,
    }

    def __init__(self,
                 client_id: str,
                 client_secret: str,
                 base_url: str,
                 urls: Optional[Mapping[str, str]] = None,
                 disable_cors: bool = False,
                 context_resolver: Optional[ContextResolver] = None,
                 api_version: str = "v1.0",
                 http_timeout: float = 10.0):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.disable_cors = disable_cors
        self.context_resolver = context_resolver
        self.http_timeout = http_timeout
        self.urls: Dict[str, str] = {**self.DEFAULT_API_URLS, **dict(urls or {})}

    def get_client_id(self) -> str:
        return self.client_id

    def get_client_secret(self) -> str:
        return self.client_secret

    def get_base_url(self) -> str:
        return self.base_url

    def get_proxy_url(self) -> str:
        """Target that proxied paths are appended to."""
        return self.base_url

    def get_context_resolver(self) -> Optional[ContextResolver]:
        return self.context_resolver

    def get_service_url(self, url_key: str) -> str:
        """
        Full URL of a vendor resource.

        ``url_key`` must be one of the configured resource keys
        (``authentication``, ``audits``, ``events`` or a custom key passed
        in ``urls``).
        """
        if url_key not in self.urls:
            raise InvalidUrlConfigException(
                f'URL "{url_key}" is not configured',
                details={"url_key": url_key, "available": sorted(self.urls)}
            )

        return self.join(self.base_url, self.urls[url_key])

    @staticmethod
    def join(base: str, path: str) -> str:
        if not path:
            return base
        return base.rstrip("/") + "/" + path.lstrip("/")

    def __repr__(self) -> str:
        return f"Config(client_id={self.client_id!r}, base_url={self.base_url!r})"
