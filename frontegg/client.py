"""
Entry point wiring configuration, transport and the vendor API clients.
"""

from typing import Any, Dict, Mapping, Optional

import httpx

from shared.config import CLIENT_ID_ENV_NAME, CLIENT_SECRET_ENV_NAME, get_settings
from shared.errors import FronteggSDKException
from shared.logging import get_logger
from shared.metrics import get_metrics_collector
from shared.retry import RetryConfig
from frontegg.audits import AuditsClient
from frontegg.authenticator import Authenticator
from frontegg.config import Config, ContextResolver
from frontegg.events import EventsClient, TriggerOptions
from frontegg.http import ApiRawResponse, HttpClient, HttpxHttpClient
from frontegg.proxy import FronteggAdapter, Proxy


class Frontegg:
    """Frontegg vendor API client."""

    VERSION = "0.2.0"
    DEFAULT_API_VERSION = "v1.0"
    DEFAULT_API_BASE_URL = "https://api.frontegg.com"

    def __init__(self,
                 client_id: Optional[str] = None,
                 client_secret: Optional[str] = None,
                 api_base_url: Optional[str] = None,
                 api_urls: Optional[Mapping[str, str]] = None,
                 api_version: Optional[str] = None,
                 http_client: Optional[HttpClient] = None,
                 disable_cors: Optional[bool] = None,
                 context_resolver: Optional[ContextResolver] = None):
        settings = get_settings(
            client_id=client_id,
            client_secret=client_secret,
            api_base_url=api_base_url,
            api_version=api_version,
            disable_cors=disable_cors
        )
        self.logger = get_logger("frontegg.client")

        if not settings.client_id:
            raise FronteggSDKException(
                'Required "client_id" key not supplied in config and could not '
                f'find fallback environment variable "{CLIENT_ID_ENV_NAME}"',
                "CONFIG_ERROR"
            )
        if not settings.client_secret:
            raise FronteggSDKException(
                'Required "client_secret" key not supplied in config and could not '
                f'find fallback environment variable "{CLIENT_SECRET_ENV_NAME}"',
                "CONFIG_ERROR"
            )
        if not callable(context_resolver):
            raise FronteggSDKException(
                'Required "context_resolver" key not supplied in config and could not '
                'find fallback value',
                "CONFIG_ERROR"
            )

        self.config = Config(
            settings.client_id,
            settings.client_secret,
            settings.api_base_url,
            api_urls,
            settings.disable_cors,
            context_resolver,
            api_version=settings.api_version,
            http_timeout=settings.http_timeout
        )
        self.client: HttpClient = http_client or HttpxHttpClient(
            timeout=settings.http_timeout,
            retry_config=RetryConfig(
                max_attempts=settings.http_max_retries,
                base_delay=settings.http_retry_base_delay
            )
        )

        self.metrics = get_metrics_collector()
        self.metrics.set_info(version=self.VERSION, api_base_url=self.config.base_url)

        self.authenticator = Authenticator(self.config, self.client, self.metrics)
        self.audits_client = AuditsClient(self.authenticator)
        self.events_client = EventsClient(self.authenticator)
        self.proxy = Proxy(
            self.authenticator,
            FronteggAdapter(self.client, self.config.http_timeout),
            self.config.get_context_resolver()
        )

    def get_authenticator(self) -> Authenticator:
        return self.authenticator

    def get_client(self) -> HttpClient:
        return self.client

    def get_config(self) -> Config:
        return self.config

    def get_audits_client(self) -> AuditsClient:
        return self.audits_client

    def get_events_client(self) -> EventsClient:
        return self.events_client

    async def init(self) -> None:
        """Authenticate with the vendor API up front."""
        await self.authenticator.authenticate()

    async def get_audits(self,
                         tenant_id: str,
                         filter: str = "",
                         offset: int = 0,
                         count: Optional[int] = None,
                         sort_by: Optional[str] = None,
                         sort_direction: str = "ASC",
                         **filters: Any) -> Dict[str, Any]:
        """Retrieve filtered and sorted audit logs; see ``AuditsClient.get_audits``."""
        return await self.audits_client.get_audits(
            tenant_id, filter, offset, count, sort_by, sort_direction, **filters
        )

    async def send_audit(self, tenant_id: str, audit_log: Mapping[str, Any]) -> Dict[str, Any]:
        return await self.audits_client.send_audit(tenant_id, audit_log)

    async def trigger_event(self, trigger_options: TriggerOptions) -> bool:
        """Trigger an event; False means the API refused it, see ``get_events_client().get_api_error()``."""
        return await self.events_client.trigger(trigger_options)

    async def forward(self, request: httpx.Request) -> ApiRawResponse:
        """Forward an inbound request to the vendor API."""
        return await self.proxy.forward_to(request, self.config.get_proxy_url())

    async def aclose(self) -> None:
        close = getattr(self.client, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "Frontegg":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
