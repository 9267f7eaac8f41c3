"""
Unit tests for the Frontegg entry point.
"""

import httpx
import pytest

from frontegg import Config, Frontegg
from frontegg.authenticator import AccessToken, Authenticator
from frontegg.events import ChannelsConfig, DefaultProperties, TriggerOptions, WebHookBody
from frontegg.http import ApiRawResponse, HttpClient, HttpxHttpClient
from frontegg.testing import StubHttpClient, test_data_factory
from shared.errors import FronteggSDKException


def empty_context_resolver(request):
    return {}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep developer credentials out of the tests."""
    for name in ("FRONTEGG_CLIENT_ID", "FRONTEGG_CLIENT_SECRET_KEY", "FRONTEGG_CLIENT_SECRET",
                 "FRONTEGG_API_BASE_URL", "FRONTEGG_DISABLE_CORS"):
        monkeypatch.delenv(name, raising=False)


class TestFrontegg:
    """Test cases for Frontegg."""

    def make_frontegg(self, http_client=None, **kwargs):
        return Frontegg(
            client_id="clientTestID",
            client_secret="apiTestSecretKey",
            http_client=http_client,
            context_resolver=empty_context_resolver,
            **kwargs
        )

    def test_components_created(self):
        """Test default wiring."""
        frontegg = self.make_frontegg()

        assert isinstance(frontegg.get_authenticator(), Authenticator)
        assert isinstance(frontegg.get_config(), Config)
        assert frontegg.get_config().get_client_id() == "clientTestID"
        assert frontegg.get_config().get_client_secret() == "apiTestSecretKey"
        assert frontegg.get_config().get_base_url() == Frontegg.DEFAULT_API_BASE_URL
        assert frontegg.get_config().api_version == Frontegg.DEFAULT_API_VERSION
        assert isinstance(frontegg.get_client(), HttpxHttpClient)
        assert isinstance(frontegg.get_client(), HttpClient)

    def test_credentials_from_environment(self, monkeypatch):
        """Test env fallback for credentials."""
        monkeypatch.setenv("FRONTEGG_CLIENT_ID", "env-client")
        monkeypatch.setenv("FRONTEGG_CLIENT_SECRET_KEY", "env-secret")

        frontegg = Frontegg(context_resolver=empty_context_resolver)

        assert frontegg.get_config().get_client_id() == "env-client"
        assert frontegg.get_config().get_client_secret() == "env-secret"

    def test_missing_client_id(self):
        """Test missing client id."""
        with pytest.raises(FronteggSDKException) as exc_info:
            Frontegg(client_secret="secret", context_resolver=empty_context_resolver)

        assert "FRONTEGG_CLIENT_ID" in exc_info.value.message

    def test_missing_client_secret(self):
        """Test missing client secret."""
        with pytest.raises(FronteggSDKException) as exc_info:
            Frontegg(client_id="id", context_resolver=empty_context_resolver)

        assert "FRONTEGG_CLIENT_SECRET_KEY" in exc_info.value.message

    @pytest.mark.parametrize("credentials", [
        {"client_id": "", "client_secret": "secret"},
        {"client_id": "id", "client_secret": ""},
    ])
    def test_explicit_empty_credentials_not_replaced_by_environment(self, monkeypatch, credentials):
        """Test an empty value passed in is treated as missing."""
        monkeypatch.setenv("FRONTEGG_CLIENT_ID", "env-client")
        monkeypatch.setenv("FRONTEGG_CLIENT_SECRET_KEY", "env-secret")

        with pytest.raises(FronteggSDKException) as exc_info:
            Frontegg(context_resolver=empty_context_resolver, **credentials)

        assert exc_info.value.code == "CONFIG_ERROR"

    def test_missing_context_resolver(self):
        """Test context resolver is required."""
        with pytest.raises(FronteggSDKException) as exc_info:
            Frontegg(client_id="id", client_secret="secret", context_resolver="not callable")

        assert "context_resolver" in exc_info.value.message

    def test_api_urls_and_base_url(self):
        """Test URL overrides are passed to the config."""
        frontegg = self.make_frontegg(
            api_base_url="https://api.eu.frontegg.com/",
            api_urls={"events": "/event/resources/triggers/v3"}
        )

        config = frontegg.get_config()
        assert config.get_service_url("events") == "https://api.eu.frontegg.com/event/resources/triggers/v3"
        assert config.get_service_url("audits") == "https://api.eu.frontegg.com/audits/"

    @pytest.mark.asyncio
    async def test_init_authenticates(self):
        """Test init obtains an access token."""
        client = StubHttpClient([test_data_factory.create_auth_response()])
        frontegg = self.make_frontegg(client)

        await frontegg.init()

        assert isinstance(frontegg.get_authenticator().get_access_token(), AccessToken)

    @pytest.mark.asyncio
    async def test_get_audits(self):
        """Test audit retrieval through the entry point."""
        client = StubHttpClient([
            test_data_factory.create_auth_response(),
            ApiRawResponse({}, '{"data": [["log1"], ["log 2"]], "total": 2}', 200),
        ])
        frontegg = self.make_frontegg(client)

        audit_logs = await frontegg.get_audits("THE-TENANT-ID")

        assert audit_logs["total"] == 2
        assert ["log1"] in audit_logs["data"]
        assert ["log 2"] in audit_logs["data"]

    @pytest.mark.asyncio
    async def test_send_audit(self):
        """Test audit submission through the entry point."""
        audit_log = test_data_factory.create_audit_log()
        client = StubHttpClient([
            test_data_factory.create_auth_response(),
            ApiRawResponse({}, '{"frontegg_id": "a-1"}', 200),
        ])
        frontegg = self.make_frontegg(client)

        result = await frontegg.send_audit("THE-TENANT-ID", audit_log)

        assert result == {"frontegg_id": "a-1"}

    @pytest.mark.asyncio
    async def test_trigger_event(self):
        """Test event trigger through the entry point."""
        client = StubHttpClient([
            test_data_factory.create_auth_response(),
            test_data_factory.create_event_response(),
        ])
        frontegg = self.make_frontegg(client)

        channels = ChannelsConfig()
        channels.set_webhook(WebHookBody(data={
            "field 1": "value 1",
            "field 2": "value 2",
            "field 3": "value 3",
        }))
        trigger_options = TriggerOptions(
            event_key="event-key",
            default_properties=DefaultProperties(
                title="Default notification title",
                description="Default notification description!"
            ),
            channels=channels,
            tenant_id="THE-TENANT-ID"
        )

        assert await frontegg.trigger_event(trigger_options) is True
        assert frontegg.get_events_client().get_api_error() is None

    @pytest.mark.asyncio
    async def test_forward(self):
        """Test forwarding a proxied request."""
        client = StubHttpClient([
            test_data_factory.create_auth_response(),
            test_data_factory.create_audits_response(count=1),
        ])
        frontegg = self.make_frontegg(client)
        request = httpx.Request(
            "GET",
            "http://localhost" + Config.PROXY_URL + "/audits?sortDirection=desc&sortBy=createdAt&filter=&offset=0&count=20"
        )

        response = await frontegg.forward(request)

        assert isinstance(response, ApiRawResponse)
        assert response.http_response_code == 200
        assert response.get_headers()
        assert response.json()["total"] == 1
        assert client.last_request.url.startswith("https://api.frontegg.com/audits?")

    @pytest.mark.asyncio
    async def test_async_context_manager_closes_client(self):
        """Test the transport is closed on exit."""
        async with self.make_frontegg() as frontegg:
            client = frontegg.get_client()

        assert client._client is None
