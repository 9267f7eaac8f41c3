"""
Unit tests for EventsClient and trigger option models.
"""

from datetime import datetime, timezone

import pytest

from frontegg.authenticator import Authenticator
from frontegg.config import Config
from frontegg.events import (
    AuditBody,
    BellBody,
    ChannelsConfig,
    DefaultProperties,
    EventsClient,
    Severity,
    SlackChatPostMessageArguments,
    TriggerOptions,
    WebHookBody,
)
from frontegg.testing import StubHttpClient, test_data_factory
from shared.errors import EventTriggerException, FronteggTransportException, InvalidParameterException


def make_trigger_options(channels=None, event_key="event-key", tenant_id="THE-TENANT-ID"):
    if channels is None:
        channels = ChannelsConfig().set_webhook(WebHookBody(data={"field 1": "value 1"}))
    return TriggerOptions(
        event_key=event_key,
        default_properties=DefaultProperties(
            title="Default notification title",
            description="Default notification description!"
        ),
        channels=channels,
        tenant_id=tenant_id
    )


class TestTriggerOptions:
    """Test cases for trigger option serialization."""

    def test_to_dict(self):
        """Test payload shape."""
        payload = make_trigger_options().to_dict()

        assert payload == {
            "eventKey": "event-key",
            "properties": {
                "title": "Default notification title",
                "description": "Default notification description!",
            },
            "channels": {"webhook": {"field 1": "value 1"}},
            "tenantId": "THE-TENANT-ID",
        }

    def test_default_properties_extra_fields(self):
        """Test custom properties are kept."""
        properties = DefaultProperties(title="t", description="d", link="https://example.com")

        assert properties.model_dump()["link"] == "https://example.com"

    def test_channels_flags_and_bodies(self):
        """Test True channels and channel bodies."""
        channels = ChannelsConfig(
            slack=SlackChatPostMessageArguments(text="hi"),
            bell=BellBody(
                title="Bell",
                severity=Severity.WARNING,
                user_ids=["user-1"],
                expiry_date=datetime(2030, 1, 1, tzinfo=timezone.utc)
            ),
            audit=True
        )

        result = channels.to_dict()

        assert result["slack"] == {"text": "hi"}
        assert result["bell"]["userIds"] == ["user-1"]
        assert result["bell"]["severity"] == "Warning"
        assert result["bell"]["expiryDate"].startswith("2030-01-01T00:00:00")
        assert result["audit"] is True
        assert "webhook" not in result

    def test_disabled_channels_omitted(self):
        """Test False/None channels are dropped."""
        channels = ChannelsConfig(webhook=False, audit=AuditBody(user="u@t.com"))

        assert channels.to_dict() == {"audit": {"severity": "Info", "user": "u@t.com"}}
        assert ChannelsConfig().is_empty()

    def test_tenant_is_optional(self):
        """Test vendor-wide events."""
        assert "tenantId" not in make_trigger_options(tenant_id=None).to_dict()


class TestEventsClient:
    """Test cases for EventsClient."""

    @pytest.fixture
    def client(self):
        """Create stub HTTP client with an auth response queued."""
        return StubHttpClient([test_data_factory.create_auth_response()])

    @pytest.fixture
    def events_client(self, client):
        """Create EventsClient instance."""
        config = Config("clientTestID", "apiTestSecretKey", "https://api.frontegg.com")
        return EventsClient(Authenticator(config, client))

    @pytest.mark.asyncio
    async def test_trigger_success(self, events_client, client):
        """Test successful trigger."""
        client.queue(test_data_factory.create_event_response())

        assert await events_client.trigger(make_trigger_options()) is True
        assert events_client.get_api_error() is None

        request = client.last_request
        assert request.method == "POST"
        assert request.url == "https://api.frontegg.com/event/resources/triggers/v2"
        assert request.headers["frontegg-tenant-id"] == "THE-TENANT-ID"
        assert request.headers["x-access-token"]
        assert request.json()["eventKey"] == "event-key"

    @pytest.mark.asyncio
    async def test_trigger_failure_captures_error(self, events_client, client):
        """Test rejected trigger."""
        client.queue(test_data_factory.create_error_response(400, "Unknown event key"))

        assert await events_client.trigger(make_trigger_options()) is False

        api_error = events_client.get_api_error()
        assert api_error.http_response_code == 400
        assert api_error.message == "Unknown event key"

    @pytest.mark.asyncio
    async def test_success_clears_previous_error(self, events_client, client):
        """Test api error reset."""
        client.queue(
            test_data_factory.create_error_response(500, "Boom"),
            test_data_factory.create_event_response()
        )

        assert await events_client.trigger(make_trigger_options()) is False
        assert await events_client.trigger(make_trigger_options()) is True
        assert events_client.get_api_error() is None

    @pytest.mark.asyncio
    async def test_trigger_empty_event_key(self, events_client, client):
        """Test empty event key."""
        with pytest.raises(InvalidParameterException):
            await events_client.trigger(make_trigger_options(event_key="  "))

        assert client.requests == []

    @pytest.mark.asyncio
    async def test_trigger_without_channels(self, events_client, client):
        """Test no channels configured."""
        with pytest.raises(InvalidParameterException):
            await events_client.trigger(make_trigger_options(channels=ChannelsConfig()))

    @pytest.mark.asyncio
    async def test_trigger_transport_failure(self, events_client, client):
        """Test transport errors surface as EventTriggerException."""
        client.queue(FronteggTransportException("connection refused"))

        with pytest.raises(EventTriggerException) as exc_info:
            await events_client.trigger(make_trigger_options())

        assert "connection refused" in exc_info.value.message
