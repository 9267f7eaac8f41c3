from frontegg.events.client import EventsClient
from frontegg.events.models import (
    AuditBody,
    BellBody,
    ChannelsConfig,
    DefaultProperties,
    Severity,
    SlackChatPostMessageArguments,
    TriggerOptions,
    WebHookBody,
)

__all__ = [
    "AuditBody",
    "BellBody",
    "ChannelsConfig",
    "DefaultProperties",
    "EventsClient",
    "Severity",
    "SlackChatPostMessageArguments",
    "TriggerOptions",
    "WebHookBody",
]
