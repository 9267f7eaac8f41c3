"""
Event trigger options and channel payloads.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_serializer


class Severity(str, Enum):
    """Severity levels accepted by the bell and audit channels."""
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"


class DefaultProperties(BaseModel):
    """Title/description used by every channel without its own body."""
    model_config = ConfigDict(extra="allow")

    title: str = Field(..., description="Notification title")
    description: str = Field(..., description="Notification description")


class WebHookBody(BaseModel):
    """Arbitrary JSON object posted to the tenant's webhooks."""
    data: Dict[str, Any] = Field(default_factory=dict)

    @model_serializer
    def serialize_data(self) -> Dict[str, Any]:
        return dict(self.data)


class SlackChatPostMessageArguments(BaseModel):
    """Slack ``chat.postMessage`` arguments."""
    model_config = ConfigDict(extra="allow")

    text: Optional[str] = None
    blocks: Optional[List[Dict[str, Any]]] = None
    attachments: Optional[List[Dict[str, Any]]] = None
    icon_emoji: Optional[str] = None
    icon_url: Optional[str] = None
    username: Optional[str] = None


class BellBody(BaseModel):
    """In-app (bell) notification."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    body: Optional[str] = None
    severity: Optional[Severity] = None
    user_ids: Optional[List[str]] = Field(None, alias="userIds")
    expiry_date: Optional[datetime] = Field(None, alias="expiryDate")
    url: Optional[str] = None


class AuditBody(BaseModel):
    """Audit log entry written when the event fires."""
    model_config = ConfigDict(extra="allow")

    severity: Severity = Severity.INFO
    user: Optional[str] = None
    resource: Optional[str] = None
    action: Optional[str] = None
    ip: Optional[str] = None


class ChannelsConfig(BaseModel):
    """
    Channels an event is delivered to.

    Each channel is either ``True`` (deliver using the default properties)
    or a channel specific body; unset channels are not sent.
    """
    webhook: Union[bool, WebHookBody, None] = None
    slack: Union[bool, SlackChatPostMessageArguments, None] = None
    bell: Union[bool, BellBody, None] = None
    audit: Union[bool, AuditBody, None] = None

    def set_webhook(self, value: Union[bool, WebHookBody]) -> "ChannelsConfig":
        self.webhook = value
        return self

    def set_slack(self, value: Union[bool, SlackChatPostMessageArguments]) -> "ChannelsConfig":
        self.slack = value
        return self

    def set_bell(self, value: Union[bool, BellBody]) -> "ChannelsConfig":
        self.bell = value
        return self

    def set_audit(self, value: Union[bool, AuditBody]) -> "ChannelsConfig":
        self.audit = value
        return self

    def is_empty(self) -> bool:
        return not self.to_dict()

    def to_dict(self) -> Dict[str, Any]:
        channels: Dict[str, Any] = {}
        for name in ("webhook", "slack", "bell", "audit"):
            value = getattr(self, name)
            if value is None or value is False:
                continue
            if isinstance(value, BaseModel):
                value = value.model_dump(mode="json", by_alias=True, exclude_none=True)
            channels[name] = value
        return channels


class TriggerOptions(BaseModel):
    """Everything needed to trigger one event for one tenant."""

    event_key: str = Field(..., description="Event key configured in the vendor portal")
    default_properties: DefaultProperties
    channels: ChannelsConfig = Field(default_factory=ChannelsConfig)
    tenant_id: Optional[str] = Field(None, description="Tenant the event belongs to")

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "eventKey": self.event_key,
            "properties": self.default_properties.model_dump(mode="json"),
            "channels": self.channels.to_dict(),
        }
        if self.tenant_id:
            payload["tenantId"] = self.tenant_id
        return payload
