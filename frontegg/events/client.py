"""
Event triggering.
"""

import json
import time
from typing import Optional

from shared.errors import (
    EventTriggerException,
    FronteggTransportException,
    InvalidParameterException,
)
from shared.logging import get_logger
from frontegg.authenticator import Authenticator
from frontegg.events.models import TriggerOptions
from frontegg.http import ApiError


class EventsClient:
    """Client for the vendor event triggers resource."""

    def __init__(self, authenticator: Authenticator):
        self.authenticator = authenticator
        self.logger = get_logger("frontegg.events")
        self._api_error: Optional[ApiError] = None

    def get_api_error(self) -> Optional[ApiError]:
        return self._api_error

    async def trigger(self, trigger_options: TriggerOptions) -> bool:
        """
        Trigger the event described by ``trigger_options``.

        Returns True on success. On an API failure returns False and the
        failure is available from ``get_api_error()``.
        """
        if not trigger_options.event_key.strip():
            raise InvalidParameterException("Event key must not be empty")
        if trigger_options.channels.is_empty():
            raise InvalidParameterException(
                "At least one channel must be configured",
                details={"event_key": trigger_options.event_key}
            )

        token = await self.authenticator.validate_authentication()
        config = self.authenticator.get_config()

        headers = {
            "Content-Type": "application/json",
            "x-access-token": token.value,
        }
        if trigger_options.tenant_id:
            headers["frontegg-tenant-id"] = trigger_options.tenant_id

        start_time = time.time()
        try:
            response = await self.authenticator.get_client().send(
                config.get_service_url("events"),
                "POST",
                json.dumps(trigger_options.to_dict()),
                headers,
                config.http_timeout
            )
        except FronteggTransportException as e:
            self.logger.error(
                "Event trigger request failed",
                event_key=trigger_options.event_key,
                error=e.message
            )
            raise EventTriggerException(
                f'Event "{trigger_options.event_key}" could not be sent: {e.message}',
                details=e.details
            ) from e

        self.authenticator.metrics.record_api_request(
            "trigger_event", response.http_response_code, time.time() - start_time
        )

        if not response.is_success():
            self._api_error = ApiError.from_response(response, "Event trigger failed")
            self.logger.warning(
                "Event trigger rejected",
                event_key=trigger_options.event_key,
                tenant_id=trigger_options.tenant_id,
                status_code=response.http_response_code,
                message=self._api_error.message
            )
            return False

        self._api_error = None
        self.logger.info(
            "Event triggered",
            event_key=trigger_options.event_key,
            tenant_id=trigger_options.tenant_id
        )
        return True
