"""
Audit log retrieval and submission.
"""

import json
import time
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from shared.errors import FronteggAPIException, InvalidParameterException
from shared.logging import get_logger
from frontegg.authenticator import Authenticator
from frontegg.http import ApiError, ApiRawResponse


class AuditsClient:
    """Client for the vendor audits resource."""

    SORT_DIRECTIONS = ("ASC", "DESC")

    def __init__(self, authenticator: Authenticator):
        self.authenticator = authenticator
        self.logger = get_logger("frontegg.audits")
        self._api_error: Optional[ApiError] = None

    def get_api_error(self) -> Optional[ApiError]:
        return self._api_error

    async def get_audits(self,
                         tenant_id: str,
                         filter: str = "",
                         offset: int = 0,
                         count: Optional[int] = None,
                         sort_by: Optional[str] = None,
                         sort_direction: str = "ASC",
                         **filters: Any) -> Dict[str, Any]:
        """
        Retrieve filtered and sorted audit logs of a tenant.

        Extra keyword arguments are sent as metadata filters. Returns the
        decoded ``{"data": [...], "total": n}`` body.
        """
        direction = (sort_direction or "ASC").upper()
        if direction not in self.SORT_DIRECTIONS:
            raise InvalidParameterException(
                f'Sort direction must be one of {", ".join(self.SORT_DIRECTIONS)}',
                details={"sort_direction": sort_direction}
            )
        if offset < 0:
            raise InvalidParameterException("Offset must not be negative", details={"offset": offset})

        params = {
            "filter": filter,
            "offset": offset,
            "count": count,
            "sortBy": sort_by,
            "sortDirection": direction,
            **filters,
        }
        query = urlencode({k: v for k, v in params.items() if v is not None}, doseq=True)
        url = self.authenticator.get_config().get_service_url("audits") + "?" + query

        response = await self._call("get_audits", url, "GET", tenant_id)
        return self._decode(response)

    async def send_audit(self, tenant_id: str, audit_log: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Submit an audit log entry and return the created entry.

        ``audit_log`` usually carries ``user``, ``resource``, ``action``,
        ``ip`` and must carry ``severity``.
        """
        if not audit_log.get("severity"):
            raise InvalidParameterException(
                'Audit log requires a "severity" value',
                details={"fields": sorted(audit_log)}
            )

        url = self.authenticator.get_config().get_service_url("audits")
        response = await self._call("send_audit", url, "POST", tenant_id, json.dumps(dict(audit_log)))
        return self._decode(response)

    async def _call(self, operation: str, url: str, method: str, tenant_id: str,
                    body: Optional[str] = None) -> ApiRawResponse:
        token = await self.authenticator.validate_authentication()
        headers = {
            "x-access-token": token.value,
            "frontegg-tenant-id": tenant_id,
        }
        if body is not None:
            headers["Content-Type"] = "application/json"

        start_time = time.time()
        response = await self.authenticator.get_client().send(
            url, method, body, headers, self.authenticator.get_config().http_timeout
        )
        self.authenticator.metrics.record_api_request(
            operation, response.http_response_code, time.time() - start_time
        )

        if not response.is_success():
            self._api_error = ApiError.from_response(response, "Audits request failed")
            self.logger.warning(
                "Audits request failed",
                operation=operation,
                tenant_id=tenant_id,
                status_code=response.http_response_code,
                message=self._api_error.message
            )
            raise FronteggAPIException(self._api_error)

        self._api_error = None
        return response

    def _decode(self, response: ApiRawResponse) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            self._api_error = ApiError.from_response(response, "Invalid audits response")
            raise FronteggAPIException(self._api_error, "Audits response is not valid JSON")

        return payload if isinstance(payload, dict) else {"data": payload}
