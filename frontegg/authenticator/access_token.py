"""
Access token issued by the vendor authentication endpoint.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class AccessToken:
    """Bearer token value and its absolute expiry time (UTC)."""

    value: str
    expires_at: datetime
    issued_at: Optional[datetime] = None

    @classmethod
    def from_response(cls, payload: Mapping[str, Any], now: Optional[datetime] = None) -> "AccessToken":
        """
        Build a token from the ``{"token": ..., "expiresIn": seconds}`` body.

        Raises ``ValueError`` when either field is missing or malformed.
        """
        token = payload.get("token")
        if not isinstance(token, str) or not token:
            raise ValueError("Authentication response has no token")

        try:
            expires_in = int(payload.get("expiresIn"))
        except (TypeError, ValueError):
            raise ValueError("Authentication response has no valid expiresIn")
        if expires_in <= 0:
            raise ValueError("Authentication response expiresIn must be positive")

        now = now or datetime.now(timezone.utc)
        return cls(value=token, expires_at=now + timedelta(seconds=expires_in), issued_at=now)

    def is_valid(self, now: Optional[datetime] = None, margin_seconds: float = 0.0) -> bool:
        now = now or datetime.now(timezone.utc)
        return now + timedelta(seconds=margin_seconds) < self.expires_at

    def lifetime_seconds(self) -> Optional[float]:
        if self.issued_at is None:
            return None
        return (self.expires_at - self.issued_at).total_seconds()

    def get_value(self) -> str:
        return self.value

    def get_expires_at(self) -> datetime:
        return self.expires_at

    def __repr__(self) -> str:
        # Token value stays out of reprs and logs.
        return f"AccessToken(expires_at={self.expires_at.isoformat()})"
