"""
Bearer token authentication for callers of the proxy service.
"""

from typing import Any, Dict, List, Optional, Sequence

import httpx
import jwt
from fastapi import Request

from shared.config import FronteggSettings
from shared.errors import FronteggSDKException, UnauthorizedRequestException
from shared.logging import get_logger


# Key under which the verified caller context travels on the outbound request.
CONTEXT_EXTENSION = "frontegg_context"


class BearerTokenAuthenticator:
    """Validates the caller's ``Authorization: Bearer`` JWT and derives the tenant context."""

    def __init__(self,
                 key: Optional[str],
                 algorithms: Sequence[str] = ("HS256",),
                 audience: Optional[str] = None,
                 issuer: Optional[str] = None,
                 tenant_claim: str = "tenantId",
                 permissions_claim: str = "permissions"):
        if not key:
            raise FronteggSDKException(
                'Required "jwt_key" not supplied and could not find fallback '
                'environment variable "FRONTEGG_JWT_KEY"',
                "CONFIG_ERROR"
            )
        self.key = key
        self.algorithms = list(algorithms)
        self.audience = audience
        self.issuer = issuer
        self.tenant_claim = tenant_claim
        self.permissions_claim = permissions_claim
        self.logger = get_logger("frontegg.proxy_service.auth")

    @classmethod
    def from_settings(cls, settings: FronteggSettings) -> "BearerTokenAuthenticator":
        return cls(
            settings.jwt_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            tenant_claim=settings.jwt_tenant_claim
        )

    def authenticate(self, request: Request) -> Dict[str, Any]:
        """Return ``tenantId``/``userId``/``permissions`` from a verified bearer token."""
        authorization = request.headers.get("Authorization")
        if not authorization or not authorization.startswith("Bearer "):
            raise UnauthorizedRequestException("Missing or invalid Authorization header")

        token = authorization[7:].strip()
        if not token:
            raise UnauthorizedRequestException("Authorization header contained empty bearer token")

        claims = self.validate_token(token)

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise UnauthorizedRequestException("JWT missing subject claim")

        tenant_id = claims.get(self.tenant_claim)
        if not isinstance(tenant_id, str) or not tenant_id:
            raise UnauthorizedRequestException(
                "JWT missing tenant claim",
                details={"claim": self.tenant_claim}
            )

        context: Dict[str, Any] = {"tenantId": tenant_id, "userId": subject}
        permissions = self._extract_permissions(claims)
        if permissions:
            context["permissions"] = permissions

        request.state.user_info = {"user_id": subject, "tenant_id": tenant_id}
        return context

    def validate_token(self, token: str) -> Dict[str, Any]:
        """Validate signature, expiry and optional audience/issuer, returning the claims."""
        options = {"verify_aud": self.audience is not None, "require": ["exp", "sub"]}
        try:
            return jwt.decode(
                token,
                self.key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options=options
            )
        except jwt.PyJWTError as exc:
            self.logger.warning("Caller token rejected", error=str(exc))
            raise UnauthorizedRequestException(
                "JWT validation failed",
                details={"error": str(exc)}
            ) from exc

    def _extract_permissions(self, claims: Dict[str, Any]) -> List[str]:
        permissions = claims.get(self.permissions_claim)
        if isinstance(permissions, str):
            return [p.strip() for p in permissions.split(",") if p.strip()]
        if isinstance(permissions, (list, tuple)):
            return [str(p) for p in permissions]
        return []


def verified_context_resolver(request: httpx.Request) -> Dict[str, Any]:
    """Context resolver reading the context the service verified before forwarding."""
    context = request.extensions.get(CONTEXT_EXTENSION)
    if context is None:
        raise UnauthorizedRequestException("Request carries no verified caller context")
    return context
