"""
Proxy service exposing the Frontegg proxy over HTTP.
"""

import os
import time
from typing import Optional

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import FronteggSettings, get_settings
from shared.errors import (
    AuthenticationException,
    FronteggSDKException,
    FronteggTransportException,
    UnauthorizedRequestException,
)
from shared.logging import clear_context, configure_logging, get_logger, set_request_id
from shared.metrics import get_metrics_collector
from frontegg import Config, Frontegg
from service_proxy.app.auth import CONTEXT_EXTENSION, BearerTokenAuthenticator, verified_context_resolver


PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

# Hop-by-hop, or recomputed by the response this service sends.
DROPPED_RESPONSE_HEADERS = frozenset({
    "connection",
    "content-length",
    "keep-alive",
    "transfer-encoding",
})


class ProxyService:
    """HTTP front for ``Frontegg.forward``."""

    def __init__(self,
                 frontegg: Optional[Frontegg] = None,
                 settings: Optional[FronteggSettings] = None,
                 request_authenticator: Optional[BearerTokenAuthenticator] = None):
        self.service_name = "proxy"
        self.settings = settings or get_settings()
        configure_logging("frontegg", self.settings.log_level)
        self.logger = get_logger("frontegg.proxy_service")
        self.metrics = get_metrics_collector()
        self.request_authenticator = request_authenticator or BearerTokenAuthenticator.from_settings(self.settings)
        self.frontegg = frontegg or Frontegg(context_resolver=verified_context_resolver)
        self._start_time = time.time()

        self.app = FastAPI(
            title="Frontegg Proxy Service",
            description="Forwards requests to the Frontegg API with vendor credentials",
            version=Frontegg.VERSION,
            docs_url="/docs" if self.settings.env == "local" else None,
            redoc_url=None,
        )

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.frontegg.aclose()

        self._setup_middleware()
        self._setup_routes()

    def _setup_middleware(self):
        """Set up middleware."""

        # Vendor CORS headers are stripped, so this service answers CORS itself
        if self.frontegg.get_config().disable_cors:
            self.app.add_middleware(
                CORSMiddleware,
                allow_origins=["*"] if self.settings.env == "local" else [],
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            )

        @self.app.middleware("http")
        async def add_request_context(request: Request, call_next):
            start_time = time.time()
            set_request_id(request.headers.get("x-request-id"))
            try:
                response = await call_next(request)
                self.logger.info(
                    "HTTP request",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=round((time.time() - start_time) * 1000, 2)
                )
                return response
            finally:
                clear_context()

    def _setup_routes(self):
        """Set up routes."""

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            return {
                "service": self.service_name,
                "status": "ok",
                "authenticated": self.frontegg.get_authenticator().has_valid_token(),
                "uptime_seconds": round(time.time() - self._start_time, 3),
                "version": Frontegg.VERSION,
                "commit": os.getenv("GIT_COMMIT", "unknown")
            }

        @self.app.get("/metrics")
        async def metrics_endpoint():
            """Prometheus metrics endpoint."""
            from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
            return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

        @self.app.api_route(Config.PROXY_URL + "/{path:path}", methods=PROXY_METHODS)
        async def forward(request: Request, path: str):
            """Forward the request to the Frontegg API on behalf of the verified caller."""
            context = self.request_authenticator.authenticate(request)

            # Caller credentials stay with this service.
            outbound = httpx.Request(
                request.method,
                str(request.url),
                headers=[(name, value) for name, value in request.headers.raw if name.lower() != b"authorization"],
                content=await request.body(),
                extensions={CONTEXT_EXTENSION: context}
            )
            upstream = await self.frontegg.forward(outbound)

            response = Response(content=upstream.content, status_code=upstream.http_response_code)
            for name, value in upstream.headers.multi_items():
                if name.lower() not in DROPPED_RESPONSE_HEADERS:
                    response.headers.append(name, value)
            return response

        @self.app.exception_handler(FronteggSDKException)
        async def sdk_exception_handler(request: Request, exc: FronteggSDKException):
            """Handle client library errors."""
            self.metrics.record_error(exc.code)
            self.logger.error(
                "Frontegg client error",
                code=exc.code,
                message=exc.message,
                details=exc.details
            )
            if isinstance(exc, UnauthorizedRequestException):
                status_code = 401
            elif isinstance(exc, (AuthenticationException, FronteggTransportException)):
                status_code = 502
            else:
                status_code = 400
            return JSONResponse(status_code=status_code, content=exc.to_response().model_dump())

    def run(self):
        """Run the service."""
        import uvicorn
        uvicorn.run(
            self.app,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level.lower()
        )


def create_app(frontegg: Optional[Frontegg] = None,
               request_authenticator: Optional[BearerTokenAuthenticator] = None) -> FastAPI:
    """Create the proxy application."""
    return ProxyService(frontegg, request_authenticator=request_authenticator).app


if __name__ == "__main__":
    ProxyService().run()
