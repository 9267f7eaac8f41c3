"""
Shared utilities for the Frontegg client.

This package aggregates common building blocks used by the client library
and the proxy service:

- config: Settings loaded from the environment via pydantic-settings
- logging: Structured logging with tenant/user correlation
- metrics: Prometheus metrics helpers
- errors: Canonical exception types and error responses
- retry: Retry helpers for transport failures

Do not import from frontegg or service_proxy into shared/.
"""
