"""
Shared metrics configuration for the Frontegg client.
"""

import threading
from typing import Dict, Any, Optional

from prometheus_client import Counter, Histogram, Info, CollectorRegistry, REGISTRY


class MetricsCollector:
    """Centralized metrics collector for vendor API traffic."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else REGISTRY
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up the metrics recorded by the client and the proxy service."""
        prefix = self.service_name

        self._metrics["client_info"] = Info(
            f"{prefix}_client",
            "Frontegg client information",
            registry=self.registry
        )

        # Vendor API calls
        self._metrics["api_requests_total"] = Counter(
            f"{prefix}_api_requests_total",
            "Total vendor API requests",
            ["operation", "status_code"],
            registry=self.registry
        )

        self._metrics["api_request_duration_seconds"] = Histogram(
            f"{prefix}_api_request_duration_seconds",
            "Vendor API request duration in seconds",
            ["operation"],
            registry=self.registry
        )

        self._metrics["authentications_total"] = Counter(
            f"{prefix}_authentications_total",
            "Total authentication attempts",
            ["status"],
            registry=self.registry
        )

        # Proxy service
        self._metrics["proxy_requests_total"] = Counter(
            f"{prefix}_proxy_requests_total",
            "Total proxied requests",
            ["method", "status_code"],
            registry=self.registry
        )

        self._metrics["errors_total"] = Counter(
            f"{prefix}_errors_total",
            "Total errors",
            ["error_type"],
            registry=self.registry
        )

    def set_info(self, **values: str):
        self._metrics["client_info"].info(values)

    def record_api_request(self, operation: str, status_code: int, duration: float):
        """Record a completed vendor API call."""
        self._metrics["api_requests_total"].labels(
            operation=operation,
            status_code=str(status_code)
        ).inc()
        self._metrics["api_request_duration_seconds"].labels(operation=operation).observe(duration)

    def record_authentication(self, status: str):
        self._metrics["authentications_total"].labels(status=status).inc()

    def record_proxy_request(self, method: str, status_code: int):
        self._metrics["proxy_requests_total"].labels(method=method, status_code=str(status_code)).inc()

    def record_error(self, error_type: str):
        self._metrics["errors_total"].labels(error_type=error_type).inc()


_collectors: Dict[str, MetricsCollector] = {}
_lock = threading.Lock()


def get_metrics_collector(service_name: str = "frontegg",
                          registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get the metrics collector for a service, creating it once per process."""
    if registry is not None:
        return MetricsCollector(service_name, registry)

    with _lock:
        if service_name not in _collectors:
            _collectors[service_name] = MetricsCollector(service_name)
        return _collectors[service_name]
