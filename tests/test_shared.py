"""
Unit tests for shared retry, logging and error helpers.
"""

import pytest
from prometheus_client import CollectorRegistry

from shared.errors import FronteggAPIException, InvalidParameterException
from shared.logging import clear_context, redact_sensitive, set_request_id, tenant_id_var, user_context, user_id_var
from shared.metrics import get_metrics_collector
from shared.retry import RetryConfig, RetryError, _calculate_delay, call_with_retry
from frontegg.http import ApiError


class TestRetry:
    """Test cases for call_with_retry."""

    @pytest.mark.asyncio
    async def test_retries_until_success(self):
        """Test transient failures are retried."""
        calls = []

        async def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise ConnectionError("down")
            return "ok"

        result = await call_with_retry(
            flaky,
            exceptions=(ConnectionError,),
            config=RetryConfig(max_attempts=3, base_delay=0.0, jitter=False)
        )

        assert result == "ok"
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_exhausted(self):
        """Test RetryError keeps the last exception."""
        async def down():
            raise ConnectionError("down")

        with pytest.raises(RetryError) as exc_info:
            await call_with_retry(
                down,
                exceptions=(ConnectionError,),
                config=RetryConfig(max_attempts=2, base_delay=0.0, jitter=False)
            )

        assert exc_info.value.attempts == 2
        assert isinstance(exc_info.value.last_exception, ConnectionError)

    @pytest.mark.asyncio
    async def test_unlisted_exception_not_retried(self):
        """Test other exceptions propagate immediately."""
        calls = []

        async def broken():
            calls.append(1)
            raise KeyError("x")

        with pytest.raises(KeyError):
            await call_with_retry(broken, exceptions=(ConnectionError,), config=RetryConfig(base_delay=0.0))

        assert len(calls) == 1

    def test_delay_strategies(self):
        """Test backoff calculation."""
        exponential = RetryConfig(base_delay=1.0, max_delay=3.0, jitter=False)
        assert [_calculate_delay(a, exponential) for a in (1, 2, 3)] == [1.0, 2.0, 3.0]

        linear = RetryConfig(base_delay=0.5, jitter=False, backoff_strategy="linear")
        assert _calculate_delay(3, linear) == 1.5


class TestLogging:
    """Test cases for logging processors."""

    def test_redact_sensitive(self):
        """Test credentials are masked."""
        event = redact_sensitive(None, "info", {"event": "x", "secret": "s", "Token": "t", "client_id": "c"})

        assert event == {"event": "x", "secret": "***", "Token": "***", "client_id": "c"}

    def test_user_context_restores_previous_values(self):
        """Test nested user context is unwound on exit, including on errors."""
        with user_context(user_id="outer-user", tenant_id="outer-tenant"):
            with pytest.raises(RuntimeError):
                with user_context(user_id="inner-user", tenant_id="inner-tenant"):
                    assert tenant_id_var.get() == "inner-tenant"
                    raise RuntimeError("boom")

            assert user_id_var.get() == "outer-user"
            assert tenant_id_var.get() == "outer-tenant"

        assert user_id_var.get() is None
        assert tenant_id_var.get() is None


class TestErrors:
    """Test cases for error responses."""

    def test_to_response_carries_request_id(self):
        """Test request id correlation."""
        request_id = set_request_id()
        try:
            response = InvalidParameterException("bad", details={"field": "severity"}).to_response()
        finally:
            clear_context()

        assert response.request_id == request_id
        assert response.code == "INVALID_PARAMETER"
        assert response.details == {"field": "severity"}

    def test_api_exception(self):
        """Test API exception details."""
        exc = FronteggAPIException(ApiError("Audits request failed", "Forbidden", 403))

        assert exc.message == "Frontegg API error: 403"
        assert exc.details["message"] == "Forbidden"


class TestMetrics:
    """Test cases for the metrics collector."""

    def test_collector_is_shared(self):
        """Test one collector per process and name."""
        assert get_metrics_collector() is get_metrics_collector()

    def test_records_api_request(self):
        """Test counters on a private registry."""
        registry = CollectorRegistry()
        collector = get_metrics_collector("test_frontegg", registry=registry)

        collector.record_api_request("get_audits", 200, 0.01)

        value = registry.get_sample_value(
            "test_frontegg_api_requests_total",
            {"operation": "get_audits", "status_code": "200"}
        )
        assert value == 1.0
