"""Tina Content MCP Metrics Configuration.

Local-only metrics collection using OpenTelemetry with a Prometheus reader.
Metrics stay disabled unless explicitly enabled and never run under pytest.
"""

from __future__ import annotations

import os
import socket
import time
from typing import Any

from opentelemetry import metrics
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST
from prometheus_client import generate_latest

SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "tina-content-mcp")
SERVICE_VERSION = os.getenv("OTEL_SERVICE_VERSION", "0.1.0")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "local")


def is_test_environment() -> bool:
    """Detect if running in test environment."""
    return "PYTEST_CURRENT_TEST" in os.environ or "CI" in os.environ


METRICS_ENABLED = os.getenv("TINA_METRICS_ENABLED", "false").lower() == "true"

meter = None
tool_calls_counter = None
tool_duration_histogram = None
prometheus_reader = None

_metrics_initialized = False


def get_resource() -> Resource:
    """Create OpenTelemetry resource with service information."""
    return Resource.create(
        {
            "service.name": SERVICE_NAME,
            "service.version": SERVICE_VERSION,
            "deployment.environment": DEPLOYMENT_ENVIRONMENT,
            "host.name": socket.gethostname(),
        }
    )


def initialize_metrics():
    """Initialize local metrics collection with a Prometheus reader."""
    global meter, tool_calls_counter, tool_duration_histogram, prometheus_reader

    prometheus_reader = PrometheusMetricReader()
    meter_provider = MeterProvider(resource=get_resource(), metric_readers=[prometheus_reader])
    metrics.set_meter_provider(meter_provider)
    meter = metrics.get_meter(__name__)

    tool_calls_counter = meter.create_counter(
        name="mcp_tool_calls_total",
        description="Total number of MCP tool calls",
        unit="1",
    )
    tool_duration_histogram = meter.create_histogram(
        name="mcp_tool_duration_seconds",
        description="Duration of MCP tool calls",
        unit="s",
    )


def is_metrics_enabled() -> bool:
    """Check if metrics collection is active."""
    return meter is not None


def record_tool_call_start(tool_name: str) -> float | None:
    """Record start of tool call, return start time."""
    if not is_metrics_enabled():
        return None
    return time.perf_counter()


def _record(tool_name: str, start_time: float | None, status: str, extra: dict[str, str] | None = None):
    attributes = {"tool_name": tool_name, "status": status, "environment": DEPLOYMENT_ENVIRONMENT}
    if extra:
        attributes.update(extra)
    if tool_calls_counter is not None:
        tool_calls_counter.add(1, attributes)
    if tool_duration_histogram is not None and start_time is not None:
        tool_duration_histogram.record(time.perf_counter() - start_time, {"tool_name": tool_name})


def record_tool_call_success(tool_name: str, start_time: float | None):
    """Record successful tool call."""
    if not is_metrics_enabled():
        return
    _record(tool_name, start_time, "success")


def record_tool_call_error(tool_name: str, start_time: float | None, error: Exception):
    """Record failed tool call, labelled with the error class."""
    if not is_metrics_enabled():
        return
    _record(tool_name, start_time, "error", {"error_type": type(error).__name__})


def get_metrics_export() -> tuple[str, str]:
    """Export metrics in Prometheus format."""
    if not is_metrics_enabled():
        return "# Metrics not available\n", "text/plain"
    return generate_latest().decode("utf-8"), CONTENT_TYPE_LATEST


def get_metrics_summary() -> dict[str, Any]:
    """Get metrics summary for debugging."""
    if not is_metrics_enabled():
        return {"status": "disabled"}
    return {
        "status": "active",
        "service_name": SERVICE_NAME,
        "service_version": SERVICE_VERSION,
        "environment": DEPLOYMENT_ENVIRONMENT,
    }


def ensure_metrics_initialized(enabled: bool | None = None):
    """Initialize metrics once when the server starts."""
    global _metrics_initialized
    if _metrics_initialized:
        return
    if enabled is None:
        enabled = METRICS_ENABLED
    if enabled and not is_test_environment():
        initialize_metrics()
    _metrics_initialized = True


def shutdown_metrics():
    """Shutdown metrics collection."""
    global meter, tool_calls_counter, tool_duration_histogram, prometheus_reader, _metrics_initialized
    if prometheus_reader is not None:
        prometheus_reader.shutdown()
    meter = None
    tool_calls_counter = None
    tool_duration_histogram = None
    prometheus_reader = None
    _metrics_initialized = False
