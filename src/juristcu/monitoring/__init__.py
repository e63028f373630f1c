"""Monitoring and metrics instrumentation for the JurisTCU service.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from juristcu.monitoring.metrics import (
    documents_scanned_total,
    evaluation_parse_failures_total,
    llm_latency_seconds,
    provider_calls_total,
    provider_failovers_total,
    provider_failures_total,
    scans_total,
)

__all__ = [
    "provider_calls_total",
    "provider_failures_total",
    "provider_failovers_total",
    "llm_latency_seconds",
    "evaluation_parse_failures_total",
    "scans_total",
    "documents_scanned_total",
]
