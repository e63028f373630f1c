"""Custom Prometheus metrics for the JurisTCU scan service.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- provider_failures_total (quota/credential errors mean a key needs attention)
- scans_total{outcome="halted"} (every provider exhausted mid-scan)
- evaluation_parse_failures_total (model drifting away from the JSON contract)
"""

from prometheus_client import Counter, Histogram

# === Provider Metrics ===

provider_calls_total = Counter(
    "provider_calls_total",
    "Total completion calls by provider and outcome",
    ["provider", "outcome"],
)
"""
Completion calls counter.

Labels:
- provider: gemini, claude, openai
- outcome: success, failure
"""

provider_failures_total = Counter(
    "provider_failures_total",
    "Total classified provider failures",
    ["provider", "error_kind"],
)
"""
Classified failures counter.

Labels:
- provider: gemini, claude, openai
- error_kind: rate_limited, quota_exhausted, invalid_credential,
  permission_denied, transient_error

Alert thresholds:
- WARN: any invalid_credential or permission_denied
- CRITICAL: quota_exhausted on the last configured provider
"""

provider_failovers_total = Counter(
    "provider_failovers_total",
    "Router transitions from one provider (or key) to the next",
    ["from_provider", "to_provider"],
)
"""
Failover counter.

Labels:
- from_provider: provider whose failure triggered the transition
- to_provider: provider that became active, or "none" when the chain is exhausted

Gemini key rotation shows up as from_provider=gemini, to_provider=gemini.
"""

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "LLM completion latency in seconds",
    ["provider", "success"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)
"""
Completion latency histogram.

Labels:
- provider: gemini, claude, openai
- success: true (reply received), false (call failed)

Alert thresholds:
- WARN: p95 > 10s
- CRITICAL: p95 > 30s
"""

# === Evaluation Metrics ===

evaluation_parse_failures_total = Counter(
    "evaluation_parse_failures_total",
    "Replies that could not be decoded into an evaluation",
    ["stage"],
)
"""
Reply decode failures counter.

Labels:
- stage: stage1 (no JSON object found), stage2 (schema mismatch)

Failed replies are recorded as "not met" rather than aborting the scan.
"""

# === Scan Metrics ===

scans_total = Counter(
    "scans_total",
    "Total corpus scans by outcome",
    ["outcome"],
)
"""
Scan counter.

Labels:
- outcome: completed, halted, rejected
"""

documents_scanned_total = Counter(
    "documents_scanned_total",
    "Total documents fully evaluated across all scans",
)
