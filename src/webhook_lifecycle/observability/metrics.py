"""
Prometheus metrics for the webhook lifecycle subsystem.

Counts reconciliation passes, configuration objects written, policy
rejections and conversion binding outcomes.
"""

import logging
import time
from contextlib import contextmanager

from prometheus_client import CollectorRegistry, Counter, Histogram

logger = logging.getLogger(__name__)

# Global metrics registry
_metrics_registry: CollectorRegistry | None = None

# Metrics definitions
WEBHOOK_RECONCILIATION_TOTAL = Counter(
    "olm_webhook_reconciliation_total",
    "Total number of webhook reconciliation attempts",
    ["kind", "namespace", "result"],
    registry=None,  # Will be set during initialization
)

WEBHOOK_RECONCILIATION_DURATION = Histogram(
    "olm_webhook_reconciliation_duration_seconds",
    "Time spent reconciling one webhook description",
    ["kind", "namespace"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=None,
)

WEBHOOK_RECONCILIATION_ERRORS = Counter(
    "olm_webhook_reconciliation_errors_total",
    "Total number of webhook reconciliation errors",
    ["kind", "namespace", "error_type", "retryable"],
    registry=None,
)

WEBHOOK_CONFIGURATIONS_WRITTEN = Counter(
    "olm_webhook_configurations_written_total",
    "Webhook configuration objects created or updated",
    ["kind", "action"],
    registry=None,
)

WEBHOOK_POLICY_VIOLATIONS = Counter(
    "olm_webhook_policy_violations_total",
    "Webhook rule sets rejected by the safety policy",
    ["violation"],
    registry=None,
)

CONVERSION_BINDINGS_TOTAL = Counter(
    "olm_webhook_conversion_bindings_total",
    "CRD conversion webhook binding attempts by outcome",
    ["outcome"],
    registry=None,
)


def get_metrics_registry() -> CollectorRegistry:
    """Get or create the global metrics registry."""
    global _metrics_registry

    if _metrics_registry is None:
        _metrics_registry = CollectorRegistry()

        for metric in [
            WEBHOOK_RECONCILIATION_TOTAL,
            WEBHOOK_RECONCILIATION_DURATION,
            WEBHOOK_RECONCILIATION_ERRORS,
            WEBHOOK_CONFIGURATIONS_WRITTEN,
            WEBHOOK_POLICY_VIOLATIONS,
            CONVERSION_BINDINGS_TOTAL,
        ]:
            _metrics_registry.register(metric)

    return _metrics_registry


class MetricsCollector:
    """Collects and manages metrics for webhook reconciliation."""

    def __init__(self):
        self.registry = get_metrics_registry()

    @contextmanager
    def track_webhook_reconciliation(self, kind: str, namespace: str):
        """
        Context manager to track one webhook reconciliation.

        Args:
            kind: Configuration kind being reconciled
            namespace: Namespace of the owner
        """
        start_time = time.time()
        result = "unknown"

        try:
            yield
            result = "success"
        except Exception as e:
            result = "error"

            error_type = type(e).__name__
            retryable = "true" if hasattr(e, "retryable") and e.retryable else "false"

            WEBHOOK_RECONCILIATION_ERRORS.labels(
                kind=kind,
                namespace=namespace,
                error_type=error_type,
                retryable=retryable,
            ).inc()

            raise
        finally:
            duration = time.time() - start_time

            WEBHOOK_RECONCILIATION_TOTAL.labels(
                kind=kind, namespace=namespace, result=result
            ).inc()

            WEBHOOK_RECONCILIATION_DURATION.labels(
                kind=kind, namespace=namespace
            ).observe(duration)

    def record_configuration_written(self, kind: str, action: str) -> None:
        """Count a created or updated configuration object."""
        WEBHOOK_CONFIGURATIONS_WRITTEN.labels(kind=kind, action=action).inc()

    def record_policy_violation(self, violation: str) -> None:
        WEBHOOK_POLICY_VIOLATIONS.labels(violation=violation).inc()

    def record_conversion_binding(self, outcome: str) -> None:
        CONVERSION_BINDINGS_TOTAL.labels(outcome=outcome).inc()


metrics_collector = MetricsCollector()
