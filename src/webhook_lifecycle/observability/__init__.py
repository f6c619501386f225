"""
Observability utilities for the webhook lifecycle subsystem.

This module provides metrics and structured logging capabilities for
production monitoring and troubleshooting.
"""

from .logging import OperatorLogger, setup_structured_logging
from .metrics import MetricsCollector, get_metrics_registry

__all__ = [
    "MetricsCollector",
    "get_metrics_registry",
    "OperatorLogger",
    "setup_structured_logging",
]
