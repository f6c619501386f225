"""
Service layer for webhook lifecycle management.

This package contains the reconciliation logic for admission webhook
configurations, their namespace scoping and CRD conversion wiring.
"""

from .conversion_binder import ConversionBinder, ConversionBindingResult
from .scope_resolver import ScopeResolver
from .webhook_reconciler import WebhookReconciler, WebhookReconcileResult

__all__ = [
    "ConversionBinder",
    "ConversionBindingResult",
    "ScopeResolver",
    "WebhookReconciler",
    "WebhookReconcileResult",
]
