"""
Error handling module for the webhook lifecycle subsystem.

This module provides an error hierarchy that integrates with kopf
and provides clear categorization for different types of failures.
"""

from .operator_errors import (
    ConfigurationError,
    DuplicateWebhookError,
    OperatorError,
    ScopeResolutionError,
    TemporaryError,
    ValidationError,
    WebhookPolicyViolation,
)

__all__ = [
    "OperatorError",
    "ValidationError",
    "TemporaryError",
    "ConfigurationError",
    "WebhookPolicyViolation",
    "ScopeResolutionError",
    "DuplicateWebhookError",
]
