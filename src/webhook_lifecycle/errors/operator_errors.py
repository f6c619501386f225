"""
Operator error hierarchy with categorization and retry logic.

This module defines the error types used by the webhook lifecycle subsystem,
providing clear categorization and integration with kopf's retry mechanisms.
"""

import kopf

from webhook_lifecycle.constants import ERROR_OPERATOR_GROUP_INFO


class OperatorError(Exception):
    """
    Base error class for all operator-related exceptions.

    Provides categorization, retry behavior, and user guidance for resolution.
    """

    def __init__(
        self,
        message: str,
        category: str,
        retryable: bool = True,
        delay: int = 30,
        user_action: str | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize operator error.

        Args:
            message: Human-readable error description
            category: Error category (validation, policy, scope, api, configuration)
            retryable: Whether kopf should retry this operation
            delay: Suggested retry delay in seconds
            user_action: What user should do to resolve the issue
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.category = category
        self.retryable = retryable
        self.delay = delay
        self.user_action = user_action
        self.cause = cause

    def as_kopf_error(self):
        """
        Convert to appropriate kopf exception type.

        Reconcile handlers driving WebhookReconciler raise the result so kopf
        retries temporary failures and stops on permanent ones.
        """
        if self.retryable:
            return kopf.TemporaryError(str(self), delay=self.delay)
        else:
            return kopf.PermanentError(str(self))

    def __str__(self) -> str:
        """Enhanced string representation with user guidance."""
        base_msg = super().__str__()
        if self.user_action:
            return f"{base_msg}\nAction required: {self.user_action}"
        return base_msg


class ValidationError(OperatorError):
    """Error in resource specification validation."""

    def __init__(
        self, message: str, field: str | None = None, user_action: str | None = None
    ):
        action = user_action or "Check resource specification and fix validation errors"
        if field:
            message = f"Validation error in field '{field}': {message}"
        super().__init__(
            message=message, category="validation", retryable=False, user_action=action
        )


class TemporaryError(OperatorError):
    """Temporary error that should be retried."""

    def __init__(self, message: str, delay: int = 30, user_action: str | None = None):
        super().__init__(
            message=message,
            category="temporary",
            retryable=True,
            delay=delay,
            user_action=user_action
            or "Wait for automatic retry or check system status",
        )


class ConfigurationError(OperatorError):
    """Error in operator or resource configuration."""

    def __init__(
        self, message: str, retryable: bool = False, user_action: str | None = None
    ):
        super().__init__(
            message=message,
            category="configuration",
            retryable=retryable,
            user_action=user_action or "Review and correct configuration",
        )


class WebhookPolicyViolation(OperatorError):
    """
    A webhook rule set that the safety policy refuses to install.

    The string form is exactly the policy message so it can be copied to
    the owner's status unchanged.
    """

    def __init__(self, violation, message: str, rule_index: int | None = None):
        super().__init__(message=message, category="policy", retryable=False)
        self.violation = violation
        self.rule_index = rule_index


class ScopeResolutionError(TemporaryError):
    """The owning OperatorGroup could not be determined."""

    def __init__(self, namespace: str, detail: str | None = None, delay: int = 30):
        super().__init__(message=ERROR_OPERATOR_GROUP_INFO, delay=delay)
        # Status message stays literal, detail is for logs
        self.user_action = None
        self.namespace = namespace
        self.detail = detail


class DuplicateWebhookError(ValidationError):
    """Two webhook descriptions of one owner share a generateName."""

    def __init__(self, generate_name: str, message: str):
        super().__init__(
            message=message,
            user_action="Give every webhook definition a distinct generateName",
        )
        self.generate_name = generate_name
