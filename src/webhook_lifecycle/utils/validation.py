"""
Validation utilities for webhook descriptions.

This module holds the safety policy applied to tenant-declared webhooks
before anything is installed:

- A webhook may not intercept every API group
- A webhook may not intercept the lifecycle manager's own API group
- A webhook may not intercept webhook configuration objects themselves

The policy is a pure function of the rules, independent of cluster state.
"""

import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from webhook_lifecycle.constants import (
    ADMISSION_REGISTRATION_API_GROUP,
    ERROR_DUPLICATE_GENERATE_NAME,
    ERROR_RULES_ADMISSION_WEBHOOKS,
    ERROR_RULES_ALL_GROUPS,
    ERROR_RULES_OLM_GROUP,
    OLM_API_GROUP,
    PROTECTED_ADMISSION_RESOURCES,
    WILDCARD,
)
from webhook_lifecycle.errors import DuplicateWebhookError, WebhookPolicyViolation
from webhook_lifecycle.models.webhook import WebhookDescription

logger = logging.getLogger(__name__)


class RuleViolation(Enum):
    """Reasons a webhook rule is refused, in the order they are checked."""

    ALL_GROUPS = ERROR_RULES_ALL_GROUPS
    OLM_GROUP = ERROR_RULES_OLM_GROUP
    ADMISSION_WEBHOOK_RESOURCES = ERROR_RULES_ADMISSION_WEBHOOKS

    @property
    def message(self) -> str:
        return self.value


def _rule_sets(rule: Any) -> tuple[frozenset[str], frozenset[str]]:
    """Extract the (api groups, resources) sets from any rule representation."""
    if isinstance(rule, Mapping):
        groups = rule.get("apiGroups", rule.get("api_groups"))
        resources = rule.get("resources")
    else:
        groups = getattr(rule, "api_groups", None)
        resources = getattr(rule, "resources", None)
    return frozenset(groups or ()), frozenset(resources or ())


def classify_rule(rule: Any) -> RuleViolation | None:
    """
    Classify a single rule against the safety policy.

    Args:
        rule: RuleWithOperations model, kubernetes client rule, or raw dict

    Returns:
        The first violation the rule commits, or None if it is allowed
    """
    groups, resources = _rule_sets(rule)

    if WILDCARD in groups:
        return RuleViolation.ALL_GROUPS
    if OLM_API_GROUP in groups:
        return RuleViolation.OLM_GROUP
    if ADMISSION_REGISTRATION_API_GROUP in groups and (
        resources & PROTECTED_ADMISSION_RESOURCES
    ):
        return RuleViolation.ADMISSION_WEBHOOK_RESOURCES
    return None


def validate_webhook_rules(rules: Iterable[Any] | None) -> None:
    """
    Validate a webhook rule set against the safety policy.

    Args:
        rules: Rules declared by a webhook description

    Raises:
        WebhookPolicyViolation: On the first offending rule
    """
    for index, rule in enumerate(rules or ()):
        violation = classify_rule(rule)
        if violation is not None:
            logger.warning(
                f"Webhook rule {index} rejected: {violation.message}",
                extra={"operation": "validate_rules", "error_type": violation.name},
            )
            raise WebhookPolicyViolation(violation, violation.message, rule_index=index)


def validate_webhook_descriptions(descriptions: Iterable[WebhookDescription]) -> None:
    """
    Validate every webhook description an owner declares.

    Checks that generate names are unique and that each rule set satisfies
    the safety policy.

    Raises:
        DuplicateWebhookError: If two descriptions share a generateName
        WebhookPolicyViolation: If any rule set is unsafe
    """
    seen: set[str] = set()
    for desc in descriptions:
        if desc.generate_name in seen:
            raise DuplicateWebhookError(
                desc.generate_name,
                ERROR_DUPLICATE_GENERATE_NAME.format(desc.generate_name),
            )
        seen.add(desc.generate_name)
        validate_webhook_rules(desc.rules)
