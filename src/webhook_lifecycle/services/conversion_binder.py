"""
CRD conversion webhook binding.

When a webhook description names a CRD, that CRD's version conversion is
pointed at the same service as the reconciled webhook. Binding is a secondary
effect of a successful webhook reconciliation: failures are reported in the
returned result and logged, never raised.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from kubernetes import client
from kubernetes.client.rest import ApiException

from webhook_lifecycle.constants import (
    CONVERSION_STRATEGY_WEBHOOK,
    CONVERSION_WEBHOOK_PATH,
)
from webhook_lifecycle.observability.metrics import metrics_collector
from webhook_lifecycle.settings import settings
from webhook_lifecycle.utils.kubernetes import is_not_found

logger = logging.getLogger(__name__)


class ConversionOutcome(str, Enum):
    """Outcome of one conversion binding attempt."""

    BOUND = "bound"
    SKIPPED = "skipped"
    CRD_NOT_FOUND = "crd_not_found"
    FAILED = "failed"


@dataclass
class ConversionBindingResult:
    """Result of binding a CRD's conversion to a webhook endpoint."""

    crd_name: str
    outcome: ConversionOutcome
    message: str = ""
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """False only for soft failures worth surfacing."""
        return self.outcome in (ConversionOutcome.BOUND, ConversionOutcome.SKIPPED)


class ConversionBinder:
    """Points CRD conversion at a reconciled admission webhook's service."""

    def __init__(self, k8s_client: client.ApiClient | None = None):
        self.k8s_client = k8s_client

    @property
    def kubernetes_client(self) -> client.ApiClient:
        """Get or create Kubernetes API client."""
        if self.k8s_client is None:
            from ..utils.kubernetes import get_kubernetes_client

            self.k8s_client = get_kubernetes_client()
        return self.k8s_client

    def bind_conversion(self, crd_name: str, webhook: Any) -> ConversionBindingResult:
        """
        Bind a CRD's conversion webhook to a webhook entry's endpoint.

        Args:
            crd_name: Name of the CustomResourceDefinition
            webhook: V1ValidatingWebhook or V1MutatingWebhook entry of the
                reconciled configuration object

        Returns:
            Structured outcome of the binding attempt
        """
        result = self._bind(crd_name, webhook)
        metrics_collector.record_conversion_binding(result.outcome.value)
        return result

    def _bind(self, crd_name: str, webhook: Any) -> ConversionBindingResult:
        if not crd_name:
            logger.debug("No conversion CRD declared, skipping conversion binding")
            return ConversionBindingResult(crd_name, ConversionOutcome.SKIPPED)

        api = client.ApiextensionsV1Api(self.kubernetes_client)

        try:
            crd = api.read_custom_resource_definition(name=crd_name)
        except ApiException as e:
            if is_not_found(e):
                message = f"CRD {crd_name} not found, conversion will be bound later"
                logger.info(message, extra={"crd_name": crd_name})
                return ConversionBindingResult(
                    crd_name, ConversionOutcome.CRD_NOT_FOUND, message, e
                )
            message = f"CRD {crd_name} could not be read: {e.reason}"
            logger.warning(message, extra={"crd_name": crd_name})
            return ConversionBindingResult(
                crd_name, ConversionOutcome.FAILED, message, e
            )

        logger.info(f"Found conversion CRD {crd_name}", extra={"crd_name": crd_name})
        self._apply_conversion(crd, webhook)

        try:
            api.replace_custom_resource_definition(name=crd_name, body=crd)
        except ApiException as e:
            message = f"CRD {crd_name} could not be updated: {e.reason}"
            logger.warning(message, extra={"crd_name": crd_name})
            return ConversionBindingResult(
                crd_name, ConversionOutcome.FAILED, message, e
            )

        logger.info(
            f"Bound conversion webhook of CRD {crd_name} to {webhook.name}",
            extra={"crd_name": crd_name, "operation": "bind_conversion"},
        )
        return ConversionBindingResult(crd_name, ConversionOutcome.BOUND)

    def _apply_conversion(
        self, crd: client.V1CustomResourceDefinition, webhook: Any
    ) -> None:
        """Rewrite the CRD's conversion stanza in place."""
        webhook_service = webhook.client_config.service
        review_versions = settings.conversion_review_version_list

        existing = crd.spec.conversion
        if existing is not None and existing.webhook is not None:
            review_versions = (
                existing.webhook.conversion_review_versions or review_versions
            )

        crd.spec.conversion = client.V1CustomResourceConversion(
            strategy=CONVERSION_STRATEGY_WEBHOOK,
            webhook=client.V1WebhookConversion(
                client_config=client.ApiextensionsV1WebhookClientConfig(
                    service=client.ApiextensionsV1ServiceReference(
                        name=webhook_service.name,
                        namespace=webhook_service.namespace,
                        path=CONVERSION_WEBHOOK_PATH,
                        port=webhook_service.port,
                    ),
                    ca_bundle=webhook.client_config.ca_bundle,
                ),
                conversion_review_versions=list(review_versions),
            ),
        )
        # Webhook conversion requires structural, pruned schemas
        crd.spec.preserve_unknown_fields = False
