"""
Create-or-update engine for admission webhook configurations.

Every webhook description of an owner maps onto one configuration object per
namespace the owner is installed into. Objects are found through the logical
key labels (owner plus generate name), never by name, because names are
generated by the API server on create. Each pass rebuilds the single webhook
entry from the current description, scope and CA, so the stored object is a
pure function of the current inputs.
"""

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from kubernetes import client
from kubernetes.client.rest import ApiException

from webhook_lifecycle.constants import (
    GENERATE_NAME_SEPARATOR,
    KIND_MUTATING,
    KIND_VALIDATING,
    WEBHOOK_HASH_KEY,
)
from webhook_lifecycle.errors import WebhookPolicyViolation
from webhook_lifecycle.models.owner import WebhookKey, WebhookOwner
from webhook_lifecycle.models.webhook import WebhookAdmissionType, WebhookDescription
from webhook_lifecycle.observability.logging import OperatorLogger
from webhook_lifecycle.observability.metrics import metrics_collector
from webhook_lifecycle.utils.hashing import hash_webhook_description
from webhook_lifecycle.utils.validation import (
    validate_webhook_descriptions,
    validate_webhook_rules,
)

from .conversion_binder import ConversionBinder, ConversionBindingResult
from .scope_resolver import ScopeResolver


@dataclass(frozen=True)
class _ConfigurationApi:
    """AdmissionregistrationV1Api calls and models for one configuration kind."""

    kind: str
    list_method: str
    create_method: str
    replace_method: str
    configuration_class: type
    entry_builder: str


_CONFIGURATION_APIS = {
    WebhookAdmissionType.VALIDATING: _ConfigurationApi(
        kind=KIND_VALIDATING,
        list_method="list_validating_webhook_configuration",
        create_method="create_validating_webhook_configuration",
        replace_method="replace_validating_webhook_configuration",
        configuration_class=client.V1ValidatingWebhookConfiguration,
        entry_builder="to_validating_webhook",
    ),
    WebhookAdmissionType.MUTATING: _ConfigurationApi(
        kind=KIND_MUTATING,
        list_method="list_mutating_webhook_configuration",
        create_method="create_mutating_webhook_configuration",
        replace_method="replace_mutating_webhook_configuration",
        configuration_class=client.V1MutatingWebhookConfiguration,
        entry_builder="to_mutating_webhook",
    ),
}


@dataclass
class WebhookReconcileResult:
    """What one reconciliation of a webhook description did."""

    kind: str
    generate_name: str
    description_hash: str
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    conversions: list[ConversionBindingResult] = field(default_factory=list)

    @property
    def conversion_failures(self) -> list[ConversionBindingResult]:
        return [c for c in self.conversions if not c.ok]


class WebhookReconciler:
    """
    Reconciles the admission webhook configurations declared by one owner.

    The reconciler performs no retries and holds no state between passes:
    every error ends the current pass, and the caller's reconcile loop is
    expected to invoke it again.
    """

    def __init__(
        self,
        owner: WebhookOwner,
        k8s_client: client.ApiClient | None = None,
        scope_resolver: ScopeResolver | None = None,
        conversion_binder: ConversionBinder | None = None,
    ):
        """
        Initialize webhook reconciler.

        Args:
            owner: Resource declaring the webhook descriptions
            k8s_client: Kubernetes API client, will be created if not provided
            scope_resolver: Namespace scope lookup, defaults to OperatorGroups
                read through the same client
            conversion_binder: CRD conversion binder sharing the same client
        """
        self.owner = owner
        self.k8s_client = k8s_client
        self.scope_resolver = scope_resolver or ScopeResolver(k8s_client)
        self.conversion_binder = conversion_binder or ConversionBinder(k8s_client)
        self.logger = OperatorLogger(self.__class__.__name__)

    @property
    def kubernetes_client(self) -> client.ApiClient:
        """Get or create Kubernetes API client."""
        if self.k8s_client is None:
            from ..utils.kubernetes import get_kubernetes_client

            self.k8s_client = get_kubernetes_client()
        return self.k8s_client

    def reconcile_webhooks(
        self, ca_pem: bytes, descriptions: Iterable[WebhookDescription]
    ) -> list[WebhookReconcileResult]:
        """
        Reconcile every webhook description of the owner, in order.

        The whole set is validated before any object is written.

        Args:
            ca_pem: PEM encoded CA bundle for the webhook service
            descriptions: Webhook descriptions declared by the owner

        Returns:
            One result per description
        """
        descriptions = list(descriptions)
        try:
            validate_webhook_descriptions(descriptions)
        except WebhookPolicyViolation as e:
            metrics_collector.record_policy_violation(e.violation.name)
            raise
        return [self.create_or_update_webhook(ca_pem, desc) for desc in descriptions]

    def create_or_update_webhook(
        self, ca_pem: bytes, desc: WebhookDescription
    ) -> WebhookReconcileResult:
        """
        Validate, scope and reconcile a single webhook description.

        Args:
            ca_pem: PEM encoded CA bundle for the webhook service
            desc: Webhook description to reconcile

        Returns:
            Result of the reconciliation

        Raises:
            WebhookPolicyViolation: If the rules are unsafe
            ScopeResolutionError: If the owner's OperatorGroup is ambiguous
            ApiException: On store failures, unchanged
        """
        kind = desc.type.configuration_kind
        namespace = self.owner.namespace
        start_time = time.time()

        self.logger.log_reconciliation_start(
            resource_type=kind, resource_name=desc.generate_name, namespace=namespace
        )

        with metrics_collector.track_webhook_reconciliation(kind, namespace):
            try:
                try:
                    validate_webhook_rules(desc.rules)
                except WebhookPolicyViolation as e:
                    metrics_collector.record_policy_violation(e.violation.name)
                    raise

                scope_selector = self.scope_resolver.resolve_scope(namespace)
                result = self.reconcile(desc.type, scope_selector, ca_pem, desc)
            except Exception as e:
                self.logger.log_reconciliation_error(
                    resource_type=kind,
                    resource_name=desc.generate_name,
                    namespace=namespace,
                    error=e,
                    duration=time.time() - start_time,
                )
                raise

        self.logger.log_reconciliation_success(
            resource_type=kind,
            resource_name=desc.generate_name,
            namespace=namespace,
            duration=time.time() - start_time,
        )
        return result

    def reconcile(
        self,
        webhook_type: WebhookAdmissionType,
        scope_selector: client.V1LabelSelector | None,
        ca_pem: bytes,
        desc: WebhookDescription,
    ) -> WebhookReconcileResult:
        """
        Create or update the configuration objects for a description.

        Args:
            webhook_type: Validating or mutating
            scope_selector: Namespace selector embedded in the webhook entry
            ca_pem: PEM encoded CA bundle
            desc: Webhook description

        Returns:
            Result listing created and updated object names
        """
        config_api = _CONFIGURATION_APIS[webhook_type]
        api = client.AdmissionregistrationV1Api(self.kubernetes_client)
        key = WebhookKey(self.owner, desc.generate_name)
        description_hash = hash_webhook_description(desc)

        result = WebhookReconcileResult(
            kind=config_api.kind,
            generate_name=desc.generate_name,
            description_hash=description_hash,
        )

        existing = getattr(api, config_api.list_method)(label_selector=key.selector())

        if not existing.items:
            configuration = config_api.configuration_class(
                metadata=client.V1ObjectMeta(
                    generate_name=f"{desc.generate_name}{GENERATE_NAME_SEPARATOR}",
                    namespace=self.owner.namespace,
                    labels=self._labels(None, key, description_hash),
                ),
                webhooks=[self._build_entry(config_api, desc, scope_selector, ca_pem)],
            )
            try:
                created = getattr(api, config_api.create_method)(body=configuration)
            except ApiException as e:
                self.logger.error(
                    f"Error creating {config_api.kind} for {desc.generate_name}: {e}",
                    webhook_kind=config_api.kind,
                    generate_name=desc.generate_name,
                )
                raise

            name = created.metadata.name
            result.created.append(name)
            metrics_collector.record_configuration_written(config_api.kind, "create")
            self.logger.info(
                f"Created {config_api.kind} {name}",
                webhook_kind=config_api.kind,
                generate_name=desc.generate_name,
                resource_name=name,
            )
            self._bind_conversion(desc, configuration, result)
            return result

        for configuration in existing.items:
            name = configuration.metadata.name
            configuration.webhooks = [
                self._build_entry(config_api, desc, scope_selector, ca_pem)
            ]
            configuration.metadata.labels = self._labels(
                configuration.metadata.labels, key, description_hash
            )

            try:
                getattr(api, config_api.replace_method)(name=name, body=configuration)
            except ApiException as e:
                self.logger.warning(
                    f"could not update {config_api.kind} {name}: {e.reason}",
                    webhook_kind=config_api.kind,
                    generate_name=desc.generate_name,
                    resource_name=name,
                )
                raise

            result.updated.append(name)
            metrics_collector.record_configuration_written(config_api.kind, "update")
            self.logger.debug(
                f"Updated {config_api.kind} {name}",
                webhook_kind=config_api.kind,
                generate_name=desc.generate_name,
                resource_name=name,
            )
            self._bind_conversion(desc, configuration, result)

        return result

    def _build_entry(
        self,
        config_api: _ConfigurationApi,
        desc: WebhookDescription,
        scope_selector: client.V1LabelSelector | None,
        ca_pem: bytes,
    ) -> Any:
        builder = getattr(desc, config_api.entry_builder)
        return builder(self.owner.namespace, scope_selector, ca_pem)

    def _labels(
        self, current: dict[str, str] | None, key: WebhookKey, description_hash: str
    ) -> dict[str, str]:
        labels = dict(current or {})
        labels.update(key.labels())
        labels[WEBHOOK_HASH_KEY] = description_hash
        return labels

    def _bind_conversion(
        self,
        desc: WebhookDescription,
        configuration: Any,
        result: WebhookReconcileResult,
    ) -> None:
        if not desc.conversion_crd:
            return
        result.conversions.append(
            self.conversion_binder.bind_conversion(
                desc.conversion_crd, configuration.webhooks[0]
            )
        )
