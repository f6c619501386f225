"""
Pydantic models for webhook descriptions.

A webhook description is the owner-supplied, declarative specification of one
admission webhook: its rules and how to reach the endpoint serving it. The
models here mirror the ``webhookdefinitions`` entries of a
ClusterServiceVersion and know how to render themselves into the Kubernetes
client objects stored in webhook configurations.
"""

import base64
from enum import Enum
from typing import Literal

from kubernetes import client
from pydantic import BaseModel, ConfigDict, Field, field_validator

from webhook_lifecycle.constants import (
    DEFAULT_CONTAINER_PORT,
    KIND_MUTATING,
    KIND_VALIDATING,
    SERVICE_SUFFIX,
)


class WebhookAdmissionType(str, Enum):
    """Kind of admission webhook a description declares."""

    VALIDATING = "ValidatingAdmissionWebhook"
    MUTATING = "MutatingAdmissionWebhook"

    @property
    def configuration_kind(self) -> str:
        """Kubernetes kind of the configuration object holding this webhook."""
        if self is WebhookAdmissionType.VALIDATING:
            return KIND_VALIDATING
        return KIND_MUTATING


class LabelSelectorRequirement(BaseModel):
    """A single set-based label selector requirement."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Label key the selector applies to")
    operator: Literal["In", "NotIn", "Exists", "DoesNotExist"] = Field(
        ..., description="Relationship between the key and the values"
    )
    values: list[str] | None = Field(None, description="Values to match against")


class LabelSelector(BaseModel):
    """Kubernetes label selector."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    match_labels: dict[str, str] | None = Field(None, alias="matchLabels")
    match_expressions: list[LabelSelectorRequirement] | None = Field(
        None, alias="matchExpressions"
    )

    def to_k8s(self) -> client.V1LabelSelector:
        """Convert to the Kubernetes client model."""
        expressions = None
        if self.match_expressions is not None:
            expressions = [
                client.V1LabelSelectorRequirement(
                    key=req.key, operator=req.operator, values=req.values
                )
                for req in self.match_expressions
            ]
        return client.V1LabelSelector(
            match_labels=self.match_labels, match_expressions=expressions
        )


class RuleWithOperations(BaseModel):
    """Operations and resources a webhook intercepts."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    operations: list[str] = Field(default_factory=list)
    api_groups: list[str] = Field(default_factory=list, alias="apiGroups")
    api_versions: list[str] = Field(default_factory=list, alias="apiVersions")
    resources: list[str] = Field(default_factory=list)
    scope: Literal["Cluster", "Namespaced", "*"] | None = Field(None)

    def to_k8s(self) -> client.V1RuleWithOperations:
        """Convert to the Kubernetes client model."""
        return client.V1RuleWithOperations(
            operations=list(self.operations),
            api_groups=list(self.api_groups),
            api_versions=list(self.api_versions),
            resources=list(self.resources),
            scope=self.scope,
        )


class WebhookDescription(BaseModel):
    """
    Declarative description of one admission webhook.

    ``generate_name`` identifies the logical webhook across every physical
    configuration object created for it. Instances are immutable for the
    duration of a reconciliation pass.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    generate_name: str = Field(
        ..., alias="generateName", description="Logical webhook name"
    )
    type: WebhookAdmissionType = Field(..., description="Admission webhook type")
    deployment_name: str = Field(
        ..., alias="deploymentName", description="Deployment serving the webhook"
    )
    container_port: int = Field(
        DEFAULT_CONTAINER_PORT,
        alias="containerPort",
        ge=1,
        le=65535,
        description="Port the webhook service exposes",
    )
    target_port: int | str | None = Field(
        None, alias="targetPort", description="Container port traffic is sent to"
    )
    rules: list[RuleWithOperations] = Field(default_factory=list)
    failure_policy: Literal["Ignore", "Fail"] | None = Field(
        None, alias="failurePolicy"
    )
    match_policy: Literal["Exact", "Equivalent"] | None = Field(
        None, alias="matchPolicy"
    )
    object_selector: LabelSelector | None = Field(None, alias="objectSelector")
    side_effects: Literal["None", "NoneOnDryRun", "Some", "Unknown"] = Field(
        ..., alias="sideEffects"
    )
    timeout_seconds: int | None = Field(None, alias="timeoutSeconds", ge=1, le=30)
    admission_review_versions: list[str] = Field(
        ..., alias="admissionReviewVersions", min_length=1
    )
    reinvocation_policy: Literal["Never", "IfNeeded"] | None = Field(
        None, alias="reinvocationPolicy"
    )
    webhook_path: str | None = Field(None, alias="webhookPath")
    conversion_crd: str = Field(
        "",
        alias="conversionCrd",
        description="CRD whose conversion webhook is served by this endpoint",
    )

    @field_validator("generate_name", "deployment_name")
    @classmethod
    def validate_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    def domain_name(self) -> str:
        """Deployment name as a DNS-1035 label, dots replaced by dashes."""
        return self.deployment_name.replace(".", "-")

    def service_name(self) -> str:
        return f"{self.domain_name()}{SERVICE_SUFFIX}"

    def _client_config(
        self, namespace: str, ca_pem: bytes
    ) -> client.AdmissionregistrationV1WebhookClientConfig:
        return client.AdmissionregistrationV1WebhookClientConfig(
            service=client.AdmissionregistrationV1ServiceReference(
                name=self.service_name(),
                namespace=namespace,
                path=self.webhook_path,
                port=self.container_port,
            ),
            ca_bundle=base64.b64encode(ca_pem).decode("ascii"),
        )

    def _rules(self) -> list[client.V1RuleWithOperations]:
        return [rule.to_k8s() for rule in self.rules]

    def _object_selector(self) -> client.V1LabelSelector | None:
        if self.object_selector is None:
            return None
        return self.object_selector.to_k8s()

    def to_validating_webhook(
        self,
        namespace: str,
        namespace_selector: client.V1LabelSelector | None,
        ca_pem: bytes,
    ) -> client.V1ValidatingWebhook:
        """
        Build the validating webhook entry for a configuration object.

        Args:
            namespace: Namespace of the service backing the webhook
            namespace_selector: Namespaces admission requests are scoped to
            ca_pem: PEM encoded CA bundle, embedded verbatim

        Returns:
            Validating webhook entry
        """
        return client.V1ValidatingWebhook(
            name=self.generate_name,
            rules=self._rules(),
            failure_policy=self.failure_policy,
            match_policy=self.match_policy,
            namespace_selector=namespace_selector,
            object_selector=self._object_selector(),
            side_effects=self.side_effects,
            timeout_seconds=self.timeout_seconds,
            admission_review_versions=list(self.admission_review_versions),
            client_config=self._client_config(namespace, ca_pem),
        )

    def to_mutating_webhook(
        self,
        namespace: str,
        namespace_selector: client.V1LabelSelector | None,
        ca_pem: bytes,
    ) -> client.V1MutatingWebhook:
        """
        Build the mutating webhook entry for a configuration object.

        Same as :meth:`to_validating_webhook` plus the reinvocation policy.
        """
        return client.V1MutatingWebhook(
            name=self.generate_name,
            rules=self._rules(),
            failure_policy=self.failure_policy,
            match_policy=self.match_policy,
            namespace_selector=namespace_selector,
            object_selector=self._object_selector(),
            side_effects=self.side_effects,
            timeout_seconds=self.timeout_seconds,
            admission_review_versions=list(self.admission_review_versions),
            reinvocation_policy=self.reinvocation_policy,
            client_config=self._client_config(namespace, ca_pem),
        )
