"""
Pydantic models for OperatorGroup resources.

Only the parts of an OperatorGroup needed to scope admission webhooks are
modelled: its uid, target namespaces and namespace selector.
"""

from typing import Any

from kubernetes import client
from pydantic import BaseModel, ConfigDict, Field

from webhook_lifecycle.constants import (
    ERROR_OPERATOR_GROUP_MISSING_UID,
    OPERATOR_GROUP_UID_LABEL_PREFIX,
)
from webhook_lifecycle.errors import ConfigurationError

from .webhook import LabelSelector


class OperatorGroupMetadata(BaseModel):
    """Subset of object metadata used for scoping."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    name: str = Field(..., description="OperatorGroup name")
    namespace: str = Field("", description="OperatorGroup namespace")
    uid: str | None = Field(None, description="OperatorGroup uid")


class OperatorGroupSpec(BaseModel):
    """OperatorGroup specification."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    selector: LabelSelector | None = Field(
        None, description="Namespace selector for selector-based groups"
    )
    target_namespaces: list[str] = Field(
        default_factory=list,
        alias="targetNamespaces",
        description="Explicit namespaces for single/multi-namespace groups",
    )


class OperatorGroup(BaseModel):
    """An OperatorGroup as returned by the cluster."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    metadata: OperatorGroupMetadata
    spec: OperatorGroupSpec = Field(default_factory=OperatorGroupSpec)

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> "OperatorGroup":
        return cls.model_validate(body)

    def label_key(self) -> str:
        """
        Namespace label OLM places on every target namespace of this group.

        Raises:
            ConfigurationError: If the group has no uid yet
        """
        if not self.metadata.uid:
            raise ConfigurationError(
                ERROR_OPERATOR_GROUP_MISSING_UID.format(
                    self.metadata.name, self.metadata.namespace
                )
            )
        return f"{OPERATOR_GROUP_UID_LABEL_PREFIX}{self.metadata.uid}"

    def namespace_label_selector(self) -> client.V1LabelSelector:
        """
        Namespace selector equivalent to this group's scope.

        - target namespaces set: match the group's uid label
        - selector set: the selector verbatim
        - neither: empty selector, matching every namespace
        """
        if self.spec.target_namespaces:
            return client.V1LabelSelector(match_labels={self.label_key(): ""})
        if self.spec.selector is not None:
            return self.spec.selector.to_k8s()
        return client.V1LabelSelector()
