"""
Owner identity and logical webhook keys.

Configuration objects get cluster-generated names, so they are never looked up
by name. Instead every object carries the owner labels plus the description's
generate name, and that label set is the only stable handle across passes.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from webhook_lifecycle.constants import (
    DEFAULT_OWNER_API_VERSION,
    DEFAULT_OWNER_KIND,
    OWNER_KIND_LABEL_KEY,
    OWNER_LABEL_KEY,
    OWNER_NAMESPACE_LABEL_KEY,
    WEBHOOK_DESC_KEY,
)


class WebhookOwner(BaseModel):
    """The managed resource that declares webhook descriptions."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Name of the owning resource")
    namespace: str = Field(..., description="Namespace the owner is installed into")
    kind: str = Field(DEFAULT_OWNER_KIND, description="Kind of the owning resource")
    uid: str | None = Field(None, description="UID of the owning resource")
    api_version: str = Field(DEFAULT_OWNER_API_VERSION, alias="apiVersion")

    @classmethod
    def from_body(cls, body: dict) -> "WebhookOwner":
        """Build an owner from a raw Kubernetes object."""
        metadata = body.get("metadata", {})
        return cls(
            name=metadata["name"],
            namespace=metadata.get("namespace", ""),
            kind=body.get("kind") or DEFAULT_OWNER_KIND,
            uid=metadata.get("uid"),
            api_version=body.get("apiVersion") or DEFAULT_OWNER_API_VERSION,
        )

    def owner_labels(self) -> dict[str, str]:
        """Ownership labels identifying objects managed on behalf of this owner."""
        return {
            OWNER_LABEL_KEY: self.name,
            OWNER_NAMESPACE_LABEL_KEY: self.namespace,
            OWNER_KIND_LABEL_KEY: self.kind,
        }


@dataclass(frozen=True)
class WebhookKey:
    """Logical identity of a webhook: owner plus description generate name."""

    owner: WebhookOwner
    generate_name: str

    def labels(self) -> dict[str, str]:
        labels = self.owner.owner_labels()
        labels[WEBHOOK_DESC_KEY] = self.generate_name
        return labels

    def selector(self) -> str:
        """Equality-based label selector string matching this key."""
        return ",".join(f"{key}={value}" for key, value in sorted(self.labels().items()))
