"""
Test fixtures for webhook lifecycle resources.

This module provides sample webhook definitions, OperatorGroups and CRDs,
plus small in-memory stand-ins for the admission registration and
apiextensions APIs that honour label selectors, generated names and
resource versions.
"""

import copy
import itertools
from typing import Any

from kubernetes import client
from kubernetes.client.rest import ApiException

TEST_CA_PEM = b"-----BEGIN CERTIFICATE-----\nMIIBfakeca\n-----END CERTIFICATE-----\n"
ROTATED_CA_PEM = (
    b"-----BEGIN CERTIFICATE-----\nMIIBrotatedca\n-----END CERTIFICATE-----\n"
)

# Minimal validating webhook definition as found in a ClusterServiceVersion
MINIMAL_WEBHOOK_DEFINITION: dict[str, Any] = {
    "generateName": "webhook.test.com",
    "type": "ValidatingAdmissionWebhook",
    "deploymentName": "webhook-dep",
    "containerPort": 443,
    "sideEffects": "None",
    "admissionReviewVersions": ["v1beta1", "v1"],
    "rules": [],
}

# Mutating webhook with every optional field set
COMPLETE_MUTATING_DEFINITION: dict[str, Any] = {
    "generateName": "mutate.widgets.example.com",
    "type": "MutatingAdmissionWebhook",
    "deploymentName": "widget-operator",
    "containerPort": 9443,
    "targetPort": 4343,
    "sideEffects": "NoneOnDryRun",
    "admissionReviewVersions": ["v1"],
    "failurePolicy": "Fail",
    "matchPolicy": "Equivalent",
    "timeoutSeconds": 10,
    "reinvocationPolicy": "IfNeeded",
    "webhookPath": "/mutate-widgets",
    "objectSelector": {"matchLabels": {"app": "widget"}},
    "rules": [
        {
            "operations": ["CREATE", "UPDATE"],
            "apiGroups": ["stable.example.com"],
            "apiVersions": ["v1"],
            "resources": ["widgets"],
            "scope": "Namespaced",
        }
    ],
}

CONVERSION_WEBHOOK_DEFINITION: dict[str, Any] = {
    **MINIMAL_WEBHOOK_DEFINITION,
    "generateName": "convert.widgets.example.com",
    "deploymentName": "widget-operator",
    "containerPort": 9443,
    "conversionCrd": "widgets.stable.example.com",
}


def operator_group(
    name: str = "og",
    namespace: str = "ns1",
    uid: str | None = "og-uid-1",
    target_namespaces: list[str] | None = None,
    selector: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Raw OperatorGroup object."""
    spec: dict[str, Any] = {}
    if target_namespaces is not None:
        spec["targetNamespaces"] = target_namespaces
    if selector is not None:
        spec["selector"] = selector
    metadata: dict[str, Any] = {"name": name, "namespace": namespace}
    if uid is not None:
        metadata["uid"] = uid
    return {
        "apiVersion": "operators.coreos.com/v1",
        "kind": "OperatorGroup",
        "metadata": metadata,
        "spec": spec,
    }


def conversion_crd(name: str = "widgets.stable.example.com"):
    """CRD without webhook conversion."""
    group = name.split(".", 1)[1]
    return client.V1CustomResourceDefinition(
        api_version="apiextensions.k8s.io/v1",
        kind="CustomResourceDefinition",
        metadata=client.V1ObjectMeta(name=name, resource_version="1"),
        spec=client.V1CustomResourceDefinitionSpec(
            group=group,
            names=client.V1CustomResourceDefinitionNames(
                kind="Widget", plural="widgets"
            ),
            scope="Namespaced",
            versions=[
                client.V1CustomResourceDefinitionVersion(
                    name="v1", served=True, storage=True
                ),
                client.V1CustomResourceDefinitionVersion(
                    name="v1alpha1", served=True, storage=False
                ),
            ],
            preserve_unknown_fields=True,
            conversion=client.V1CustomResourceConversion(strategy="None"),
        ),
    )


def _parse_selector(selector: str) -> dict[str, str]:
    if not selector:
        return {}
    return dict(term.split("=", 1) for term in selector.split(","))


class FakeAdmissionRegistrationApi:
    """In-memory AdmissionregistrationV1Api for webhook configurations."""

    def __init__(self):
        self.objects: dict[str, dict[str, Any]] = {"validating": {}, "mutating": {}}
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[str, ApiException] = {}
        self._suffixes = itertools.count(1)
        self._versions = itertools.count(1)

    def fail(self, method: str, status: int = 500, reason: str = "Internal Error"):
        """Make every call of ``method`` raise an ApiException."""
        self.failures[method] = ApiException(status=status, reason=reason)

    def _check(self, method: str, name: str = "") -> None:
        self.calls.append((method, name))
        if method in self.failures:
            raise self.failures[method]

    def _list(self, kind: str, list_class, label_selector: str = "", **_):
        wanted = _parse_selector(label_selector)
        items = [
            copy.deepcopy(obj)
            for obj in self.objects[kind].values()
            if wanted.items() <= (obj.metadata.labels or {}).items()
        ]
        return list_class(items=items)

    def _create(self, kind: str, body, **_):
        body = copy.deepcopy(body)
        if body.metadata.generate_name and not body.metadata.name:
            body.metadata.name = (
                f"{body.metadata.generate_name}{next(self._suffixes):05d}"
            )
        if body.metadata.name in self.objects[kind]:
            raise ApiException(status=409, reason="AlreadyExists")
        body.metadata.resource_version = str(next(self._versions))
        body.metadata.uid = f"uid-{body.metadata.name}"
        self.objects[kind][body.metadata.name] = body
        return copy.deepcopy(body)

    def _replace(self, kind: str, name: str, body, **_):
        current = self.objects[kind].get(name)
        if current is None:
            raise ApiException(status=404, reason="Not Found")
        if body.metadata.resource_version != current.metadata.resource_version:
            raise ApiException(status=409, reason="Conflict")
        body = copy.deepcopy(body)
        body.metadata.resource_version = str(next(self._versions))
        self.objects[kind][name] = body
        return copy.deepcopy(body)

    def list_validating_webhook_configuration(self, label_selector: str = "", **kwargs):
        self._check("list_validating_webhook_configuration")
        return self._list(
            "validating",
            client.V1ValidatingWebhookConfigurationList,
            label_selector,
        )

    def create_validating_webhook_configuration(self, body, **kwargs):
        self._check("create_validating_webhook_configuration")
        return self._create("validating", body)

    def replace_validating_webhook_configuration(self, name, body, **kwargs):
        self._check("replace_validating_webhook_configuration", name)
        return self._replace("validating", name, body)

    def list_mutating_webhook_configuration(self, label_selector: str = "", **kwargs):
        self._check("list_mutating_webhook_configuration")
        return self._list(
            "mutating", client.V1MutatingWebhookConfigurationList, label_selector
        )

    def create_mutating_webhook_configuration(self, body, **kwargs):
        self._check("create_mutating_webhook_configuration")
        return self._create("mutating", body)

    def replace_mutating_webhook_configuration(self, name, body, **kwargs):
        self._check("replace_mutating_webhook_configuration", name)
        return self._replace("mutating", name, body)


class FakeApiextensionsApi:
    """In-memory ApiextensionsV1Api for CustomResourceDefinitions."""

    def __init__(self, *crds):
        self.crds = {crd.metadata.name: crd for crd in crds}
        self.failures: dict[str, ApiException] = {}
        self.replaced: list[str] = []

    def fail(self, method: str, status: int = 500, reason: str = "Internal Error"):
        self.failures[method] = ApiException(status=status, reason=reason)

    def read_custom_resource_definition(self, name, **kwargs):
        if "read_custom_resource_definition" in self.failures:
            raise self.failures["read_custom_resource_definition"]
        if name not in self.crds:
            raise ApiException(status=404, reason="Not Found")
        return copy.deepcopy(self.crds[name])

    def replace_custom_resource_definition(self, name, body, **kwargs):
        if "replace_custom_resource_definition" in self.failures:
            raise self.failures["replace_custom_resource_definition"]
        self.crds[name] = copy.deepcopy(body)
        self.replaced.append(name)
        return copy.deepcopy(body)
