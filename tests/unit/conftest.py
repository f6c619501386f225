"""Shared fixtures for webhook lifecycle unit tests."""

from unittest.mock import MagicMock, patch

import pytest

from tests.fixtures.webhook_resources import (
    FakeAdmissionRegistrationApi,
    FakeApiextensionsApi,
    conversion_crd,
    operator_group,
)
from webhook_lifecycle.models.owner import WebhookOwner
from webhook_lifecycle.services.conversion_binder import ConversionBinder
from webhook_lifecycle.services.scope_resolver import ScopeResolver
from webhook_lifecycle.services.webhook_reconciler import WebhookReconciler


@pytest.fixture
def owner():
    return WebhookOwner(name="csv-a", namespace="ns1", uid="csv-uid-1")


@pytest.fixture
def admission_api():
    """Fake admission registration API installed in place of the real one."""
    fake = FakeAdmissionRegistrationApi()
    with patch("kubernetes.client.AdmissionregistrationV1Api", return_value=fake):
        yield fake


@pytest.fixture
def apiextensions_api():
    """Fake apiextensions API holding one conversion CRD."""
    fake = FakeApiextensionsApi(conversion_crd())
    with patch("kubernetes.client.ApiextensionsV1Api", return_value=fake):
        yield fake


@pytest.fixture
def operator_groups():
    """OperatorGroups per namespace, editable by tests."""
    return {"ns1": [operator_group(namespace="ns1")]}


@pytest.fixture
def scope_resolver(operator_groups):
    return ScopeResolver(
        k8s_client=MagicMock(),
        operator_group_lister=lambda namespace: operator_groups.get(namespace, []),
    )


@pytest.fixture
def reconciler(owner, admission_api, apiextensions_api, scope_resolver):
    k8s_client = MagicMock()
    return WebhookReconciler(
        owner,
        k8s_client=k8s_client,
        scope_resolver=scope_resolver,
        conversion_binder=ConversionBinder(k8s_client),
    )
