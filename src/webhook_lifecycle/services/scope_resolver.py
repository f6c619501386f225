"""
Namespace scope resolution from OperatorGroup state.

The namespace selector placed on a webhook restricts admission requests to the
namespaces its owner is entitled to manage. It is derived from the single
OperatorGroup of the owner's namespace.
"""

import logging
from collections.abc import Callable
from typing import Any

from kubernetes import client
from kubernetes.client.rest import ApiException

from webhook_lifecycle.constants import OPERATOR_GROUP_GROUP, OPERATOR_GROUP_PLURAL
from webhook_lifecycle.errors import ConfigurationError, ScopeResolutionError
from webhook_lifecycle.models.operator_group import OperatorGroup
from webhook_lifecycle.settings import settings

logger = logging.getLogger(__name__)

OperatorGroupLister = Callable[[str], list[dict[str, Any]]]


class ScopeResolver:
    """Derives webhook namespace selectors from OperatorGroups."""

    def __init__(
        self,
        k8s_client: client.ApiClient | None = None,
        operator_group_lister: OperatorGroupLister | None = None,
    ):
        """
        Initialize scope resolver.

        Args:
            k8s_client: Kubernetes API client, will be created if not provided
            operator_group_lister: Optional callable returning raw OperatorGroup
                objects for a namespace, replacing the API lookup
        """
        self.k8s_client = k8s_client
        self.operator_group_lister = operator_group_lister

    @property
    def kubernetes_client(self) -> client.ApiClient:
        """Get or create Kubernetes API client."""
        if self.k8s_client is None:
            from ..utils.kubernetes import get_kubernetes_client

            self.k8s_client = get_kubernetes_client()
        return self.k8s_client

    def list_operator_groups(self, namespace: str) -> list[OperatorGroup]:
        """
        List the OperatorGroups of a namespace.

        Args:
            namespace: Namespace to look in

        Returns:
            Parsed OperatorGroups
        """
        if self.operator_group_lister is not None:
            items = self.operator_group_lister(namespace)
        else:
            custom_api = client.CustomObjectsApi(self.kubernetes_client)
            response = custom_api.list_namespaced_custom_object(
                group=OPERATOR_GROUP_GROUP,
                version=settings.operator_group_api_version,
                namespace=namespace,
                plural=OPERATOR_GROUP_PLURAL,
            )
            items = response.get("items", [])
        return [OperatorGroup.from_body(item) for item in items]

    def resolve_scope(self, namespace: str) -> client.V1LabelSelector:
        """
        Resolve the namespace selector for an owner namespace.

        Args:
            namespace: Namespace the owner is installed into

        Returns:
            Namespace label selector of the namespace's OperatorGroup

        Raises:
            ScopeResolutionError: If the lookup fails or the namespace does not
                hold exactly one OperatorGroup
        """
        try:
            groups = self.list_operator_groups(namespace)
        except ApiException as e:
            logger.error(f"Failed to list OperatorGroups in {namespace}: {e}")
            raise ScopeResolutionError(
                namespace, detail=f"list failed: {e.reason}"
            ) from e

        if len(groups) != 1:
            detail = (
                f"cannot determine scope: found {len(groups)} OperatorGroups "
                f"in namespace {namespace}"
            )
            logger.warning(detail, extra={"namespace": namespace})
            raise ScopeResolutionError(namespace, detail=detail)

        try:
            selector = groups[0].namespace_label_selector()
        except ConfigurationError as e:
            logger.warning(str(e), extra={"namespace": namespace})
            raise ScopeResolutionError(namespace, detail=e.args[0]) from e

        logger.debug(
            f"Resolved scope for {namespace} from OperatorGroup "
            f"{groups[0].metadata.name}: {selector.to_dict()}"
        )
        return selector
