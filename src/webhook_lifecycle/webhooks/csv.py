"""
Validating admission webhook for ClusterServiceVersion resources.

Rejects ClusterServiceVersions whose webhook definitions:
- Cannot be parsed into webhook descriptions
- Reuse a generateName
- Intercept all API groups, the OLM group, or webhook configurations
"""

import logging

import kopf
from pydantic import ValidationError

from webhook_lifecycle.constants import CSV_PLURAL, CSV_VERSION, OLM_API_GROUP
from webhook_lifecycle.errors import DuplicateWebhookError, WebhookPolicyViolation
from webhook_lifecycle.models.webhook import WebhookDescription
from webhook_lifecycle.observability.metrics import metrics_collector
from webhook_lifecycle.utils.validation import validate_webhook_descriptions

logger = logging.getLogger(__name__)


def parse_webhook_definitions(spec: dict) -> list[WebhookDescription]:
    """Parse the webhook definitions of a ClusterServiceVersion spec."""
    definitions = spec.get("webhookdefinitions") or []
    return [WebhookDescription.model_validate(item) for item in definitions]


@kopf.on.validate(OLM_API_GROUP, CSV_VERSION, CSV_PLURAL, id="validate-webhooks")
async def validate_csv_webhooks(
    spec: dict,
    namespace: str,
    name: str,
    operation: str,
    dryrun: bool,
    **kwargs,
) -> dict:
    """
    Validate the webhook definitions of a ClusterServiceVersion before admission.

    Args:
        spec: Resource specification
        namespace: Resource namespace
        name: Resource name
        operation: CREATE or UPDATE
        dryrun: Whether this is a dry-run request

    Returns:
        Empty dict when the request is allowed

    Raises:
        kopf.AdmissionError: If any webhook definition is refused
    """
    logger.info(
        f"Validating webhook definitions of ClusterServiceVersion {name} in "
        f"namespace {namespace} (operation: {operation}, dryrun: {dryrun})"
    )

    try:
        descriptions = parse_webhook_definitions(spec)
    except ValidationError as e:
        error_msg = f"Invalid webhook definition: {e}"
        logger.warning(f"ClusterServiceVersion {name} rejected: {error_msg}")
        raise kopf.AdmissionError(error_msg) from e

    try:
        validate_webhook_descriptions(descriptions)
    except WebhookPolicyViolation as e:
        metrics_collector.record_policy_violation(e.violation.name)
        logger.warning(f"ClusterServiceVersion {name} rejected: {e}")
        raise kopf.AdmissionError(str(e)) from e
    except DuplicateWebhookError as e:
        logger.warning(f"ClusterServiceVersion {name} rejected: {e}")
        raise kopf.AdmissionError(e.args[0]) from e

    logger.info(f"ClusterServiceVersion {name} webhook definitions passed validation")

    return {}
