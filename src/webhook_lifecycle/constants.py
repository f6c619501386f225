"""
Constants used throughout the webhook lifecycle subsystem.

This module defines all constant values used by the reconciler including:
- Ownership and webhook description labels (published contract)
- Protected API groups and resources for the rule safety policy
- OperatorGroup API coordinates
- Conversion webhook wiring defaults
- Error message templates
"""

# Ownership labels placed on every managed configuration object.
# The (owner, generate name) label pair is the logical identity of a webhook.
OWNER_LABEL_KEY = "olm.owner"
OWNER_NAMESPACE_LABEL_KEY = "olm.owner.namespace"
OWNER_KIND_LABEL_KEY = "olm.owner.kind"

# Webhook description labels
WEBHOOK_DESC_KEY = "olm.webhook-description-generate-name"
WEBHOOK_HASH_KEY = "olm.webhook-description-hash"

# Owner defaults
DEFAULT_OWNER_KIND = "ClusterServiceVersion"
DEFAULT_OWNER_API_VERSION = "operators.coreos.com/v1alpha1"

# API groups referenced by the rule safety policy
WILDCARD = "*"
OLM_API_GROUP = "operators.coreos.com"
ADMISSION_REGISTRATION_API_GROUP = "admissionregistration.k8s.io"
MUTATING_WEBHOOK_CONFIGURATION = "MutatingWebhookConfiguration"
VALIDATING_WEBHOOK_CONFIGURATION = "ValidatingWebhookConfiguration"
PROTECTED_ADMISSION_RESOURCES = frozenset(
    {WILDCARD, MUTATING_WEBHOOK_CONFIGURATION, VALIDATING_WEBHOOK_CONFIGURATION}
)

# OperatorGroup coordinates
OPERATOR_GROUP_GROUP = OLM_API_GROUP
OPERATOR_GROUP_PLURAL = "operatorgroups"
OPERATOR_GROUP_UID_LABEL_PREFIX = "olm.operatorgroup.uid/"

# ClusterServiceVersion coordinates (admission path)
CSV_VERSION = "v1alpha1"
CSV_PLURAL = "clusterserviceversions"

# Webhook endpoint wiring
DEFAULT_CONTAINER_PORT = 443
SERVICE_SUFFIX = "-service"
GENERATE_NAME_SEPARATOR = "-"

# Conversion webhook wiring. The path is a published contract with the
# component serving the conversion endpoint.
CONVERSION_WEBHOOK_PATH = "/convert"
CONVERSION_STRATEGY_WEBHOOK = "Webhook"

# Configuration object kinds
KIND_VALIDATING = "ValidatingWebhookConfiguration"
KIND_MUTATING = "MutatingWebhookConfiguration"

# Rule safety policy messages (surfaced verbatim on the owner's status)
ERROR_RULES_ALL_GROUPS = "Webhook rules cannot include all groups"
ERROR_RULES_OLM_GROUP = "Webhook rules cannot include the OLM group"
ERROR_RULES_ADMISSION_WEBHOOKS = (
    "Webhook rules cannot include MutatingWebhookConfiguration or "
    "ValidatingWebhookConfiguration resources"
)
ERROR_DUPLICATE_GENERATE_NAME = (
    "Webhook descriptions must have unique generateName: {}"
)

# Scope resolution
ERROR_OPERATOR_GROUP_INFO = "Error retrieving OperatorGroup info"
ERROR_OPERATOR_GROUP_MISSING_UID = "OperatorGroup '{}' in namespace '{}' has no uid"
