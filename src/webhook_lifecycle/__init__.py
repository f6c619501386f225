"""
OLM Webhook Lifecycle - admission webhook reconciliation for managed operators.

This package reconciles the admission webhooks an installed operator declares
against the live cluster:
- Validating and mutating webhook configuration create-or-update
- Namespace scoping derived from the owning OperatorGroup
- Drift detection through content-hash labels
- CRD conversion webhook binding
- Safety policy for tenant-declared webhook rules
"""

__version__ = "0.1.0"
