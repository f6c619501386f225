"""
Admission webhooks for the webhook lifecycle subsystem.

Provides a validating admission handler for ClusterServiceVersions so that
unsafe webhook definitions are refused before anything is installed.
"""
