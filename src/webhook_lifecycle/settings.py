"""Centralized subsystem settings using pydantic-settings.

This module provides a single source of truth for webhook lifecycle
configuration loaded from environment variables. Uses pydantic for automatic
validation, type coercion, and documentation.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Webhook lifecycle configuration loaded from environment variables.

    All settings have sensible defaults for production use. Override via
    environment variables as documented per field.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Operator identification
    operator_namespace: str = Field(
        default="olm",
        description="Namespace where the lifecycle controller is deployed",
        validation_alias="OPERATOR_NAMESPACE",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        validation_alias="JSON_LOGS",
        description="Enable JSON formatted logging for structured log aggregation",
    )
    correlation_ids: bool = Field(
        default=True,
        validation_alias="CORRELATION_IDS",
        description="Enable correlation IDs in logs for request tracing",
    )
    webhook_log_level: str = Field(
        default="WARNING",
        validation_alias="WEBHOOK_LOG_LEVEL",
        description="Log level for the admission handler loggers",
    )

    # Admission server and metrics
    webhook_port: int = Field(
        default=8443,
        validation_alias="WEBHOOK_PORT",
        description="Port for the ClusterServiceVersion admission webhook server",
    )
    webhook_cert_dir: str = Field(
        default="/tmp/k8s-webhook-server/serving-certs",
        validation_alias="WEBHOOK_CERT_DIR",
        description="Directory holding tls.crt and tls.key for the admission server",
    )
    metrics_port: int = Field(
        default=8081,
        validation_alias="METRICS_PORT",
        description="Port for Prometheus metrics endpoint",
    )

    # OperatorGroup lookup
    operator_group_api_version: str = Field(
        default="v1",
        validation_alias="OPERATOR_GROUP_API_VERSION",
        description="API version used to list OperatorGroups",
    )

    # Conversion binding
    conversion_review_versions: str = Field(
        default="v1,v1beta1",
        validation_alias="CONVERSION_REVIEW_VERSIONS",
        description=(
            "Comma-separated ConversionReview versions used when a CRD does "
            "not declare any"
        ),
    )

    @property
    def conversion_review_version_list(self) -> list[str]:
        """Parse conversion review versions from comma-separated string.

        Returns:
            List of ConversionReview versions
        """
        return [
            v.strip() for v in self.conversion_review_versions.split(",") if v.strip()
        ]


# Global settings instance - initialized once at module import
settings = Settings()
