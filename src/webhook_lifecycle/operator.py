#!/usr/bin/env python3
"""
Webhook lifecycle admission server - kopf entry point.

Serves the ClusterServiceVersion admission handler that refuses unsafe
webhook definitions before install, and exposes Prometheus metrics.

Usage:
    python -m webhook_lifecycle.operator

Environment Variables:
    WEBHOOK_PORT: Port of the admission server (default 8443)
    WEBHOOK_CERT_DIR: Directory with tls.crt and tls.key
    METRICS_PORT: Port of the metrics endpoint (default 8081)
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
"""

import logging
import sys

import kopf
from prometheus_client import start_http_server

from webhook_lifecycle.observability.logging import setup_structured_logging
from webhook_lifecycle.observability.metrics import get_metrics_registry
from webhook_lifecycle.settings import settings as operator_settings

# Importing the module registers the admission handler with kopf
from webhook_lifecycle.webhooks import csv as csv_webhook  # noqa: F401


def configure_logging() -> None:
    """Configure structured logging based on operator_settings."""
    setup_structured_logging(
        log_level=operator_settings.log_level.upper(),
        enable_json_formatting=operator_settings.json_logs,
        correlation_id_enabled=operator_settings.correlation_ids,
        webhook_log_level=operator_settings.webhook_log_level,
    )


@kopf.on.startup()
async def startup_handler(settings: kopf.OperatorSettings, **_) -> None:
    """Start the metrics endpoint once kopf is up."""
    logging.info("Starting webhook lifecycle admission server...")

    settings.watching.reconnect_backoff = 1.0

    start_http_server(operator_settings.metrics_port, registry=get_metrics_registry())
    logging.info(f"Metrics available on port {operator_settings.metrics_port}")


def build_kopf_settings() -> kopf.OperatorSettings:
    """Admission server settings; configurations are managed outside kopf."""
    cert_dir = operator_settings.webhook_cert_dir
    settings_obj = kopf.OperatorSettings()
    settings_obj.admission.server = kopf.WebhookServer(
        port=operator_settings.webhook_port,
        host="0.0.0.0",
        certfile=f"{cert_dir}/tls.crt",
        pkeyfile=f"{cert_dir}/tls.key",
    )
    settings_obj.admission.managed = None
    return settings_obj


def main() -> None:
    """
    Main entry point.

    Configures logging and admission settings, then runs kopf cluster-wide.
    """
    configure_logging()

    settings_obj = build_kopf_settings()
    logging.info(
        f"Admission webhook server on port {operator_settings.webhook_port} "
        f"using certificates from {operator_settings.webhook_cert_dir}"
    )

    try:
        kopf.run(clusterwide=True, settings=settings_obj)
    except KeyboardInterrupt:
        logging.info("Received shutdown signal")
        sys.exit(0)
    except Exception as e:
        logging.error(f"Admission server failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
