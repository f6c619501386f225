"""
Content hashing for webhook descriptions.

The hash is stored as a label on every reconciled configuration object and is
only a drift marker: a non-cryptographic equality fingerprint. It must be
stable across processes and machines, so it is computed over a canonical JSON
rendering of the description rather than over Python object identity.
"""

import json
import logging
from typing import Any

from webhook_lifecycle.models.webhook import WebhookDescription

logger = logging.getLogger(__name__)

FNV32_OFFSET_BASIS = 0x811C9DC5
FNV32_PRIME = 0x01000193

# Alphabet without vowels and confusable characters, as used by Kubernetes
# when it encodes hashes into names and label values.
SAFE_ALPHANUMS = "bcdfghjklmnpqrstvwxz2456789"


def fnv1a_32(data: bytes) -> int:
    """32-bit FNV-1a hash of ``data``."""
    value = FNV32_OFFSET_BASIS
    for byte in data:
        value ^= byte
        value = (value * FNV32_PRIME) & 0xFFFFFFFF
    return value


def safe_encode_string(value: str) -> str:
    """Map every character onto the safe alphabet so the result is a valid label value."""
    return "".join(SAFE_ALPHANUMS[ord(char) % len(SAFE_ALPHANUMS)] for char in value)


def canonical_description(desc: WebhookDescription) -> bytes:
    """
    Serialize a description deterministically.

    Field order follows the model, list order is preserved and mapping keys
    are sorted, so two field-for-field identical descriptions serialize to
    the same bytes.
    """
    data: dict[str, Any] = desc.model_dump(mode="json", by_alias=True)
    return json.dumps(data, sort_keys=True, separators=(",", ":")).encode("utf-8")


def hash_webhook_description(desc: WebhookDescription) -> str:
    """
    Calculate the drift hash of a webhook description.

    Args:
        desc: Webhook description to hash

    Returns:
        Label-safe hash string
    """
    digest = fnv1a_32(canonical_description(desc))
    encoded = safe_encode_string(str(digest))
    logger.debug(f"Hashed webhook description {desc.generate_name}: {encoded}")
    return encoded
