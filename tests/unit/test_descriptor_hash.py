"""
Unit tests for webhook description drift hashing.
"""

import pytest

from tests.fixtures.webhook_resources import (
    COMPLETE_MUTATING_DEFINITION,
    MINIMAL_WEBHOOK_DEFINITION,
)
from webhook_lifecycle.models.webhook import WebhookDescription
from webhook_lifecycle.utils.hashing import (
    SAFE_ALPHANUMS,
    canonical_description,
    fnv1a_32,
    hash_webhook_description,
    safe_encode_string,
)


class TestFnv1a32:
    """Known FNV-1a 32-bit values."""

    def test_empty_input_is_offset_basis(self):
        assert fnv1a_32(b"") == 0x811C9DC5

    @pytest.mark.parametrize(
        "data,expected",
        [
            (b"a", 0xE40C292C),
            (b"foobar", 0xBF9CF968),
        ],
    )
    def test_known_values(self, data, expected):
        assert fnv1a_32(data) == expected

    def test_result_fits_32_bits(self):
        assert 0 <= fnv1a_32(b"x" * 1000) <= 0xFFFFFFFF


class TestSafeEncodeString:
    """Tests for the label-safe encoding."""

    def test_digits(self):
        assert safe_encode_string("0123456789") == "456789bcdf"

    def test_output_uses_safe_alphabet(self):
        encoded = safe_encode_string("3735928559")
        assert set(encoded) <= set(SAFE_ALPHANUMS)
        assert len(encoded) == len("3735928559")


class TestHashWebhookDescription:
    """Tests for the drift hash of a description."""

    def test_deterministic(self):
        first = WebhookDescription.model_validate(COMPLETE_MUTATING_DEFINITION)
        second = WebhookDescription.model_validate(dict(COMPLETE_MUTATING_DEFINITION))

        assert hash_webhook_description(first) == hash_webhook_description(second)
        assert canonical_description(first) == canonical_description(second)

    def test_is_valid_label_value(self):
        value = hash_webhook_description(
            WebhookDescription.model_validate(MINIMAL_WEBHOOK_DEFINITION)
        )

        assert 0 < len(value) <= 63
        assert set(value) <= set(SAFE_ALPHANUMS)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("generateName", "other.test.com"),
            ("containerPort", 8443),
            ("timeoutSeconds", 5),
            ("failurePolicy", "Ignore"),
            ("webhookPath", "/validate"),
            ("admissionReviewVersions", ["v1"]),
            ("conversionCrd", "widgets.stable.example.com"),
            (
                "rules",
                [{"operations": ["CREATE"], "apiGroups": ["apps"], "resources": ["deployments"]}],
            ),
        ],
    )
    def test_field_change_alters_hash(self, field, value):
        base = WebhookDescription.model_validate(MINIMAL_WEBHOOK_DEFINITION)
        changed = WebhookDescription.model_validate(
            {**MINIMAL_WEBHOOK_DEFINITION, field: value}
        )

        assert hash_webhook_description(base) != hash_webhook_description(changed)

    def test_rule_order_matters(self):
        rules = COMPLETE_MUTATING_DEFINITION["rules"] + [
            {"operations": ["DELETE"], "apiGroups": ["apps"], "resources": ["deployments"]}
        ]
        forward = WebhookDescription.model_validate(
            {**COMPLETE_MUTATING_DEFINITION, "rules": rules}
        )
        backward = WebhookDescription.model_validate(
            {**COMPLETE_MUTATING_DEFINITION, "rules": list(reversed(rules))}
        )

        assert hash_webhook_description(forward) != hash_webhook_description(backward)
