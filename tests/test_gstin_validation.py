"""Tests for GSTIN / PAN checks on customer and supplier records."""

import pytest

from pharmabill.domain.errors import ValidationError
from pharmabill.domain.services.gstin_validation import (
    is_valid_gstin,
    is_valid_pan,
    state_name,
    validate_counterparty,
)


class TestFormats:
    def test_valid_gstin(self):
        assert is_valid_gstin("27AAPFU0939F1ZV")
        assert is_valid_gstin(" 27aapfu0939f1zv ")

    def test_invalid_gstin(self):
        assert not is_valid_gstin("27AAPFU0939F1Z")
        assert not is_valid_gstin("")
        assert not is_valid_gstin(None)

    def test_pan(self):
        assert is_valid_pan("AAPFU0939F")
        assert not is_valid_pan("AAPF0939F")

    def test_state_name(self):
        assert state_name("27") == "Maharashtra"
        assert state_name("7") == "Delhi"
        assert state_name("99") is None


class TestValidateCounterparty:
    def test_b2c_without_gstin_ok(self):
        assert validate_counterparty("B2C", None, "27") == []

    def test_b2b_requires_gstin(self):
        with pytest.raises(ValidationError, match="GSTIN is required"):
            validate_counterparty("B2B", None, "27")

    def test_unknown_state_code(self):
        with pytest.raises(ValidationError, match="Unknown state code"):
            validate_counterparty("B2C", None, "99")

    def test_malformed_gstin_rejected(self):
        with pytest.raises(ValidationError, match="Invalid GSTIN"):
            validate_counterparty("B2C", "NOT-A-GSTIN", "27")

    def test_state_mismatch_is_only_reported(self):
        diagnostics = validate_counterparty("B2B", "24AAACS1234F1Z5", "27")
        assert len(diagnostics) == 1
        assert diagnostics[0].context["state_code"] == "27"
