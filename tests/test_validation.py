"""
Tests for strict-mode validation and the domain error.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import logging

import pytest

from receipt_extraction.exceptions import ExtractionError, ExtractionRejectedError
from receipt_extraction.models.receipt import AmountField, ExtractedField, ExtractionResult, ReceiptItem
from receipt_extraction.services.validation import check_items_total, validate_result


def _result(total=8.0, date_value="2024-03-15", date_found=True, merchant="CARREFOUR", items=None):
    return ExtractionResult(
        total_amount=AmountField(value=total, confidence=0.8, raw_text="TOTAL"),
        date=ExtractedField[str](
            value=date_value,
            confidence=0.9 if date_found else 0.1,
            raw_text=date_value if date_found else None,
        ),
        merchant_name=ExtractedField[str](value=merchant, confidence=0.9, raw_text=merchant),
        items=items or [],
    )


class TestValidateResult:
    """Checks run in order total, date, merchant."""

    def test_valid_result_passes(self):
        validate_result(_result())

    def test_zero_total_rejected(self):
        with pytest.raises(ExtractionRejectedError) as exc_info:
            validate_result(_result(total=0.0))
        assert exc_info.value.field == "total_amount"
        assert exc_info.value.value == 0.0

    def test_bad_date_format_rejected(self):
        with pytest.raises(ExtractionRejectedError) as exc_info:
            validate_result(_result(date_value="15/03/2024"))
        assert exc_info.value.field == "date"

    def test_defaulted_date_rejected(self):
        with pytest.raises(ExtractionRejectedError) as exc_info:
            validate_result(_result(date_found=False))
        assert exc_info.value.field == "date"

    def test_short_merchant_rejected(self):
        with pytest.raises(ExtractionRejectedError) as exc_info:
            validate_result(_result(merchant="X"))
        assert exc_info.value.field == "merchant_name"

    def test_first_failure_reported(self):
        with pytest.raises(ExtractionRejectedError) as exc_info:
            validate_result(_result(total=0.0, date_found=False, merchant="X"))
        assert exc_info.value.field == "total_amount"

    def test_items_mismatch_only_warns(self, caplog):
        items = [ReceiptItem(name="Pain", total_price=30.0)]
        with caplog.at_level(logging.WARNING, logger="receipt_extraction.services.validation"):
            validate_result(_result(total=8.0, items=items))
        assert "Items total does not match receipt total" in caplog.text


class TestCheckItemsTotal:
    """Advisory consistency check."""

    def test_within_tolerance(self):
        items = [ReceiptItem(name="Pain", total_price=3.0), ReceiptItem(name="Lait", total_price=4.0)]
        assert check_items_total(_result(total=8.0, items=items))

    def test_outside_tolerance(self):
        items = [ReceiptItem(name="Pain", total_price=1.0)]
        assert not check_items_total(_result(total=8.0, items=items))

    def test_no_items(self):
        assert check_items_total(_result(total=8.0))


class TestExtractionRejectedError:
    """Domain error payload."""

    def test_to_dict(self):
        error = ExtractionRejectedError("Invalid total amount extracted", field="total_amount", value=0.0)
        assert error.to_dict() == {
            "code": "EXTRACTION_REJECTED",
            "message": "Invalid total amount extracted",
            "field": "total_amount",
            "value": 0.0,
        }

    def test_is_extraction_error(self):
        error = ExtractionRejectedError("bad", field="date")
        assert isinstance(error, ExtractionError)
        assert str(error) == "bad"
