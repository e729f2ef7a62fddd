"""
Strict-mode result validation.
"""

import logging
import re

from receipt_extraction.exceptions import ExtractionRejectedError
from receipt_extraction.models.receipt import ExtractionResult

logger = logging.getLogger(__name__)

ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')
ITEMS_TOTAL_TOLERANCE = 0.5  # relative deviation tolerated before warning


def check_items_total(result: ExtractionResult) -> bool:
    """
    Compare the sum of item prices with the receipt total.

    Tax and discounts make exact equality unreliable, so a deviation above
    50% is only logged.

    Returns:
        True when the items are consistent with the total (or cannot be compared)
    """
    items_total = sum(item.total_price or 0 for item in result.items)
    total = result.total_amount.value
    if items_total <= 0 or total <= 0:
        return True

    difference = abs(items_total - total)
    if difference / total > ITEMS_TOTAL_TOLERANCE:
        logger.warning(
            "Items total does not match receipt total",
            extra={
                "items_total": round(items_total, 2),
                "receipt_total": total,
                "difference": round(difference, 2),
            }
        )
        return False
    return True


def validate_result(result: ExtractionResult) -> None:
    """
    Reject results that are internally inconsistent.

    Checks run in order (total, date, merchant) and the first failure is
    raised.

    Raises:
        ExtractionRejectedError: If the total is not positive, the date was
            not found or is not YYYY-MM-DD, or the merchant name is shorter
            than 2 characters
    """
    if result.total_amount.value <= 0:
        raise ExtractionRejectedError(
            "Invalid total amount extracted",
            field="total_amount",
            value=result.total_amount.value,
        )

    if result.date.is_default or not ISO_DATE.match(result.date.value):
        raise ExtractionRejectedError(
            "Invalid date extracted",
            field="date",
            value=result.date.value,
        )

    if not result.merchant_name.value or len(result.merchant_name.value) < 2:
        raise ExtractionRejectedError(
            "Invalid merchant name extracted",
            field="merchant_name",
            value=result.merchant_name.value,
        )

    check_items_total(result)
