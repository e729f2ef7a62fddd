"""
Extraction options and the closed vocabularies they use.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Union


class Language(str, Enum):
    """Receipt language selecting one of the immutable pattern tables."""
    FRENCH = "fr"
    ENGLISH = "en"
    AUTO = "auto"


class ReceiptType(str, Enum):
    """Coarse document classification, metadata only."""
    RETAIL = "retail"
    CARD_PAYMENT = "card_payment"
    CASH_REGISTER = "cash_register"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ExtractionOptions:
    """
    Per-call configuration for the extractor.

    All fields are optional. ``reference_date`` is the "today" used for
    date recency scoring and for the date fallback; pinning it makes
    extraction fully deterministic.
    """
    language: Union[Language, str] = Language.AUTO
    receipt_type: Optional[ReceiptType] = None
    strict_validation: bool = False
    reference_date: Optional[date] = None

    def __post_init__(self):
        object.__setattr__(self, 'language', Language(self.language))
        if self.receipt_type is not None:
            object.__setattr__(self, 'receipt_type', ReceiptType(self.receipt_type))
