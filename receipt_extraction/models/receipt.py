"""
Pydantic models for extraction results.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Generic, List, Optional, TypeVar

from receipt_extraction.models.options import Language, ReceiptType

T = TypeVar("T")


class ExtractedField(BaseModel, Generic[T]):
    """One resolved answer plus provenance."""
    value: T
    confidence: float = Field(ge=0.0, le=1.0)
    raw_text: Optional[str] = None  # None when the value is a documented default
    bounding_box: Optional[Dict[str, Any]] = None

    class Config:
        frozen = True

    @property
    def is_default(self) -> bool:
        """True when no candidate was found and the value is a fallback."""
        return self.raw_text is None


class AmountField(ExtractedField[float]):
    """Resolved monetary amount with its ISO-4217 currency."""
    value: float = Field(ge=0.0)
    currency: str = "EUR"


class ReceiptItem(BaseModel):
    """One purchased line."""
    name: str
    quantity: float = Field(default=1, ge=0)
    unit_price: Optional[float] = Field(default=None, ge=0)
    total_price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None

    class Config:
        frozen = True


class ExtractionResult(BaseModel):
    """Structured receipt produced by a single extract call."""
    total_amount: AmountField
    date: ExtractedField[str]  # YYYY-MM-DD
    merchant_name: ExtractedField[str]
    items: List[ReceiptItem] = []
    summary: str = ""
    tax_amount: Optional[ExtractedField[float]] = None
    subtotal: Optional[ExtractedField[float]] = None
    payment_method: Optional[ExtractedField[str]] = None
    receipt_number: Optional[ExtractedField[str]] = None
    language: Language = Language.FRENCH
    receipt_type: ReceiptType = ReceiptType.UNKNOWN
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
