"""
Receipt extraction orchestrator.

Turns OCR text into an ExtractionResult: every scalar field is resolved
from competing scored candidates, items are parsed line by line, and an
optional strict validator rejects inconsistent results.
"""

import logging
from datetime import date
from typing import Optional

from receipt_extraction.config import Settings, settings as default_settings
from receipt_extraction.models.options import ExtractionOptions, Language
from receipt_extraction.models.receipt import ExtractionResult
from receipt_extraction.services.detection import detect_language, detect_receipt_type
from receipt_extraction.services.items import extract_items
from receipt_extraction.services.matchers import (
    match_dates,
    match_payment_methods,
    match_receipt_numbers,
    match_subtotals,
    match_tax_amounts,
    match_total_amounts,
)
from receipt_extraction.services.merchant import match_merchant_names
from receipt_extraction.services.resolver import (
    resolve_date,
    resolve_label,
    resolve_merchant_name,
    resolve_optional_amount,
    resolve_total_amount,
)
from receipt_extraction.services.summary import generate_summary
from receipt_extraction.services.validation import validate_result
from receipt_extraction.utils.patterns import pattern_table
from receipt_extraction.utils.scoring import (
    AMOUNT_PROFILE,
    PAYMENT_PROFILE,
    RECEIPT_NUMBER_PROFILE,
    SUBTOTAL_PROFILE,
    TAX_PROFILE,
    ScoringContext,
)
from receipt_extraction.utils.text import normalize_ocr_spacing

logger = logging.getLogger(__name__)


class ReceiptExtractor:
    """Stateless extraction service; one instance can serve concurrent calls."""

    # Overall confidence weights (sum to 1.0)
    CONFIDENCE_WEIGHTS = {
        'total_amount': 0.35,  # Most critical field
        'merchant_name': 0.25,
        'date': 0.25,
        'tax_amount': 0.10,    # Nice to have but not critical
        'payment_method': 0.05,
    }

    def __init__(self, config: Optional[Settings] = None):
        self.settings = config or default_settings

    def _resolve_options(self, options: Optional[ExtractionOptions]) -> ExtractionOptions:
        if options is not None:
            return options
        return ExtractionOptions(
            language=Language(self.settings.DEFAULT_LANGUAGE),
            strict_validation=self.settings.STRICT_VALIDATION,
        )

    def extract(self, text: str, options: Optional[ExtractionOptions] = None) -> ExtractionResult:
        """
        Extract structured receipt data from OCR text.

        Args:
            text: OCR-extracted receipt text
            options: Language, receipt type, strict validation and the
                reference date used for recency scoring and the date fallback

        Returns:
            ExtractionResult, with low-confidence defaults for missing fields

        Raises:
            ExtractionRejectedError: Only when ``strict_validation`` is set and
                the result is inconsistent
        """
        options = self._resolve_options(options)
        text = normalize_ocr_spacing(text or "")

        logger.info(
            "Starting data extraction",
            extra={"text_length": len(text), "language": options.language.value}
        )

        language = options.language
        if language == Language.AUTO:
            language = detect_language(text)
        receipt_type = options.receipt_type or detect_receipt_type(text)

        table = pattern_table(language)
        context = ScoringContext(text=text, reference_date=options.reference_date or date.today())
        currency = self.settings.DEFAULT_CURRENCY
        fallback_confidence = self.settings.DEFAULT_CONFIDENCE

        total_amount = resolve_total_amount(
            match_total_amounts(text, table, currency),
            AMOUNT_PROFILE,
            context,
            default_currency=currency,
            default_confidence=fallback_confidence,
        )
        receipt_date = resolve_date(match_dates(text), context, default_confidence=fallback_confidence)
        merchant_name = resolve_merchant_name(
            match_merchant_names(text, table),
            context,
            unknown_merchant=self.settings.UNKNOWN_MERCHANT,
            default_confidence=fallback_confidence,
        )
        items = extract_items(text, max_items=self.settings.MAX_ITEMS)

        result = ExtractionResult(
            total_amount=total_amount,
            date=receipt_date,
            merchant_name=merchant_name,
            items=items,
            summary=generate_summary(
                merchant_name,
                total_amount,
                receipt_date,
                len(items),
                unknown_merchant=self.settings.UNKNOWN_MERCHANT,
                max_length=self.settings.SUMMARY_MAX_LENGTH,
            ),
            tax_amount=resolve_optional_amount(match_tax_amounts(text, table, currency), TAX_PROFILE, context),
            subtotal=resolve_optional_amount(match_subtotals(text, table, currency), SUBTOTAL_PROFILE, context),
            payment_method=resolve_label(match_payment_methods(text, table), PAYMENT_PROFILE, context),
            receipt_number=resolve_label(match_receipt_numbers(text), RECEIPT_NUMBER_PROFILE, context),
            language=language,
            receipt_type=receipt_type,
        )
        result = result.model_copy(update={"confidence": self._calculate_confidence(result)})

        if options.strict_validation:
            validate_result(result)

        logger.info(
            "Data extraction completed successfully",
            extra={
                "total_amount": total_amount.value,
                "currency": total_amount.currency,
                "date": receipt_date.value,
                "merchant_name": merchant_name.value,
                "item_count": len(items),
                "language": language.value,
                "receipt_type": receipt_type.value,
            }
        )
        return result

    def _calculate_confidence(self, result: ExtractionResult) -> float:
        """
        Weighted mean of field confidences.

        Absent optional fields contribute nothing, so a receipt with only
        the three core fields tops out at 0.85.
        """
        score = 0.0
        for field, weight in self.CONFIDENCE_WEIGHTS.items():
            extracted = getattr(result, field)
            if extracted is not None:
                score += weight * extracted.confidence
        return round(max(0.0, min(1.0, score)), 2)


# Shared instance built from the process settings
receipt_extractor = ReceiptExtractor()


def extract(text: str, options: Optional[ExtractionOptions] = None) -> ExtractionResult:
    """Extract a receipt with the shared extractor."""
    return receipt_extractor.extract(text, options)
