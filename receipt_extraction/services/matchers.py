"""
Candidate pattern matchers.

Each matcher scans the full text with a fixed, ordered list of patterns
and emits every raw match as a candidate. Nothing is discarded here:
overlapping matches from different patterns coexist, and unusable values
(amount 0, impossible dates) are filtered by the resolver.
"""

import logging
from typing import Iterable, List

from receipt_extraction.utils.candidates import (
    AmountCandidate,
    DateCandidate,
    LabelCandidate,
    create_candidate,
)
from receipt_extraction.utils.dates import normalize_date
from receipt_extraction.utils.money import DEFAULT_CURRENCY, normalize_amount
from receipt_extraction.utils.patterns import (
    DATE_PATTERNS,
    RECEIPT_NUMBER_PATTERNS,
    PatternSpec,
    PatternTable,
)

logger = logging.getLogger(__name__)


def _match_amounts(
    text: str,
    specs: Iterable[PatternSpec],
    default_currency: str
) -> List[AmountCandidate]:
    candidates: List[AmountCandidate] = []
    for spec in specs:
        for match in spec.compiled.finditer(text):
            parsed = normalize_amount(match.groupdict(), default_currency)
            candidates.append(create_candidate(
                AmountCandidate,
                value=parsed.amount,
                currency=parsed.currency,
                pattern_name=spec.name,
                match_span=(match.start(), match.end()),
                raw_text=match.group(0),
                text=text,
                priority=spec.priority,
            ))
    return candidates


def match_total_amounts(
    text: str,
    table: PatternTable,
    default_currency: str = DEFAULT_CURRENCY
) -> List[AmountCandidate]:
    """
    Emit total-amount candidates.

    Keyword-anchored patterns ("total:", "montant:") run first, bare
    currency-amount patterns last.

    Args:
        text: Receipt text
        table: Pattern table for the receipt language
        default_currency: ISO code used when no symbol is captured

    Returns:
        Unranked AmountCandidate list in pattern order
    """
    candidates = _match_amounts(text, table.amount, default_currency)
    logger.debug("Total amount candidates", extra={"count": len(candidates)})
    return candidates


def match_tax_amounts(text: str, table: PatternTable, default_currency: str = DEFAULT_CURRENCY) -> List[AmountCandidate]:
    """Emit tax candidates (TVA / tax / VAT lines)."""
    return _match_amounts(text, table.tax, default_currency)


def match_subtotals(text: str, table: PatternTable, default_currency: str = DEFAULT_CURRENCY) -> List[AmountCandidate]:
    """Emit subtotal candidates (sous-total / subtotal lines)."""
    return _match_amounts(text, table.subtotal, default_currency)


def match_dates(text: str) -> List[DateCandidate]:
    """
    Emit date candidates for numeric and month-name dates.

    Candidates whose groups do not form a real calendar date carry
    ``value=None``.
    """
    candidates: List[DateCandidate] = []
    for spec in DATE_PATTERNS:
        for match in spec.compiled.finditer(text):
            candidates.append(create_candidate(
                DateCandidate,
                value=normalize_date(match.groupdict()),
                pattern_name=spec.name,
                match_span=(match.start(), match.end()),
                raw_text=match.group(0),
                text=text,
                priority=spec.priority,
            ))
    logger.debug("Date candidates", extra={"count": len(candidates)})
    return candidates


def match_payment_methods(text: str, table: PatternTable) -> List[LabelCandidate]:
    """Emit payment-method candidates, already normalized to canonical labels."""
    candidates: List[LabelCandidate] = []
    for spec in table.payment:
        for match in spec.compiled.finditer(text):
            candidates.append(create_candidate(
                LabelCandidate,
                value=spec.label or match.group(0),
                pattern_name=spec.name,
                match_span=(match.start(), match.end()),
                raw_text=match.group(0),
                text=text,
                priority=spec.priority,
            ))
    return candidates


def match_receipt_numbers(text: str) -> List[LabelCandidate]:
    """Emit receipt/ticket number candidates; every value contains a digit."""
    candidates: List[LabelCandidate] = []
    for spec in RECEIPT_NUMBER_PATTERNS:
        for match in spec.compiled.finditer(text):
            candidates.append(create_candidate(
                LabelCandidate,
                value=match.group('value').strip(),
                pattern_name=spec.name,
                match_span=(match.start(), match.end()),
                raw_text=match.group(0),
                text=text,
                priority=spec.priority,
            ))
    return candidates
