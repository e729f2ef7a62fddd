"""
Field resolver: turns scored candidates into one accepted value per field.

Scalar fields never fail on a miss. An empty (or entirely unusable)
candidate pool yields a documented default with low confidence and no
raw text; only strict validation can turn that into an error.
"""

import logging
from typing import Callable, List, Optional, Tuple, TypeVar

from receipt_extraction.models.receipt import AmountField, ExtractedField
from receipt_extraction.utils.candidates import (
    AmountCandidate,
    Candidate,
    DateCandidate,
    LabelCandidate,
    MerchantCandidate,
)
from receipt_extraction.utils.scoring import (
    DATE_PROFILE,
    MERCHANT_PROFILE,
    ScoringContext,
    ScoringProfile,
    select_best_candidate,
)

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Candidate)

DEFAULT_CONFIDENCE = 0.1


def _confidence(score: float) -> float:
    return round(score, 2)


def best_usable(
    candidates: List[T],
    profile: ScoringProfile,
    context: ScoringContext,
    usable: Callable[[T], bool]
) -> Optional[Tuple[T, float]]:
    """
    Drop candidates whose parsed value is unusable, then pick the best.

    Returns:
        (candidate, score) or None when nothing usable remains
    """
    pool = [c for c in candidates if usable(c)]
    if len(pool) != len(candidates):
        logger.debug(
            "Unusable candidates dropped",
            extra={"field": profile.name, "dropped": len(candidates) - len(pool)}
        )
    return select_best_candidate(pool, profile, context)


def _positive_amount(candidate: AmountCandidate) -> bool:
    return candidate.value > 0


def resolve_total_amount(
    candidates: List[AmountCandidate],
    profile: ScoringProfile,
    context: ScoringContext,
    default_currency: str = 'EUR',
    default_confidence: float = DEFAULT_CONFIDENCE
) -> AmountField:
    """Best positive amount, or 0 in ``default_currency`` at low confidence."""
    best = best_usable(candidates, profile, context, _positive_amount)
    if best is None:
        return AmountField(value=0.0, currency=default_currency, confidence=default_confidence)

    candidate, score = best
    return AmountField(
        value=candidate.value,
        currency=candidate.currency,
        confidence=_confidence(score),
        raw_text=candidate.raw_text,
    )


def resolve_date(
    candidates: List[DateCandidate],
    context: ScoringContext,
    default_confidence: float = DEFAULT_CONFIDENCE
) -> ExtractedField[str]:
    """Best real calendar date, or the reference date at low confidence."""
    best = best_usable(candidates, DATE_PROFILE, context, lambda c: c.value is not None)
    if best is None:
        return ExtractedField[str](value=context.reference_date.isoformat(), confidence=default_confidence)

    candidate, score = best
    return ExtractedField[str](value=candidate.value, confidence=_confidence(score), raw_text=candidate.raw_text)


def resolve_merchant_name(
    candidates: List[MerchantCandidate],
    context: ScoringContext,
    unknown_merchant: str,
    default_confidence: float = DEFAULT_CONFIDENCE
) -> ExtractedField[str]:
    """Best merchant candidate, or the unknown-merchant sentinel at low confidence."""
    best = best_usable(candidates, MERCHANT_PROFILE, context, lambda c: len(c.value) >= 2)
    if best is None:
        return ExtractedField[str](value=unknown_merchant, confidence=default_confidence)

    candidate, score = best
    return ExtractedField[str](value=candidate.value, confidence=_confidence(score), raw_text=candidate.raw_text)


def resolve_optional_amount(
    candidates: List[AmountCandidate],
    profile: ScoringProfile,
    context: ScoringContext
) -> Optional[ExtractedField[float]]:
    """Tax and subtotal are optional: a miss is simply None."""
    best = best_usable(candidates, profile, context, _positive_amount)
    if best is None:
        return None

    candidate, score = best
    return ExtractedField[float](value=candidate.value, confidence=_confidence(score), raw_text=candidate.raw_text)


def resolve_label(
    candidates: List[LabelCandidate],
    profile: ScoringProfile,
    context: ScoringContext
) -> Optional[ExtractedField[str]]:
    """Payment method and receipt number: best non-empty label or None."""
    best = best_usable(candidates, profile, context, lambda c: bool(c.value))
    if best is None:
        return None

    candidate, score = best
    return ExtractedField[str](value=candidate.value, confidence=_confidence(score), raw_text=candidate.raw_text)
