"""
Scoring functions for extraction candidates.

Every heuristic is a pure rule ``(candidate, context) -> delta``. A
ScoringProfile folds its rules over a base score and clamps the result to
[0.1, 1.0]: a matched candidate is never scored below the "still
possible" floor nor above certainty.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence, Tuple, TypeVar
import re

from receipt_extraction.utils.candidates import Candidate, DateCandidate, MerchantCandidate
from receipt_extraction.utils.text import contains_phrase, tokenize

__all__ = [
    'ScoringContext', 'ScoringProfile', 'ScoringRule',
    'score_candidate', 'select_top_candidates', 'select_best_candidate',
    'AMOUNT_PROFILE', 'DATE_PROFILE', 'MERCHANT_PROFILE', 'TAX_PROFILE',
    'SUBTOTAL_PROFILE', 'PAYMENT_PROFILE', 'RECEIPT_NUMBER_PROFILE',
    'MIN_SCORE', 'MAX_SCORE',
]

MIN_SCORE = 0.1
MAX_SCORE = 1.0

T = TypeVar('T', bound=Candidate)


@dataclass(frozen=True)
class ScoringContext:
    """Read-only facts about the document shared by all rules."""
    text: str
    reference_date: date


ScoringRule = Callable[[Candidate, ScoringContext], float]


@dataclass(frozen=True)
class ScoringProfile:
    """Base score plus an ordered list of rules for one field."""
    name: str
    base: float
    rules: Tuple[ScoringRule, ...] = ()


def score_candidate(candidate: Candidate, profile: ScoringProfile, context: ScoringContext) -> float:
    """
    Score a candidate by folding the profile's rules over its base score.

    Returns:
        Score clamped to [0.1, 1.0]
    """
    score = profile.base
    for rule in profile.rules:
        score += rule(candidate, context)
    return max(MIN_SCORE, min(MAX_SCORE, score))


# Rule factories

def match_phrase_bonus(groups: Sequence[Tuple[Sequence[str], float]]) -> ScoringRule:
    """
    Add ``delta`` once per group when any of its phrases appears in the
    matched substring.
    """
    def rule(candidate: Candidate, context: ScoringContext) -> float:
        tokens = tokenize(candidate.raw_text)
        return sum(
            delta for phrases, delta in groups
            if any(contains_phrase(tokens, phrase) for phrase in phrases)
        )
    return rule


def line_phrase_delta(groups: Sequence[Tuple[Sequence[str], float]]) -> ScoringRule:
    """Add ``delta`` once per group when any phrase appears on the candidate's line."""
    def rule(candidate: Candidate, context: ScoringContext) -> float:
        return sum(
            delta for phrases, delta in groups
            if any(contains_phrase(candidate.context_tokens, phrase) for phrase in phrases)
        )
    return rule


def position_delta(late_after: Optional[float] = None, late_bonus: float = 0.0,
                   early_before: Optional[float] = None, early_delta: float = 0.0) -> ScoringRule:
    """Adjust by position ratio: ``late_bonus`` past ``late_after``, ``early_delta`` before ``early_before``."""
    def rule(candidate: Candidate, context: ScoringContext) -> float:
        delta = 0.0
        if late_after is not None and candidate.position_ratio > late_after:
            delta += late_bonus
        if early_before is not None and candidate.position_ratio < early_before:
            delta += early_delta
        return delta
    return rule


def pattern_delta(deltas: Dict[str, float]) -> ScoringRule:
    """Adjust by the name of the pattern that produced the candidate."""
    def rule(candidate: Candidate, context: ScoringContext) -> float:
        return deltas.get(candidate.pattern_name, 0.0)
    return rule


def date_recency(candidate: DateCandidate, context: ScoringContext) -> float:
    """
    Real receipts skew recent.

    Within 30 days: +0.2, within a year: +0.1, older than 5 years: -0.2
    """
    if not candidate.value:
        return 0.0
    days = abs((context.reference_date - date.fromisoformat(candidate.value)).days)
    if days <= 30:
        return 0.2
    if days <= 365:
        return 0.1
    if days > 365 * 5:
        return -0.2
    return 0.0


# Merchant structure rules

MERCHANT_LINE_BONUS = {
    0: 0.3,  # Line 0 (very first line) - strong boost
    1: 0.2,
    2: 0.1,
}

_COMPANY_SUFFIX = re.compile(r'\b(?:ltd|inc|sa|sarl|sas|sasu|eurl|gmbh|llc)\b', re.IGNORECASE)
_CONJUNCTION = re.compile(r'&|\b(?:et|and)\b', re.IGNORECASE)
_DATE_LIKE = re.compile(r'\d{1,2}[/.-]\d{1,2}[/.-]\d{2,4}')
_AMOUNT_LIKE = re.compile(r'[€$£¥]\s*\d+|\d+[.,]?\d*\s*[€$£¥]')


def merchant_line_bonus(candidate: MerchantCandidate, context: ScoringContext) -> float:
    """Earlier lines are more likely to hold the store name."""
    if candidate.source != 'positional' or candidate.line_index is None:
        return 0.0
    return MERCHANT_LINE_BONUS.get(candidate.line_index, 0.0)


def merchant_source_bonus(candidate: MerchantCandidate, context: ScoringContext) -> float:
    """A name found right after a store indicator word."""
    return 0.2 if candidate.source == 'keyword' else 0.0


def merchant_length(candidate: Candidate, context: ScoringContext) -> float:
    length = len(candidate.value)
    if 5 <= length <= 25:
        return 0.2
    if 3 <= length <= 35:
        return 0.1
    return 0.0


def merchant_structure(candidate: Candidate, context: ScoringContext) -> float:
    """Uppercase letters, conjunctions and company suffixes look like a business name."""
    name = candidate.value
    delta = 0.0
    if any(c.isupper() for c in name):
        delta += 0.1
    if _CONJUNCTION.search(name):
        delta += 0.1
    if _COMPANY_SUFFIX.search(name):
        delta += 0.2
    return delta


def merchant_noise_penalty(candidate: Candidate, context: ScoringContext) -> float:
    """Dates and amounts inside a name mean the line is something else."""
    source = candidate.raw_text or candidate.value
    delta = 0.0
    if _DATE_LIKE.search(source):
        delta -= 0.3
    if _AMOUNT_LIKE.search(source):
        delta -= 0.3
    return delta


# Keyword tables (language-neutral: receipts mix both)

STRONG_TOTAL_KEYWORDS = (
    (('total',), 0.3),
    (('montant',), 0.3),
    (('amount',), 0.3),
    (('somme', 'sum'), 0.25),
    (('à payer', 'a payer', 'to pay', 'balance due'), 0.25),
)

CARD_KEYWORDS = (
    (('carte', 'cb', 'card'), 0.2),
    (('visa', 'mastercard'), 0.2),
)

TOTAL_DEPRIORITIZING = (
    (('sous-total', 'sous total', 'subtotal', 'sub-total', 'sub total', 'ht'), -0.2),
    (('tva', 'tax', 'taxe', 'taxes', 'vat'), -0.2),
)

PAYMENT_CONTEXT = (
    (('paiement', 'payment', 'payé', 'paye', 'paid', 'réglé', 'regle'), 0.1),
)

# Profiles

AMOUNT_PROFILE = ScoringProfile(
    name='total_amount',
    base=0.5,
    rules=(
        match_phrase_bonus(STRONG_TOTAL_KEYWORDS),
        match_phrase_bonus(CARD_KEYWORDS),
        line_phrase_delta(TOTAL_DEPRIORITIZING),
        position_delta(late_after=0.7, late_bonus=0.1, early_before=0.3, early_delta=-0.1),
    ),
)

DATE_PROFILE = ScoringProfile(
    name='date',
    base=0.6,
    rules=(
        date_recency,
        position_delta(early_before=0.5, early_delta=0.1),
        line_phrase_delta(((('date', 'le', 'du', 'on'), 0.1),)),
    ),
)

MERCHANT_PROFILE = ScoringProfile(
    name='merchant_name',
    base=0.5,
    rules=(
        merchant_source_bonus,
        merchant_line_bonus,
        merchant_length,
        merchant_structure,
        merchant_noise_penalty,
    ),
)

TAX_PROFILE = ScoringProfile(
    name='tax_amount',
    base=0.7,
    rules=(position_delta(late_after=0.5, late_bonus=0.1),),
)

SUBTOTAL_PROFILE = ScoringProfile(
    name='subtotal',
    base=0.7,
    rules=(position_delta(late_after=0.5, late_bonus=0.1),),
)

PAYMENT_PROFILE = ScoringProfile(
    name='payment_method',
    base=0.6,
    rules=(
        pattern_delta({'visa': 0.2, 'mastercard': 0.2, 'amex': 0.2}),
        line_phrase_delta(PAYMENT_CONTEXT),
        position_delta(late_after=0.5, late_bonus=0.05),
    ),
)

RECEIPT_NUMBER_PROFILE = ScoringProfile(
    name='receipt_number',
    base=0.6,
    rules=(pattern_delta({'receipt_keyword': 0.1, 'generic_code': -0.3}),),
)


def select_top_candidates(
    candidates: List[T],
    profile: ScoringProfile,
    context: ScoringContext,
    top_n: Optional[int] = 3
) -> List[tuple[T, float]]:
    """
    Score and rank candidates.

    The sort is stable, so equal scores keep pattern/emission order.

    Args:
        candidates: List of candidates to score
        profile: Scoring profile for the field
        context: Document context
        top_n: Number of top candidates to return (None for all)

    Returns:
        List of (candidate, score) tuples, sorted by score descending
    """
    scored = [(candidate, score_candidate(candidate, profile, context)) for candidate in candidates]
    scored.sort(key=lambda x: x[1], reverse=True)
    if top_n is None:
        return scored
    return scored[:top_n]


def select_best_candidate(
    candidates: List[T],
    profile: ScoringProfile,
    context: ScoringContext
) -> Optional[tuple[T, float]]:
    """
    Select best candidate and its score.

    Returns:
        (candidate, score) for the highest-scoring candidate, or None if empty list
    """
    if not candidates:
        return None
    return select_top_candidates(candidates, profile, context, top_n=1)[0]
