"""
Candidate dataclasses for extraction scoring.

Each candidate represents a potential extracted value with metadata
used for scoring and selection. Candidates live only for the duration of
one extraction call.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from receipt_extraction.utils.text import line_at, position_ratio, tokenize


@dataclass
class Candidate:
    """Base class for extraction candidates."""
    value: Any
    pattern_name: str
    match_span: tuple[int, int]  # (start, end) character positions
    raw_text: str = ""  # Original matched text
    priority: int = 100  # Lower is better (pattern order)
    position_ratio: float = 0.0  # match start / text length
    context_tokens: List[str] = field(default_factory=list)  # tokens of the surrounding line


@dataclass
class AmountCandidate(Candidate):
    """
    Candidate for a monetary field (total, tax, subtotal).

    ``value`` is the parsed amount as a float; 0 means the numeric string
    was malformed and the resolver will drop it.
    """
    value: float
    currency: str = "EUR"


@dataclass
class DateCandidate(Candidate):
    """Candidate for the receipt date. ``value`` is None when the match is not a real date."""
    value: Optional[str]  # ISO format: YYYY-MM-DD


@dataclass
class MerchantCandidate(Candidate):
    """
    Candidate for the merchant name.

    Scoring factors:
    - source: 'positional' (first lines) or 'keyword' (after a store indicator)
    - line_index: index among non-blank lines, positional candidates only
    """
    value: str
    source: str = "positional"
    line_index: Optional[int] = None


@dataclass
class LabelCandidate(Candidate):
    """Candidate for a short string field (payment method, receipt number)."""
    value: str


def create_candidate(
    cls,
    value: Any,
    pattern_name: str,
    match_span: tuple[int, int],
    raw_text: str,
    text: str,
    priority: int = 100,
    **extra
):
    """
    Create a candidate of type ``cls`` with computed position and context.

    Args:
        cls: Candidate subclass to build
        value: Parsed value
        pattern_name: Name of pattern that matched
        match_span: Character span of match
        raw_text: Original matched text
        text: Full text for context analysis
        priority: Pattern priority
        **extra: Subclass-specific fields (currency, source, line_index)

    Returns:
        Candidate with position ratio and line context tokens filled in
    """
    start, _ = match_span
    return cls(
        value=value,
        pattern_name=pattern_name,
        match_span=match_span,
        raw_text=raw_text.strip(),
        priority=priority,
        position_ratio=position_ratio(text, start),
        context_tokens=tokenize(line_at(text, start)),
        **extra
    )
