"""
Merchant name extraction.

Two strategies feed one candidate pool:
1. positional: the first three non-blank lines
2. keyword: text following a store indicator word ("magasin", "store")

Every candidate string passes a validity filter before it is scored.
"""

import re
from typing import List, Optional

from receipt_extraction.utils.candidates import MerchantCandidate, create_candidate
from receipt_extraction.utils.patterns import PatternTable

POSITIONAL_LINES = 3
MAX_NAME_LENGTH = 50

_LETTER = re.compile(r'[^\W\d_]')
_SPECIAL = re.compile(r"[^\w\s\-&'.,]")

# Shapes that are never a merchant name
EXCLUDE_PATTERNS = [
    re.compile(r'^\d+[/.-]\d+[/.-]\d+$'),  # Dates
    re.compile(r'^[€$£¥]?\s*\d+[.,]\d{2}\s*[€$£¥]?$'),  # Amounts
    re.compile(r'^(?:total|montant|tva|tax|subtotal|sous-total)$', re.IGNORECASE),  # Receipt terms
    re.compile(r'^(?:ticket|reçu|recu|receipt|facture|invoice)$', re.IGNORECASE),  # Receipt identifiers
]


def is_valid_merchant_name(name: str) -> bool:
    """
    Check whether a string could be a merchant name.

    Rules: length 2-50, contains letters, letters are at least 30% of
    the characters, special characters at most 30%, and it is not a bare
    date, amount or receipt keyword.
    """
    trimmed = name.strip()

    if len(trimmed) < 2 or len(trimmed) > MAX_NAME_LENGTH:
        return False

    letter_count = len(_LETTER.findall(trimmed))
    if letter_count == 0:
        return False
    if letter_count / len(trimmed) < 0.3:
        return False

    if len(_SPECIAL.findall(trimmed)) / len(trimmed) > 0.3:
        return False

    return not any(pattern.match(trimmed) for pattern in EXCLUDE_PATTERNS)


def normalize_merchant_name(name: str) -> str:
    """Collapse whitespace, drop disallowed punctuation, cap at 50 characters."""
    name = ' '.join(name.split())
    name = _SPECIAL.sub('', name)
    name = ' '.join(name.split())
    return name[:MAX_NAME_LENGTH]


def _positional_candidates(text: str) -> List[MerchantCandidate]:
    candidates: List[MerchantCandidate] = []
    line_index = 0
    offset = 0

    for raw_line in text.split('\n'):
        line_start = offset
        offset += len(raw_line) + 1
        line = raw_line.strip()
        if not line:
            continue
        if line_index >= POSITIONAL_LINES:
            break

        if is_valid_merchant_name(line):
            start = line_start + raw_line.index(line)
            candidates.append(create_candidate(
                MerchantCandidate,
                value=normalize_merchant_name(line),
                pattern_name='early_line',
                match_span=(start, start + len(line)),
                raw_text=line,
                text=text,
                source='positional',
                line_index=line_index,
            ))
        line_index += 1

    return candidates


def _indicator_pattern(indicator: str) -> re.Pattern:
    # Same-line text only: "STORE\n123 Main St" is not "STORE 123 Main St"
    return re.compile(
        rf'(?<![\w-]){re.escape(indicator)}(?![\w-])[:\t ]*(?P<value>[^\n]{{3,50}})',
        re.IGNORECASE
    )


def _keyword_candidates(text: str, table: PatternTable) -> List[MerchantCandidate]:
    candidates: List[MerchantCandidate] = []
    for indicator in table.merchant_indicators:
        for match in _indicator_pattern(indicator).finditer(text):
            value = match.group('value')
            if not is_valid_merchant_name(value):
                continue
            candidates.append(create_candidate(
                MerchantCandidate,
                value=normalize_merchant_name(value),
                pattern_name=f'indicator_{indicator}',
                match_span=(match.start(), match.end()),
                raw_text=match.group(0),
                text=text,
                priority=2,
                source='keyword',
            ))
    return candidates


def match_merchant_names(text: str, table: PatternTable) -> List[MerchantCandidate]:
    """
    Run both strategies and merge their output into one pool.

    Args:
        text: Receipt text
        table: Pattern table for the receipt language

    Returns:
        Validated, normalized MerchantCandidate list (positional first)
    """
    candidates = _positional_candidates(text) + _keyword_candidates(text, table)
    return [c for c in candidates if c.value and len(c.value) >= 2]
