"""
Date normalization for receipt text.

Numeric dates are disambiguated with a fixed rule:
- first number > 31  → year first (YYYY/MM/DD)
- last number > 31   → year last, day first (DD/MM/YYYY)
- otherwise          → day first (European default, DD/MM/YY)

The day-first default is a deliberate bias toward the primary deployment
locale, not a locale inference. Invalid calendar dates return None.
"""

from datetime import date
from typing import Mapping, Optional
import unicodedata

YEAR_PIVOT = 50  # two-digit years: < 50 → 20xx, >= 50 → 19xx
MIN_YEAR = 1900
MAX_YEAR = 2100

FRENCH_MONTHS = {
    'janvier': 1, 'février': 2, 'mars': 3, 'avril': 4, 'mai': 5, 'juin': 6,
    'juillet': 7, 'août': 8, 'septembre': 9, 'octobre': 10, 'novembre': 11, 'décembre': 12,
    'janv': 1, 'févr': 2, 'avr': 4, 'juil': 7, 'sept': 9, 'oct': 10, 'nov': 11, 'déc': 12,
}

ENGLISH_MONTHS = {
    'january': 1, 'february': 2, 'march': 3, 'april': 4, 'may': 5, 'june': 6,
    'july': 7, 'august': 8, 'september': 9, 'october': 10, 'november': 11, 'december': 12,
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'jun': 6, 'jul': 7, 'aug': 8,
    'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}


def _strip_accents(value: str) -> str:
    return ''.join(
        c for c in unicodedata.normalize('NFKD', value)
        if not unicodedata.combining(c)
    )


# Accent-less spellings are common in OCR output ("fevrier", "aout")
MONTH_NAMES = {}
for _table in (FRENCH_MONTHS, ENGLISH_MONTHS):
    for _name, _number in _table.items():
        MONTH_NAMES[_name] = _number
        MONTH_NAMES[_strip_accents(_name)] = _number

# Longest first so alternations prefer "septembre" over "sept"
MONTH_ALTERNATION = '|'.join(sorted(MONTH_NAMES, key=len, reverse=True))


def month_number(name: str) -> Optional[int]:
    """Return 1-12 for a French or English month name, else None."""
    if not name:
        return None
    key = name.strip().rstrip('.').lower()
    return MONTH_NAMES.get(key) or MONTH_NAMES.get(_strip_accents(key))


def expand_year(year: int, digits: int) -> int:
    """Expand a two-digit year around the pivot."""
    if digits <= 2 and year < 100:
        return year + (2000 if year < YEAR_PIVOT else 1900)
    return year


def build_date(year: int, month: int, day: int) -> Optional[str]:
    """Return YYYY-MM-DD for a real calendar date, None otherwise."""
    if not MIN_YEAR <= year <= MAX_YEAR:
        return None
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def resolve_numeric_date(first: str, second: str, third: str) -> Optional[str]:
    """
    Apply the day/month/year disambiguation rule to three numeric parts.

    Examples:
        >>> resolve_numeric_date('25', '12', '2023')
        '2023-12-25'
        >>> resolve_numeric_date('2024', '03', '15')
        '2024-03-15'
        >>> resolve_numeric_date('13', '13', '2024') is None
        True
    """
    try:
        a, b, c = int(first), int(second), int(third)
    except (TypeError, ValueError):
        return None

    if a > 31:
        year, month, day = expand_year(a, len(first)), b, c
    else:
        # Year last; day-first when the year is obvious and when ambiguous alike
        year, month, day = expand_year(c, len(third)), b, a

    return build_date(year, month, day)


def resolve_named_date(day: str, month: str, year: str) -> Optional[str]:
    """Parse a date whose month is spelled out."""
    number = month_number(month)
    if number is None:
        return None
    try:
        day_value, year_value = int(day), int(year)
    except (TypeError, ValueError):
        return None
    return build_date(expand_year(year_value, len(year)), number, day_value)


def normalize_date(groups: Mapping[str, Optional[str]]) -> Optional[str]:
    """
    Turn the captured groups of a date match into an ISO date string.

    Numeric matches carry ``first``/``second``/``third`` groups; month-name
    matches carry ``day``/``month``/``year``.
    """
    if groups.get('month'):
        return resolve_named_date(groups.get('day'), groups['month'], groups.get('year'))
    if groups.get('first') and groups.get('second') and groups.get('third'):
        return resolve_numeric_date(groups['first'], groups['second'], groups['third'])
    return None
