"""
Shared money parsing utilities with multi-locale support.

Handles various number formats:
- US: 1,234.56
- European: 1.234,56, 1 234,56 or 12,50
- Currency symbol or code on either side: €8.00, 8.00€, 8.00 EUR
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Mapping, NamedTuple, Optional
import re


class MoneyFormat(Enum):
    """Money format locale hints."""
    US = "US"  # 1,234.56
    EUROPEAN = "EUROPEAN"  # 1.234,56
    AUTO = "AUTO"  # Auto-detect based on patterns


# Symbol / code → ISO-4217. Codes are matched case-insensitively.
CURRENCY_MAP = {
    '€': 'EUR',
    '$': 'USD',
    '£': 'GBP',
    '¥': 'JPY',
    'eur': 'EUR',
    'usd': 'USD',
    'gbp': 'GBP',
    'jpy': 'JPY',
}

DEFAULT_CURRENCY = 'EUR'

_CENT = Decimal('0.01')


class ParsedAmount(NamedTuple):
    """Normalized amount: non-negative float plus ISO currency code."""
    amount: float
    currency: str


def parse_money(
    amount_str: str,
    format_hint: Optional[MoneyFormat] = None
) -> Optional[Decimal]:
    """
    Parse money string with multi-locale support.

    Everything except digits, dots and commas is stripped first, so
    signs, symbols and codes never reach the decimal parser.

    Args:
        amount_str: String containing amount (e.g., "€1,234.56", "12,50 EUR")
        format_hint: Optional locale hint (US, EUROPEAN, AUTO)

    Returns:
        Decimal amount or None if parsing fails

    Examples:
        >>> parse_money("$1,234.56")
        Decimal('1234.56')
        >>> parse_money("12,50€")
        Decimal('12.50')
        >>> parse_money("1 234,56 €")
        Decimal('1234.56')
    """
    if not amount_str or not isinstance(amount_str, str):
        return None

    cleaned = re.sub(r'[^0-9.,]', '', amount_str)
    if not cleaned or not re.search(r'\d', cleaned):
        return None

    detected_format = format_hint or MoneyFormat.AUTO
    if detected_format == MoneyFormat.AUTO:
        detected_format = _detect_money_format(cleaned)

    if detected_format == MoneyFormat.EUROPEAN:
        return _parse_european_format(cleaned)
    return _parse_us_format(cleaned)


def _detect_money_format(amount_str: str) -> MoneyFormat:
    """
    Auto-detect money format based on separator patterns.

    Heuristics:
    - If ends with ,XX (comma + 2 digits), assume European
    - If dot comes before the last comma, assume European
    - Otherwise assume US
    """
    if re.search(r',\d{2}$', amount_str):
        return MoneyFormat.EUROPEAN

    if '.' in amount_str and ',' in amount_str:
        if amount_str.index('.') < amount_str.rindex(','):
            return MoneyFormat.EUROPEAN

    return MoneyFormat.US


def _parse_us_format(amount_str: str) -> Optional[Decimal]:
    """Parse US format: comma thousands, dot decimal."""
    try:
        return Decimal(amount_str.replace(',', ''))
    except (InvalidOperation, ValueError):
        return None


def _parse_european_format(amount_str: str) -> Optional[Decimal]:
    """Parse European format: dot thousands, comma decimal."""
    cleaned = amount_str.replace('.', '').replace(',', '.')
    try:
        return Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None


def normalize_currency(symbol: Optional[str], default: str = DEFAULT_CURRENCY) -> str:
    """Map a currency symbol or code to its ISO code, falling back to ``default``."""
    if not symbol:
        return default
    return CURRENCY_MAP.get(symbol.strip().lower(), default)


def normalize_amount(
    groups: Mapping[str, Optional[str]],
    default_currency: str = DEFAULT_CURRENCY
) -> ParsedAmount:
    """
    Turn the captured groups of an amount match into (amount, currency).

    Expects an ``amount`` group and optional ``pre``/``post`` currency
    groups. Malformed or negative numbers become 0 so the candidate is
    scored out later instead of raising.
    """
    value = parse_money(groups.get('amount') or '')
    if value is None or value < 0:
        value = Decimal('0')

    symbol = groups.get('pre') or groups.get('post')
    currency = normalize_currency(symbol, default_currency)

    return ParsedAmount(amount=round_amount(value), currency=currency)


def round_amount(value) -> float:
    """Round to cents and return a float."""
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))
