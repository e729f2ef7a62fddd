"""
Regex pattern tables, one immutable table per receipt language.

Patterns are listed in priority order: keyword-anchored patterns first,
bare currency-amount patterns last.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Tuple

from receipt_extraction.models.options import Language
from receipt_extraction.utils.dates import MONTH_ALTERNATION


@dataclass(frozen=True)
class PatternSpec:
    """A named regex pattern with example and notes for documentation."""
    name: str
    pattern: str
    example: str
    notes: Optional[str] = None
    priority: int = 100
    flags: int = re.IGNORECASE
    label: Optional[str] = None  # canonical value for keyword-only patterns
    compiled: re.Pattern = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'compiled', re.compile(self.pattern, self.flags))


# Building blocks
_SP = r'[^\S\n]*'  # horizontal whitespace only
CURRENCY = r'[€$£¥]|(?<![a-z])(?:eur|usd|gbp|jpy)(?![a-z])'
AMOUNT = r'(?<![\d.,])(?P<amount>\d{1,3}(?:[ \u00a0\u202f.,]\d{3})+[.,]\d{2}|\d+[.,]\d{2})(?!\d|[.,]\d)'
MONEY = rf'(?:(?P<pre>{CURRENCY}){_SP})?{AMOUNT}(?:{_SP}(?P<post>{CURRENCY}))?'
KEYWORD_START = r'(?<![\w-])'


@dataclass(frozen=True)
class PatternTable:
    """All language-specific patterns and keyword lists."""
    language: Language
    amount: Tuple[PatternSpec, ...]
    tax: Tuple[PatternSpec, ...]
    subtotal: Tuple[PatternSpec, ...]
    payment: Tuple[PatternSpec, ...]
    merchant_indicators: Tuple[str, ...]


FRENCH = PatternTable(
    language=Language.FRENCH,
    amount=(
        PatternSpec(
            name='total_keyword',
            pattern=rf'{KEYWORD_START}(?:total|montant|somme|à\s+payer|a\s+payer)(?:{_SP}ttc)?[:\s]*{MONEY}',
            example='TOTAL TTC : 8.00€',
            notes='Keyword before amount',
            priority=1,
        ),
        PatternSpec(
            name='amount_then_keyword',
            pattern=rf'{MONEY}{_SP}(?:total|montant|somme)',
            example='8.00€ TOTAL',
            priority=2,
        ),
        PatternSpec(
            name='card_payment',
            pattern=rf'{KEYWORD_START}(?:carte|cb|visa|mastercard)(?![\w]){_SP}:?{_SP}{MONEY}',
            example='CB 8.00€',
            notes='Card payment line usually repeats the total',
            priority=3,
        ),
        PatternSpec(
            name='symbol_before',
            pattern=rf'(?P<pre>[€$£¥]){_SP}{AMOUNT}',
            example='€8.00',
            notes='Currency symbol (last resort)',
            priority=4,
        ),
        PatternSpec(
            name='symbol_after',
            pattern=rf'{AMOUNT}{_SP}(?P<post>[€$£¥]|(?:eur|usd|gbp|jpy)(?![a-z]))',
            example='8,00 €',
            notes='Currency symbol or code after amount (last resort)',
            priority=4,
        ),
    ),
    tax=(
        PatternSpec(
            name='tva',
            pattern=rf'{KEYWORD_START}(?:tva|t\.v\.a\.?)(?:{_SP}\(?{_SP}\d{{1,2}}(?:[.,]\d{{1,2}})?{_SP}%{_SP}\)?)?[:\s]*{MONEY}',
            example='TVA 20% 3.00€',
        ),
    ),
    subtotal=(
        PatternSpec(
            name='sous_total',
            pattern=rf'{KEYWORD_START}sous[-\s]*total(?:{_SP}ht)?[:\s]*{MONEY}',
            example='Sous-total: 15.00€',
        ),
        PatternSpec(
            name='total_ht',
            pattern=rf'{KEYWORD_START}total{_SP}ht[:\s]*{MONEY}',
            example='Total HT 15.00€',
        ),
    ),
    payment=(
        PatternSpec(name='visa', pattern=r'\bvisa\b', example='CARTE VISA', label='Visa'),
        PatternSpec(name='mastercard', pattern=r'\bmaster\s?card\b', example='MASTERCARD', label='Mastercard'),
        PatternSpec(name='amex', pattern=r'\b(?:amex|american\s+express)\b', example='AMEX', label='American Express'),
        PatternSpec(name='card', pattern=r'(?<![\w-])(?:carte(?:\s+bancaire)?|cb)(?![\w])', example='CB', label='Carte'),
        PatternSpec(name='cash', pattern=r'(?<![\w-])(?:espèces|especes|liquide|cash)(?![\w])', example='ESPECES', label='Espèces'),
        PatternSpec(name='cheque', pattern=r'(?<![\w-])(?:chèque|cheque)(?![\w])', example='CHEQUE', label='Chèque'),
    ),
    merchant_indicators=('magasin', 'enseigne', 'commerce', 'boutique', 'supermarché', 'hypermarché'),
)

ENGLISH = PatternTable(
    language=Language.ENGLISH,
    amount=(
        PatternSpec(
            name='total_keyword',
            pattern=rf'{KEYWORD_START}(?:total|amount|sum|to\s+pay|balance\s+due)[:\s]*{MONEY}',
            example='Total $5.70',
            notes='Keyword before amount',
            priority=1,
        ),
        PatternSpec(
            name='amount_then_keyword',
            pattern=rf'{MONEY}{_SP}(?:total|amount|sum)',
            example='$5.70 TOTAL',
            priority=2,
        ),
        PatternSpec(
            name='card_payment',
            pattern=rf'{KEYWORD_START}(?:card|visa|mastercard)(?![\w]){_SP}:?{_SP}{MONEY}',
            example='VISA $5.70',
            priority=3,
        ),
        PatternSpec(
            name='symbol_before',
            pattern=rf'(?P<pre>[€$£¥]){_SP}{AMOUNT}',
            example='$5.70',
            priority=4,
        ),
        PatternSpec(
            name='symbol_after',
            pattern=rf'{AMOUNT}{_SP}(?P<post>[€$£¥]|(?:eur|usd|gbp|jpy)(?![a-z]))',
            example='5.70 USD',
            priority=4,
        ),
    ),
    tax=(
        PatternSpec(
            name='tax',
            pattern=rf'{KEYWORD_START}(?:sales\s+tax|tax|vat|gst|hst)(?:{_SP}\(?{_SP}\d{{1,2}}(?:[.,]\d{{1,2}})?{_SP}%{_SP}\)?)?[:\s]*{MONEY}',
            example='Tax 8% $0.42',
        ),
    ),
    subtotal=(
        PatternSpec(
            name='subtotal',
            pattern=rf'{KEYWORD_START}sub[-\s]*total[:\s]*{MONEY}',
            example='Subtotal: $5.28',
        ),
    ),
    payment=(
        PatternSpec(name='visa', pattern=r'\bvisa\b', example='VISA', label='Visa'),
        PatternSpec(name='mastercard', pattern=r'\bmaster\s?card\b', example='MASTERCARD', label='Mastercard'),
        PatternSpec(name='amex', pattern=r'\b(?:amex|american\s+express)\b', example='AMEX', label='American Express'),
        PatternSpec(name='card', pattern=r'(?<![\w-])(?:card|debit|credit)(?![\w])', example='DEBIT CARD', label='Carte'),
        PatternSpec(name='cash', pattern=r'(?<![\w-])(?:cash|money)(?![\w])', example='CASH', label='Espèces'),
        PatternSpec(name='cheque', pattern=r'(?<![\w-])(?:check|cheque)(?![\w])', example='CHECK', label='Chèque'),
    ),
    merchant_indicators=('store', 'shop', 'market', 'supermarket', 'mall', 'outlet'),
)

# Language-independent patterns

DATE_PATTERNS = (
    PatternSpec(
        name='year_first_date',
        pattern=r'(?<![\d.,/-])(?P<first>\d{4})[/.-](?P<second>\d{1,2})[/.-](?P<third>\d{1,2})(?![\d])',
        example='2024/03/15',
        notes='YYYY/MM/DD, YYYY-M-D',
    ),
    PatternSpec(
        name='numeric_date',
        pattern=r'(?<![\d.,/-])(?P<first>\d{1,2})[/.-](?P<second>\d{1,2})[/.-](?P<third>\d{4}|\d{2})(?![\d])',
        example='25/12/2023',
        notes='DD/MM/YYYY, DD-MM-YY or DD.MM.YYYY',
    ),
    PatternSpec(
        name='day_month_name',
        pattern=rf'(?<!\d)(?P<day>\d{{1,2}})(?:er|st|nd|rd|th)?\.?\s+(?P<month>{MONTH_ALTERNATION})\.?(?![^\W\d_]),?\s+(?P<year>\d{{4}}|\d{{2}})(?!\d)',
        example='15 mars 2024',
    ),
    PatternSpec(
        name='month_name_day',
        pattern=rf'(?<![^\W\d_])(?P<month>{MONTH_ALTERNATION})\.?\s+(?P<day>\d{{1,2}})(?:st|nd|rd|th)?,?\s+(?P<year>\d{{4}}|\d{{2}})(?!\d)',
        example='March 15, 2024',
    ),
)

RECEIPT_NUMBER_PATTERNS = (
    PatternSpec(
        name='receipt_keyword',
        pattern=(
            r'(?<![\w-])(?:ticket|re[çc]u|receipt|facture|invoice|transaction|n°|no\.?|#)'
            r'[^\S\n]*(?:n°|no\.?|#|number|num[ée]ro)?[^\S\n]*:?[^\S\n]*'
            r'(?P<value>(?=[a-z-]*\d)[a-z0-9-]{4,20})(?![\w-])'
        ),
        example='Ticket n°: 12345',
        priority=1,
    ),
    PatternSpec(
        name='generic_code',
        pattern=r'(?<![\w./,-])(?P<value>(?=[a-z-]*\d)(?=[0-9-]*[a-z])[a-z0-9-]{8,15})(?![\w./,-])',
        example='AB12CD3456',
        notes='Bare alphanumeric code (mixed letters and digits)',
        priority=5,
    ),
)

_ITEM_NAME = r'(?P<name>[^\W\d_][^\n]*?)'
_QTY = r'(?P<qty>\d{1,3})[^\S\n]*[x×*][^\S\n]*'

ITEM_PATTERNS = (
    PatternSpec(
        name='qty_name_price',
        pattern=rf'{_QTY}{_ITEM_NAME}{_SP}\s{MONEY}',
        example='2 x Pain 3.00€',
    ),
    PatternSpec(
        name='name_qty_price',
        pattern=rf'{_ITEM_NAME}\s{_SP}{_QTY}{MONEY}',
        example='Pain 2 x 3.00€',
    ),
    PatternSpec(
        name='name_price',
        pattern=rf'{_ITEM_NAME}{_SP}\s{MONEY}',
        example='Pain de mie 2.50€',
    ),
)


def pattern_table(language: Language) -> PatternTable:
    """Select the pattern table for a resolved language."""
    if language == Language.ENGLISH:
        return ENGLISH
    return FRENCH
