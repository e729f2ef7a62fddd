"""
Line item extraction and deduplication.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple

from receipt_extraction.models.receipt import ReceiptItem
from receipt_extraction.utils.money import normalize_amount, round_amount
from receipt_extraction.utils.patterns import ITEM_PATTERNS
from receipt_extraction.utils.text import contains_phrase, tokenize

logger = logging.getLogger(__name__)

MAX_ITEMS = 20
MAX_ITEM_NAME_LENGTH = 50

# Summary and payment lines share the "label price" shape but are not purchases
NON_ITEM_KEYWORDS = (
    'total', 'sous-total', 'subtotal', 'sub total', 'montant', 'somme', 'à payer', 'a payer',
    'tva', 'tax', 'taxe', 'vat', 'ht', 'ttc', 'carte', 'cb', 'card', 'visa', 'mastercard',
    'espèces', 'especes', 'cash', 'rendu', 'monnaie', 'change', 'amount', 'sum', 'balance',
    'paiement', 'payment', 'to pay',
)


def _clean_item_name(name: str) -> str:
    name = re.sub(r"[^\w\s\-'.%]", '', name)
    return ' '.join(name.split())[:MAX_ITEM_NAME_LENGTH]


def _is_summary_line(name: str) -> bool:
    tokens = tokenize(name)
    return any(contains_phrase(tokens, keyword) for keyword in NON_ITEM_KEYWORDS)


def parse_item_line(line: str) -> Optional[ReceiptItem]:
    """
    Parse one receipt line into an item.

    Shapes are tried most specific first (``qty x name price``,
    ``name qty x price``, ``name price``); the first shape matching the
    whole line wins. The printed price is the line total.

    Returns:
        ReceiptItem, or None when the line is not a valid item
        (name shorter than 2 characters, non-positive price, summary line)
    """
    stripped = line.strip()
    if not stripped:
        return None

    for spec in ITEM_PATTERNS:
        match = spec.compiled.fullmatch(stripped)
        if not match:
            continue

        groups = match.groupdict()
        name = _clean_item_name(groups['name'])
        quantity = int(groups['qty']) if groups.get('qty') else 1
        total_price = normalize_amount(groups).amount

        if len(name) < 2 or total_price <= 0 or _is_summary_line(name):
            return None
        if quantity <= 0:
            quantity = 1

        return ReceiptItem(
            name=name,
            quantity=quantity,
            unit_price=round_amount(total_price / quantity),
            total_price=total_price,
        )

    return None


def deduplicate_items(items: Iterable[ReceiptItem], max_items: int = MAX_ITEMS) -> List[ReceiptItem]:
    """
    Merge items sharing ``(name.lower(), total_price)``.

    When two items collide the one with the higher quantity wins; the
    first occurrence keeps its position. The result is capped at
    ``max_items``. Running this on its own output returns the same list.
    """
    seen: Dict[Tuple[str, Optional[float]], ReceiptItem] = {}
    for item in items:
        key = (item.name.lower(), item.total_price)
        current = seen.get(key)
        if current is None or (current.quantity or 0) < (item.quantity or 0):
            seen[key] = item
    return list(seen.values())[:max_items]


def extract_items(text: str, max_items: int = MAX_ITEMS) -> List[ReceiptItem]:
    """
    Extract purchased lines from receipt text.

    Args:
        text: Receipt text
        max_items: Safety bound against OCR noise producing spurious items

    Returns:
        Deduplicated item list, at most ``max_items`` long
    """
    items = [item for item in map(parse_item_line, text.split('\n')) if item is not None]
    result = deduplicate_items(items, max_items)
    logger.debug("Items extracted", extra={"parsed": len(items), "kept": len(result)})
    return result
