"""
Language and receipt-type detection by keyword vote.
"""

import logging
from typing import List, Sequence

from receipt_extraction.models.options import Language, ReceiptType
from receipt_extraction.utils.text import contains_phrase, tokenize

logger = logging.getLogger(__name__)

FRENCH_KEYWORDS = ('total', 'montant', 'tva', 'magasin', 'caisse', 'ticket', 'reçu', 'merci', 'carte', 'espèces')
ENGLISH_KEYWORDS = ('total', 'amount', 'tax', 'store', 'cash', 'receipt', 'thank', 'card', 'change')

# Checked in this order; on equal votes the earlier type wins
RECEIPT_TYPE_KEYWORDS = (
    (ReceiptType.CARD_PAYMENT, ('carte', 'card', 'cb', 'visa', 'mastercard', 'sans contact', 'contactless')),
    (ReceiptType.CASH_REGISTER, ('caisse', 'ticket', 'register', 'till', 'cashier', 'caissier')),
    (ReceiptType.RETAIL, ('magasin', 'store', 'supermarché', 'supermarket', 'boutique', 'shop', 'hypermarché')),
)


def _has_keyword(tokens: List[str], keyword: str) -> bool:
    # Single words match as a prefix so "thank" counts for "thanks"
    if ' ' in keyword:
        return contains_phrase(tokens, keyword)
    return any(token.startswith(keyword) for token in tokens)


def count_keywords(tokens: List[str], keywords: Sequence[str]) -> int:
    """Number of distinct keywords present in the token list."""
    return sum(1 for keyword in keywords if _has_keyword(tokens, keyword))


def detect_language(text: str) -> Language:
    """
    Majority vote between the French and English keyword lists.

    Ties (including no keyword at all) resolve to French.
    """
    tokens = tokenize(text)
    french = count_keywords(tokens, FRENCH_KEYWORDS)
    english = count_keywords(tokens, ENGLISH_KEYWORDS)
    language = Language.ENGLISH if english > french else Language.FRENCH
    logger.debug("Language detected", extra={"french": french, "english": english, "language": language.value})
    return language


def detect_receipt_type(text: str) -> ReceiptType:
    """
    Majority vote over card-payment, cash-register and retail markers.

    Returns UNKNOWN when no marker is present.
    """
    tokens = tokenize(text)
    best_type, best_count = ReceiptType.UNKNOWN, 0
    for receipt_type, keywords in RECEIPT_TYPE_KEYWORDS:
        count = count_keywords(tokens, keywords)
        if count > best_count:
            best_type, best_count = receipt_type, count
    return best_type
