"""
Tests for language and receipt-type detection.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from receipt_extraction.models.options import Language, ReceiptType
from receipt_extraction.services.detection import detect_language, detect_receipt_type


class TestDetectLanguage:
    """Keyword majority vote, ties go to French."""

    def test_french(self):
        text = "CARREFOUR\nTicket de caisse\nTOTAL TTC 8.00€\nMerci de votre visite"
        assert detect_language(text) == Language.FRENCH

    def test_english(self):
        text = "Store 0421\nTotal amount $5.70\nCash\nThanks for shopping"
        assert detect_language(text) == Language.ENGLISH

    def test_tie_defaults_to_french(self):
        assert detect_language("TOTAL 8.00") == Language.FRENCH

    def test_empty_defaults_to_french(self):
        assert detect_language("") == Language.FRENCH

    def test_keywords_counted_once(self):
        """Repeating one English word does not outvote distinct French words."""
        text = "total total total\nmontant\nTVA"
        assert detect_language(text) == Language.FRENCH


class TestDetectReceiptType:
    """Second, independent keyword vote."""

    def test_card_payment(self):
        assert detect_receipt_type("Paiement CB\nVISA sans contact") == ReceiptType.CARD_PAYMENT

    def test_cash_register(self):
        assert detect_receipt_type("Caisse 3\nTicket 0042") == ReceiptType.CASH_REGISTER

    def test_retail(self):
        assert detect_receipt_type("Magasin Leclerc\nTOTAL 8.00€") == ReceiptType.RETAIL

    def test_majority_wins(self):
        text = "Magasin\nSupermarché Casino\nCarte"
        assert detect_receipt_type(text) == ReceiptType.RETAIL

    def test_unknown(self):
        assert detect_receipt_type("Bonjour") == ReceiptType.UNKNOWN
        assert detect_receipt_type("") == ReceiptType.UNKNOWN
