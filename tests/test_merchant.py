"""
Tests for merchant name extraction.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from receipt_extraction.services.merchant import (
    is_valid_merchant_name,
    match_merchant_names,
    normalize_merchant_name,
)
from receipt_extraction.utils.patterns import ENGLISH, FRENCH


class TestMerchantValidity:
    """Filter applied before any merchant candidate is scored."""

    def test_plain_names(self):
        assert is_valid_merchant_name("CARREFOUR")
        assert is_valid_merchant_name("Marks & Spencer")
        assert is_valid_merchant_name("  Leclerc  ")

    def test_length_bounds(self):
        assert not is_valid_merchant_name("A")
        assert not is_valid_merchant_name("A" * 51)
        assert is_valid_merchant_name("A" * 50)

    def test_needs_letters(self):
        assert not is_valid_merchant_name("12345")
        assert not is_valid_merchant_name("12/03/2024")

    def test_letter_density(self):
        """Mostly-numeric lines are addresses or codes, not names."""
        assert not is_valid_merchant_name("A 1234567890")

    def test_special_character_density(self):
        assert not is_valid_merchant_name("**!!ab!!**")

    def test_excluded_shapes(self):
        assert not is_valid_merchant_name("TOTAL")
        assert not is_valid_merchant_name("Ticket")
        assert not is_valid_merchant_name("12.50€")

    def test_normalize(self):
        assert normalize_merchant_name("  Le   Petit *Café*  ") == "Le Petit Café"
        assert normalize_merchant_name("B" * 80) == "B" * 50


class TestMerchantCandidates:
    """Positional and keyword strategies feed one pool."""

    def test_positional_uses_first_three_non_blank_lines(self):
        text = "\n\nFIRST SHOP\n\nSECOND LINE\nTHIRD LINE\nFOURTH LINE"
        candidates = [c for c in match_merchant_names(text, FRENCH) if c.source == 'positional']
        assert [c.value for c in candidates] == ["FIRST SHOP", "SECOND LINE", "THIRD LINE"]
        assert [c.line_index for c in candidates] == [0, 1, 2]

    def test_invalid_lines_keep_their_index(self):
        text = "12/03/2024\nBOULANGERIE PAUL\nTOTAL"
        candidates = match_merchant_names(text, FRENCH)
        assert [(c.value, c.line_index) for c in candidates] == [("BOULANGERIE PAUL", 1)]

    def test_keyword_strategy(self):
        text = "Bienvenue\nMagasin: Super U Ouest\nTOTAL 8.00€"
        keyword = [c for c in match_merchant_names(text, FRENCH) if c.source == 'keyword']
        assert [c.value for c in keyword] == ["Super U Ouest"]
        assert keyword[0].pattern_name == 'indicator_magasin'

    def test_keyword_stays_on_its_line(self):
        text = "STORE\n123 Main Street"
        keyword = [c for c in match_merchant_names(text, ENGLISH) if c.source == 'keyword']
        assert keyword == []

    def test_indicator_inside_word_ignored(self):
        text = "Thank you for shopping with us"
        keyword = [c for c in match_merchant_names(text, ENGLISH) if c.source == 'keyword']
        assert keyword == []

    def test_empty_text(self):
        assert match_merchant_names("", FRENCH) == []
