"""
Tests for the rule-based confidence scorer.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from datetime import date

from receipt_extraction.utils.candidates import (
    AmountCandidate,
    DateCandidate,
    MerchantCandidate,
    create_candidate,
)
from receipt_extraction.utils.scoring import (
    AMOUNT_PROFILE,
    DATE_PROFILE,
    MERCHANT_PROFILE,
    MAX_SCORE,
    MIN_SCORE,
    ScoringContext,
    ScoringProfile,
    score_candidate,
    select_best_candidate,
    select_top_candidates,
)

REFERENCE_DATE = date(2024, 3, 20)


def _context(text):
    return ScoringContext(text=text, reference_date=REFERENCE_DATE)


def _amount(text, raw, value=8.0):
    start = text.index(raw)
    return create_candidate(
        AmountCandidate,
        value=value,
        pattern_name='test',
        match_span=(start, start + len(raw)),
        raw_text=raw,
        text=text,
        currency='EUR',
    )


def _date(text, raw, value):
    start = text.index(raw)
    return create_candidate(
        DateCandidate,
        value=value,
        pattern_name='numeric_date',
        match_span=(start, start + len(raw)),
        raw_text=raw,
        text=text,
    )


def _merchant(text, raw, line_index=None, source='positional'):
    start = text.index(raw)
    return create_candidate(
        MerchantCandidate,
        value=raw,
        pattern_name='early_line',
        match_span=(start, start + len(raw)),
        raw_text=raw,
        text=text,
        source=source,
        line_index=line_index,
    )


class TestScoreClamping:
    """Scores always land in [0.1, 1.0]."""

    def test_upper_clamp(self):
        profile = ScoringProfile(name='test', base=0.9, rules=(lambda c, ctx: 0.5,))
        text = "TOTAL 8.00€"
        assert score_candidate(_amount(text, "8.00€"), profile, _context(text)) == MAX_SCORE

    def test_lower_clamp(self):
        profile = ScoringProfile(name='test', base=0.5, rules=(lambda c, ctx: -2.0,))
        text = "TOTAL 8.00€"
        assert score_candidate(_amount(text, "8.00€"), profile, _context(text)) == MIN_SCORE

    def test_rules_are_folded_in_order(self):
        profile = ScoringProfile(
            name='test',
            base=0.5,
            rules=(lambda c, ctx: 0.2, lambda c, ctx: -0.1),
        )
        text = "x 8.00€"
        assert abs(score_candidate(_amount(text, "8.00€"), profile, _context(text)) - 0.6) < 1e-9


class TestAmountScoring:
    """Keyword and position heuristics for totals."""

    def test_total_keyword_bonus(self):
        text = "TOTAL 8.00€"
        score = score_candidate(_amount(text, "TOTAL 8.00€"), AMOUNT_PROFILE, _context(text))
        # base 0.5 + keyword 0.3 - early position 0.1
        assert abs(score - 0.7) < 1e-9

    def test_late_total_beats_early_bare_amount(self):
        text = "Article 8.00€\n" + "\n" * 30 + "TOTAL 8.00€"
        early = _amount(text, "8.00€")
        late = _amount(text, "TOTAL 8.00€")
        best, score = select_best_candidate([early, late], AMOUNT_PROFILE, _context(text))
        assert best is late
        assert score > 0.5

    def test_subtotal_line_penalized(self):
        text = "Sous-total: 15.00€\nTOTAL: 18.00€"
        subtotal = _amount(text, "15.00€", value=15.0)
        total = _amount(text, "TOTAL: 18.00€", value=18.0)
        assert score_candidate(subtotal, AMOUNT_PROFILE, _context(text)) < \
            score_candidate(total, AMOUNT_PROFILE, _context(text))

    def test_card_line_bonus(self):
        text = "\n" * 20 + "CB 8.00€"
        card = _amount(text, "CB 8.00€")
        bare = _amount(text, "8.00€")
        assert score_candidate(card, AMOUNT_PROFILE, _context(text)) > \
            score_candidate(bare, AMOUNT_PROFILE, _context(text))


class TestDateScoring:
    """Recency and position heuristics for dates."""

    def test_recent_date_scores_higher_than_old(self):
        text = "Date: 15/03/2024\nAncien: 15/03/2015"
        recent = _date(text, "15/03/2024", '2024-03-15')
        old = _date(text, "15/03/2015", '2015-03-15')
        context = _context(text)
        assert score_candidate(recent, DATE_PROFILE, context) > score_candidate(old, DATE_PROFILE, context)

    def test_recent_date_confidence(self):
        text = "Date: 15/03/2024"
        score = score_candidate(_date(text, "15/03/2024", '2024-03-15'), DATE_PROFILE, _context(text))
        # base 0.6 + recent 0.2 + early 0.1 + "date" 0.1
        assert abs(score - 1.0) < 1e-9


class TestMerchantScoring:
    """Line position and structure heuristics for merchant names."""

    def test_line_bonus_decays(self):
        text = "ALPHA STORE\nBRAVO STORE\nCHARL STORE\nDELTA STORE"
        context = _context(text)
        scores = [
            score_candidate(_merchant(text, name, line_index=i), MERCHANT_PROFILE, context)
            for i, name in enumerate(["ALPHA STORE", "BRAVO STORE", "CHARL STORE"])
        ]
        # 0.5 base + 0.2 length + 0.1 uppercase, plus the decaying line bonus
        assert scores[0] == 1.0
        assert abs(scores[1] - 1.0) < 1e-9
        assert abs(scores[2] - 0.9) < 1e-9

    def test_amount_inside_name_penalized(self):
        text = "boulangerie\nbaguette 1.20€"
        clean = _merchant(text, "boulangerie", line_index=0)
        noisy = _merchant(text, "baguette 1.20€", line_index=0)
        context = _context(text)
        assert score_candidate(noisy, MERCHANT_PROFILE, context) < score_candidate(clean, MERCHANT_PROFILE, context)

    def test_company_suffix_bonus(self):
        text = "dupont sarl\ndupont"
        context = _context(text)
        with_suffix = score_candidate(_merchant(text, "dupont sarl", line_index=3), MERCHANT_PROFILE, context)
        without = score_candidate(_merchant(text, "dupont", line_index=3), MERCHANT_PROFILE, context)
        assert with_suffix > without


class TestSelection:
    """Ranking helpers."""

    def test_empty_list(self):
        assert select_best_candidate([], AMOUNT_PROFILE, _context("")) is None

    def test_ties_keep_emission_order(self):
        text = "Ligne\n" * 3 + "8.00€ 9.00€\n" + "Ligne\n" * 3
        first = _amount(text, "8.00€", value=8.0)
        second = _amount(text, "9.00€", value=9.0)
        ranked = select_top_candidates([first, second], AMOUNT_PROFILE, _context(text))
        assert [c.value for c, _ in ranked] == [8.0, 9.0]

    def test_top_n(self):
        text = "1.00€ 2.00€ 3.00€ 4.00€"
        candidates = [_amount(text, f"{i}.00€", value=float(i)) for i in range(1, 5)]
        assert len(select_top_candidates(candidates, AMOUNT_PROFILE, _context(text), top_n=2)) == 2
        assert len(select_top_candidates(candidates, AMOUNT_PROFILE, _context(text), top_n=None)) == 4
