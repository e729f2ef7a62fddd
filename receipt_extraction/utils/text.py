"""
Text helpers shared by matchers and scorers.
"""

import re
from typing import List

# Four or more single letters separated by spaces: "C A R R E F O U R"
_SPACED_LETTERS = re.compile(r'(?<!\S)(?:[^\W\d_] ){3,}[^\W\d_](?!\S)')
_TOKEN = re.compile(r'[^\W\d_]+(?:-[^\W\d_]+)*')


def normalize_ocr_spacing(text: str) -> str:
    """
    Remove OCR-induced spaces between single characters.

    Only the spaced run itself is collapsed, so "C A R R E F O U R  CITY"
    becomes "CARREFOUR  CITY" and lines without such runs are untouched.
    """
    if not _SPACED_LETTERS.search(text):
        return text
    return _SPACED_LETTERS.sub(lambda m: m.group(0).replace(' ', ''), text)


def tokenize(text: str) -> List[str]:
    """Lower-case word tokens; hyphenated words ("sous-total") stay whole."""
    return _TOKEN.findall(text.lower())


def line_at(text: str, offset: int) -> str:
    """Return the full line containing ``offset``."""
    start = text.rfind('\n', 0, offset) + 1
    end = text.find('\n', offset)
    if end == -1:
        end = len(text)
    return text[start:end]


def position_ratio(text: str, offset: int) -> float:
    """Relative position of ``offset`` in ``text``, in [0, 1]."""
    if not text:
        return 0.0
    return max(0.0, min(1.0, offset / len(text)))


def contains_phrase(tokens: List[str], phrase: str) -> bool:
    """True when the token sequence contains ``phrase`` as whole words."""
    words = phrase.lower().split()
    if not words:
        return False
    width = len(words)
    return any(tokens[i:i + width] == words for i in range(len(tokens) - width + 1))
