"""
Text normalization helpers shared by every matching stage.

``normalize`` turns free text into lowercase tokens; ``edit_distance`` is the
Levenshtein distance used for near-miss token checks (small talk, shortcut
phrasings). Document ranking does not use it, see ``matcher.py``.
"""

import re
from typing import List, Optional, Sequence

from rapidfuzz.distance import Levenshtein

_CURLY_QUOTES = re.compile("[‘’“”]")
_NON_WORD = re.compile(r"[^\w\s-]")


def normalize(text: Optional[str]) -> List[str]:
    """
    Lowercase, straighten curly quotes, blank out punctuation and split.

    Letters, digits, underscores and hyphens survive; everything else becomes
    whitespace. Empty input gives an empty list.
    """
    if not text:
        return []
    lowered = str(text).lower()
    lowered = _CURLY_QUOTES.sub("'", lowered)
    lowered = _NON_WORD.sub(" ", lowered)
    return [token for token in lowered.split() if token]


def normalized_text(text: Optional[str]) -> str:
    """``normalize`` joined back with single spaces."""
    return " ".join(normalize(text))


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit insert/delete/substitute costs."""
    return Levenshtein.distance(a or "", b or "")


def contains_run(tokens: Sequence[str], run: Sequence[str]) -> bool:
    """True if ``run`` occurs as a contiguous slice of ``tokens``."""
    if not run or len(run) > len(tokens):
        return False
    width = len(run)
    first = run[0]
    for start in range(len(tokens) - width + 1):
        if tokens[start] == first and list(tokens[start:start + width]) == list(run):
            return True
    return False
