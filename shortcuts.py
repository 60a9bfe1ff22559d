"""
Canonical shortcut questions.

A few popular questions ("which projects used MERN stack?") are answered by a
direct filter over the documents instead of fuzzy ranking, because the answer
is a list of projects rather than one best document.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from rapidfuzz import fuzz

from document_index import Document
from text_normalizer import normalized_text

PHRASE_MATCH_THRESHOLD = 90


@dataclass(frozen=True)
class ShortcutRule:
    """
    One shortcut: phrasings that trigger it and the filter it applies.

    A document qualifies when any element of ``field`` contains one of
    ``terms`` (case-insensitive substring).
    """

    name: str
    phrases: Tuple[str, ...]
    heading: str
    terms: Tuple[str, ...]
    field: str = "technologies"
    category: Optional[str] = None

    def matches_phrase(self, query: str) -> bool:
        text = normalized_text(query)
        if not text:
            return False
        for phrase in self.phrases:
            target = normalized_text(phrase)
            if text == target or fuzz.ratio(text, target) >= PHRASE_MATCH_THRESHOLD:
                return True
        return False

    def select(self, documents: Sequence[Document]) -> List[Document]:
        selected = []
        for doc in documents:
            if self.category and doc.category != self.category:
                continue
            values = doc.field_value(self.field) or ()
            if isinstance(values, str):
                values = (values,)
            lowered = [v.lower() for v in values]
            if any(term in value for value in lowered for term in self.terms):
                selected.append(doc)
        return selected


DEFAULT_SHORTCUTS = (
    ShortcutRule(
        name="mern",
        phrases=("which projects used mern stack?", "which projects used mern", "mern projects"),
        heading="📌 Projects using MERN",
        terms=("mern", "mongo"),
    ),
    ShortcutRule(
        name="react",
        phrases=("which projects used react?", "react projects", "projects built with react"),
        heading="📌 Projects using React",
        terms=("react",),
    ),
    ShortcutRule(
        name="python",
        phrases=("which projects used python?", "python projects", "projects built with python"),
        heading="📌 Projects using Python",
        terms=("python", "django", "flask", "fastapi"),
    ),
)


def find_shortcut(query: str, rules: Sequence[ShortcutRule] = DEFAULT_SHORTCUTS) -> Optional[ShortcutRule]:
    """Return the first rule whose phrasing matches ``query``."""
    for rule in rules:
        if rule.matches_phrase(query):
            return rule
    return None
