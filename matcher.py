"""
Weighted Fuzzy Document Matcher

Provides approximate matching between a (synonym-expanded) user query and the
flattened portfolio documents. Uses the RapidFuzz library for fast,
case-insensitive, position-independent string similarity.

Key Features:
- Per-field fuzzy similarity with configurable field weights
- Best-field-wins scoring: one strong match on a heavy field is enough
- Minimum similarity floor that drops unrelated documents entirely
- Lower-is-better scores in [0, 1] (0 = perfect match)
- Stable ordering: ties keep index-build order

Algorithm:
- Normalizes the query and removes filler/question words
- For every searchable field, takes the best of token_set_ratio and
  partial_ratio of the query inside the field text (0-100), or inside
  each element of list fields, and rescales it to a similarity in [0, 1]
- Fields below the similarity floor are ignored
- Field score = (1 - similarity) ** weight, document score = min field score
- Sorts candidates by ascending score

Dependencies:
- rapidfuzz: High-performance fuzzy string matching library
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from rapidfuzz import fuzz

import assistant_config as config
from document_index import Document
from text_normalizer import normalize, normalized_text


@dataclass(frozen=True)
class MatchCandidate:
    """A document and its match score (0 = perfect, 1 = unrelated)."""

    document: Document
    score: float
    field: str = ""


class Matcher:
    """
    Fuzzy matching engine for portfolio document lookup.

    Scores every document against the query field by field and keeps the
    best weighted field score. Documents where no field reaches the
    similarity floor are excluded from the result.

    Attributes:
        documents (tuple[Document, ...]): Searchable documents, in build order
        field_weights (dict[str, float]): Searchable field -> weight in (0, 1]
        min_similarity (float): Per-field similarity floor in [0, 1]
        stop_words (frozenset): Query words ignored while matching
    """

    def __init__(
        self,
        documents: Iterable[Document],
        field_weights: Optional[Mapping[str, float]] = None,
        min_similarity: float = config.MIN_SIMILARITY,
        stop_words: Optional[Iterable[str]] = None,
    ):
        """
        Initialize the matcher and pre-normalize every searchable field.

        Args:
            documents: Documents to search, usually a ``DocumentIndex``
            field_weights: Overrides ``assistant_config.FIELD_WEIGHTS``
            min_similarity: Overrides ``assistant_config.MIN_SIMILARITY``
            stop_words: Overrides ``assistant_config.STOP_WORDS``
        """
        self.documents = tuple(documents)
        self.field_weights: Dict[str, float] = dict(field_weights or config.FIELD_WEIGHTS)
        self.min_similarity = min_similarity
        self.stop_words = frozenset(stop_words if stop_words is not None else config.STOP_WORDS)
        self._prepared = [self._prepare_document(doc) for doc in self.documents]

    def search(self, query: str) -> List[MatchCandidate]:
        """
        Find documents matching the query text.

        Args:
            query (str): Query text, typically already synonym-expanded

        Returns:
            list[MatchCandidate]: Non-excluded documents sorted by ascending
                score; equal scores keep index-build order.
        """
        prepared_query = self.prepare_query(query)
        if not prepared_query:
            return []

        matches = []
        for doc, fields in zip(self.documents, self._prepared):
            best_score = None
            best_field = ""
            for field_name, values in fields.items():
                similarity = max(self.similarity(prepared_query, value) for value in values)
                if similarity < self.min_similarity:
                    continue
                score = self.weighted_score(similarity, self.field_weights[field_name])
                if best_score is None or score < best_score:
                    best_score = score
                    best_field = field_name
            if best_score is not None:
                matches.append(MatchCandidate(document=doc, score=best_score, field=best_field))

        # sort() is stable, so ties stay in build order
        matches.sort(key=lambda m: m.score)
        return matches

    def prepare_query(self, query: str) -> str:
        """Normalized query without stop words (kept whole if only stop words)."""
        toks = normalize(query)
        content = [tok for tok in toks if tok not in self.stop_words]
        return " ".join(content or toks)

    @staticmethod
    def similarity(query: str, value: str) -> float:
        """
        Case-folded similarity of two normalized strings in [0, 1].

        token_set_ratio handles reordered and contained words. partial_ratio
        searches for the query inside the field text only, so a short field
        value never aligns inside a longer query word ("express" in
        "experiences"). Very short queries skip it since "go" would align
        inside "good".
        """
        if not query or not value:
            return 0.0
        ratio = fuzz.token_set_ratio(query, value)
        if config.PARTIAL_MATCH_MIN_LENGTH <= len(query) <= len(value):
            ratio = max(ratio, fuzz.partial_ratio(query, value))
        return ratio / 100.0

    @staticmethod
    def weighted_score(similarity: float, weight: float) -> float:
        base = min(1.0, max(0.0, 1.0 - similarity))
        return base ** weight

    def _prepare_document(self, doc: Document) -> Dict[str, Sequence[str]]:
        fields: Dict[str, Sequence[str]] = {}
        for field_name in self.field_weights:
            value = doc.field_value(field_name)
            if not value:
                continue
            if isinstance(value, str):
                value = (value,)
            values = [normalized_text(item) for item in value]
            values = [v for v in values if v]
            if values:
                fields[field_name] = values
        return fields
