"""
Synonym-based query expansion.

Appends canonical vocabulary to a query when one of its synonyms shows up,
so "which db does he know" also searches for "databases". Expansion only
ever adds words; the user's own phrasing is left untouched.
"""

from typing import Dict, Iterable, List, Mapping, Tuple

from exception_logger import exception_logger
from text_normalizer import contains_run, normalize


class SynonymExpander:
    """
    Expand queries with canonical terms.

    Canonical terms are checked in the insertion order of the synonym table,
    which is also the order in which they are appended.

    Attributes:
        synonyms (dict[str, tuple[str, ...]]): Canonical term -> synonyms
    """

    def __init__(self, synonym_map: Mapping[str, Iterable[str]] = None):
        self.synonyms: Dict[str, Tuple[str, ...]] = clean_synonym_map(synonym_map or {})
        self._synonym_tokens: List[Tuple[str, List[List[str]]]] = [
            (canonical, [normalize(s) for s in syns if normalize(s)])
            for canonical, syns in self.synonyms.items()
        ]

    def expand(self, query: str) -> str:
        """
        Return ``query`` followed by every canonical term it triggers.

        A canonical term is triggered when any of its synonyms appears as a
        whole token (or contiguous token run for multi-word synonyms). Terms
        the query already contains are not appended again, so expanding an
        expanded query changes nothing.
        """
        toks = normalize(query)
        additions: List[str] = []
        for canonical, synonym_runs in self._synonym_tokens:
            canonical_run = normalize(canonical)
            if contains_run(toks, canonical_run):
                continue
            if any(contains_run(toks, run) for run in synonym_runs):
                additions.append(canonical)
        return f"{query} {' '.join(additions)}".strip()


def clean_synonym_map(raw: Mapping) -> Dict[str, Tuple[str, ...]]:
    """
    Validate a synonym table, dropping malformed entries.

    Non-string keys, values that are not lists of strings, and blank
    synonyms are skipped and reported; the remaining order is preserved.
    """
    cleaned: Dict[str, Tuple[str, ...]] = {}
    for canonical, synonyms in raw.items():
        if not isinstance(canonical, str) or not canonical.strip():
            exception_logger.log_error(f"Skipping synonym entry with invalid key {canonical!r}", "synonyms")
            continue
        if isinstance(synonyms, str):
            synonyms = [synonyms]
        if not isinstance(synonyms, (list, tuple)):
            exception_logger.log_error(
                f"Synonyms for '{canonical}' must be a list", "synonyms",
                context=f"got {type(synonyms).__name__}",
            )
            continue
        kept = tuple(s.strip().lower() for s in synonyms if isinstance(s, str) and s.strip())
        cleaned[canonical.strip()] = kept
    return cleaned
