"""
Strict small-talk classifier.

Recognizes short greetings and thanks ("hi", "thanks!", "helo there") so the
assistant can answer them without touching the knowledge base. Only queries
of at most three tokens qualify: a real question that happens to contain
"hey" or "thanks" must still reach the matcher.
"""

from typing import Dict, Iterable, Optional

import assistant_config as config
from text_normalizer import edit_distance, normalize


class SmallTalkClassifier:
    """
    Token-level small-talk detection.

    Attributes:
        responses (dict): Canonical key -> response text. Keys are tried in
            insertion order and the first match wins.
        tokens (frozenset): Closed set of small-talk tokens
        max_tokens (int): Longest query (in tokens) still eligible
        fuzzy_min_length (int): Keys shorter than this only match exactly
    """

    def __init__(
        self,
        responses: Optional[Dict[str, str]] = None,
        tokens: Optional[Iterable[str]] = None,
        max_tokens: int = config.SMALL_TALK_MAX_TOKENS,
        fuzzy_min_length: int = config.SMALL_TALK_FUZZY_MIN_LENGTH,
    ):
        self.responses = dict(responses if responses is not None else config.SMALL_TALK_RESPONSES)
        self.tokens = frozenset(tokens if tokens is not None else config.SMALL_TALK_TOKENS)
        self.max_tokens = max_tokens
        self.fuzzy_min_length = fuzzy_min_length

    def classify(self, query: str) -> Optional[str]:
        """
        Return the canned response for a small-talk query, or None.

        Args:
            query (str): Raw user input

        Returns:
            Optional[str]: Response text of the first canonical key matched
                by any token, None when the query is not small talk.
        """
        toks = normalize(query)
        if not toks or len(toks) > self.max_tokens:
            return None

        for token in toks:
            if not self._is_small_talk_token(token):
                continue
            for key, response in self.responses.items():
                if self._matches_key(token, key):
                    return response
        return None

    def _is_small_talk_token(self, token: str) -> bool:
        if token in self.tokens:
            return True
        return any(
            len(known) >= self.fuzzy_min_length and edit_distance(token, known) <= 1
            for known in self.tokens
        )

    def _matches_key(self, token: str, key: str) -> bool:
        if token == key:
            return True
        return len(key) >= self.fuzzy_min_length and edit_distance(token, key) <= 1
