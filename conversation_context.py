"""
Conversation-scoped state and the follow-up continuation state machine.

``ConversationContext`` belongs to one chat session and is threaded through
every ``ResponseManager`` call. ``FollowUpStateMachine`` decides whether a
turn is an affirmation that continues a pending follow-up ("yes", "tell me
more") or a number picking one of the did-you-mean suggestions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Tuple

import assistant_config as config
from document_index import Document
from text_normalizer import normalized_text


@dataclass
class ConversationContext:
    """
    Mutable per-session state.

    Attributes:
        pending_follow_ups: Prompts offered after the last answer
        follow_up_cursor: Next prompt to consume (modulo the list length)
        last_answered_topic: ``(category, document)`` of the last direct answer
        did_you_mean: Suggestions shown after a low-confidence search
    """

    pending_follow_ups: List[str] = field(default_factory=list)
    follow_up_cursor: int = 0
    last_answered_topic: Optional[Tuple[str, Document]] = None
    did_you_mean: List[Document] = field(default_factory=list)

    def replace_follow_ups(self, follow_ups: Iterable[str]):
        self.pending_follow_ups = list(follow_ups)
        self.follow_up_cursor = 0

    def clear_follow_ups(self):
        self.replace_follow_ups(())

    def record_answer(self, category: str, document: Document):
        self.last_answered_topic = (category, document)


class FollowUpState(Enum):
    IDLE = "idle"
    AWAITING_FOLLOW_UP = "awaiting_follow_up"


class FollowUpStateMachine:
    """
    Recognizes continuation turns.

    Attributes:
        affirmations (frozenset): Normalized replies that accept a follow-up
    """

    def __init__(self, affirmations: Optional[Iterable[str]] = None):
        source = affirmations if affirmations is not None else config.AFFIRMATIONS
        self.affirmations: FrozenSet[str] = frozenset(normalized_text(a) for a in source)

    @staticmethod
    def state(context: ConversationContext) -> FollowUpState:
        if context.pending_follow_ups:
            return FollowUpState.AWAITING_FOLLOW_UP
        return FollowUpState.IDLE

    def is_affirmation(self, text: str) -> bool:
        return normalized_text(text) in self.affirmations

    def take_follow_up(self, text: str, context: ConversationContext) -> Optional[str]:
        """
        Consume the next pending follow-up if ``text`` accepts one.

        The cursor wraps around, so repeated affirmations cycle through the
        pending prompts. Returns None (and leaves the context alone) when
        nothing is pending or the text is not an affirmation.
        """
        if self.state(context) is FollowUpState.IDLE:
            return None
        if not self.is_affirmation(text):
            return None
        pending = context.pending_follow_ups
        prompt = pending[context.follow_up_cursor % len(pending)]
        context.follow_up_cursor += 1
        return prompt

    @staticmethod
    def pick_suggestion(text: str, context: ConversationContext) -> Optional[Document]:
        """Return the did-you-mean entry chosen by a bare number (1-based)."""
        if not context.did_you_mean:
            return None
        choice = normalized_text(text)
        if not choice.isdigit():
            return None
        index = int(choice) - 1
        if 0 <= index < len(context.did_you_mean):
            return context.did_you_mean[index]
        return None

    @staticmethod
    def performance_answer(context: ConversationContext) -> str:
        """Answer a performance follow-up from the last answered document."""
        _, document = context.last_answered_topic
        if document.performance:
            return f"🚀 Performance improvements: {document.performance}"
        return config.GENERIC_PERFORMANCE_ANSWER

    @staticmethod
    def is_performance_prompt(prompt: str) -> bool:
        return "performance" in prompt.lower()
