"""
Query Resolution Pipeline

Turns one user message into an answer for the portfolio assistant. Every
call runs to completion synchronously and returns the updated
``ConversationContext`` alongside the answer text.

Pipeline:
- Follow-up continuation ("yes" after an answer) and did-you-mean picks
- Strict small talk ("hi", "thanks")
- Canonical shortcut questions ("which projects used MERN stack?")
- Synonym expansion + weighted fuzzy search
- Confidence thresholding: direct answer, did-you-mean list, or no match

Dependencies:
- rapidfuzz (through matcher.py and shortcuts.py)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence

import assistant_config as config
from answer_builder import build_answer
from assistant_errors import KnowledgeBaseNotReadyError, UnknownDocumentError
from conversation_context import ConversationContext, FollowUpStateMachine
from document_index import Document, DocumentIndex
from exception_logger import exception_logger
from matcher import MatchCandidate, Matcher
from shortcuts import DEFAULT_SHORTCUTS, ShortcutRule, find_shortcut
from small_talk import SmallTalkClassifier
from synonym_expander import SynonymExpander


class ResolutionOutcome(Enum):
    SMALL_TALK = "small_talk"
    CANONICAL_SHORTCUT = "canonical_shortcut"
    CONFIDENT_MATCH = "confident_match"
    FALLBACK_SUGGESTIONS = "fallback_suggestions"
    NO_MATCH = "no_match"
    FOLLOW_UP_ANSWER = "follow_up_answer"


@dataclass
class Resolution:
    """Result of one resolved turn."""

    text: str
    follow_ups: List[str]
    context: ConversationContext
    outcome: ResolutionOutcome
    follow_up_prompt: Optional[str] = None
    candidates: List[MatchCandidate] = field(default_factory=list)


class ResponseManager:
    """
    Main orchestrator for the question -> answer pipeline.

    The knowledge base may be attached after construction (it is usually
    loaded from a file or URL at startup); until then every query raises
    ``KnowledgeBaseNotReadyError``.
    """

    def __init__(
        self,
        knowledge_base: Optional[Mapping[str, Any]] = None,
        synonyms: Optional[Mapping[str, Sequence[str]]] = None,
        small_talk: Optional[SmallTalkClassifier] = None,
        follow_ups: Optional[FollowUpStateMachine] = None,
        shortcuts: Sequence[ShortcutRule] = DEFAULT_SHORTCUTS,
        confidence_threshold: float = config.CONFIDENCE_THRESHOLD,
        fallback_limit: int = config.FALLBACK_LIMIT,
        min_similarity: float = config.MIN_SIMILARITY,
    ):
        self.small_talk = small_talk or SmallTalkClassifier()
        self.follow_up_machine = follow_ups or FollowUpStateMachine()
        self.expander = SynonymExpander(synonyms or {})
        self.shortcuts = tuple(shortcuts)
        self.confidence_threshold = confidence_threshold
        self.fallback_limit = fallback_limit
        self.min_similarity = min_similarity

        self.index: Optional[DocumentIndex] = None
        self.matcher: Optional[Matcher] = None
        if knowledge_base is not None:
            self.attach_knowledge_base(knowledge_base)

    # ------------------------------ public API ------------------------------
    @property
    def is_ready(self) -> bool:
        return self.index is not None

    def attach_knowledge_base(self, knowledge_base: Mapping[str, Any]) -> DocumentIndex:
        """Build the document index and matcher. Call once per knowledge base."""
        index = DocumentIndex.from_knowledge_base(knowledge_base)
        self.matcher = Matcher(index, min_similarity=self.min_similarity)
        self.index = index
        return index

    def resolve(self, query: str, context: ConversationContext) -> Resolution:
        """
        Resolve one user turn.

        Args:
            query (str): Raw user text
            context (ConversationContext): The session's context, updated in place

        Returns:
            Resolution: Answer text, follow-ups to offer and the updated context

        Raises:
            KnowledgeBaseNotReadyError: No knowledge base attached yet
        """
        self._ensure_ready("resolve", query)
        query = (query or "").strip()

        picked = self.follow_up_machine.pick_suggestion(query, context)
        if picked is not None:
            return self.select_did_you_mean(picked, context)

        prompt = self.follow_up_machine.take_follow_up(query, context)
        if prompt is not None:
            return self._continue_follow_up(prompt, context)

        resolution = self._run_pipeline(query, context)
        if resolution.outcome is not ResolutionOutcome.FALLBACK_SUGGESTIONS:
            context.did_you_mean = []
        context.replace_follow_ups(resolution.follow_ups)
        return resolution

    def select_did_you_mean(self, document: Document, context: ConversationContext) -> Resolution:
        """
        Answer a suggestion the user picked from the did-you-mean list.

        Raises:
            KnowledgeBaseNotReadyError: No knowledge base attached yet
            UnknownDocumentError: ``document`` is None
        """
        self._ensure_ready("select_did_you_mean", document.label if document else None)
        if document is None:
            exception_logger.log_error("Selection without a document", "engine", context="select_did_you_mean")
            raise UnknownDocumentError("No document was selected.")
        answer = build_answer(document, document.category)
        context.record_answer(document.category, document)
        context.did_you_mean = []
        context.replace_follow_ups(answer.follow_ups)
        return Resolution(
            text=answer.text,
            follow_ups=list(answer.follow_ups),
            context=context,
            outcome=ResolutionOutcome.CONFIDENT_MATCH,
        )

    # ------------------------------ pipeline ------------------------------
    def _continue_follow_up(self, prompt: str, context: ConversationContext) -> Resolution:
        if context.last_answered_topic and self.follow_up_machine.is_performance_prompt(prompt):
            return Resolution(
                text=self.follow_up_machine.performance_answer(context),
                follow_ups=list(context.pending_follow_ups),
                context=context,
                outcome=ResolutionOutcome.FOLLOW_UP_ANSWER,
                follow_up_prompt=prompt,
            )

        resolution = self._run_pipeline(prompt, context)
        resolution.follow_up_prompt = prompt
        if resolution.outcome is ResolutionOutcome.FALLBACK_SUGGESTIONS:
            context.clear_follow_ups()
        resolution.follow_ups = list(context.pending_follow_ups)
        return resolution

    def _run_pipeline(self, query: str, context: ConversationContext) -> Resolution:
        small_talk = self.small_talk.classify(query)
        if small_talk:
            return Resolution(small_talk, [], context, ResolutionOutcome.SMALL_TALK)

        shortcut = self._answer_shortcut(query, context)
        if shortcut is not None:
            return shortcut

        expanded = self.expander.expand(query)
        candidates = self.matcher.search(expanded)
        if not candidates:
            return self._no_match(query, context)

        best = candidates[0]
        if best.score <= self.confidence_threshold:
            document = best.document
            answer = build_answer(document, document.category)
            context.record_answer(document.category, document)
            return Resolution(
                text=answer.text,
                follow_ups=list(answer.follow_ups),
                context=context,
                outcome=ResolutionOutcome.CONFIDENT_MATCH,
                candidates=candidates,
            )

        return self._fallback(candidates, context)

    def _answer_shortcut(self, query: str, context: ConversationContext) -> Optional[Resolution]:
        rule = find_shortcut(query, self.shortcuts)
        if rule is None:
            return None
        matches = rule.select(self.index.documents)
        if not matches:
            return None
        labels = ", ".join(doc.label for doc in matches)
        return Resolution(
            text=f"{rule.heading}: {labels}",
            follow_ups=[f"Do you want details on {matches[0].label}?"],
            context=context,
            outcome=ResolutionOutcome.CANONICAL_SHORTCUT,
        )

    def _no_match(self, query: str, context: ConversationContext) -> Resolution:
        examples = ", ".join(f'"{example}"' for example in config.NO_MATCH_EXAMPLES)
        return Resolution(
            text=f"🤔 I couldn't find a direct match for \"{query}\". Try: {examples}.",
            follow_ups=list(config.NO_MATCH_FOLLOW_UPS),
            context=context,
            outcome=ResolutionOutcome.NO_MATCH,
        )

    def _fallback(self, candidates: List[MatchCandidate], context: ConversationContext) -> Resolution:
        top = candidates[: self.fallback_limit]
        context.did_you_mean = [candidate.document for candidate in top]
        choices = "\n".join(f"{i + 1}. {c.document.label}" for i, c in enumerate(top))
        return Resolution(
            text=(
                "I found a few close matches. Did you mean one of these?\n\n"
                f"{choices}\n\nPick a number or type its name."
            ),
            follow_ups=[],
            context=context,
            outcome=ResolutionOutcome.FALLBACK_SUGGESTIONS,
            candidates=candidates,
        )

    def _ensure_ready(self, operation: str, query: Optional[str]):
        if self.is_ready:
            return
        exception_logger.log_error(
            "Knowledge base not loaded yet", "engine", context=f"{operation}: {query!r}"
        )
        raise KnowledgeBaseNotReadyError("The knowledge base has not been loaded yet.")
