"""
Answer text assembly for a single document.

Pure functions: the same document and category always give the same text
and follow-up prompts. Fields missing from the record are simply left out.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from document_index import Document

PROJECT_FOLLOW_UPS = (
    "How did he solve performance or scaling issues in this project?",
    "Show the project's source or demo link?",
)
EXPERIENCE_FOLLOW_UPS = (
    "What skills did he gain in this role?",
    "Which projects came out of this experience?",
)
GENERIC_FOLLOW_UPS = ("Would you like more examples or code links?",)


@dataclass
class Answer:
    text: str
    follow_ups: List[str] = field(default_factory=list)


def build_answer(document: Document, category: str) -> Answer:
    """Build the answer text and follow-up prompts for ``document``."""
    out = f"✨ {document.label}\n\n"
    if document.headline:
        out += f"{document.headline}\n\n"
    if document.description:
        out += f"{document.description}\n\n"
    if document.problems_solved:
        out += f"Problems solved: {_join(document.problems_solved)}\n\n"
    if document.technologies:
        out += f"Technologies: {_join(document.technologies)}\n"
    skills = document.skills or document.skills_gained
    if skills:
        out += f"Skills: {_join(skills)}\n"
    if document.lessons_gained:
        out += f"Lessons: {_join(document.lessons_gained)}\n"
    if document.impact:
        out += f"Impact: {document.impact}\n"
    if document.source_link:
        out += f"🔗 Link: {document.source_link}\n"
    if document.media:
        out += f"🎬 Media: {document.media}\n"

    return Answer(text=out.rstrip("\n"), follow_ups=follow_ups_for(category))


def follow_ups_for(category: str) -> List[str]:
    if category == "projects":
        return list(PROJECT_FOLLOW_UPS)
    if category == "experiences":
        return list(EXPERIENCE_FOLLOW_UPS)
    return list(GENERIC_FOLLOW_UPS)


def _join(items: Sequence[str]) -> str:
    return ", ".join(items)
