"""
Knowledge-base flattening.

The portfolio knowledge base is a JSON object whose values are either lists
of records (projects, experiences, testimonials...) or a single record
(profile). ``DocumentIndex`` turns it into one flat, immutable sequence of
``Document`` objects that the matcher and answer builder work on.

Records are authored by hand and only loosely structured, so every field is
optional and malformed values are dropped instead of failing the build.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from exception_logger import exception_logger

# Field name -> accepted record keys, first present key wins
TEXT_FIELD_KEYS = {
    "name": ("name",),
    "title": ("title",),
    "company_name": ("company_name", "companyName", "company"),
    "description": ("description",),
    "headline": ("headline",),
    "impact": ("impact",),
    "source_link": ("source_code_link", "sourceCodeLink", "source_link", "sourceLink"),
    "media": ("media",),
    "performance": ("performance",),
}
LIST_FIELD_KEYS = {
    "technologies": ("technologies",),
    "skills": ("skills",),
    "skills_gained": ("skills_gained", "skillsGained"),
    "problems_solved": ("problems_solved", "problemsSolved"),
    "lessons_gained": ("lessons_gained", "lessonsGained"),
    "tags": ("tags",),
}


@dataclass(frozen=True)
class Document:
    """A single knowledge-base record tagged with its source category."""

    category: str
    id: str
    position: int
    name: Optional[str] = None
    title: Optional[str] = None
    company_name: Optional[str] = None
    description: Optional[str] = None
    headline: Optional[str] = None
    impact: Optional[str] = None
    source_link: Optional[str] = None
    media: Optional[str] = None
    performance: Optional[str] = None
    technologies: Tuple[str, ...] = ()
    skills: Tuple[str, ...] = ()
    skills_gained: Tuple[str, ...] = ()
    problems_solved: Tuple[str, ...] = ()
    lessons_gained: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()

    @property
    def label(self) -> str:
        """Display name: title, name or company, in that order."""
        return self.title or self.name or self.company_name or "Item"

    def field_value(self, field_name: str):
        return getattr(self, field_name, None)


class DocumentIndex:
    """
    Immutable, ordered collection of flattened documents.

    Attributes:
        documents (tuple[Document, ...]): Documents in index-build order
    """

    def __init__(self, documents):
        self.documents: Tuple[Document, ...] = tuple(documents)
        self._by_id: Dict[str, Document] = {doc.id: doc for doc in self.documents}

    @classmethod
    def from_knowledge_base(cls, knowledge_base: Mapping[str, Any]) -> "DocumentIndex":
        """
        Flatten a knowledge base into documents.

        Lists produce ``<category>-<i>`` ids, single objects use the category
        name as id. Anything else is skipped and logged.
        """
        documents: List[Document] = []
        for category, value in (knowledge_base or {}).items():
            if isinstance(value, list):
                for idx, record in enumerate(value):
                    if not isinstance(record, Mapping):
                        exception_logger.log_error(
                            f"Skipping non-object record {category}[{idx}]", "index",
                            context=f"got {type(record).__name__}",
                        )
                        continue
                    documents.append(build_document(record, category, f"{category}-{idx}", len(documents)))
            elif isinstance(value, Mapping):
                documents.append(build_document(value, category, str(category), len(documents)))
            else:
                exception_logger.log_error(
                    f"Skipping category '{category}': expected a list or an object", "index",
                    context=f"got {type(value).__name__}",
                )
        return cls(documents)

    def get(self, document_id: str) -> Optional[Document]:
        return self._by_id.get(document_id)

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)


def build_document(record: Mapping[str, Any], category: str, doc_id: str, position: int) -> Document:
    values: Dict[str, Any] = {}
    for field_name, keys in TEXT_FIELD_KEYS.items():
        text = _coerce_text(_first_present(record, keys))
        if text:
            values[field_name] = text
    for field_name, keys in LIST_FIELD_KEYS.items():
        raw_value = _first_present(record, keys)
        items = _coerce_list(raw_value)
        if items is None:
            exception_logger.log_error(
                f"Field '{field_name}' of {doc_id} is not a list, treating it as absent", "index",
                context=f"got {type(raw_value).__name__}",
            )
            continue
        if items:
            values[field_name] = items
    return Document(category=str(category), id=doc_id, position=position, **values)


def _first_present(record: Mapping[str, Any], keys) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def _coerce_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return None
    text = str(value).strip()
    return text or None


def _coerce_list(value: Any) -> Optional[Tuple[str, ...]]:
    """
    Normalize a sequence field.

    Returns an empty tuple for a missing field, None for a value that cannot
    be read as a sequence. A bare string counts as a one-item list and
    ``{"name": ...}`` entries contribute their name.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if isinstance(value, Mapping) or not isinstance(value, (list, tuple)):
        return None

    items: List[str] = []
    for entry in value:
        if isinstance(entry, Mapping):
            entry = entry.get("name")
        text = _coerce_text(entry)
        if text:
            items.append(text)
    return tuple(items)
