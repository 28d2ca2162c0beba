"""
Document model for the reference corpus.

Documents are immutable. Category-specific metadata is a tagged union: one
frozen dataclass per known category, GenericMetadata for anything else.
SourceReference is the citation snapshot copied into assistant messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Union


class Category(str, Enum):
    """Known corpus categories. Values are matched case-sensitively."""

    CATECHISM = "Catechism"
    COUNCIL_DOCUMENTS = "Council Documents"
    ENCYCLICALS = "Encyclicals"
    SAINTS = "Saints"
    SCRIPTURE = "Scripture"

    @classmethod
    def parse(cls, value: str | None) -> "Category | None":
        """Exact-match lookup; returns None for unknown categories."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# METADATA VARIANTS
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CatechismMetadata:
    section: str | None = None
    paragraphs: str | None = None
    year: str | None = None


@dataclass(frozen=True)
class CouncilDocumentMetadata:
    document: str | None = None
    type: str | None = None
    year: str | None = None


@dataclass(frozen=True)
class EncyclicalMetadata:
    pope: str | None = None
    year: str | None = None
    type: str | None = None


@dataclass(frozen=True)
class SaintMetadata:
    lifespan: str | None = None
    feast: str | None = None
    title: str | None = None


@dataclass(frozen=True)
class ScriptureMetadata:
    testament: str | None = None
    books: str | None = None
    type: str | None = None


@dataclass(frozen=True)
class GenericMetadata:
    """Free-form metadata for categories outside the enumeration."""

    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


DocumentMetadata = Union[
    CatechismMetadata,
    CouncilDocumentMetadata,
    EncyclicalMetadata,
    SaintMetadata,
    ScriptureMetadata,
    GenericMetadata,
]

METADATA_TYPES: dict[Category, type] = {
    Category.CATECHISM: CatechismMetadata,
    Category.COUNCIL_DOCUMENTS: CouncilDocumentMetadata,
    Category.ENCYCLICALS: EncyclicalMetadata,
    Category.SAINTS: SaintMetadata,
    Category.SCRIPTURE: ScriptureMetadata,
}


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def build_metadata(category: str, raw: Mapping[str, Any] | None) -> DocumentMetadata | None:
    """
    Build the metadata variant for a category from a raw key/value map.

    Keys the variant does not know are dropped for known categories; unknown
    categories keep everything in GenericMetadata. Values are stored as text
    since they are only ever rendered into prompts.
    """
    if raw is None:
        return None

    known = Category.parse(category)
    if known is None:
        return GenericMetadata(fields=raw)

    metadata_type = METADATA_TYPES[known]
    names = metadata_type.__dataclass_fields__.keys()
    return metadata_type(**{name: _as_text(raw.get(name)) for name in names})


# ---------------------------------------------------------------------------
# DOCUMENT AND CITATION
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SourceReference:
    """A denormalized citation of a document, with its relevance score."""

    id: int
    title: str
    source: str
    content: str | None = None
    category: str | None = None
    section: str | None = None
    relevance_score: float | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "source": self.source,
            "category": self.category,
            "section": self.section,
            "relevanceScore": self.relevance_score,
        }


@dataclass(frozen=True)
class Document:
    """
    A corpus document.

    Created once at corpus-load time and never mutated. Citations take a
    snapshot via `to_source_reference`, so historical messages keep the text
    they were answered with.
    """

    id: int
    title: str
    content: str
    source: str
    category: str
    metadata: DocumentMetadata | None = None

    @property
    def section(self) -> str | None:
        """Section label used in citations, where the category has one."""
        if isinstance(self.metadata, CatechismMetadata):
            return self.metadata.section
        if isinstance(self.metadata, CouncilDocumentMetadata):
            return self.metadata.document
        return None

    def to_source_reference(self, relevance_score: float | None = None) -> SourceReference:
        return SourceReference(
            id=self.id,
            title=self.title,
            content=self.content,
            source=self.source,
            category=self.category,
            section=self.section,
            relevance_score=relevance_score,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        if isinstance(self.metadata, GenericMetadata):
            metadata = dict(self.metadata.fields)
        elif self.metadata is not None:
            metadata = {
                name: getattr(self.metadata, name)
                for name in self.metadata.__dataclass_fields__
            }
        else:
            metadata = None
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "source": self.source,
            "category": self.category,
            "metadata": metadata,
        }
