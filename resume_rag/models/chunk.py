"""Chunk, Document and SearchResult data models."""

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from resume_rag.models.enums import Section

# Recognized metadata keys; other JSON-compatible keys are carried through untouched.
METADATA_KEYS = ("section", "title", "tags", "originalIndex")


@dataclass(frozen=True)
class Chunk:
    """One section-scoped rendering of the profile, pre-embedding."""

    section: Section
    content: str
    title: str
    tags: tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.section, Section):
            object.__setattr__(self, "section", Section(self.section))
        if not self.content:
            raise ValueError("content must not be empty")


@dataclass
class Document:
    """A persisted retrieval unit keyed by the hash of its content."""

    id: str
    content: str
    embedding: np.ndarray
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.embedding = np.asarray(self.embedding, dtype=np.float32)
        if self.embedding.ndim != 1:
            raise ValueError("embedding must be a one-dimensional vector")

    @property
    def dimension(self) -> int:
        return int(self.embedding.shape[0])


@dataclass(frozen=True)
class SearchResult:
    """A ranked hit from a similarity search."""

    content: str
    metadata: dict[str, Any]
    similarity: float
