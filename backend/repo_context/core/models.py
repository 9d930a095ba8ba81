"""Data models for repo-context."""

from __future__ import annotations

import dataclasses
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


@dataclasses.dataclass
class FileRecord:
    """One fetched file. Lives for a single indexing run."""

    path: str
    content: str


@dataclasses.dataclass
class Chunk:
    """A bounded slice of a file prepared as one embedding unit."""

    source_path: str
    part_index: int
    text: str

    def vector_id(self, repo_key: str) -> str:
        return make_vector_id(repo_key, self.source_path, self.part_index)


@dataclasses.dataclass
class EmbeddingResult:
    """Embedding outcome for one chunk; ``vector`` is None when the call failed."""

    chunk: Chunk
    vector: Optional[List[float]]
    error: Optional[str] = None


@dataclasses.dataclass
class StoredVector:
    """The unit persisted to the vector index."""

    id: str
    values: List[float]
    metadata: Dict


@dataclasses.dataclass
class VectorMatch:
    id: str
    score: float
    metadata: Dict


def make_vector_id(repo_key: str, path: str, part_index: int) -> str:
    """Deterministic id: re-upserting the same chunk overwrites it."""
    return f"{repo_key}-{path.replace('/', '_')}-{part_index}"


class ItemFailure(BaseModel):
    key: str
    stage: str
    error: str


class IndexReport(BaseModel):
    """Outcome of one indexing run."""

    repo_key: str
    files_discovered: int = 0
    files_indexed: int = 0
    failed_files: List[ItemFailure] = Field(default_factory=list)
    chunks_total: int = 0
    chunks_unchanged: int = 0
    failed_chunks: List[ItemFailure] = Field(default_factory=list)
    vectors_upserted: int = 0
    vectors_pruned: int = 0
    estimated_tokens: int = 0
    time_taken: float = 0.0

    @property
    def succeeded(self) -> int:
        return self.vectors_upserted

    @property
    def failed(self) -> List[ItemFailure]:
        return self.failed_files + self.failed_chunks
