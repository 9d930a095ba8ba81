"""Core functionality for repo-context."""

from .models import (
    Chunk,
    EmbeddingResult,
    FileRecord,
    IndexReport,
    ItemFailure,
    StoredVector,
    VectorMatch,
    make_vector_id,
)
from .chunking import Chunker, chunk_file, count_tokens
from .embeddings import Embedder, GeminiEmbedder, SentenceTransformersEmbedder, make_embedder

__all__ = [
    "Chunk",
    "EmbeddingResult",
    "FileRecord",
    "IndexReport",
    "ItemFailure",
    "StoredVector",
    "VectorMatch",
    "make_vector_id",
    "Chunker",
    "chunk_file",
    "count_tokens",
    "Embedder",
    "GeminiEmbedder",
    "SentenceTransformersEmbedder",
    "make_embedder",
]
