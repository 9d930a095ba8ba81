"""Indexing functionality for repo-context."""

from .embedding import EmbeddingGenerator
from .upserter import VectorUpserter, build_stored_vectors
from .indexer import IndexingPipeline, index_codebase, index_repository

__all__ = [
    "EmbeddingGenerator",
    "VectorUpserter",
    "build_stored_vectors",
    "IndexingPipeline",
    "index_codebase",
    "index_repository",
]
