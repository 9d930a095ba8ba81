"""Vector storage backends (Qdrant only)."""

from .base import VectorStore
from .factory import make_vector_store, sanitize_collection_name
from .qdrant import QdrantVectorStore, point_id

__all__ = [
    "VectorStore",
    "QdrantVectorStore",
    "make_vector_store",
    "sanitize_collection_name",
    "point_id",
]
