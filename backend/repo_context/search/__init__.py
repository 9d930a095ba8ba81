"""Context retrieval for repo-context."""

from .base import Retriever
from .retriever import ContextRetriever, build_review_query, retrieve_context

__all__ = [
    "Retriever",
    "ContextRetriever",
    "build_review_query",
    "retrieve_context",
]
