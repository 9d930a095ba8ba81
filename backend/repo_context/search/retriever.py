"""Similarity-search context retrieval."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..config import load_config
from ..core import Embedder, make_embedder
from ..core.errors import QueryError
from ..storage import VectorStore, make_vector_store
from .base import Retriever

logger = logging.getLogger(__name__)

REVIEW_DIFF_CHARS = 2000


class ContextRetriever(Retriever):
    """Embeds the query once and returns the stored content of the nearest chunks."""

    def __init__(self, embedder: Embedder, store: VectorStore):
        self.embedder = embedder
        self.store = store

    async def retrieve(self, query: str, top_k: int = 5, repo_key: Optional[str] = None) -> List[str]:
        try:
            vector = await self.embedder.embed_one(query)
        except Exception as e:
            raise QueryError(f"Failed to embed query: {e}") from e

        try:
            matches = await self.store.query(vector, top_k, repo_key=repo_key)
        except Exception as e:
            raise QueryError(f"Vector index query failed: {e}") from e

        contexts = [m.metadata.get("content") for m in matches[:top_k]]
        contexts = [c for c in contexts if c]
        logger.info(f"Retrieved {len(contexts)} context chunks")
        return contexts

    async def aclose(self) -> None:
        await self.embedder.aclose()
        await self.store.aclose()


def build_review_query(title: str, description: Optional[str], diff: str, max_diff_chars: int = REVIEW_DIFF_CHARS) -> str:
    """Retrieval query for a pull request review."""
    return f"{title}\n\n{description or ''}\n\n{diff[:max_diff_chars]}"


async def retrieve_context(
    query: str,
    top_k: int = 5,
    repo_key: Optional[str] = None,
    cfg: Optional[Dict] = None,
) -> List[str]:
    cfg = cfg if cfg is not None else load_config()
    retriever = ContextRetriever(make_embedder(cfg), make_vector_store(cfg))
    try:
        return await retriever.retrieve(query, top_k, repo_key=repo_key)
    finally:
        await retriever.aclose()
