"""Retriever Interface."""

from __future__ import annotations

from typing import List, Optional


class Retriever:
    """Abstract base class for context retrieval."""

    async def retrieve(self, query: str, top_k: int = 5, repo_key: Optional[str] = None) -> List[str]:
        """Return the content of the chunks most similar to ``query``.

        Args:
            query: Free-text query (a PR title, description and diff excerpt)
            top_k: Maximum number of results
            repo_key: Restrict results to one repository

        Returns:
            Chunk texts in the vector index's rank order
        """
        raise NotImplementedError
