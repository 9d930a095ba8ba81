"""Bounded-concurrency embedding of chunk texts."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..core.embeddings import Embedder
from ..core.models import Chunk, EmbeddingResult
from ..utils.concurrency import GroupedExecutor, Outcome

logger = logging.getLogger(__name__)

EMBEDDING_CONCURRENCY = 10


class EmbeddingGenerator:
    """Embeds texts ``concurrency`` at a time; a failed call yields None."""

    def __init__(self, embedder: Embedder, concurrency: int = EMBEDDING_CONCURRENCY, timeout: Optional[float] = None):
        self.embedder = embedder
        self.executor = GroupedExecutor(concurrency, timeout=timeout, label="embedding")

    async def _run(self, texts: List[str]) -> List[Outcome[List[float]]]:
        outcomes = await self.executor.run(texts, self.embedder.embed_one)
        for outcome in outcomes:
            if not outcome.ok:
                logger.warning(f"Embedding failed for text {outcome.index}: {outcome.error!r}")
        ok = sum(1 for o in outcomes if o.ok)
        logger.info(f"Embedded {ok}/{len(texts)}")
        return outcomes

    async def embed_batch(self, texts: List[str]) -> List[Optional[List[float]]]:
        outcomes = await self._run(texts)
        return [o.value if o.ok else None for o in outcomes]

    async def embed_chunks(self, chunks: List[Chunk]) -> List[EmbeddingResult]:
        outcomes = await self._run([c.text for c in chunks])
        return [
            EmbeddingResult(
                chunk=chunk,
                vector=outcome.value if outcome.ok else None,
                error=None if outcome.ok else (str(outcome.error) or type(outcome.error).__name__),
            )
            for chunk, outcome in zip(chunks, outcomes)
        ]
