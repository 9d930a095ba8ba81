"""Batched persistence of embedded chunks."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..core.errors import UpsertError
from ..core.models import EmbeddingResult, StoredVector
from ..storage.base import VectorStore

logger = logging.getLogger(__name__)

UPSERT_BATCH_SIZE = 100


def build_stored_vectors(
    repo_key: str,
    results: List[EmbeddingResult],
    content_hashes: Optional[Dict[str, str]] = None,
) -> List[StoredVector]:
    """Turn successful embedding results into storable records."""
    vectors = []
    for result in results:
        if result.vector is None:
            continue
        chunk = result.chunk
        vector_id = chunk.vector_id(repo_key)
        metadata = {
            "repo_key": repo_key,
            "path": chunk.source_path,
            "content": chunk.text,
            "part_index": chunk.part_index,
        }
        if content_hashes and vector_id in content_hashes:
            metadata["content_hash"] = content_hashes[vector_id]
        vectors.append(StoredVector(id=vector_id, values=result.vector, metadata=metadata))
    return vectors


class VectorUpserter:
    """Writes vectors in fixed-size batches, one batch at a time.

    The first failing batch raises ``UpsertError`` and the remaining batches
    are not attempted. Earlier batches stay committed.
    """

    def __init__(self, store: VectorStore, batch_size: int = UPSERT_BATCH_SIZE):
        self.store = store
        self.batch_size = batch_size

    async def upsert(
        self,
        repo_key: str,
        results: List[EmbeddingResult],
        content_hashes: Optional[Dict[str, str]] = None,
    ) -> int:
        vectors = build_stored_vectors(repo_key, results, content_hashes)
        if not vectors:
            logger.info(f"No vectors to upsert for {repo_key}")
            return 0

        total_batches = (len(vectors) + self.batch_size - 1) // self.batch_size
        for i in range(0, len(vectors), self.batch_size):
            batch = vectors[i:i + self.batch_size]
            batch_num = i // self.batch_size + 1
            try:
                await self.store.upsert(batch)
            except Exception as e:
                raise UpsertError(
                    f"Failed to upsert batch {batch_num}/{total_batches} "
                    f"(vectors {i}-{i + len(batch)}): {e}"
                ) from e
            logger.info(f"Upserted batch {batch_num}/{total_batches}")

        return len(vectors)
