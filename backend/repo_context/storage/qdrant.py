"""Qdrant vector database backend."""

from __future__ import annotations

import logging
import uuid
from typing import Dict, Iterable, List, Optional

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    FilterSelector,
    HasIdCondition,
    MatchValue,
    PointStruct,
    VectorParams,
)

from ..core.models import StoredVector, VectorMatch
from .base import VectorStore

logger = logging.getLogger(__name__)


def point_id(vector_id: str) -> str:
    """Qdrant only accepts integer or UUID ids; derive a stable UUID."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, vector_id))


def _repo_filter(repo_key: str) -> Filter:
    return Filter(must=[FieldCondition(key="repo_key", match=MatchValue(value=repo_key))])


class QdrantVectorStore(VectorStore):

    def __init__(
        self,
        collection_name: str,
        client: Optional[AsyncQdrantClient] = None,
        host: str = "localhost",
        port: int = 6333,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
    ):
        self.collection_name = collection_name
        if client is None:
            if url:
                client = AsyncQdrantClient(url=url, api_key=api_key)
            else:
                client = AsyncQdrantClient(host=host, port=port, api_key=api_key)
        self.client = client
        self._vector_dim: Optional[int] = None

    async def _get_collection_vector_dim(self) -> Optional[int]:
        if not await self.client.collection_exists(collection_name=self.collection_name):
            return None
        collection_info = await self.client.get_collection(collection_name=self.collection_name)
        return collection_info.config.params.vectors.size

    async def _ensure_collection(self, vector_dim: int) -> None:
        if self._vector_dim == vector_dim:
            return

        existing_dim = await self._get_collection_vector_dim()
        if existing_dim is None:
            await self.client.create_collection(
                collection_name=self.collection_name,
                vectors_config=VectorParams(size=vector_dim, distance=Distance.COSINE),
            )
            logger.info(f"Created collection '{self.collection_name}' (dim={vector_dim})")
        elif existing_dim != vector_dim:
            raise ValueError(
                f"Collection '{self.collection_name}' exists with dimension {existing_dim}, "
                f"but records have dimension {vector_dim}. Please delete the collection and re-index."
            )
        self._vector_dim = vector_dim

    async def upsert(self, records: List[StoredVector]) -> None:
        if not records:
            return

        vector_dim = len(records[0].values)
        for record in records:
            if len(record.values) != vector_dim:
                raise ValueError(
                    f"Record {record.id} has different dimension: "
                    f"{len(record.values)} vs expected {vector_dim}"
                )
        await self._ensure_collection(vector_dim)

        points = [
            PointStruct(
                id=point_id(record.id),
                vector=record.values,
                payload={**record.metadata, "vector_id": record.id},
            )
            for record in records
        ]
        await self.client.upsert(collection_name=self.collection_name, points=points)

    async def query(self, vector: List[float], top_k: int, repo_key: Optional[str] = None) -> List[VectorMatch]:
        results = await self.client.query_points(
            collection_name=self.collection_name,
            query=vector,
            limit=top_k,
            query_filter=_repo_filter(repo_key) if repo_key else None,
            with_payload=True,
            with_vectors=False,
        )
        return [
            VectorMatch(
                id=(point.payload or {}).get("vector_id", str(point.id)),
                score=point.score,
                metadata=dict(point.payload or {}),
            )
            for point in results.points
        ]

    async def fetch_content_hashes(self, ids: Iterable[str]) -> Dict[str, str]:
        ids = list(ids)
        if not ids or not await self.client.collection_exists(collection_name=self.collection_name):
            return {}
        points = await self.client.retrieve(
            collection_name=self.collection_name,
            ids=[point_id(i) for i in ids],
            with_payload=True,
            with_vectors=False,
        )
        hashes = {}
        for point in points:
            payload = point.payload or {}
            if payload.get("vector_id") and payload.get("content_hash"):
                hashes[payload["vector_id"]] = payload["content_hash"]
        return hashes

    async def delete_stale(self, repo_key: str, keep_ids: Iterable[str]) -> int:
        if not await self.client.collection_exists(collection_name=self.collection_name):
            return 0

        stale_filter = Filter(
            must=[FieldCondition(key="repo_key", match=MatchValue(value=repo_key))],
            must_not=[HasIdCondition(has_id=[point_id(i) for i in keep_ids])],
        )
        stale = await self.client.count(
            collection_name=self.collection_name,
            count_filter=stale_filter,
            exact=True,
        )
        if stale.count:
            await self.client.delete(
                collection_name=self.collection_name,
                points_selector=FilterSelector(filter=stale_filter),
            )
            logger.info(f"Deleted {stale.count} stale vectors for repo: {repo_key}")
        return stale.count

    async def count(self, repo_key: Optional[str] = None) -> int:
        """Count records in the collection."""
        if not await self.client.collection_exists(collection_name=self.collection_name):
            return 0
        result = await self.client.count(
            collection_name=self.collection_name,
            count_filter=_repo_filter(repo_key) if repo_key else None,
            exact=True,
        )
        return result.count

    async def aclose(self) -> None:
        await self.client.close()
