"""Abstract vector storage interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from ..core.models import StoredVector, VectorMatch


class VectorStore(ABC):
    """Abstract base class for vector storage backends."""

    @abstractmethod
    async def upsert(self, records: List[StoredVector]) -> None:
        """Insert or overwrite records keyed by ``StoredVector.id``."""
        pass

    @abstractmethod
    async def query(
        self,
        vector: List[float],
        top_k: int,
        repo_key: Optional[str] = None,
    ) -> List[VectorMatch]:
        """Nearest vectors with metadata, most similar first."""
        pass

    @abstractmethod
    async def fetch_content_hashes(self, ids: Iterable[str]) -> Dict[str, str]:
        """Map each stored id among ``ids`` to its ``content_hash``."""
        pass

    @abstractmethod
    async def delete_stale(self, repo_key: str, keep_ids: Iterable[str]) -> int:
        """Delete vectors of ``repo_key`` not in ``keep_ids``; return how many."""
        pass

    async def aclose(self) -> None:
        pass
