"""Embedding models for semantic search."""

from __future__ import annotations

import asyncio
import threading
from typing import Dict, List, Optional

import httpx

from .errors import EmbeddingError


class Embedder:
    """Abstract base class for embedding models."""

    async def embed_one(self, text: str) -> List[float]:
        """Embed a single text into a vector."""
        raise NotImplementedError

    async def embed(self, texts: List[str]) -> List[List[float]]:
        """Embed multiple texts into vectors."""
        return [await self.embed_one(t) for t in texts]

    async def aclose(self) -> None:
        pass


class GeminiEmbedder(Embedder):
    """Embedder backed by the Gemini ``embedContent`` REST endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-embedding-001",
        api_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not api_key:
            raise ValueError("Gemini API key is not set (GEMINI_API_KEY)")
        self.model = model
        self._client = client or httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
            timeout=timeout,
        )

    async def embed_one(self, text: str) -> List[float]:
        payload = {
            "model": f"models/{self.model}",
            "content": {"parts": [{"text": text}]},
        }
        response = await self._client.post(f"/models/{self.model}:embedContent", json=payload)
        if response.status_code != 200:
            raise EmbeddingError(
                f"Embedding request failed with HTTP {response.status_code}: {response.text[:200]}"
            )
        data = response.json()
        values = data.get("embedding", {}).get("values")
        if not values:
            raise EmbeddingError(f"Unexpected response format: {data}")
        return values

    async def aclose(self) -> None:
        await self._client.aclose()


class SentenceTransformersEmbedder(Embedder):
    """Embedder using SentenceTransformers library, run off the event loop.

    One model instance serves every caller, so ``encode`` calls are
    serialised; concurrent ``embed_one`` calls queue on the lock.
    """

    def __init__(self, model_name: str, model=None) -> None:
        if model is None:
            from sentence_transformers import SentenceTransformer  # type: ignore
            model = SentenceTransformer(model_name)
        self.model = model
        self._lock = threading.Lock()

    def _encode(self, texts: List[str]) -> List[List[float]]:
        with self._lock:
            arr = self.model.encode(texts, normalize_embeddings=True, show_progress_bar=False)
        return [row.tolist() for row in arr]

    async def embed(self, texts: List[str]) -> List[List[float]]:
        return await asyncio.to_thread(self._encode, texts)

    async def embed_one(self, text: str) -> List[float]:
        return (await self.embed([text]))[0]


def make_embedder(cfg: Dict) -> Embedder:
    """Create embedder from config.

    Raises:
        SystemExit: If backend is invalid or dependencies are missing
    """
    emb_cfg = cfg.get("embedding", {})
    backend = str(emb_cfg.get("backend", "gemini")).strip().lower()

    if backend == "gemini":
        return GeminiEmbedder(
            api_key=emb_cfg.get("api_key") or "",
            model=emb_cfg.get("model", "gemini-embedding-001"),
            api_url=emb_cfg.get("api_url", "https://generativelanguage.googleapis.com/v1beta"),
            timeout=float(emb_cfg.get("timeout", 30.0)),
        )

    if backend == "sentence_transformers":
        model_name = emb_cfg.get("sentence_transformers_model", "all-MiniLM-L6-v2")
        try:
            return SentenceTransformersEmbedder(model_name)
        except Exception as e:
            raise SystemExit(
                "Could not load sentence-transformers. "
                "Run: pip install -U sentence-transformers"
            ) from e

    raise SystemExit(f"embedding.backend is invalid: {backend!r}")
