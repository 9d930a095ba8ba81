"""Factory for creating vector store instances (Qdrant only)."""

from __future__ import annotations

import re
from typing import Dict, Optional

from .base import VectorStore
from .qdrant import QdrantVectorStore


def sanitize_collection_name(name: str) -> str:
    name = re.sub(r'[^a-zA-Z0-9_-]', '_', name)
    if name and not name[0].isalpha() and name[0] != '_':
        name = '_' + name
    return name


def make_vector_store(cfg: Dict, collection_name: Optional[str] = None) -> VectorStore:
    vector_store_cfg = cfg.get("vector_store", {})
    backend = str(vector_store_cfg.get("backend", "qdrant")).strip().lower()
    if backend != "qdrant":
        raise SystemExit(f"vector_store.backend is invalid: {backend!r}")

    collection_name = sanitize_collection_name(collection_name or vector_store_cfg.get("collection", "codebase"))
    qdrant_cfg = vector_store_cfg.get("qdrant", {})

    return QdrantVectorStore(
        collection_name=collection_name,
        host=qdrant_cfg.get("host", "localhost"),
        port=int(qdrant_cfg.get("port", 6333)),
        url=qdrant_cfg.get("url"),
        api_key=qdrant_cfg.get("api_key"),
    )
