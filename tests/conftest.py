"""Shared pytest fixtures for repo-context tests."""
from __future__ import annotations

import asyncio
import base64
import hashlib
import math
from typing import Dict, Iterable, List, Optional

import pytest

from repo_context.config import load_config
from repo_context.config.manager import _ENV_OVERRIDES
from repo_context.core.embeddings import Embedder
from repo_context.core.models import StoredVector, VectorMatch
from repo_context.discovery.github import ContentClient, ContentEntry, RepoContent
from repo_context.storage.base import VectorStore


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


# -- Mock source-control host --

class MockContentClient(ContentClient):
    """In-memory repository tree.

    ``files`` maps file paths to their text; directories are implied by the
    paths. Paths listed in ``fail`` raise on access.
    """

    def __init__(self, files: Dict[str, str], fail: Iterable[str] = ()):
        self.files = files
        self.fail = set(fail)
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def _children(self, path: str) -> List[ContentEntry]:
        prefix = f"{path}/" if path else ""
        seen: Dict[str, str] = {}
        for file_path in self.files:
            if not file_path.startswith(prefix):
                continue
            rest = file_path[len(prefix):]
            head, sep, _ = rest.partition("/")
            seen[prefix + head] = "dir" if sep else "file"
        return [ContentEntry(path=p, type=t) for p, t in sorted(seen.items())]

    async def get_content(self, repo_key: str, path: str = "") -> RepoContent:
        self.calls.append(path)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if path in self.fail:
                raise RuntimeError(f"boom: {path}")
            if path in self.files:
                return RepoContent(type="file", path=path, content=b64(self.files[path]))
            entries = self._children(path)
            if not entries:
                raise RuntimeError(f"404: {path}")
            return RepoContent(type="dir", path=path, entries=entries)
        finally:
            self.in_flight -= 1


# -- Mock embedding service --

def fake_vector(text: str, dim: int = 8) -> List[float]:
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return [b / 255.0 for b in digest[:dim]]


class MockEmbedder(Embedder):
    """Deterministic hash vectors; texts containing a ``fail_marker`` raise."""

    def __init__(self, dim: int = 8, fail_marker: Optional[str] = None):
        self.dim = dim
        self.fail_marker = fail_marker
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def embed_one(self, text: str) -> List[float]:
        self.calls.append(text)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if self.fail_marker and self.fail_marker in text:
                raise RuntimeError("embedding service unavailable")
            return fake_vector(text, self.dim)
        finally:
            self.in_flight -= 1


# -- In-memory vector index --

def _cosine(a: List[float], b: List[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    na = math.sqrt(sum(x * x for x in a)) or 1.0
    nb = math.sqrt(sum(y * y for y in b)) or 1.0
    return dot / (na * nb)


class InMemoryVectorStore(VectorStore):
    """Dict-backed store. ``fail_on_call`` makes the n-th upsert call (1-based) raise."""

    def __init__(self, fail_on_call: Optional[int] = None):
        self.records: Dict[str, StoredVector] = {}
        self.upsert_calls: List[List[StoredVector]] = []
        self.fail_on_call = fail_on_call
        self.ranked: Optional[List[VectorMatch]] = None

    async def upsert(self, records: List[StoredVector]) -> None:
        self.upsert_calls.append(list(records))
        if self.fail_on_call == len(self.upsert_calls):
            raise RuntimeError("index unavailable")
        for record in records:
            self.records[record.id] = record

    async def query(self, vector, top_k, repo_key=None) -> List[VectorMatch]:
        if self.ranked is not None:
            # canned ranking, deliberately ignoring top_k
            return list(self.ranked)
        matches = [
            VectorMatch(id=r.id, score=_cosine(vector, r.values), metadata=dict(r.metadata))
            for r in self.records.values()
            if repo_key is None or r.metadata.get("repo_key") == repo_key
        ]
        matches.sort(key=lambda m: m.score, reverse=True)
        return matches[:top_k]

    async def fetch_content_hashes(self, ids) -> Dict[str, str]:
        return {
            i: self.records[i].metadata["content_hash"]
            for i in ids
            if i in self.records and "content_hash" in self.records[i].metadata
        }

    async def delete_stale(self, repo_key, keep_ids) -> int:
        keep = set(keep_ids)
        stale = [
            i for i, r in self.records.items()
            if r.metadata.get("repo_key") == repo_key and i not in keep
        ]
        for i in stale:
            del self.records[i]
        return len(stale)


# -- Fixtures --

@pytest.fixture(autouse=True)
def offline_token_counter(monkeypatch):
    """Keep pipeline tests independent of the tiktoken encoding download."""
    monkeypatch.setattr(
        "repo_context.indexing.indexer.count_tokens",
        lambda text: len(text.split()),
    )


@pytest.fixture
def cfg(monkeypatch):
    for name, _, _ in _ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    return load_config()


@pytest.fixture
def sample_repo():
    return MockContentClient({
        "src/a.ts": "export const a = 1;\n" * 2,
        "src/lib/b.py": "def b():\n    return 2\n",
        "node_modules/x.js": "module.exports = {};\n",
        "package-lock.json": "{}",
        "README.md": "# Sample\n",
        "public/assets/logo.txt": "logo",
        ".env.local": "SECRET=1",
        "docs/LICENSE.md": "MIT",
    })


@pytest.fixture
def embedder():
    return MockEmbedder()


@pytest.fixture
def store():
    return InMemoryVectorStore()
