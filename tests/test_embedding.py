"""Tests for EmbeddingGenerator and the HTTP embedder."""
import json
import threading
import time

import httpx
import pytest

from repo_context.core.embeddings import GeminiEmbedder, SentenceTransformersEmbedder, make_embedder
from repo_context.core.errors import EmbeddingError
from repo_context.core.models import Chunk
from repo_context.indexing import EmbeddingGenerator

from conftest import MockEmbedder, fake_vector


class TestEmbeddingGenerator:
    @pytest.mark.asyncio
    async def test_forced_failure_scenario(self):
        texts = [f"text {i}" for i in range(25)]
        texts[5] = "text 5 FAIL"
        generator = EmbeddingGenerator(MockEmbedder(fail_marker="FAIL"), concurrency=10)

        result = await generator.embed_batch(texts)

        assert len(result) == 25
        assert result[5] is None
        assert all(v is not None for i, v in enumerate(result) if i != 5)
        assert result[7] == fake_vector("text 7")

    @pytest.mark.asyncio
    async def test_all_failures_keep_length(self):
        generator = EmbeddingGenerator(MockEmbedder(fail_marker="x"), concurrency=3)
        assert await generator.embed_batch(["x1", "x2", "x3", "x4"]) == [None] * 4

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        generator = EmbeddingGenerator(MockEmbedder())
        assert await generator.embed_batch([]) == []

    @pytest.mark.asyncio
    async def test_concurrency_width(self):
        embedder = MockEmbedder()
        await EmbeddingGenerator(embedder, concurrency=10).embed_batch([str(i) for i in range(25)])
        assert embedder.max_in_flight == 10
        assert len(embedder.calls) == 25

    @pytest.mark.asyncio
    async def test_embed_chunks_records_errors(self):
        chunks = [
            Chunk(source_path="a.ts", part_index=0, text="ok"),
            Chunk(source_path="b.ts", part_index=0, text="FAIL here"),
        ]
        results = await EmbeddingGenerator(MockEmbedder(fail_marker="FAIL")).embed_chunks(chunks)
        assert [r.chunk for r in results] == chunks
        assert results[0].vector is not None and results[0].error is None
        assert results[1].vector is None
        assert "unavailable" in results[1].error


def _gemini(handler):
    http = httpx.AsyncClient(
        base_url="https://generativelanguage.googleapis.com/v1beta",
        transport=httpx.MockTransport(handler),
    )
    return GeminiEmbedder(api_key="k", client=http)


class TestGeminiEmbedder:
    @pytest.mark.asyncio
    async def test_embed_one(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"embedding": {"values": [0.1, 0.2, 0.3]}})

        embedder = _gemini(handler)
        assert await embedder.embed_one("hello") == [0.1, 0.2, 0.3]
        assert seen["path"] == "/v1beta/models/gemini-embedding-001:embedContent"
        assert seen["body"]["content"]["parts"][0]["text"] == "hello"
        await embedder.aclose()

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        embedder = _gemini(lambda request: httpx.Response(429, text="quota exceeded"))
        with pytest.raises(EmbeddingError, match="429"):
            await embedder.embed_one("hello")
        await embedder.aclose()

    @pytest.mark.asyncio
    async def test_malformed_response_raises(self):
        embedder = _gemini(lambda request: httpx.Response(200, json={"nope": True}))
        with pytest.raises(EmbeddingError):
            await embedder.embed_one("hello")
        await embedder.aclose()

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            GeminiEmbedder(api_key="")


class TestMakeEmbedder:
    def test_gemini_backend(self, cfg):
        cfg["embedding"]["api_key"] = "k"
        assert isinstance(make_embedder(cfg), GeminiEmbedder)

    def test_invalid_backend(self, cfg):
        cfg["embedding"]["backend"] = "word2vec"
        with pytest.raises(SystemExit):
            make_embedder(cfg)


class _Row:
    def __init__(self, values):
        self.values = values

    def tolist(self):
        return list(self.values)


class _CountingModel:
    """Stand-in for a SentenceTransformer that records overlapping encode calls."""

    def __init__(self):
        self.lock = threading.Lock()
        self.active = 0
        self.peak = 0

    def encode(self, texts, normalize_embeddings=True, show_progress_bar=False):
        with self.lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        time.sleep(0.005)
        with self.lock:
            self.active -= 1
        return [_Row([float(len(t)), 1.0]) for t in texts]


class TestSentenceTransformersEmbedder:
    @pytest.mark.asyncio
    async def test_encode_calls_do_not_overlap(self):
        model = _CountingModel()
        embedder = SentenceTransformersEmbedder("unused", model=model)

        result = await EmbeddingGenerator(embedder, concurrency=10).embed_batch(["a" * i for i in range(1, 11)])

        assert result[2] == [3.0, 1.0]
        assert all(v is not None for v in result)
        assert model.peak == 1
