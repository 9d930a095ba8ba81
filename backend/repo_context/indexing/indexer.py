"""Codebase indexing pipeline."""

from __future__ import annotations

import logging
import time
from typing import Dict, Iterable, List, Optional, Union

from ..config import embedding_fingerprint, load_config
from ..core import (
    Chunker,
    Embedder,
    FileRecord,
    IndexReport,
    ItemFailure,
    count_tokens,
    make_embedder,
    make_vector_id,
)
from ..discovery import (
    ContentClient,
    ContentFetcher,
    ExclusionPolicy,
    FileDiscoverer,
    GitHubContentClient,
)
from ..storage import VectorStore, make_vector_store
from ..utils import text_sha256
from .base import Indexer
from .embedding import EmbeddingGenerator
from .upserter import VectorUpserter

logger = logging.getLogger(__name__)


def _as_record(item: Union[FileRecord, Dict]) -> FileRecord:
    if isinstance(item, FileRecord):
        return item
    return FileRecord(path=item["path"], content=item["content"])


class IndexingPipeline(Indexer):
    """Discover -> fetch -> chunk -> embed -> upsert."""

    def __init__(
        self,
        embedder: Embedder,
        store: VectorStore,
        content_client: Optional[ContentClient] = None,
        cfg: Optional[Dict] = None,
    ):
        self.cfg = cfg if cfg is not None else load_config()
        self.embedder = embedder
        self.store = store
        self.content_client = content_client

        fetch_cfg = self.cfg.get("fetch", {})
        emb_cfg = self.cfg.get("embedding", {})
        vs_cfg = self.cfg.get("vector_store", {})

        self.chunker = Chunker.from_config(self.cfg)
        self.generator = EmbeddingGenerator(
            embedder,
            concurrency=int(emb_cfg.get("concurrency", 10)),
            timeout=emb_cfg.get("timeout"),
        )
        self.upserter = VectorUpserter(store, batch_size=int(vs_cfg.get("upsert_batch_size", 100)))
        self.prune_stale = bool(vs_cfg.get("prune_stale", False))
        self.incremental = bool(self.cfg.get("incremental", False))
        self._fingerprint = embedding_fingerprint(self.cfg)

        if content_client is not None:
            self.discoverer = FileDiscoverer(content_client, ExclusionPolicy.from_config(self.cfg))
            self.fetcher = ContentFetcher(
                content_client,
                batch_size=int(fetch_cfg.get("batch_size", 20)),
                timeout=fetch_cfg.get("timeout"),
            )

    @classmethod
    def from_config(cls, cfg: Optional[Dict] = None) -> "IndexingPipeline":
        cfg = cfg if cfg is not None else load_config()
        return cls(
            embedder=make_embedder(cfg),
            store=make_vector_store(cfg),
            content_client=GitHubContentClient.from_config(cfg),
            cfg=cfg,
        )

    async def aclose(self) -> None:
        await self.embedder.aclose()
        await self.store.aclose()
        if self.content_client is not None:
            await self.content_client.aclose()

    async def __aenter__(self) -> "IndexingPipeline":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def index_codebase(
        self,
        repo_key: str,
        files: List[Union[FileRecord, Dict]],
        keep_paths: Iterable[str] = (),
    ) -> IndexReport:
        """Chunk, embed and upsert ``files``.

        ``keep_paths`` names files that were not read this run (failed
        fetches); their stored vectors survive stale pruning.
        """
        start_time = time.time()
        records = [_as_record(f) for f in files]
        report = IndexReport(repo_key=repo_key, files_indexed=len(records))

        chunks = [chunk for record in records for chunk in self.chunker.chunk(record)]
        report.chunks_total = len(chunks)
        report.estimated_tokens = sum(count_tokens(c.text) for c in chunks)
        logger.info(f"Created {len(chunks)} chunks from {len(records)} files")

        hashes = {c.vector_id(repo_key): text_sha256(self._fingerprint, c.text) for c in chunks}

        pending = chunks
        if self.incremental and chunks:
            stored = await self.store.fetch_content_hashes(hashes.keys())
            pending = [c for c in chunks if stored.get(c.vector_id(repo_key)) != hashes[c.vector_id(repo_key)]]
            report.chunks_unchanged = len(chunks) - len(pending)
            logger.info(f"{report.chunks_unchanged} chunks unchanged since last run")

        results = await self.generator.embed_chunks(pending)
        report.failed_chunks = [
            ItemFailure(key=r.chunk.vector_id(repo_key), stage="embed", error=r.error or "unknown error")
            for r in results
            if r.vector is None
        ]

        report.vectors_upserted = await self.upserter.upsert(repo_key, results, hashes)

        # never prune when nothing from this run reached the store
        if self.prune_stale and (report.vectors_upserted or report.chunks_unchanged):
            keep_ids = set(hashes)
            for path in keep_paths:
                keep_ids.update(make_vector_id(repo_key, path, i) for i in range(self.chunker.max_chunks))
            report.vectors_pruned = await self.store.delete_stale(repo_key, keep_ids)

        report.time_taken = time.time() - start_time
        logger.info(
            f"Indexed {repo_key}: {report.vectors_upserted} vectors, "
            f"{len(report.failed_chunks)} failed chunks in {report.time_taken:.2f}s"
        )
        return report

    async def index_repository(self, repo_key: str, start_path: str = "") -> IndexReport:
        if self.content_client is None:
            raise ValueError("index_repository needs a content client")

        paths = await self.discoverer.discover(repo_key, start_path)
        logger.info(f"Found {len(paths)} files to fetch in {repo_key}")

        fetched = await self.fetcher.fetch(repo_key, paths)
        report = await self.index_codebase(
            repo_key,
            fetched.records,
            keep_paths=[failure.key for failure in fetched.failed],
        )
        report.files_discovered = len(paths)
        report.failed_files = fetched.failed
        return report


async def index_codebase(
    repo_key: str,
    files: List[Union[FileRecord, Dict]],
    cfg: Optional[Dict] = None,
) -> IndexReport:
    """Index already-fetched files (wrapper)."""
    async with IndexingPipeline.from_config(cfg) as pipeline:
        return await pipeline.index_codebase(repo_key, files)


async def index_repository(repo_key: str, start_path: str = "", cfg: Optional[Dict] = None) -> IndexReport:
    """Discover, fetch and index a repository (wrapper)."""
    async with IndexingPipeline.from_config(cfg) as pipeline:
        return await pipeline.index_repository(repo_key, start_path)
