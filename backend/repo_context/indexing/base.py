"""Indexer Interface."""

from __future__ import annotations

from typing import Dict, Iterable, List, Union

from ..core.models import FileRecord, IndexReport


class Indexer:
    """Abstract base class for codebase indexing."""

    async def index_codebase(
        self,
        repo_key: str,
        files: List[Union[FileRecord, Dict]],
        keep_paths: Iterable[str] = (),
    ) -> IndexReport:
        raise NotImplementedError

    async def index_repository(self, repo_key: str, start_path: str = "") -> IndexReport:
        raise NotImplementedError
