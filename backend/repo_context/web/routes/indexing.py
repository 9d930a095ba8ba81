"""Indexing routes."""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from ...indexing import IndexingPipeline
from ..dependencies import get_pipeline_factory
from ..schemas import IndexStartResponse, IndexStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/repos")

# Repository-level indexing status, keyed by repo_key
indexing_progress: Dict[str, Dict] = {}


def _set_status(repo_key: str, status: str, **fields) -> None:
    entry = indexing_progress.setdefault(repo_key, {})
    entry.update(status=status, updated_at=datetime.now(timezone.utc), **fields)


async def index_repo_task(repo_key: str, pipeline_factory: Callable[[], IndexingPipeline]) -> None:
    """Background task: index one repository and record its status."""
    _set_status(repo_key, "indexing", error_message=None)
    try:
        async with pipeline_factory() as pipeline:
            report = await pipeline.index_repository(repo_key)
    except Exception as e:
        logger.exception(f"Error indexing {repo_key}")
        _set_status(repo_key, "error", error_message=str(e))
        return

    _set_status(repo_key, "indexed", report=report, error_message=None)
    logger.info(
        f"{repo_key} indexed: {report.vectors_upserted} vectors, "
        f"{len(report.failed)} failed items"
    )


@router.post("/{owner}/{repo}/index", response_model=IndexStartResponse, status_code=202)
async def start_indexing(
    owner: str,
    repo: str,
    background_tasks: BackgroundTasks,
    pipeline_factory: Callable[[], IndexingPipeline] = Depends(get_pipeline_factory),
):
    """Start indexing a repository in the background."""
    repo_key = f"{owner}/{repo}"
    current = indexing_progress.get(repo_key)
    if current and current["status"] in ("pending", "indexing"):
        raise HTTPException(status_code=409, detail="Repository is already being indexed")

    _set_status(repo_key, "pending", report=None, error_message=None)
    logger.info(f"Starting background indexing task for {repo_key}")
    background_tasks.add_task(index_repo_task, repo_key, pipeline_factory)
    return IndexStartResponse(repo_key=repo_key, status="pending")


@router.get("/{owner}/{repo}/index", response_model=IndexStatusResponse)
async def get_indexing_status(owner: str, repo: str):
    repo_key = f"{owner}/{repo}"
    entry = indexing_progress.get(repo_key)
    if not entry:
        raise HTTPException(status_code=404, detail="Repository has not been indexed")
    return IndexStatusResponse(repo_key=repo_key, **entry)
