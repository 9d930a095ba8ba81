"""FastAPI dependencies."""

from typing import AsyncIterator, Callable, Dict

from fastapi import Depends

from ..config import load_config
from ..core import make_embedder
from ..indexing import IndexingPipeline
from ..search import ContextRetriever
from ..storage import make_vector_store


def get_config() -> Dict:
    return load_config()


def get_pipeline_factory(cfg: Dict = Depends(get_config)) -> Callable[[], IndexingPipeline]:
    # the pipeline outlives the request, so hand out a factory
    return lambda: IndexingPipeline.from_config(cfg)


async def get_retriever(cfg: Dict = Depends(get_config)) -> AsyncIterator[ContextRetriever]:
    retriever = ContextRetriever(make_embedder(cfg), make_vector_store(cfg))
    try:
        yield retriever
    finally:
        await retriever.aclose()
