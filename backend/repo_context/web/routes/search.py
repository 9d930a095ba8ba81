"""Context retrieval routes."""

from fastapi import APIRouter, Depends, HTTPException

from ...core.errors import QueryError
from ...search import ContextRetriever
from ..dependencies import get_retriever
from ..schemas import ContextRequest, ContextResponse

router = APIRouter()


@router.post("/context", response_model=ContextResponse)
async def get_context(request: ContextRequest, retriever: ContextRetriever = Depends(get_retriever)):
    try:
        contexts = await retriever.retrieve(request.query, request.top_k, repo_key=request.repo_key)
    except QueryError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return ContextResponse(contexts=contexts)
