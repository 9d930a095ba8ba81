from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List, Literal

from ..core.models import IndexReport


IndexStatus = Literal["pending", "indexing", "indexed", "error"]


class IndexStartResponse(BaseModel):
    repo_key: str
    status: IndexStatus


class IndexStatusResponse(BaseModel):
    repo_key: str
    status: IndexStatus
    report: Optional[IndexReport] = None
    error_message: Optional[str] = None
    updated_at: datetime


class ContextRequest(BaseModel):
    query: str
    top_k: int = Field(default=5, ge=1, le=100)
    repo_key: Optional[str] = None


class ContextResponse(BaseModel):
    contexts: List[str]
