from typing import Optional

from pydantic import BaseModel, Field


class IndexStats(BaseModel):
    """Statistics from a directory ingestion."""
    path: str
    files_indexed: int = 0
    chunks_stored: int = 0
    files_skipped: int = 0
    total_time_seconds: float = 0.0


class KnowledgeRequest(BaseModel):
    content: str = Field(..., min_length=1)
    source: str = Field(..., min_length=1)
    timeout: Optional[float] = Field(None, gt=0)


class KnowledgeResponse(BaseModel):
    document_id: str
    source: str


class IndexRequest(BaseModel):
    path: str = Field(..., min_length=1)
    timeout: Optional[float] = Field(None, gt=0)


class QueryRequest(BaseModel):
    query: str = Field(..., min_length=1)
    top_k: Optional[int] = Field(None, ge=0, le=50)
    timeout: Optional[float] = Field(None, gt=0)


class SearchHit(BaseModel):
    document_id: str
    score: float
    content: str
    metadata: dict[str, str]


class SearchResponse(BaseModel):
    query: str
    results: list[SearchHit] = Field(default_factory=list)


class ContextResponse(BaseModel):
    query: str
    context_text: str


class SourcesResponse(BaseModel):
    sources: list[str]


class RemoveResponse(BaseModel):
    source: str
    removed: int


class CountResponse(BaseModel):
    count: int
