from typing import Optional

from fastapi import FastAPI, HTTPException

from vector_store.exceptions import (
    BackendUnavailable,
    EmbeddingUnavailable,
    IngestionIOError,
    OperationTimeout,
    RetrievalError,
    UnsupportedOperation,
)

from .config import RetrievalConfig
from .manager import RetrievalManager
from .models import (
    ContextResponse,
    CountResponse,
    IndexRequest,
    IndexStats,
    KnowledgeRequest,
    KnowledgeResponse,
    QueryRequest,
    RemoveResponse,
    SearchHit,
    SearchResponse,
    SourcesResponse,
)

_STATUS_CODES: list[tuple[type[Exception], int]] = [
    (OperationTimeout, 504),
    (EmbeddingUnavailable, 503),
    (BackendUnavailable, 503),
    (UnsupportedOperation, 501),
    (IngestionIOError, 404),
    (ValueError, 400),
]


def status_for(exc: BaseException) -> int:
    """HTTP status for an engine error."""
    for error_type, status in _STATUS_CODES:
        if isinstance(exc, error_type):
            return status
    return 500


def create_app(
    config: Optional[RetrievalConfig] = None,
    manager: Optional[RetrievalManager] = None,
) -> FastAPI:
    service = manager or RetrievalManager(config or RetrievalConfig.from_env())

    app = FastAPI(
        title="Retrieval Service",
        version="1.0.0",
        description="Knowledge ingestion and context retrieval API.",
    )

    def fail(exc: Exception) -> HTTPException:
        detail = "; ".join([str(exc), *getattr(exc, "__notes__", [])])
        return HTTPException(status_code=status_for(exc), detail=detail)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", **service.health_check()}

    @app.get("/count", response_model=CountResponse)
    def count() -> CountResponse:
        try:
            return CountResponse(count=service.knowledge_base_count())
        except RetrievalError as exc:
            raise fail(exc) from exc

    @app.get("/sources", response_model=SourcesResponse)
    def sources() -> SourcesResponse:
        try:
            return SourcesResponse(sources=service.get_indexed_paths())
        except RetrievalError as exc:
            raise fail(exc) from exc

    @app.delete("/sources", response_model=RemoveResponse)
    def remove_source(source: str) -> RemoveResponse:
        try:
            return RemoveResponse(source=source, removed=service.remove_source(source))
        except RetrievalError as exc:
            raise fail(exc) from exc

    @app.post("/knowledge", response_model=KnowledgeResponse)
    def add_knowledge(request: KnowledgeRequest) -> KnowledgeResponse:
        try:
            document = service.add_knowledge(request.content, request.source, timeout=request.timeout)
            return KnowledgeResponse(document_id=document.id, source=request.source)
        except (RetrievalError, ValueError) as exc:
            raise fail(exc) from exc

    @app.post("/index", response_model=IndexStats)
    def index(request: IndexRequest) -> IndexStats:
        try:
            return service.index_directory_with_stats(request.path, timeout=request.timeout)
        except RetrievalError as exc:
            raise fail(exc) from exc

    @app.post("/search", response_model=SearchResponse)
    def search(request: QueryRequest) -> SearchResponse:
        try:
            results = service.retrieve(request.query, top_k=request.top_k, timeout=request.timeout)
        except (RetrievalError, ValueError) as exc:
            raise fail(exc) from exc
        return SearchResponse(
            query=request.query,
            results=[
                SearchHit(
                    document_id=result.document.id,
                    score=result.score,
                    content=result.document.content,
                    metadata=result.document.metadata,
                )
                for result in results
            ],
        )

    @app.post("/context", response_model=ContextResponse)
    def context(request: QueryRequest) -> ContextResponse:
        try:
            text = service.retrieve_context(request.query, timeout=request.timeout)
        except (RetrievalError, ValueError) as exc:
            raise fail(exc) from exc
        return ContextResponse(query=request.query, context_text=text)

    @app.post("/clear")
    def clear() -> dict:
        try:
            service.clear()
        except RetrievalError as exc:
            raise fail(exc) from exc
        return {"status": "cleared"}

    return app
