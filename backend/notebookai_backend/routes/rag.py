from __future__ import annotations

from fastapi import APIRouter, Request

from ..models.rag import MatchChunksRequest, MatchChunksResponse
from ..services.embeddings import EmbeddingBackend
from ..services.notebook_store import NotebookStore
from ..services.vector_store import VectorStoreManager

router = APIRouter(prefix="/rag", tags=["rag"])


@router.post("/match", response_model=MatchChunksResponse)
async def match_chunks(request: Request, payload: MatchChunksRequest) -> MatchChunksResponse:
    """Find the stored chunks of a notebook most similar to a query."""
    store: NotebookStore = request.app.state.notebook_store
    vector_store: VectorStoreManager = request.app.state.vector_store
    embedding_backend: EmbeddingBackend = request.app.state.embedding_backend

    store.records.select_one("notebooks", {"id": payload.notebook_id})
    query_embedding = await embedding_backend.embed(payload.query)
    matches = vector_store.match_chunks(
        query_embedding=query_embedding,
        threshold=payload.threshold,
        count=payload.count,
        notebook_id=payload.notebook_id,
    )
    return MatchChunksResponse(matches=matches)
