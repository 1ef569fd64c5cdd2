from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from .config import AppConfig, get_settings
from .errors import NotebookError
from .routes import chat, documents, health, notebooks, rag, syllabi
from .services.chat import ChatService
from .services.document_summary import DocumentSummaryService
from .services.embeddings import EmbeddingBackend, create_embedding_backend
from .services.ingestion import IngestionService
from .services.llm import LLMBackend, create_llm_backend
from .services.notebook_store import NotebookStore
from .services.notebooks import NotebookService
from .services.syllabus import SyllabusService
from .services.vector_store import create_vector_store

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred"


def create_app(
    settings: AppConfig | None = None,
    llm_backend: LLMBackend | None = None,
    embedding_backend: EmbeddingBackend | None = None,
) -> FastAPI:
    """Create the FastAPI application for the document notebook backend."""
    settings = settings or get_settings()
    settings.ensure_directories()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="Notebook AI",
        version="0.1.0",
        description="Upload documents, chat over their summaries and generate course syllabi.",
    )

    # Bootstrap services
    llm = llm_backend or create_llm_backend(settings)
    embeddings = embedding_backend or create_embedding_backend(settings)
    store = NotebookStore(settings)
    vector_store = create_vector_store(settings)
    summary_service = DocumentSummaryService(settings, llm)

    app.state.settings = settings
    app.state.notebook_store = store
    app.state.vector_store = vector_store
    app.state.embedding_backend = embeddings
    app.state.ingestion_service = IngestionService(settings, store, vector_store, embeddings, summary_service)
    app.state.notebook_service = NotebookService(store, vector_store, summary_service)
    app.state.chat_service = ChatService(llm, settings, store)
    app.state.syllabus_service = SyllabusService(llm, settings, store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotebookError)
    async def notebook_error_handler(request: Request, exc: NotebookError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=exc.status_code, content={"success": False, "error": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} crashed: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"success": False, "error": UNEXPECTED_ERROR})

    app.include_router(health.router, prefix="/api")
    app.include_router(notebooks.router, prefix="/api")
    app.include_router(documents.router, prefix="/api")
    app.include_router(chat.router, prefix="/api")
    app.include_router(syllabi.router, prefix="/api")
    app.include_router(rag.router, prefix="/api")

    @app.get("/api/config", tags=["config"])
    async def read_config() -> dict[str, object]:
        return {
            "llm_provider": settings.llm_provider,
            "openai_model": settings.openai_model,
            "ollama_model": settings.ollama_model,
            "embedding_backend": settings.embedding_backend,
            "embedding_model": settings.embedding_model,
            "max_chunk_size": settings.max_chunk_size,
        }

    return app
