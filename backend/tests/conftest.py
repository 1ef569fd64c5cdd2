from __future__ import annotations

import io
from pathlib import Path

import pytest
from docx import Document
from fastapi.testclient import TestClient

from notebookai_backend.app import create_app
from notebookai_backend.config import AppConfig
from notebookai_backend.errors import ProviderError
from notebookai_backend.services.document_loader import DOCX_MIME, LoadedDocument
from notebookai_backend.services.document_summary import DocumentSummaryService
from notebookai_backend.services.embeddings import HashEmbeddingBackend
from notebookai_backend.services.ingestion import IngestionService
from notebookai_backend.services.notebook_store import NotebookStore
from notebookai_backend.services.vector_store import create_vector_store


class FakeLLM:
    """Records prompts and answers from a script, then with a fixed default."""

    def __init__(self, replies: list[str] | None = None, default: str = "Generated text.") -> None:
        self.prompts: list[str] = []
        self.replies = list(replies or [])
        self.default = default

    async def generate(self, prompt: str, max_tokens: int) -> str:
        self.prompts.append(prompt)
        if self.replies:
            return self.replies.pop(0)
        return self.default


class FailingLLM:
    async def generate(self, prompt: str, max_tokens: int) -> str:
        raise ProviderError("model unavailable")


class FailingEmbeddings:
    async def embed(self, text: str) -> list[float]:
        raise ProviderError("embedding quota exceeded")


def build_settings(tmp_path: Path, **overrides) -> AppConfig:
    values = {
        "workspace_root": tmp_path / "workspace",
        "models_dir": tmp_path / "workspace" / "models",
        "index_dir": tmp_path / "workspace" / "indexes",
        "embedding_backend": "hash",
        "llm_provider": "ollama",
    }
    values.update(overrides)
    config = AppConfig.model_validate(values)
    config.ensure_directories()
    return config


def make_docx(paragraphs: list[str]) -> bytes:
    document = Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def docx_document(text: str, file_name: str = "lecture.docx") -> LoadedDocument:
    return LoadedDocument(file_name=file_name, file_type=DOCX_MIME, text=text)


@pytest.fixture
def settings(tmp_path) -> AppConfig:
    return build_settings(tmp_path)


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def store(settings) -> NotebookStore:
    return NotebookStore(settings)


@pytest.fixture
def vector_store(settings):
    return create_vector_store(settings)


@pytest.fixture
def ingestion(settings, store, vector_store, llm) -> IngestionService:
    return IngestionService(
        settings,
        store,
        vector_store,
        HashEmbeddingBackend(),
        DocumentSummaryService(settings, llm),
    )


@pytest.fixture
def client(settings, llm) -> TestClient:
    app = create_app(settings, llm_backend=llm, embedding_backend=HashEmbeddingBackend())
    return TestClient(app)
