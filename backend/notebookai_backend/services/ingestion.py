from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from ..config import AppConfig
from ..errors import EmptyContent, UnsupportedFileType, ValidationError
from ..models.notebook import IngestionResult, Notebook, UploadPreview
from .chunking import chunk_text
from .document_loader import DOCUMENT_MIME_TYPES, PREVIEW_MIME_TYPES, LoadedDocument
from .document_summary import DocumentSummaryService
from .embeddings import EmbeddingBackend
from .notebook_store import NotebookStore
from .vector_store import VectorStoreManager

logger = logging.getLogger(__name__)


class IngestionService:
    def __init__(
        self,
        settings: AppConfig,
        store: NotebookStore,
        vector_store: VectorStoreManager,
        embedding_backend: EmbeddingBackend,
        summary_service: DocumentSummaryService,
    ) -> None:
        self.settings = settings
        self.store = store
        self.vector_store = vector_store
        self.embedding_backend = embedding_backend
        self.summary_service = summary_service

    async def ingest_document(self, document: LoadedDocument, notebook_id: str) -> IngestionResult:
        """
        Summarize, chunk and embed one document into a notebook.

        Creates one source row and one stored chunk per chunk of text. A failure
        after the source row is written leaves that row in place.
        """
        self._validate(document)
        self.store.records.select_one("notebooks", {"id": notebook_id})

        chunks = chunk_text(document.text, self.settings.max_chunk_size)
        if not chunks:
            raise EmptyContent("No text content found in the file")

        summary = await self.summary_service.summarize_document(document.text, document.file_name)
        source = self.store.add_source(
            notebook_id=notebook_id,
            file_name=document.file_name,
            file_type=document.file_type,
            summary=summary,
        )

        embeddings = await asyncio.gather(*(self.embedding_backend.embed(chunk) for chunk in chunks))
        self.vector_store.add_chunks(notebook_id, source, chunks, embeddings)
        logger.info(f"Ingested {document.file_name} into notebook {notebook_id}: {len(chunks)} chunks")

        return IngestionResult(
            source=source,
            summary=summary,
            chunk_count=len(chunks),
            preview=self._preview(chunks[0]),
        )

    async def add_sources(self, notebook_id: str, documents: Iterable[LoadedDocument]) -> list[IngestionResult]:
        results = []
        for document in documents:
            results.append(await self.ingest_document(document, notebook_id))
        return results

    async def create_notebook(self, documents: list[LoadedDocument]) -> Notebook:
        """
        Create a notebook from a set of documents and title it from their summaries.

        Documents are ingested one at a time; the title is written once all of
        them have been summarized.
        """
        if not documents:
            raise ValidationError("No files provided")
        for document in documents:
            self._validate(document)

        notebook = self.store.create_notebook()
        logger.info(f"Creating notebook {notebook.id} from {len(documents)} file(s)")

        summaries: list[str] = []
        for document in documents:
            try:
                result = await self.ingest_document(document, notebook.id)
            except ValidationError as e:
                raise type(e)(f"Failed to process file {document.file_name}: {e}") from e
            summaries.append(result.summary)

        title = await self.summary_service.generate_title(summaries)
        return self.store.update_title(notebook.id, title)

    async def preview_upload(self, document: LoadedDocument) -> UploadPreview:
        """Chunk a TXT or PDF upload and embed its first chunk without persisting anything."""
        if document.file_type not in PREVIEW_MIME_TYPES:
            raise UnsupportedFileType("Unsupported file type. Please upload a TXT or PDF file.")

        chunks = chunk_text(document.text, self.settings.max_chunk_size)
        if not chunks:
            raise EmptyContent("No text content found in the file")

        embedding = await self.embedding_backend.embed(chunks[0])
        return UploadPreview(
            file_name=document.file_name,
            file_type=document.file_type,
            preview=self._preview(chunks[0]),
            total_chunks=len(chunks),
            embedding=list(embedding[:5]),
        )

    @staticmethod
    def _validate(document: LoadedDocument) -> None:
        if not document.text:
            raise EmptyContent(f"File content is empty: {document.file_name}")
        if document.file_type not in DOCUMENT_MIME_TYPES:
            raise UnsupportedFileType("Unsupported file type. Please upload a DOC or DOCX file.")

    def _preview(self, chunk: str) -> str:
        limit = self.settings.preview_chars
        return chunk[:limit] + "..." if len(chunk) > limit else chunk
