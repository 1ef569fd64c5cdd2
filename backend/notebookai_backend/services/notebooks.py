from __future__ import annotations

import logging

from ..models.notebook import NotebookDetail, NotebookListItem, NotebookSummary
from .document_summary import DocumentSummaryService
from .notebook_store import NotebookStore
from .vector_store import VectorStoreManager

logger = logging.getLogger(__name__)


class NotebookService:
    """Notebook listing, lookup, overall summaries and cascading deletion."""

    def __init__(
        self,
        store: NotebookStore,
        vector_store: VectorStoreManager,
        summary_service: DocumentSummaryService,
    ) -> None:
        self.store = store
        self.vector_store = vector_store
        self.summary_service = summary_service

    def list_notebooks(self, page: int = 1, page_size: int = 12) -> tuple[list[NotebookListItem], int]:
        return self.store.list_notebooks(page=page, page_size=page_size)

    def get_notebook(self, notebook_id: str) -> NotebookDetail:
        return self.store.get_notebook(notebook_id)

    async def get_notebook_summary(self, notebook_id: str) -> NotebookSummary:
        notebook = self.store.get_notebook(notebook_id)
        overall = await self.summary_service.generate_overall_summary(
            [source.summary for source in notebook.sources]
        )
        return NotebookSummary(
            id=notebook.id,
            title=notebook.title,
            overall_summary=overall,
            sources=notebook.sources,
        )

    def delete_notebook(self, notebook_id: str) -> None:
        self.store.delete_notebook(notebook_id)
        self.vector_store.delete_notebook(notebook_id)
        logger.info(f"Deleted notebook {notebook_id}")
