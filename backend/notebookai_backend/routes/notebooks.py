from __future__ import annotations

from typing import List

from fastapi import APIRouter, File, Query, Request, UploadFile

from ..models.notebook import NotebookPage
from ..services.ingestion import IngestionService
from ..services.notebooks import NotebookService
from ..services.syllabus import SyllabusService
from .documents import read_upload

router = APIRouter(prefix="/notebooks", tags=["notebooks"])


@router.get("/", response_model=NotebookPage)
async def list_notebooks(
    request: Request,
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
) -> NotebookPage:
    service: NotebookService = request.app.state.notebook_service
    notebooks, total = service.list_notebooks(page=page, page_size=page_size)
    return NotebookPage(notebooks=notebooks, total_count=total)


@router.post("/")
async def create_notebook(request: Request, files: List[UploadFile] = File(...)) -> dict[str, object]:
    """Create a notebook from one or more DOC/DOCX files and title it from their summaries."""
    ingestion_service: IngestionService = request.app.state.ingestion_service
    documents = [await read_upload(file) for file in files]
    notebook = await ingestion_service.create_notebook(documents)
    return {"success": True, "notebook": notebook}


@router.get("/{notebook_id}")
async def get_notebook(request: Request, notebook_id: str) -> dict[str, object]:
    service: NotebookService = request.app.state.notebook_service
    return {"success": True, "notebook": service.get_notebook(notebook_id)}


@router.get("/{notebook_id}/summary")
async def get_notebook_summary(request: Request, notebook_id: str) -> dict[str, object]:
    service: NotebookService = request.app.state.notebook_service
    return {"success": True, "summary": await service.get_notebook_summary(notebook_id)}


@router.delete("/{notebook_id}")
async def delete_notebook(request: Request, notebook_id: str) -> dict[str, object]:
    service: NotebookService = request.app.state.notebook_service
    service.delete_notebook(notebook_id)
    return {"success": True}


@router.post("/{notebook_id}/sources")
async def add_sources(request: Request, notebook_id: str, files: List[UploadFile] = File(...)) -> dict[str, object]:
    ingestion_service: IngestionService = request.app.state.ingestion_service
    documents = [await read_upload(file) for file in files]
    results = await ingestion_service.add_sources(notebook_id, documents)
    return {
        "success": True,
        "sources": [
            {
                "file_name": result.source.file_name,
                "file_type": result.source.file_type,
                "summary": result.summary,
                "chunks": result.chunk_count,
                "preview": result.preview,
            }
            for result in results
        ],
    }


@router.get("/{notebook_id}/features")
async def list_generated_features(request: Request, notebook_id: str) -> dict[str, object]:
    service: SyllabusService = request.app.state.syllabus_service
    return {"success": True, "features": service.list_generated_features(notebook_id)}
