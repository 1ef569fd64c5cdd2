from __future__ import annotations

from fastapi import APIRouter, File, Request, UploadFile

from ..models.notebook import UploadPreview
from ..services.document_loader import LoadedDocument, load_upload
from ..services.ingestion import IngestionService

router = APIRouter(prefix="/documents", tags=["documents"])


async def read_upload(file: UploadFile) -> LoadedDocument:
    data = await file.read()
    return load_upload(file.filename or "document", file.content_type, data)


@router.post("/upload")
async def upload_preview(request: Request, file: UploadFile = File(...)) -> dict[str, object]:
    """
    Preview how a TXT or PDF file would be chunked and embedded. Nothing is stored.
    """
    ingestion_service: IngestionService = request.app.state.ingestion_service
    document = await read_upload(file)
    preview: UploadPreview = await ingestion_service.preview_upload(document)
    return {"success": True, **preview.model_dump()}
