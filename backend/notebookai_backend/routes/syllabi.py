from __future__ import annotations

from fastapi import APIRouter, Request

from ..models.syllabus import SyllabusRequest
from ..services.syllabus import SyllabusService

router = APIRouter(prefix="/syllabi", tags=["syllabi"])


@router.post("/")
async def generate_syllabus(request: Request, payload: SyllabusRequest) -> dict[str, object]:
    service: SyllabusService = request.app.state.syllabus_service
    syllabus = await service.generate_syllabus(payload.notebook_id, payload.options)
    return {"success": True, "syllabus": syllabus}


@router.get("/")
async def list_syllabi(request: Request, notebook_id: str) -> dict[str, object]:
    service: SyllabusService = request.app.state.syllabus_service
    return {"success": True, "syllabi": service.list_syllabi(notebook_id)}


@router.get("/{syllabus_id}")
async def get_syllabus(request: Request, syllabus_id: str) -> dict[str, object]:
    service: SyllabusService = request.app.state.syllabus_service
    return {"success": True, "syllabus": service.get_syllabus(syllabus_id)}
