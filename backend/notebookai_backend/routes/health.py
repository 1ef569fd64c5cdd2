from __future__ import annotations

from fastapi import APIRouter, Request

from ..services.notebook_store import NotebookStore
from ..services.system import system_probe

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthcheck(request: Request) -> dict[str, object]:
    store: NotebookStore = request.app.state.notebook_store
    return {
        "status": "ok",
        "detail": system_probe(),
        "notebooks": store.records.count("notebooks"),
    }
