from __future__ import annotations

from fastapi import APIRouter, Request

from ..models.chat import ChatHistoryResponse, ChatRequest, ChatResponse
from ..services.chat import ChatService

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/", response_model=ChatResponse)
async def chat_endpoint(request: Request, payload: ChatRequest) -> ChatResponse:
    service: ChatService = request.app.state.chat_service
    text = await service.respond(notebook_id=payload.notebook_id, query=payload.prompt)
    return ChatResponse(text=text)


@router.get("/{notebook_id}/history", response_model=ChatHistoryResponse)
async def chat_history(request: Request, notebook_id: str) -> ChatHistoryResponse:
    service: ChatService = request.app.state.chat_service
    return ChatHistoryResponse(messages=service.history(notebook_id))
