from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from .notebook import Message


class ChatRequest(BaseModel):
    notebook_id: str = Field(..., description="Notebook whose sources ground the answer")
    prompt: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    success: bool = True
    text: str


class ChatHistoryResponse(BaseModel):
    success: bool = True
    messages: List[Message]
