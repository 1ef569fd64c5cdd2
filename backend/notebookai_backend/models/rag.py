from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from .notebook import ChunkMatch


class MatchChunksRequest(BaseModel):
    notebook_id: str = Field(..., description="Notebook to search")
    query: str = Field(..., description="Text to embed and match against stored chunks")
    threshold: float = Field(0.5, ge=-1.0, le=1.0)
    count: int = Field(5, ge=1, le=50)


class MatchChunksResponse(BaseModel):
    success: bool = True
    matches: List[ChunkMatch]
