from __future__ import annotations

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, Field


class Notebook(BaseModel):
    id: str = Field(..., description="Unique notebook identifier")
    title: str
    created_at: datetime


class NotebookListItem(Notebook):
    source_count: int = 0


class NotebookPage(BaseModel):
    success: bool = True
    notebooks: List[NotebookListItem]
    total_count: int


class Source(BaseModel):
    id: str
    notebook_id: str
    file_name: str
    file_type: str
    summary: str
    created_at: datetime


class NotebookDetail(Notebook):
    sources: List[Source] = Field(default_factory=list)


class NotebookSummary(BaseModel):
    id: str
    title: str
    overall_summary: str
    sources: List[Source]


class Chunk(BaseModel):
    id: str
    source_id: str
    content: str
    embedding: List[float]
    created_at: datetime


class ChunkMatch(BaseModel):
    id: str
    content: str
    similarity: float
    file_name: str


class Conversation(BaseModel):
    id: str
    notebook_id: str
    created_at: datetime


class Message(BaseModel):
    id: str
    conversation_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime


class IngestionResult(BaseModel):
    source: Source
    summary: str
    chunk_count: int
    preview: str


class UploadPreview(BaseModel):
    file_name: str
    file_type: str
    preview: str
    total_chunks: int
    embedding: List[float] = Field(..., description="Leading components of the first chunk's embedding")
