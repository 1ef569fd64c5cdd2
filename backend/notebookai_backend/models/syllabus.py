from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class SyllabusOptions(BaseModel):
    activities: List[str] = Field(default_factory=list)
    pedagogies: List[str] = Field(default_factory=list)
    custom_activity: str | None = None
    custom_pedagogy: str | None = None

    def all_activities(self) -> list[str]:
        return [*self.activities, *([self.custom_activity] if self.custom_activity else [])]

    def all_pedagogies(self) -> list[str]:
        return [*self.pedagogies, *([self.custom_pedagogy] if self.custom_pedagogy else [])]


class SyllabusRequest(BaseModel):
    notebook_id: str
    options: SyllabusOptions = Field(default_factory=SyllabusOptions)


class Activity(BaseModel):
    id: str
    syllabus_id: str
    name: str
    description: str | None = None
    created_at: datetime


class PedagogicalApproach(BaseModel):
    id: str
    syllabus_id: str
    name: str
    description: str | None = None
    created_at: datetime


class Syllabus(BaseModel):
    id: str
    notebook_id: str
    content: str
    created_at: datetime
    updated_at: datetime
    activities: List[Activity] = Field(default_factory=list)
    pedagogical_approaches: List[PedagogicalApproach] = Field(default_factory=list)


class GeneratedFeature(BaseModel):
    id: str
    notebook_id: str
    name: str
    description: str
    type: str
    reference_id: str | None = None
    created_at: datetime
    syllabus: Syllabus | None = None
