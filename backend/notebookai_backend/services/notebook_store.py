from __future__ import annotations

from typing import Literal

from ..config import AppConfig
from ..models.notebook import Conversation, Message, Notebook, NotebookDetail, NotebookListItem, Source
from ..models.syllabus import Activity, GeneratedFeature, PedagogicalApproach, Syllabus
from .record_store import RecordStore

PLACEHOLDER_TITLE = "Processing..."


class NotebookStore:
    """
    Typed access to notebooks and everything they own, on top of the record store.
    """

    def __init__(self, settings: AppConfig) -> None:
        self.records = RecordStore(settings.workspace_root / "metadata.db")

    # Notebooks

    def create_notebook(self, title: str = PLACEHOLDER_TITLE) -> Notebook:
        return Notebook(**self.records.insert("notebooks", {"title": title}))

    def get_notebook(self, notebook_id: str) -> NotebookDetail:
        row = self.records.select_one("notebooks", {"id": notebook_id})
        return NotebookDetail(**row, sources=self.list_sources(notebook_id))

    def list_notebooks(self, page: int = 1, page_size: int = 12) -> tuple[list[NotebookListItem], int]:
        offset = (max(page, 1) - 1) * page_size
        rows, total = self.records.select_many(
            "notebooks",
            order_by="created_at",
            descending=True,
            offset=offset,
            limit=page_size,
        )
        items = [
            NotebookListItem(**row, source_count=self.records.count("sources", {"notebook_id": row["id"]}))
            for row in rows
        ]
        return items, total

    def update_title(self, notebook_id: str, title: str) -> Notebook:
        return Notebook(**self.records.update("notebooks", {"id": notebook_id}, {"title": title}))

    def delete_notebook(self, notebook_id: str) -> None:
        # Child rows go with it through ON DELETE CASCADE.
        self.records.select_one("notebooks", {"id": notebook_id})
        self.records.delete("notebooks", {"id": notebook_id})

    # Sources

    def add_source(self, notebook_id: str, file_name: str, file_type: str, summary: str) -> Source:
        row = self.records.insert(
            "sources",
            {
                "notebook_id": notebook_id,
                "file_name": file_name,
                "file_type": file_type,
                "summary": summary,
            },
        )
        return Source(**row)

    def list_sources(self, notebook_id: str) -> list[Source]:
        rows, _ = self.records.select_many("sources", {"notebook_id": notebook_id})
        return [Source(**row) for row in rows]

    # Conversations

    def find_conversation(self, notebook_id: str) -> Conversation | None:
        rows, _ = self.records.select_many(
            "conversations", {"notebook_id": notebook_id}, descending=True, limit=1
        )
        return Conversation(**rows[0]) if rows else None

    def get_or_create_conversation(self, notebook_id: str) -> Conversation:
        conversation = self.find_conversation(notebook_id)
        if conversation is not None:
            return conversation
        # notebook_id is UNIQUE on conversations; a concurrent creator wins and we read its row.
        self.records.insert("conversations", {"notebook_id": notebook_id}, ignore_conflicts=True)
        return Conversation(**self.records.select_one("conversations", {"notebook_id": notebook_id}))

    def add_message(self, conversation_id: str, role: Literal["user", "assistant"], content: str) -> Message:
        row = self.records.insert(
            "messages",
            {"conversation_id": conversation_id, "role": role, "content": content},
        )
        return Message(**row)

    def list_messages(self, conversation_id: str) -> list[Message]:
        rows, _ = self.records.select_many("messages", {"conversation_id": conversation_id})
        return [Message(**row) for row in rows]

    # Syllabi and generated features

    def add_syllabus(self, notebook_id: str, content: str) -> Syllabus:
        return Syllabus(**self.records.insert("syllabi", {"notebook_id": notebook_id, "content": content}))

    def add_syllabus_children(self, syllabus_id: str, activities: list[str], pedagogies: list[str]) -> None:
        self.records.insert_many("activities", [{"syllabus_id": syllabus_id, "name": name} for name in activities])
        self.records.insert_many(
            "pedagogical_approaches",
            [{"syllabus_id": syllabus_id, "name": name} for name in pedagogies],
        )

    def get_syllabus(self, syllabus_id: str) -> Syllabus:
        row = self.records.select_one("syllabi", {"id": syllabus_id})
        return self._with_children(row)

    def list_syllabi(self, notebook_id: str) -> list[Syllabus]:
        rows, _ = self.records.select_many("syllabi", {"notebook_id": notebook_id}, descending=True)
        return [self._with_children(row) for row in rows]

    def add_generated_feature(
        self,
        notebook_id: str,
        name: str,
        description: str,
        feature_type: str,
        reference_id: str | None,
    ) -> GeneratedFeature:
        row = self.records.insert(
            "generated_features",
            {
                "notebook_id": notebook_id,
                "name": name,
                "description": description,
                "type": feature_type,
                "reference_id": reference_id,
            },
        )
        return GeneratedFeature(**row)

    def list_generated_features(self, notebook_id: str) -> list[GeneratedFeature]:
        rows, _ = self.records.select_many("generated_features", {"notebook_id": notebook_id}, descending=True)
        return [GeneratedFeature(**row) for row in rows]

    def _with_children(self, row: dict) -> Syllabus:
        activities, _ = self.records.select_many("activities", {"syllabus_id": row["id"]})
        approaches, _ = self.records.select_many("pedagogical_approaches", {"syllabus_id": row["id"]})
        return Syllabus(
            **row,
            activities=[Activity(**item) for item in activities],
            pedagogical_approaches=[PedagogicalApproach(**item) for item in approaches],
        )
