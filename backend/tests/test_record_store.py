from __future__ import annotations

import pytest

from notebookai_backend.errors import NotFoundError, StoreError
from notebookai_backend.services.record_store import RecordStore


@pytest.fixture
def records(tmp_path) -> RecordStore:
    return RecordStore(tmp_path / "metadata.db")


def test_insert_fills_id_and_timestamps(records):
    notebook = records.insert("notebooks", {"title": "Biology"})
    assert notebook["id"]
    assert notebook["created_at"]

    syllabus = records.insert("syllabi", {"notebook_id": notebook["id"], "content": "## Intro"})
    assert syllabus["updated_at"] == syllabus["created_at"]


def test_select_one_raises_when_missing(records):
    with pytest.raises(NotFoundError):
        records.select_one("notebooks", {"id": "missing"})


def test_select_many_orders_and_pages(records):
    for index in range(5):
        records.insert("notebooks", {"title": f"Notebook {index}"})

    rows, total = records.select_many("notebooks", descending=True, offset=1, limit=2)

    assert total == 5
    assert [row["title"] for row in rows] == ["Notebook 3", "Notebook 2"]


def test_update_returns_patched_record(records):
    notebook = records.insert("notebooks", {"title": "Processing..."})

    updated = records.update("notebooks", {"id": notebook["id"]}, {"title": "Cell Biology Basics"})

    assert updated["title"] == "Cell Biology Basics"
    assert records.select_one("notebooks", {"id": notebook["id"]})["title"] == "Cell Biology Basics"


def test_update_missing_record_raises(records):
    with pytest.raises(NotFoundError):
        records.update("notebooks", {"id": "missing"}, {"title": "x"})


def test_unknown_table_and_column_are_rejected(records):
    with pytest.raises(StoreError):
        records.insert("chunks", {"content": "x"})
    with pytest.raises(StoreError):
        records.select_many("notebooks", {"title; DROP TABLE notebooks": "x"})


def test_foreign_keys_are_enforced(records):
    with pytest.raises(StoreError):
        records.insert(
            "sources",
            {"notebook_id": "missing", "file_name": "a.docx", "file_type": "x", "summary": "s"},
        )


def test_deleting_notebook_cascades(records):
    notebook = records.insert("notebooks", {"title": "Chemistry"})
    records.insert(
        "sources",
        {"notebook_id": notebook["id"], "file_name": "a.docx", "file_type": "x", "summary": "s"},
    )
    conversation = records.insert("conversations", {"notebook_id": notebook["id"]})
    records.insert("messages", {"conversation_id": conversation["id"], "role": "user", "content": "hi"})

    assert records.delete("notebooks", {"id": notebook["id"]}) == 1

    assert records.count("sources") == 0
    assert records.count("conversations") == 0
    assert records.count("messages") == 0


def test_conversation_is_unique_per_notebook(records):
    notebook = records.insert("notebooks", {"title": "Physics"})
    records.insert("conversations", {"notebook_id": notebook["id"]})

    records.insert("conversations", {"notebook_id": notebook["id"]}, ignore_conflicts=True)
    with pytest.raises(StoreError):
        records.insert("conversations", {"notebook_id": notebook["id"]})

    assert records.count("conversations", {"notebook_id": notebook["id"]}) == 1


def test_message_role_is_constrained(records):
    notebook = records.insert("notebooks", {"title": "Physics"})
    conversation = records.insert("conversations", {"notebook_id": notebook["id"]})
    with pytest.raises(StoreError):
        records.insert("messages", {"conversation_id": conversation["id"], "role": "system", "content": "x"})
