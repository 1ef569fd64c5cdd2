from __future__ import annotations

from conftest import make_docx
from notebookai_backend.services.chat import NO_SOURCES_REPLY
from notebookai_backend.services.document_loader import DOCX_MIME


def upload_notebook(client, paragraphs: list[str], file_name: str = "lecture.docx"):
    return client.post(
        "/api/notebooks/",
        files=[("files", (file_name, make_docx(paragraphs), DOCX_MIME))],
    )


def test_healthcheck(client):
    response = client.get("/api/healthz")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["notebooks"] == 0


def test_config_endpoint(client):
    data = client.get("/api/config").json()
    assert data["embedding_backend"] == "hash"
    assert data["max_chunk_size"] == 4000


def test_create_and_list_notebooks(client, llm):
    llm.replies = ["Summary of the lecture.", "Lecture Notes Overview"]

    response = upload_notebook(client, ["Mitochondria make ATP.", "Ribosomes build proteins."])

    assert response.status_code == 200
    created = response.json()
    assert created["success"] is True
    assert created["notebook"]["title"] == "Lecture Notes Overview"

    listing = client.get("/api/notebooks/").json()
    assert listing["total_count"] == 1
    assert listing["notebooks"][0]["source_count"] == 1

    detail = client.get(f"/api/notebooks/{created['notebook']['id']}").json()
    assert detail["notebook"]["sources"][0]["summary"] == "Summary of the lecture."


def test_unsupported_upload_persists_nothing(client):
    response = client.post(
        "/api/notebooks/",
        files=[("files", ("data.csv", b"a,b\n1,2", "text/csv"))],
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert client.get("/api/notebooks/").json()["total_count"] == 0


def test_chat_roundtrip_and_history(client, llm):
    notebook_id = upload_notebook(client, ["Volcanoes erupt magma."]).json()["notebook"]["id"]
    llm.replies = ["Magma *rises* through vents.\n\n\n\nThat is all."]

    response = client.post("/api/chat/", json={"notebook_id": notebook_id, "prompt": "How do volcanoes work?"})

    assert response.status_code == 200
    assert response.json()["text"] == "Magma **rises** through vents.\n\nThat is all."
    history = client.get(f"/api/chat/{notebook_id}/history").json()["messages"]
    assert [message["role"] for message in history] == ["user", "assistant"]


def test_chat_without_sources_returns_fallback(client):
    store = client.app.state.notebook_store
    notebook = store.create_notebook("Empty")

    response = client.post("/api/chat/", json={"notebook_id": notebook.id, "prompt": "Anything?"})

    assert response.json() == {"success": True, "text": NO_SOURCES_REPLY}


def test_chat_unknown_notebook(client):
    response = client.post("/api/chat/", json={"notebook_id": "missing", "prompt": "Hello"})

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_chat_requires_prompt(client):
    response = client.post("/api/chat/", json={"notebook_id": "abc"})
    assert response.status_code == 422


def test_add_sources_to_existing_notebook(client):
    notebook_id = upload_notebook(client, ["First file."]).json()["notebook"]["id"]

    response = client.post(
        f"/api/notebooks/{notebook_id}/sources",
        files=[("files", ("second.docx", make_docx(["Second file content."]), DOCX_MIME))],
    )

    assert response.status_code == 200
    sources = response.json()["sources"]
    assert sources[0]["file_name"] == "second.docx"
    assert sources[0]["chunks"] == 1
    assert client.get("/api/notebooks/").json()["notebooks"][0]["source_count"] == 2


def test_upload_preview_accepts_text_only(client):
    ok = client.post("/api/documents/upload", files={"file": ("notes.txt", b"One. Two. Three.", "text/plain")})
    assert ok.status_code == 200
    data = ok.json()
    assert data["total_chunks"] == 1
    assert len(data["embedding"]) == 5

    rejected = client.post(
        "/api/documents/upload",
        files={"file": ("notes.docx", make_docx(["Text."]), DOCX_MIME)},
    )
    assert rejected.status_code == 400
    assert rejected.json()["success"] is False


def test_syllabus_and_features_endpoints(client):
    notebook_id = upload_notebook(client, ["Algebra basics."]).json()["notebook"]["id"]

    response = client.post(
        "/api/syllabi/",
        json={"notebook_id": notebook_id, "options": {"activities": ["Quizzes"], "pedagogies": ["Inquiry"]}},
    )

    assert response.status_code == 200
    syllabus = response.json()["syllabus"]
    assert [a["name"] for a in syllabus["activities"]] == ["Quizzes"]
    assert client.get(f"/api/syllabi/{syllabus['id']}").json()["syllabus"]["id"] == syllabus["id"]
    assert len(client.get("/api/syllabi/", params={"notebook_id": notebook_id}).json()["syllabi"]) == 1
    features = client.get(f"/api/notebooks/{notebook_id}/features").json()["features"]
    assert features[0]["description"] == "Course Description"


def test_match_chunks_endpoint(client):
    notebook_id = upload_notebook(client, ["Glaciers carve fjords."]).json()["notebook"]["id"]

    response = client.post(
        "/api/rag/match",
        json={"notebook_id": notebook_id, "query": "Glaciers carve fjords.", "threshold": 0.99, "count": 3},
    )

    assert response.status_code == 200
    matches = response.json()["matches"]
    assert [match["content"] for match in matches] == ["Glaciers carve fjords."]
    assert matches[0]["file_name"] == "lecture.docx"


def test_delete_notebook_cascades(client):
    notebook_id = upload_notebook(client, ["Deserts receive little rain."]).json()["notebook"]["id"]
    vector_store = client.app.state.vector_store

    response = client.delete(f"/api/notebooks/{notebook_id}")

    assert response.json() == {"success": True}
    assert client.get(f"/api/notebooks/{notebook_id}").status_code == 404
    assert vector_store.count_chunks(notebook_id) == 0


def test_notebook_summary_endpoint(client, llm):
    notebook_id = upload_notebook(client, ["Oceans cover most of Earth."]).json()["notebook"]["id"]
    llm.replies = ["Oceans dominate the planet. They regulate climate."]

    summary = client.get(f"/api/notebooks/{notebook_id}/summary").json()["summary"]

    assert summary["overall_summary"] == "Oceans dominate the planet. They regulate climate."
    assert len(summary["sources"]) == 1
