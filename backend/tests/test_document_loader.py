from __future__ import annotations

import io

import pytest
from pypdf import PdfWriter

from conftest import make_docx
from notebookai_backend.errors import DocumentLoaderError, UnsupportedFileType
from notebookai_backend.services.document_loader import (
    DOC_MIME,
    DOCX_MIME,
    PDF_MIME,
    TXT_MIME,
    load_document,
    load_upload,
    resolve_mime_type,
)


def test_docx_paragraphs_are_joined_with_blank_lines():
    data = make_docx(["Title line", "", "Body paragraph."])

    document = load_upload("notes.docx", DOCX_MIME, data)

    assert document.file_type == DOCX_MIME
    assert document.text == "Title line\n\nBody paragraph."


def test_generic_content_type_falls_back_to_extension():
    assert resolve_mime_type("notes.docx", "application/octet-stream") == DOCX_MIME
    assert resolve_mime_type("old.doc", None) == DOC_MIME
    assert resolve_mime_type("paper.pdf", "") == PDF_MIME
    assert resolve_mime_type("notes.txt", "text/plain; charset=utf-8") == TXT_MIME


def test_plain_text_is_decoded():
    document = load_upload("notes.txt", TXT_MIME, "Héllo wörld.".encode("utf-8"))
    assert document.text == "Héllo wörld."


def test_blank_pdf_yields_empty_text():
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    buffer = io.BytesIO()
    writer.write(buffer)

    document = load_upload("blank.pdf", PDF_MIME, buffer.getvalue())

    assert document.file_type == PDF_MIME
    assert document.text.strip() == ""


def test_unsupported_type_is_rejected():
    with pytest.raises(UnsupportedFileType):
        load_upload("sheet.csv", "text/csv", b"a,b\n1,2")


def test_corrupt_docx_raises_loader_error():
    with pytest.raises(DocumentLoaderError):
        load_upload("broken.docx", DOCX_MIME, b"not a zip file")


def test_load_document_from_disk(tmp_path):
    path = tmp_path / "lecture.docx"
    path.write_bytes(make_docx(["Only paragraph."]))

    document = load_document(path)

    assert document.file_name == "lecture.docx"
    assert document.text == "Only paragraph."


def test_load_document_missing_file(tmp_path):
    with pytest.raises(DocumentLoaderError):
        load_document(tmp_path / "missing.docx")
