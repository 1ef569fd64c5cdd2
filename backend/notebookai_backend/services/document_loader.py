from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path

from ..errors import DocumentLoaderError, UnsupportedFileType

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME = "application/msword"
PDF_MIME = "application/pdf"
TXT_MIME = "text/plain"

# Accepted by notebook ingestion
DOCUMENT_MIME_TYPES = frozenset({DOCX_MIME, DOC_MIME})
# Accepted by the preview-only upload path
PREVIEW_MIME_TYPES = frozenset({TXT_MIME, PDF_MIME})

_EXTENSION_MIME = {
    ".docx": DOCX_MIME,
    ".doc": DOC_MIME,
    ".pdf": PDF_MIME,
    ".txt": TXT_MIME,
}
_GENERIC_MIME = {"", "application/octet-stream"}


@dataclass
class LoadedDocument:
    file_name: str
    file_type: str
    text: str


def resolve_mime_type(file_name: str, content_type: str | None) -> str:
    """
    Return the declared MIME type, falling back to the file extension when the
    client sent none or a generic one.
    """
    declared = (content_type or "").split(";")[0].strip().lower()
    if declared not in _GENERIC_MIME:
        return declared
    return _EXTENSION_MIME.get(Path(file_name).suffix.lower(), declared or "application/octet-stream")


def load_upload(file_name: str, content_type: str | None, data: bytes) -> LoadedDocument:
    """
    Extract text from uploaded bytes.

    Supports: DOC/DOCX (python-docx), PDF (pypdf), plain text
    """
    file_type = resolve_mime_type(file_name, content_type)

    if file_type in DOCUMENT_MIME_TYPES:
        text = _extract_docx(file_name, data)
    elif file_type == PDF_MIME:
        text = _extract_pdf(file_name, data)
    elif file_type == TXT_MIME:
        text = _decode_text(file_name, data)
    else:
        raise UnsupportedFileType(f"Unsupported file type: {file_type or 'unknown'}")
    return LoadedDocument(file_name=file_name, file_type=file_type, text=text)


def load_document(file_path: Path) -> LoadedDocument:
    """Load a document from disk, inferring its MIME type from the extension."""
    if not file_path.exists():
        raise DocumentLoaderError(f"File does not exist: {file_path}")
    return load_upload(file_path.name, None, file_path.read_bytes())


def _decode_text(file_name: str, data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DocumentLoaderError(f"Failed to read {file_name}: {e}") from e


def _extract_pdf(file_name: str, data: bytes) -> str:
    """Extract PDF text page by page using pypdf."""
    try:
        from pypdf import PdfReader
    except ImportError as e:
        raise DocumentLoaderError("pypdf is required for PDF support") from e

    try:
        reader = PdfReader(io.BytesIO(data))
        return "\n\n".join(page.extract_text() or "" for page in reader.pages)
    except Exception as e:
        raise DocumentLoaderError(f"Failed to read PDF {file_name}: {e}") from e


def _extract_docx(file_name: str, data: bytes) -> str:
    """Extract raw paragraph text using python-docx."""
    try:
        from docx import Document
    except ImportError as e:
        raise DocumentLoaderError("python-docx is required for DOC/DOCX support") from e

    try:
        doc = Document(io.BytesIO(data))
    except Exception as e:
        raise DocumentLoaderError(f"Failed to read document {file_name}: {e}") from e

    text_parts = [paragraph.text for paragraph in doc.paragraphs if paragraph.text.strip()]
    return "\n\n".join(text_parts)
