from __future__ import annotations


class NotebookError(Exception):
    """Base class for failures surfaced to API callers as ``{"success": false}``."""

    status_code: int = 500


class ValidationError(NotebookError):
    """Raised when caller-supplied input cannot be processed."""

    status_code = 400


class UnsupportedFileType(ValidationError):
    pass


class EmptyContent(ValidationError):
    pass


class DocumentLoaderError(ValidationError):
    """Raised when text extraction from an uploaded file fails."""


class NotFoundError(NotebookError):
    """Raised when a referenced notebook, syllabus or record does not exist."""

    status_code = 404


class ProviderError(NotebookError):
    """Raised when the text-generation or embedding provider call fails."""

    status_code = 502


class StoreError(NotebookError):
    """Raised when a persistence call fails."""

    status_code = 500
