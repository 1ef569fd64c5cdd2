from __future__ import annotations

import logging

from ..config import AppConfig
from ..errors import NotebookError
from .llm import LLMBackend

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Notebook"
SUMMARY_UNAVAILABLE = "Unable to generate summary."


class DocumentSummaryService:
    """Service for per-document summaries, notebook titles and notebook-wide summaries."""

    def __init__(self, settings: AppConfig, llm: LLMBackend):
        self.settings = settings
        self._llm = llm

    async def summarize_document(self, text: str, file_name: str) -> str:
        """
        Generate a short (about 30 words) summary of a document.

        Only the first ``summary_context_chars`` characters are sent to the model.
        Provider failures propagate so that ingestion aborts.
        """
        preview_text = text[: self.settings.summary_context_chars]
        if self.settings.llm_provider == "none":
            return self._fallback_summary(preview_text, file_name)

        prompt = f"Summarize the following text in about 30 words:\n\n{preview_text}..."
        summary = await self._llm.generate(prompt, max_tokens=150)
        return summary.strip() or self._fallback_summary(preview_text, file_name)

    async def generate_title(self, summaries: list[str]) -> str:
        """Generate a notebook title of at most six words from the per-file summaries."""
        if self.settings.llm_provider == "none":
            return DEFAULT_TITLE

        combined = "\n\n".join(summaries)
        prompt = (
            "Based on the following summaries of all uploaded files, generate a concise and relevant title "
            "for a notebook or study session. The title should be no more than 6 words long and reflect the "
            "overall theme or topic of all the documents combined. If there's only one summary, make sure the "
            "title is still general enough to allow for future additions.\n\n"
            f"Summaries:\n{combined}\n\n"
            "Title:"
        )
        try:
            title = (await self._llm.generate(prompt, max_tokens=20)).strip().strip('"')
        except NotebookError as e:
            logger.warning(f"Failed to generate notebook title: {e}")
            return DEFAULT_TITLE
        return title or DEFAULT_TITLE

    async def generate_overall_summary(self, summaries: list[str]) -> str:
        """Summarize the notebook in exactly two sentences."""
        if self.settings.llm_provider == "none":
            return " ".join(summaries[:2]) or SUMMARY_UNAVAILABLE

        combined = "\n\n".join(summaries)
        prompt = (
            "Based on the following summaries of all uploaded files, generate a concise summary that captures "
            "the main themes and key points across all documents. The summary should be exactly 2 sentences long.\n\n"
            f"Summaries:\n{combined}\n\n"
            "Overall Summary (2 sentences):"
        )
        try:
            summary = await self._llm.generate(prompt, max_tokens=200)
        except NotebookError as e:
            logger.warning(f"Failed to generate overall summary: {e}")
            return SUMMARY_UNAVAILABLE
        return summary.strip() or SUMMARY_UNAVAILABLE

    def _fallback_summary(self, preview_text: str, file_name: str) -> str:
        """Deterministic summary used when no model is configured."""
        snippet = next((line.strip() for line in preview_text.splitlines() if line.strip()), "")
        if len(snippet) > 160:
            snippet = snippet[:157] + "..."
        return f"{file_name or 'document'}: {snippet or 'Text document ingested offline.'}"
