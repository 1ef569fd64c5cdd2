from __future__ import annotations

import logging
import re
from typing import Iterable

from ..config import AppConfig
from ..models.notebook import Message, Source
from .llm import LLMBackend
from .notebook_store import NotebookStore

logger = logging.getLogger(__name__)

NO_SOURCES_REPLY = "I couldn't find any information in this notebook. Please try adding some sources first."

_PARAGRAPH_GAP = re.compile(r"\n{2,}")
_EMPHASIS = re.compile(r"\*{1,2}(.*?)\*{1,2}")


def format_response(text: str) -> str:
    """Collapse runs of blank lines and normalize single or double asterisk emphasis to bold."""
    return _EMPHASIS.sub(r"**\1**", _PARAGRAPH_GAP.sub("\n\n", text))


class ChatService:
    """
    Answers questions over a notebook using every source summary and the full
    conversation transcript as context.
    """

    def __init__(self, backend: LLMBackend, settings: AppConfig, store: NotebookStore) -> None:
        self._backend = backend
        self._settings = settings
        self._store = store

    @property
    def provider(self) -> str:
        return self._settings.llm_provider

    async def respond(self, notebook_id: str, query: str) -> str:
        notebook = self._store.get_notebook(notebook_id)
        if not notebook.sources:
            # Nothing is persisted for this turn.
            return NO_SOURCES_REPLY

        conversation = self._store.get_or_create_conversation(notebook_id)
        history = self._store.list_messages(conversation.id)
        user_message = self._store.add_message(conversation.id, "user", query)

        prompt = self._render_prompt(notebook.sources, [*history, user_message])
        reply = await self._backend.generate(prompt, self._settings.llm_max_tokens)
        formatted = format_response(reply)

        self._store.add_message(conversation.id, "assistant", formatted)
        logger.info(f"Answered turn {len(history) // 2 + 1} for notebook {notebook_id}")
        return formatted

    def history(self, notebook_id: str) -> list[Message]:
        self._store.records.select_one("notebooks", {"id": notebook_id})
        conversation = self._store.find_conversation(notebook_id)
        if conversation is None:
            return []
        return self._store.list_messages(conversation.id)

    def _render_prompt(self, sources: Iterable[Source], transcript: Iterable[Message]) -> str:
        source_summaries = "\n\n".join(f"{source.file_name}: {source.summary}" for source in sources)
        conversation = "\n".join(f"{message.role}: {message.content}" for message in transcript)
        return (
            "You are an AI assistant helping with a notebook of documents. Use the following summaries of all "
            "the documents and the full conversation history to answer the user's latest question. If the answer "
            "cannot be found in the summaries or conversation history, say so.\n"
            "Format your response with proper paragraphs and use Markdown for emphasis.\n"
            "Use double line breaks between paragraphs and convert *asterisks* to **bold** text.\n"
            "When referencing information from the documents, mention the source file name.\n\n"
            f"Document Summaries:\n{source_summaries}\n\n"
            f"Full Conversation History:\n{conversation}\n\n"
            "Assistant: Based on the document summaries and the full conversation, "
            "here's my response to the latest question:"
        )
