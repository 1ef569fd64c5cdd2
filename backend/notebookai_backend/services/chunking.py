from __future__ import annotations

import re

PARAGRAPH_BREAK = re.compile(r"\n\n+")
SENTENCE = re.compile(r"[^.!?]+[.!?]+")
PARAGRAPH_SEPARATOR = "\n\n"


def chunk_text(text: str, max_chunk_size: int = 4000) -> list[str]:
    """
    Split text into bounded-size chunks along paragraph and sentence boundaries.

    Paragraphs are packed greedily until the next one would push the chunk past
    ``max_chunk_size``. A paragraph that is too long on its own is split into
    sentences and packed the same way. A single sentence longer than the limit
    is kept whole.

    Args:
        text: The text to chunk
        max_chunk_size: Maximum chunk length in characters

    Returns:
        Chunks in document order, stripped of surrounding whitespace
    """
    chunks: list[str] = []
    current = ""

    for paragraph in PARAGRAPH_BREAK.split(text):
        candidate = f"{current}{PARAGRAPH_SEPARATOR}{paragraph}" if current else paragraph
        if len(candidate) <= max_chunk_size:
            current = candidate
            continue

        _flush(chunks, current)
        current = ""
        if len(paragraph) > max_chunk_size:
            chunks.extend(_chunk_sentences(paragraph, max_chunk_size))
        else:
            current = paragraph

    _flush(chunks, current)
    return chunks


def _chunk_sentences(paragraph: str, max_chunk_size: int) -> list[str]:
    # Text with no sentence terminator yields no sentences and is dropped.
    chunks: list[str] = []
    group = ""
    for sentence in SENTENCE.findall(paragraph):
        if len(group + sentence) > max_chunk_size:
            _flush(chunks, group)
            group = sentence
        else:
            group += sentence
    _flush(chunks, group)
    return chunks


def _flush(chunks: list[str], buffer: str) -> None:
    content = buffer.strip()
    if content:
        chunks.append(content)
