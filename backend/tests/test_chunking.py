from __future__ import annotations

import pytest

from notebookai_backend.services.chunking import chunk_text


def normalize(text: str) -> str:
    return " ".join(text.split())


def reassemble(chunks: list[str]) -> str:
    return normalize("\n\n".join(chunks))


def test_empty_text_yields_no_chunks():
    assert chunk_text("", 100) == []


def test_short_paragraph_fits_whole():
    assert chunk_text("A. B. C.", 1000) == ["A. B. C."]


def test_default_limit_keeps_small_document_in_one_chunk():
    text = "First paragraph.\n\nSecond paragraph."
    assert chunk_text(text) == ["First paragraph.\n\nSecond paragraph."]


def test_paragraphs_are_packed_until_limit():
    paragraphs = [f"Paragraph {i} " + "word " * 6 + "end." for i in range(5)]
    text = "\n\n\n".join(paragraphs)

    chunks = chunk_text(text, 100)

    assert len(chunks) > 1
    assert all(len(chunk) <= 100 for chunk in chunks)
    assert reassemble(chunks) == normalize(text)
    assert chunks[0] == f"{paragraphs[0]}\n\n{paragraphs[1]}"


def test_overlong_paragraph_is_split_on_sentences():
    paragraph = " ".join(f"Sentence {i} talks about topic {i}!" for i in range(20))

    chunks = chunk_text(paragraph, 100)

    assert len(chunks) > 1
    assert all(len(chunk) <= 100 for chunk in chunks)
    assert all(chunk[-1] in ".!?" for chunk in chunks)
    assert reassemble(chunks) == normalize(paragraph)


def test_sentence_longer_than_limit_is_kept_whole():
    long_sentence = "This sentence " + "goes on " * 20 + "and finally stops."
    text = f"Short one. {long_sentence} Another short one."

    chunks = chunk_text(text, 60)

    assert long_sentence in chunks
    assert reassemble(chunks) == normalize(text)


def test_unpunctuated_overlong_paragraph_produces_no_chunk():
    # Current behaviour: with no sentence terminator there is nothing to split on.
    assert chunk_text("x" * 101, 100) == []


def test_unpunctuated_overlong_paragraph_does_not_disturb_neighbours():
    text = "Opening line.\n\n" + "y" * 150 + "\n\nClosing line."

    chunks = chunk_text(text, 100)

    assert chunks == ["Opening line.", "Closing line."]


def test_paragraph_after_sentence_split_is_not_duplicated():
    before = "Before the long part."
    long_paragraph = " ".join(f"Sentence {i} is here." for i in range(10))
    after = "After the long part."

    chunks = chunk_text(f"{before}\n\n{long_paragraph}\n\n{after}", 60)

    assert chunks[0] == before
    assert chunks[-1] == after
    assert sum(chunk.count(before) for chunk in chunks) == 1
    assert reassemble(chunks) == normalize(f"{before} {long_paragraph} {after}")


def test_whitespace_only_text_yields_no_chunks():
    assert chunk_text("   \n\n\t\n\n  ", 100) == []


@pytest.mark.parametrize("limit", [40, 80, 200, 4000])
def test_reassembly_preserves_punctuated_text(limit):
    paragraphs = [
        " ".join(f"Point {p} part {s} is stated clearly." for s in range(p + 1))
        for p in range(8)
    ]
    text = "\n\n".join(paragraphs)

    chunks = chunk_text(text, limit)

    assert reassemble(chunks) == normalize(text)
    for chunk in chunks:
        assert len(chunk) <= limit or not any(p in chunk[:-1] for p in ".!?")
