"""Text chunking strategies."""

from __future__ import annotations

from langchain_text_splitters import RecursiveCharacterTextSplitter

# Paragraph, line, sentence, word, then hard character cuts.
SEPARATORS: list[str] = ["\n\n", "\n", ". ", " ", ""]


def _build_splitter(chunk_size: int, chunk_overlap: int) -> RecursiveCharacterTextSplitter:
    if chunk_overlap >= chunk_size:
        raise ValueError(f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})")
    return RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=SEPARATORS,
    )


def split_text(text: str, chunk_size: int = 512, chunk_overlap: int = 100) -> list[str]:
    """Split *text* into overlapping windows of at most *chunk_size* characters.

    The result depends only on the arguments.  Whitespace-only input
    produces no chunks.
    """
    if not text.strip():
        return []
    return _build_splitter(chunk_size, chunk_overlap).split_text(text)
