"""Unit tests for the chunker module."""

import pytest

from f1_gpt.ingestion.chunker import split_text


def _race_report(n: int = 60) -> str:
    """Non-repetitive prose so every chunk can be located in the source."""
    paragraphs = []
    for p in range(n // 6):
        sentences = [
            f"Lap {p * 6 + i} saw car number {(p * 6 + i) * 7 % 97} gain {i + p} places."
            for i in range(6)
        ]
        paragraphs.append(" ".join(sentences))
    return "\n\n".join(paragraphs)


def _covered_positions(text: str, chunks: list[str]) -> set[int]:
    covered: set[int] = set()
    cursor = 0
    for chunk in chunks:
        start = text.find(chunk, cursor)
        assert start != -1, f"chunk not found in order: {chunk[:40]!r}"
        covered.update(range(start, start + len(chunk)))
        cursor = start + 1
    return covered


class TestSplitText:
    def test_no_chunk_exceeds_chunk_size(self) -> None:
        chunks = split_text(_race_report(), chunk_size=200, chunk_overlap=40)
        assert len(chunks) > 1
        assert all(len(c) <= 200 for c in chunks)

    def test_chunks_cover_every_non_whitespace_character(self) -> None:
        text = _race_report()
        chunks = split_text(text, chunk_size=200, chunk_overlap=40)
        covered = _covered_positions(text, chunks)
        missing = [i for i, ch in enumerate(text) if not ch.isspace() and i not in covered]
        assert missing == []

    def test_consecutive_chunks_overlap(self) -> None:
        text = _race_report()
        chunks = split_text(text, chunk_size=200, chunk_overlap=60)
        overlapping = 0
        cursor = 0
        previous_end = None
        for chunk in chunks:
            start = text.find(chunk, cursor)
            if previous_end is not None and start < previous_end:
                overlapping += 1
            previous_end = start + len(chunk)
            cursor = start + 1
        assert overlapping > 0

    def test_prefers_paragraph_boundaries(self) -> None:
        text = "First paragraph about Monaco.\n\nSecond paragraph about Monza."
        chunks = split_text(text, chunk_size=40, chunk_overlap=0)
        assert chunks == ["First paragraph about Monaco.", "Second paragraph about Monza."]

    def test_falls_back_to_hard_cuts(self) -> None:
        text = "x" * 250
        chunks = split_text(text, chunk_size=100, chunk_overlap=10)
        assert all(len(c) <= 100 for c in chunks)
        assert "".join(chunks).count("x") >= 250

    def test_short_text_is_one_chunk(self) -> None:
        assert split_text("Box, box.", chunk_size=512, chunk_overlap=100) == ["Box, box."]

    def test_whitespace_only_yields_nothing(self) -> None:
        assert split_text("  \n\n \t ") == []

    def test_is_deterministic(self) -> None:
        text = _race_report()
        assert split_text(text, 180, 30) == split_text(text, 180, 30)

    def test_overlap_must_be_smaller_than_size(self) -> None:
        with pytest.raises(ValueError, match="chunk_overlap"):
            split_text("anything", chunk_size=100, chunk_overlap=100)
