"""Shared pytest configuration, fakes and fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from typing import Any

import pytest

from f1_gpt.chat.llm import ChatModel
from f1_gpt.errors import CollaboratorError, ErrorKind
from f1_gpt.ingestion.embedder import EmbeddingClient
from f1_gpt.retrieval.base import DEFAULT_PROJECTION, VectorStoreBase
from f1_gpt.retrieval.models import Chunk, ChunkMatch, CollectionOptions


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── In-memory collaborators ─────────────────────────────────────────────


class FakeVectorStore(VectorStoreBase):
    """In-memory store that records every call."""

    def __init__(
        self,
        matches: list[ChunkMatch] | None = None,
        *,
        exists: bool = False,
        drop_error: Exception | None = None,
        create_error: Exception | None = None,
        find_error: Exception | None = None,
        insert_error_after: int | None = None,
    ) -> None:
        super().__init__("test-collection")
        self.matches = matches or []
        self.exists = exists
        self.drop_error = drop_error
        self.create_error = create_error
        self.find_error = find_error
        self.insert_error_after = insert_error_after
        self.options: CollectionOptions | None = None
        self.records: list[Chunk] = []
        self.find_calls: list[dict[str, Any]] = []
        self.drops = 0

    async def create_collection(self, options: CollectionOptions) -> None:
        if self.create_error is not None:
            raise self.create_error
        if self.exists:
            raise CollaboratorError(ErrorKind.ALREADY_EXISTS, "Collection already exists")
        self.exists = True
        self.options = options

    async def drop_collection(self) -> None:
        self.drops += 1
        if self.drop_error is not None:
            raise self.drop_error
        if not self.exists:
            raise CollaboratorError(ErrorKind.NOT_FOUND, "Collection does not exist")
        self.exists = False
        self.records.clear()

    async def insert_one(self, chunk: Chunk) -> str:
        if self.insert_error_after is not None and len(self.records) >= self.insert_error_after:
            raise CollaboratorError(ErrorKind.UNKNOWN, "insert failed")
        self.records.append(chunk)
        return f"id-{len(self.records)}"

    async def find(
        self,
        vector: list[float],
        *,
        limit: int = 10,
        projection: Sequence[str] = DEFAULT_PROJECTION,
    ) -> list[ChunkMatch]:
        self.find_calls.append({"vector": vector, "limit": limit, "projection": tuple(projection)})
        if self.find_error is not None:
            raise self.find_error
        return self.matches[:limit]

    async def health_check(self) -> bool:
        return True


class FakeEmbedder(EmbeddingClient):
    """Deterministic embedder; raises queued errors before succeeding."""

    def __init__(self, dimension: int = 4, errors: list[Exception] | None = None) -> None:
        super().__init__(dimension)
        self.errors = list(errors or [])
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.errors:
            raise self.errors.pop(0)
        return [float(len(text))] + [0.0] * (self.dimension - 1)


class FakeChatModel(ChatModel):
    """Replays canned fragments and records what it was sent."""

    def __init__(
        self,
        fragments: Sequence[str] = (),
        *,
        start_error: Exception | None = None,
        stream_error: Exception | None = None,
    ) -> None:
        self.fragments = list(fragments)
        self.start_error = start_error
        self.stream_error = stream_error
        self.calls: list[tuple[list[dict[str, Any]], str]] = []

    async def stream(self, history: list[dict[str, Any]], message: str) -> AsyncIterator[str]:
        self.calls.append((history, message))
        if self.start_error is not None:
            raise self.start_error
        return self._replay()

    async def _replay(self) -> AsyncIterator[str]:
        for fragment in self.fragments:
            yield fragment
        if self.stream_error is not None:
            raise self.stream_error


class RecordingSleep:
    """Stand-in for ``asyncio.sleep`` that returns at once."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)

    @property
    def total(self) -> float:
        return sum(self.delays)


def rate_limited(message: str = "429 Resource has been exhausted") -> CollaboratorError:
    return CollaboratorError(ErrorKind.RATE_LIMITED, message)


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
