"""Ingestion pipeline — scrape → split → embed → insert.

Sources are processed one after another, and so are the chunks of a
source; every external call is awaited before the next one starts.  A
source that fails is logged and skipped, but the chunks it inserted
before failing stay in the store.  Nothing is deduplicated: running the
pipeline without :meth:`IngestionPipeline.reset_store` inserts the same
chunks again.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from f1_gpt.errors import CollaboratorError, ErrorKind
from f1_gpt.ingestion.chunker import split_text
from f1_gpt.ingestion.embedder import EmbeddingClient, embed_with_retry
from f1_gpt.ingestion.loader import load_page_text
from f1_gpt.retrieval.models import Chunk, CollectionOptions

if TYPE_CHECKING:
    from f1_gpt.config import Settings
    from f1_gpt.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)

PageLoader = Callable[[str], Awaitable[str]]


@dataclass
class SourceReport:
    """Outcome of ingesting one source URL."""

    source: str
    characters: int = 0
    chunks: int = 0
    inserted: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class IngestionReport:
    """Per-source outcomes of a full run."""

    sources: list[SourceReport] = field(default_factory=list)

    @property
    def inserted(self) -> int:
        return sum(s.inserted for s in self.sources)

    @property
    def failed(self) -> list[SourceReport]:
        return [s for s in self.sources if not s.ok]


class IngestionPipeline:
    """Populate a vector store with chunked, embedded page text.

    Parameters
    ----------
    store:
        Target vector store.
    embedder:
        Embedding client; its ``dimension`` fixes the collection dimension.
    page_loader:
        Coroutine returning the visible text of a URL.
    chunk_size / chunk_overlap:
        Splitter window, in characters.
    max_attempts / backoff_seconds:
        Rate-limit retry budget per chunk and the linear backoff base.
    pacing_every / pacing_seconds:
        Pause ``pacing_seconds`` after every ``pacing_every`` inserted
        chunks of a source, whether or not anything failed.
    progress_every:
        Log progress after this many inserted chunks.
    metric:
        Similarity metric of the collection.
    sleep:
        Awaitable sleep, injectable for tests.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        embedder: EmbeddingClient,
        *,
        page_loader: PageLoader = load_page_text,
        chunk_size: int = 512,
        chunk_overlap: int = 100,
        max_attempts: int = 3,
        backoff_seconds: float = 60.0,
        pacing_every: int = 14,
        pacing_seconds: float = 60.0,
        progress_every: int = 10,
        metric: str = "cosine",
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self._load_page = page_loader
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.pacing_every = pacing_every
        self.pacing_seconds = pacing_seconds
        self.progress_every = progress_every
        self.metric = metric
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        store: VectorStoreBase,
        embedder: EmbeddingClient,
        config: Settings,
        **overrides,
    ) -> IngestionPipeline:
        """Build a pipeline whose knobs come from *config*."""
        kwargs = {
            "page_loader": functools.partial(
                load_page_text,
                headless=config.browser_headless,
                timeout=config.request_timeout,
            ),
            "chunk_size": config.chunk_size,
            "chunk_overlap": config.chunk_overlap,
            "max_attempts": config.embed_max_attempts,
            "backoff_seconds": config.embed_backoff_seconds,
            "pacing_every": config.pacing_every,
            "pacing_seconds": config.pacing_seconds,
            "progress_every": config.progress_every,
            "metric": config.similarity_metric,
        }
        kwargs.update(overrides)
        return cls(store, embedder, **kwargs)

    # -- public API -----------------------------------------------------------

    async def reset_store(self) -> None:
        """Drop the collection if present and create it afresh.

        A missing collection on drop and an existing one on create are
        tolerated; any other store error propagates.
        """
        try:
            await self._store.drop_collection()
            logger.info("Dropped old collection")
        except CollaboratorError as exc:
            if exc.kind is not ErrorKind.NOT_FOUND:
                raise
            logger.info("No previous collection to drop")

        options = CollectionOptions(dimension=self._embedder.dimension, metric=self.metric)
        try:
            await self._store.create_collection(options)
            logger.info("Collection created: %s", self._store.collection_name)
        except CollaboratorError as exc:
            if exc.kind is not ErrorKind.ALREADY_EXISTS:
                raise
            logger.info("Collection already exists, continuing...")

    async def ingest_source(self, url: str) -> SourceReport:
        """Scrape, split, embed and insert one source.

        Raises whatever stopped the source; chunks inserted before the
        failure are not rolled back.
        """
        report = SourceReport(source=url)
        await self._ingest_into(report)
        return report

    async def run(self, sources: list[str]) -> IngestionReport:
        """Reset the store, then ingest each source in order.

        Setup errors abort the run.  A failing source is logged and
        recorded in the report; the remaining sources still run.
        """
        await self.reset_store()

        result = IngestionReport()
        for url in sources:
            report = SourceReport(source=url)
            result.sources.append(report)
            try:
                await self._ingest_into(report)
            except Exception as exc:
                report.error = f"{type(exc).__name__}: {exc}"
                logger.exception("Error processing %s", url)

        logger.info(
            "Inserted %d chunks from %d sources (%d failed)",
            result.inserted,
            len(result.sources),
            len(result.failed),
        )
        return result

    # -- internals ------------------------------------------------------------

    async def _ingest_into(self, report: SourceReport) -> None:
        url = report.source
        logger.info("Scraping: %s", url)
        content = await self._load_page(url)
        report.characters = len(content)
        logger.info("Got %d characters", report.characters)

        chunks = split_text(content, self.chunk_size, self.chunk_overlap)
        report.chunks = len(chunks)
        logger.info("Split into %d chunks", report.chunks)

        for text in chunks:
            vector = await embed_with_retry(
                self._embedder,
                text,
                max_attempts=self.max_attempts,
                base_delay=self.backoff_seconds,
                sleep=self._sleep,
            )
            await self._store.insert_one(Chunk(text=text, source=url, vector=vector))
            report.inserted += 1

            if report.inserted % self.progress_every == 0:
                logger.info("Inserted %d/%d chunks...", report.inserted, report.chunks)

            if report.inserted % self.pacing_every == 0:
                logger.info("Pausing %.0fs to respect rate limits...", self.pacing_seconds)
                await self._sleep(self.pacing_seconds)

        logger.info("Done, inserted %d chunks from this page", report.inserted)
