"""Context retriever — embed a query and look up the closest chunks.

Usage::

    retriever = ContextRetriever(store, embedder, limit=10)
    matches = await retriever.retrieve("Who won the 2023 championship?")
    for m in matches:
        print(m.source, m.text[:80])
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from f1_gpt.retrieval.base import DEFAULT_PROJECTION

if TYPE_CHECKING:
    from f1_gpt.ingestion.embedder import EmbeddingClient
    from f1_gpt.retrieval.base import VectorStoreBase
    from f1_gpt.retrieval.models import ChunkMatch

logger = logging.getLogger(__name__)


class ContextRetriever:
    """Embeds a query once and runs one similarity search with it.

    Parameters
    ----------
    store:
        Vector store to search.
    embedder:
        Client used to embed the query.
    limit:
        Maximum number of matches returned.
    timeout:
        Seconds allowed for each of the embed and search calls; ``None``
        leaves it to the underlying clients.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        embedder: EmbeddingClient,
        *,
        limit: int = 10,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self.limit = limit
        self.timeout = timeout

    async def retrieve(self, query: str) -> list[ChunkMatch]:
        """Return the stored chunks most similar to *query*, best first."""
        vector = await asyncio.wait_for(self._embedder.embed(query), self.timeout)
        matches = await asyncio.wait_for(
            self._store.find(vector, limit=self.limit, projection=DEFAULT_PROJECTION),
            self.timeout,
        )
        logger.debug("Retrieved %d chunks for query %.60r", len(matches), query)
        return matches
