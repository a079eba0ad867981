"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar
from uuid import uuid4

import chromadb
from chromadb import errors as chroma_errors

from f1_gpt.config import settings
from f1_gpt.errors import CollaboratorError, ErrorKind, classify_message
from f1_gpt.retrieval.base import DEFAULT_PROJECTION, VectorStoreBase
from f1_gpt.retrieval.models import Chunk, ChunkMatch, CollectionOptions

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Exception class names differ between chromadb releases.
_NOT_FOUND_TYPES = tuple(
    cls
    for cls in (getattr(chroma_errors, name, None) for name in ("NotFoundError", "InvalidCollectionException"))
    if isinstance(cls, type)
)
_ALREADY_EXISTS_TYPES = tuple(
    cls
    for cls in (getattr(chroma_errors, name, None) for name in ("UniqueConstraintError",))
    if isinstance(cls, type)
)


def _to_collaborator_error(exc: Exception) -> CollaboratorError:
    """Translate a chromadb / transport exception into a :class:`CollaboratorError`."""
    if isinstance(exc, CollaboratorError):
        return exc
    if _NOT_FOUND_TYPES and isinstance(exc, _NOT_FOUND_TYPES):
        kind = ErrorKind.NOT_FOUND
    elif _ALREADY_EXISTS_TYPES and isinstance(exc, _ALREADY_EXISTS_TYPES):
        kind = ErrorKind.ALREADY_EXISTS
    else:
        kind = classify_message(str(exc))
    return CollaboratorError(kind, str(exc) or type(exc).__name__, cause=exc)


def _similarity(distance: float, metric: str) -> float:
    # Chroma returns distances: 1 - similarity for cosine and ip, squared L2 otherwise.
    if metric in ("cosine", "ip"):
        return 1.0 - distance
    return 1.0 / (1.0 + distance)


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store using the async HTTP client.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    client:
        Pre-built ``chromadb`` async client; one is created lazily from
        *host* / *port* when omitted.
    """

    def __init__(
        self,
        collection_name: str = settings.chroma_collection,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        client: Any = None,
    ) -> None:
        super().__init__(collection_name)
        self._host = host
        self._port = port
        self._client = client
        self._collection: Any = None
        self._options: CollectionOptions | None = None

    # -- VectorStoreBase overrides --------------------------------------------

    async def create_collection(self, options: CollectionOptions) -> None:
        client = await self._get_client()
        try:
            collection = await client.create_collection(
                name=self.collection_name,
                metadata={"hnsw:space": options.metric, "dimension": options.dimension},
            )
        except Exception as exc:
            raise _to_collaborator_error(exc) from exc
        self._collection = collection
        self._options = options
        logger.info(
            "Created collection %r (dimension=%d, metric=%s)",
            self.collection_name,
            options.dimension,
            options.metric,
        )

    async def drop_collection(self) -> None:
        client = await self._get_client()
        self._collection = None
        self._options = None
        try:
            await client.delete_collection(name=self.collection_name)
        except Exception as exc:
            raise _to_collaborator_error(exc) from exc
        logger.info("Dropped collection %r", self.collection_name)

    async def insert_one(self, chunk: Chunk) -> str:
        record_id = uuid4().hex

        async def add(collection: Any, options: CollectionOptions) -> None:
            if len(chunk.vector) != options.dimension:
                raise CollaboratorError(
                    ErrorKind.UNKNOWN,
                    f"Vector has {len(chunk.vector)} dimensions, "
                    f"collection {self.collection_name!r} expects {options.dimension}",
                )
            await collection.add(
                ids=[record_id],
                embeddings=[chunk.vector],
                documents=[chunk.text],
                metadatas=[{"source": chunk.source}],
            )

        await self._on_collection(add)
        return record_id

    async def find(
        self,
        vector: list[float],
        *,
        limit: int = 10,
        projection: Sequence[str] = DEFAULT_PROJECTION,
    ) -> list[ChunkMatch]:
        include = ["distances"]
        if "text" in projection:
            include.append("documents")
        if "source" in projection:
            include.append("metadatas")

        async def query(collection: Any, options: CollectionOptions) -> tuple[dict, CollectionOptions]:
            results = await collection.query(
                query_embeddings=[vector],
                n_results=limit,
                include=include,
            )
            return results, options

        results, options = await self._on_collection(query)

        distances = (results.get("distances") or [[]])[0]
        docs = (results.get("documents") or [[None] * len(distances)])[0]
        metas = (results.get("metadatas") or [[None] * len(distances)])[0]

        matches = [
            ChunkMatch(
                text=content or "",
                source=(meta or {}).get("source", "unknown"),
                score=_similarity(dist, options.metric),
            )
            for content, meta, dist in zip(docs, metas, distances)
        ]
        matches.sort(key=lambda m: m.score if m.score is not None else float("-inf"), reverse=True)
        return matches[:limit]

    async def health_check(self) -> bool:
        try:
            client = await self._get_client()
            await client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False

    # -- internals ------------------------------------------------------------

    async def _get_client(self) -> Any:
        if self._client is None:
            self._client = await chromadb.AsyncHttpClient(host=self._host, port=self._port)
        return self._client

    async def _on_collection(self, operation: Callable[[Any, CollectionOptions], Awaitable[T]]) -> T:
        """Run *operation* against the cached collection handle.

        Another process (a re-run of the ingestion job) may have dropped
        and recreated the collection under the same name, leaving the
        cached handle pointing at a deleted id.  On ``NOT_FOUND`` the
        handle is looked up again by name and *operation* runs once more.
        """
        collection, options = await self._get_collection()
        try:
            return await operation(collection, options)
        except CollaboratorError:
            raise
        except Exception as exc:
            error = _to_collaborator_error(exc)
            if error.kind is not ErrorKind.NOT_FOUND:
                raise error from exc

        logger.info("Collection %r was recreated; refreshing handle", self.collection_name)
        self._collection = None
        self._options = None
        collection, options = await self._get_collection()
        try:
            return await operation(collection, options)
        except Exception as exc:
            raise _to_collaborator_error(exc) from exc

    async def _get_collection(self) -> tuple[Any, CollectionOptions]:
        if self._collection is None or self._options is None:
            client = await self._get_client()
            try:
                collection = await client.get_collection(name=self.collection_name)
            except Exception as exc:
                raise _to_collaborator_error(exc) from exc
            meta = collection.metadata or {}
            self._collection = collection
            self._options = CollectionOptions(
                dimension=int(meta.get("dimension", settings.vector_dimension)),
                metric=meta.get("hnsw:space", "cosine"),
            )
        return self._collection, self._options
