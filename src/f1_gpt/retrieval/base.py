"""Abstract base class for vector-store backends.

Adding a new backend (Astra, Qdrant, pgvector …) only requires
subclassing :class:`VectorStoreBase` and implementing the abstract
methods.  Backends report failures as
:class:`~f1_gpt.errors.CollaboratorError` so callers can tell a missing
collection from a rate limit without knowing the backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from f1_gpt.retrieval.models import Chunk, ChunkMatch, CollectionOptions

DEFAULT_PROJECTION: tuple[str, ...] = ("text", "source")


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Parameters
    ----------
    collection_name:
        Logical name of the collection / index / namespace.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    async def create_collection(self, options: CollectionOptions) -> None:
        """Create the collection with a fixed dimension and metric.

        Raises ``CollaboratorError(ALREADY_EXISTS)`` when it is already there.
        """
        ...

    @abstractmethod
    async def drop_collection(self) -> None:
        """Delete the collection and every record in it.

        Raises ``CollaboratorError(NOT_FOUND)`` when there is nothing to drop.
        """
        ...

    @abstractmethod
    async def insert_one(self, chunk: Chunk) -> str:
        """Persist *chunk* and return the id assigned to it."""
        ...

    @abstractmethod
    async def find(
        self,
        vector: list[float],
        *,
        limit: int = 10,
        projection: Sequence[str] = DEFAULT_PROJECTION,
    ) -> list[ChunkMatch]:
        """Return at most *limit* records ranked by similarity to *vector*.

        Parameters
        ----------
        vector:
            Query embedding; must match the collection dimension.
        limit:
            Maximum number of matches.
        projection:
            Record fields to return.  Fields left out are blank in the
            resulting :class:`ChunkMatch`.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...
