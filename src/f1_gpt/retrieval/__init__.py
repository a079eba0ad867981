"""
Retrieval — vector storage and similarity search.

This module wraps the vector store behind a clean interface so that
the chat and ingestion layers never need to know which DB is backing it.

Public surface
--------------
- :class:`ContextRetriever` — embed a query and fetch the closest chunks.
- :class:`VectorStoreBase` — abstract backend (subclass for Astra, Qdrant, etc.).
- :class:`ChromaVectorStore` — default Chroma backend.
- :class:`Chunk`, :class:`ChunkMatch`, :class:`CollectionOptions` — data models.
"""

from f1_gpt.retrieval.base import VectorStoreBase
from f1_gpt.retrieval.models import Chunk, ChunkMatch, CollectionOptions
from f1_gpt.retrieval.retriever import ContextRetriever

__all__ = [
    "ChromaVectorStore",
    "Chunk",
    "ChunkMatch",
    "CollectionOptions",
    "ContextRetriever",
    "VectorStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from f1_gpt.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
