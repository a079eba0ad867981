"""Domain models for stored chunks and search hits."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Metric = Literal["cosine", "l2", "ip"]


class CollectionOptions(BaseModel):
    """Shape of a vector collection, fixed when the collection is created.

    Attributes
    ----------
    dimension:
        Length every stored vector must have.
    metric:
        Similarity function used for nearest-neighbour search.
    """

    dimension: int = Field(gt=0)
    metric: Metric = "cosine"


class Chunk(BaseModel):
    """A slice of source text together with its embedding.

    Chunks are immutable once built; the only way to remove one is to
    recreate the whole collection.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    source: str
    vector: list[float]


class ChunkMatch(BaseModel):
    """A search hit, projected to the ``text`` / ``source`` fields."""

    text: str = ""
    source: str = "unknown"
    score: float | None = None
