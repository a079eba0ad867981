"""Embedding clients and the rate-limit retry policy around them."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import google.generativeai as genai

from f1_gpt import gemini
from f1_gpt.errors import CollaboratorError, ErrorKind, is_rate_limited
from f1_gpt.retry import linear_backoff, retry_async

if TYPE_CHECKING:
    from f1_gpt.config import Settings

logger = logging.getLogger(__name__)


class EmbeddingClient(ABC):
    """Turns text into a fixed-length vector.

    Implementations raise :class:`~f1_gpt.errors.CollaboratorError`;
    a rate limit is reported with kind ``RATE_LIMITED``.
    """

    def __init__(self, dimension: int) -> None:
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        ...


class GeminiEmbeddingClient(EmbeddingClient):
    """Hosted Gemini embeddings (``models/gemini-embedding-001`` by default).

    Parameters
    ----------
    api_key:
        Google AI Studio key.
    model:
        Embedding model id.
    dimension:
        Requested output dimensionality; must match the collection.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "models/gemini-embedding-001",
        dimension: int = 3072,
        timeout: float | None = None,
    ) -> None:
        super().__init__(dimension)
        gemini.configure(api_key)
        self.model = model
        self.timeout = timeout

    async def embed(self, text: str) -> list[float]:
        request_options = {"timeout": self.timeout} if self.timeout else None
        try:
            result = await genai.embed_content_async(
                model=self.model,
                content=text,
                output_dimensionality=self.dimension,
                request_options=request_options,
            )
        except Exception as exc:
            raise gemini.to_collaborator_error(exc) from exc

        vector = list(result["embedding"])
        if len(vector) != self.dimension:
            raise CollaboratorError(
                ErrorKind.UNKNOWN,
                f"{self.model} returned {len(vector)} dimensions, expected {self.dimension}",
            )
        return vector


class HuggingFaceEmbeddingClient(EmbeddingClient):
    """Local sentence-transformer embeddings, for development without a key.

    ``all-MiniLM-L6-v2`` produces 384-dimensional vectors, so set
    ``VECTOR_DIMENSION=384`` when using it.
    """

    def __init__(self, model_name: str, *, dimension: int) -> None:
        from langchain_huggingface import HuggingFaceEmbeddings

        super().__init__(dimension)
        self._embedder = HuggingFaceEmbeddings(model_name=model_name)

    async def embed(self, text: str) -> list[float]:
        try:
            return await self._embedder.aembed_query(text)
        except Exception as exc:
            raise CollaboratorError(ErrorKind.UNKNOWN, str(exc), cause=exc) from exc


def build_embedding_client(config: Settings) -> EmbeddingClient:
    """Return the embedding client selected by ``config.embedding_provider``."""
    provider = config.embedding_provider.lower()
    if provider == "gemini":
        return GeminiEmbeddingClient(
            config.google_api_key,
            model=config.embedding_model,
            dimension=config.vector_dimension,
            timeout=config.request_timeout,
        )
    if provider == "huggingface":
        return HuggingFaceEmbeddingClient(config.huggingface_model, dimension=config.vector_dimension)
    raise ValueError(
        f"Unsupported embedding_provider={config.embedding_provider!r}. Choose from: gemini, huggingface."
    )


async def embed_with_retry(
    client: EmbeddingClient,
    text: str,
    *,
    max_attempts: int = 3,
    base_delay: float = 60.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> list[float]:
    """Embed *text*, waiting ``attempt * base_delay`` after each rate limit.

    Errors other than ``RATE_LIMITED`` are raised straight away; a rate
    limit on the last attempt is raised as-is.
    """

    def _log_wait(attempt: int, delay: float, exc: BaseException) -> None:
        logger.info(
            "   Rate limited. Waiting %.0fs before retry (attempt %d/%d)...",
            delay,
            attempt,
            max_attempts,
        )

    return await retry_async(
        lambda: client.embed(text),
        max_attempts=max_attempts,
        backoff=linear_backoff(base_delay),
        should_retry=is_rate_limited,
        sleep=sleep,
        on_retry=_log_wait,
    )
