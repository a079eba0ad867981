"""Shared configuration loaded from environment / ``.env``."""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

F1_SOURCES: list[str] = [
    "https://en.wikipedia.org/wiki/Formula_One",
    "https://en.wikipedia.org/wiki/2023_Formula_One_World_Championship",
    "https://en.wikipedia.org/wiki/2024_Formula_One_World_Championship",
    "https://en.wikipedia.org/wiki/List_of_Formula_One_World_Drivers%27_Champions",
    "https://en.wikipedia.org/wiki/List_of_Formula_One_World_Constructors%27_Champions",
    "https://en.wikipedia.org/wiki/Max_Verstappen",
    "https://en.wikipedia.org/wiki/Lewis_Hamilton",
    "https://en.wikipedia.org/wiki/Red_Bull_Racing",
    "https://en.wikipedia.org/wiki/Scuderia_Ferrari",
]


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Gemini
    google_api_key: str = Field(default="", description="Google AI Studio key used for chat and embeddings")
    chat_model_name: str = Field(default="gemini-2.5-flash", description="Streaming chat model identifier")

    # Embedding
    embedding_provider: str = Field(
        default="gemini",
        description="'gemini' for the hosted model, 'huggingface' for a local sentence-transformer",
    )
    embedding_model: str = "models/gemini-embedding-001"
    huggingface_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    vector_dimension: int = Field(default=3072, gt=0)
    similarity_metric: str = "cosine"

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "f1gpt"

    # Retrieval
    retrieval_limit: int = Field(default=10, gt=0)
    request_timeout: float = Field(default=30.0, gt=0, description="Seconds allowed per embed / search / model call")

    # Ingestion
    ingest_sources: list[str] = Field(default_factory=lambda: list(F1_SOURCES))
    chunk_size: int = Field(default=512, gt=0)
    chunk_overlap: int = Field(default=100, ge=0)
    embed_max_attempts: int = Field(default=3, ge=1)
    embed_backoff_seconds: float = Field(default=60.0, ge=0)
    # Free tier allows 15 requests per minute.
    pacing_every: int = Field(default=14, gt=0)
    pacing_seconds: float = Field(default=60.0, ge=0)
    progress_every: int = Field(default=10, gt=0)
    browser_headless: bool = True

    # Serving
    host: str = "0.0.0.0"
    port: int = 3000

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @model_validator(mode="after")
    def _check_chunk_window(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )
        return self


# Singleton — import `settings` wherever needed.
settings = Settings()
