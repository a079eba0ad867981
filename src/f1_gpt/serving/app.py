"""FastAPI application exposing the F1 chat assistant."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse

from f1_gpt.chat.assembler import ChatTurnAssembler
from f1_gpt.chat.llm import GeminiChatModel
from f1_gpt.chat.models import ChatRequest
from f1_gpt.config import Settings, settings
from f1_gpt.errors import EmptyConversationError
from f1_gpt.ingestion.embedder import build_embedding_client
from f1_gpt.retrieval.retriever import ContextRetriever

logger = logging.getLogger(__name__)


def build_assembler(config: Settings = settings) -> ChatTurnAssembler:
    """Construct the production store, embedder and model from *config*."""
    from f1_gpt.retrieval.chroma_store import ChromaVectorStore

    store = ChromaVectorStore(config.chroma_collection, host=config.chroma_host, port=config.chroma_port)
    retriever = ContextRetriever(
        store,
        build_embedding_client(config),
        limit=config.retrieval_limit,
        timeout=config.request_timeout,
    )
    model = GeminiChatModel(
        config.google_api_key,
        model_name=config.chat_model_name,
        timeout=config.request_timeout,
    )
    return ChatTurnAssembler(retriever, model)


def get_assembler(request: Request) -> ChatTurnAssembler:
    return request.app.state.assembler


def create_app(assembler: ChatTurnAssembler | None = None) -> FastAPI:
    """Build the API.  Without *assembler*, one is built from settings at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.assembler is None:
            app.state.assembler = build_assembler()
        yield

    app = FastAPI(
        title="F1 GPT API",
        version="0.1.0",
        description="Retrieval-augmented Formula 1 chat assistant.",
        lifespan=lifespan,
    )
    app.state.assembler = assembler

    # ── Error handlers ────────────────────────────────────────────────
    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected chat request: %s", exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    # ── Routes ────────────────────────────────────────────────────────
    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok"}

    @app.post("/api/chat", response_model=None)
    async def chat(
        body: ChatRequest,
        assembler: ChatTurnAssembler = Depends(get_assembler),
    ) -> StreamingResponse | JSONResponse:
        """Stream the assistant's reply to the last message as plain text."""
        try:
            fragments = await assembler.stream(body.messages)
        except EmptyConversationError as exc:
            return JSONResponse(status_code=400, content={"error": str(exc)})
        except Exception:
            logger.exception("Chat API error")
            return JSONResponse(status_code=500, content={"error": "Failed to generate response"})

        return StreamingResponse(fragments, media_type="text/plain; charset=utf-8")

    return app


app = create_app()
