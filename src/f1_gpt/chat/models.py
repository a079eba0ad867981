"""Conversation models shared by the assembler and the HTTP layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel

from f1_gpt.retrieval.models import ChunkMatch

Role = Literal["user", "assistant"]


class Message(BaseModel):
    """One entry of a conversation."""

    role: Role
    content: str | None = None


class ChatRequest(BaseModel):
    """Body of ``POST /api/chat``; the last message is the question."""

    messages: list[Message] = []


@dataclass
class Turn:
    """A chat turn ready to be sent to the model.

    Attributes
    ----------
    query:
        Text of the final user message.
    system_prompt:
        Persona + retrieved context.
    history:
        Model-format turns sent before *query*: the system prompt pair
        followed by the earlier messages, each ``{"role", "parts"}``.
    context:
        Chunks retrieved for *query* (empty when retrieval failed).
    """

    query: str
    system_prompt: str
    history: list[dict[str, Any]] = field(default_factory=list)
    context: list[ChunkMatch] = field(default_factory=list)
