"""Prompt templates and history mapping for the chat model.

The Gemini chat API has no system role in a chat history, so the system
prompt travels as an opening user turn answered by a canned model turn.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from f1_gpt.chat.models import Message
    from f1_gpt.retrieval.models import ChunkMatch

SYSTEM_PROMPT_TEMPLATE = """\
You are an F1 (Formula 1) racing expert assistant called F1 GPT.
You have deep knowledge of Formula 1 racing history, drivers, teams, circuits, regulations, and statistics.
Use the following context from F1 data sources to answer the user's question accurately.
If the context doesn't contain relevant information, use your general knowledge about F1.
If the question is not related to F1 or motorsport, politely redirect the conversation to F1 topics.

START CONTEXT
{context}
END CONTEXT

Guidelines:
- Be enthusiastic about F1!
- Provide specific stats, dates, and facts when available
- Reference your sources when relevant
- Keep answers concise but informative
- Use racing terminology naturally"""

ACKNOWLEDGEMENT = "Understood! I'm F1 GPT, ready to answer your Formula 1 questions with enthusiasm! 🏎️"


def format_context(matches: Sequence[ChunkMatch]) -> str:
    """Join the retrieved chunk texts with a blank line between them."""
    return "\n\n".join(m.text for m in matches)


def build_system_prompt(context: str) -> str:
    """Interpolate *context* verbatim between the context markers."""
    return SYSTEM_PROMPT_TEMPLATE.format(context=context)


def to_model_turn(role: str, text: str) -> dict[str, Any]:
    return {"role": role, "parts": [{"text": text}]}


def to_model_history(messages: Sequence[Message]) -> list[dict[str, Any]]:
    """Map messages to model turns, renaming ``assistant`` to ``model``."""
    return [
        to_model_turn("model" if m.role == "assistant" else "user", m.content or "")
        for m in messages
    ]


def build_history(system_prompt: str, prior: Sequence[Message]) -> list[dict[str, Any]]:
    """Return the system-prompt pair followed by the mapped *prior* messages."""
    return [
        to_model_turn("user", system_prompt),
        to_model_turn("model", ACKNOWLEDGEMENT),
        *to_model_history(prior),
    ]
