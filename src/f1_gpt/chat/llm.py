"""Chat model clients — single place to swap providers.

A :class:`ChatModel` starts one streaming exchange per call.  The
coroutine returns once the provider has accepted the request, so failures
to start surface to the caller before any output is produced; the
returned iterator then yields text fragments as they arrive.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

import google.generativeai as genai

from f1_gpt import gemini

logger = logging.getLogger(__name__)


class ChatModel(ABC):
    """Streaming chat completion over a Gemini-style history."""

    @abstractmethod
    async def stream(self, history: list[dict[str, Any]], message: str) -> AsyncIterator[str]:
        """Send *message* after *history* and return the fragment iterator.

        The iterator is lazy, finite and cannot be restarted.
        """
        ...


def _fragment_text(chunk: Any) -> str:
    """Text of the first candidate of a streamed chunk (``""`` if none)."""
    candidates = getattr(chunk, "candidates", None) or []
    if not candidates:
        return ""
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    return "".join(getattr(part, "text", "") or "" for part in parts)


class GeminiChatModel(ChatModel):
    """Gemini chat via ``google-generativeai``.

    Parameters
    ----------
    api_key:
        Google AI Studio key.
    model_name:
        Chat model id, e.g. ``"gemini-2.5-flash"``.
    timeout:
        Seconds allowed for the exchange to start.
    """

    def __init__(self, api_key: str, *, model_name: str = "gemini-2.5-flash", timeout: float | None = None) -> None:
        gemini.configure(api_key)
        self.model_name = model_name
        self.timeout = timeout
        self._model = genai.GenerativeModel(model_name=model_name)

    async def stream(self, history: list[dict[str, Any]], message: str) -> AsyncIterator[str]:
        chat = self._model.start_chat(history=history)
        request_options = {"timeout": self.timeout} if self.timeout else None
        try:
            response = await asyncio.wait_for(
                chat.send_message_async(message, stream=True, request_options=request_options),
                self.timeout,
            )
        except Exception as exc:
            raise gemini.to_collaborator_error(exc) from exc

        logger.debug("Started %s stream with %d history turns", self.model_name, len(history))
        return self._fragments(response)

    async def _fragments(self, response: Any) -> AsyncIterator[str]:
        try:
            async for chunk in response:
                text = _fragment_text(chunk)
                if text:
                    yield text
        except Exception as exc:
            raise gemini.to_collaborator_error(exc) from exc
