"""Chat turn assembly — retrieve context, build the prompt, stream the reply.

Steps for one turn:

1. **Retrieve** chunks for the final message.  Any failure here is
   logged and the turn continues with an empty context.
2. **Prompt**: the persona, with the retrieved text between the
   context markers.
3. **History**: the system-prompt pair, then every earlier message in
   model format.
4. **Generate**: start a streaming exchange with the final message.
5. **Forward** each non-empty fragment in arrival order.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING

from f1_gpt.chat.models import Message, Turn
from f1_gpt.chat.prompts import build_history, build_system_prompt, format_context
from f1_gpt.errors import EmptyConversationError

if TYPE_CHECKING:
    from f1_gpt.chat.llm import ChatModel
    from f1_gpt.retrieval.models import ChunkMatch
    from f1_gpt.retrieval.retriever import ContextRetriever

logger = logging.getLogger(__name__)


class ChatTurnAssembler:
    """Produces a streamed assistant reply for one conversation.

    Parameters
    ----------
    retriever:
        Looks up context for the final message.
    model:
        Streaming chat model.
    """

    def __init__(self, retriever: ContextRetriever, model: ChatModel) -> None:
        self._retriever = retriever
        self._model = model

    async def assemble(self, messages: Sequence[Message]) -> Turn:
        """Build the :class:`Turn` for *messages* without calling the model.

        Raises
        ------
        EmptyConversationError
            When there are no messages or the last one has no content.
        """
        if not messages or not (messages[-1].content or "").strip():
            raise EmptyConversationError()

        query = messages[-1].content
        context = await self._retrieve_or_empty(query)
        system_prompt = build_system_prompt(format_context(context))
        history = build_history(system_prompt, messages[:-1])
        return Turn(query=query, system_prompt=system_prompt, history=history, context=context)

    async def stream(self, messages: Sequence[Message]) -> AsyncIterator[str]:
        """Assemble the turn, start generation and return the fragment iterator.

        Everything up to the start of generation happens before this
        coroutine returns, so its errors reach the caller directly.
        """
        turn = await self.assemble(messages)
        fragments = await self._model.stream(turn.history, turn.query)
        return self._forward(fragments)

    # -- internals ------------------------------------------------------------

    async def _retrieve_or_empty(self, query: str) -> list[ChunkMatch]:
        try:
            return await self._retriever.retrieve(query)
        except Exception:
            logger.warning("Embedding/search failed, answering without retrieved context", exc_info=True)
            return []

    async def _forward(self, fragments: AsyncIterator[str]) -> AsyncIterator[str]:
        count = 0
        try:
            async for text in fragments:
                if text:
                    count += 1
                    yield text
        except Exception:
            logger.exception("Model stream failed after %d fragments", count)
            raise
        logger.debug("Stream completed with %d fragments", count)
