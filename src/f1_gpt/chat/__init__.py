"""
Chat — turn assembly for the retrieval-augmented F1 assistant.

This module contains **zero** HTTP dependencies.  It wires a context
retriever and a streaming chat model together so a turn can be tested
locally with fakes.

Public API
----------
- :class:`ChatTurnAssembler` — assemble and stream one turn.
- :class:`ChatModel` / :class:`GeminiChatModel` — streaming model clients.
- :class:`Message`, :class:`Turn` — conversation models.
"""

from f1_gpt.chat.assembler import ChatTurnAssembler
from f1_gpt.chat.llm import ChatModel, GeminiChatModel
from f1_gpt.chat.models import ChatRequest, Message, Turn

__all__ = [
    "ChatModel",
    "ChatRequest",
    "ChatTurnAssembler",
    "GeminiChatModel",
    "Message",
    "Turn",
]
