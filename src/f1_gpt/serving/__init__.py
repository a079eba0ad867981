"""
Serving — FastAPI application for the F1 chat assistant.

This module exposes the chat turn assembler over HTTP as a streaming
``POST /api/chat`` endpoint, runnable with ``python -m f1_gpt.serving``.
"""
