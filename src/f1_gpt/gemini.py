"""Google Gemini binding helpers shared by the embedding and chat clients.

Single place that touches ``google.generativeai`` configuration and that
translates ``google.api_core`` exceptions into
:class:`~f1_gpt.errors.CollaboratorError`.
"""

from __future__ import annotations

import logging

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from f1_gpt.errors import CollaboratorError, ErrorKind, classify_message

logger = logging.getLogger(__name__)

_configured_key: str | None = None


def configure(api_key: str) -> None:
    """Configure the ``google.generativeai`` module once per key."""
    global _configured_key
    if api_key == _configured_key:
        return
    if not api_key:
        logger.warning("GOOGLE_API_KEY is empty; Gemini calls will be rejected")
    genai.configure(api_key=api_key)
    _configured_key = api_key


def to_collaborator_error(exc: BaseException) -> CollaboratorError:
    """Classify a Gemini client exception."""
    if isinstance(exc, CollaboratorError):
        return exc
    if isinstance(exc, (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests)):
        kind = ErrorKind.RATE_LIMITED
    elif isinstance(exc, google_exceptions.NotFound):
        kind = ErrorKind.NOT_FOUND
    elif isinstance(exc, (google_exceptions.AlreadyExists, google_exceptions.Conflict)):
        kind = ErrorKind.ALREADY_EXISTS
    elif getattr(exc, "code", None) == 429:
        kind = ErrorKind.RATE_LIMITED
    else:
        kind = classify_message(str(exc))
    return CollaboratorError(kind, str(exc) or type(exc).__name__, cause=exc)
