"""Structured errors shared by the collaborator bindings.

Each binding (Gemini, Chroma) translates its library's exceptions into a
:class:`CollaboratorError` with an explicit :class:`ErrorKind`, so callers
switch on the kind rather than on status codes or message text.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories a collaborator can report."""

    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    UNKNOWN = "unknown"


class CollaboratorError(Exception):
    """A failure reported by an external service.

    Attributes
    ----------
    kind:
        The classified :class:`ErrorKind`.
    message:
        Human-readable description.
    cause:
        The original library exception, when there is one.
    """

    def __init__(self, kind: ErrorKind, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    def __repr__(self) -> str:
        return f"CollaboratorError(kind={self.kind.value!r}, message={self.message!r})"


class EmptyConversationError(ValueError):
    """Raised when a chat turn has no query to answer."""

    def __init__(self, message: str = "No message provided") -> None:
        super().__init__(message)


def is_rate_limited(exc: BaseException) -> bool:
    return isinstance(exc, CollaboratorError) and exc.kind is ErrorKind.RATE_LIMITED


def classify_message(message: str) -> ErrorKind:
    """Best-effort kind for backends that only report errors as text."""
    lowered = message.lower()
    if "already exists" in lowered:
        return ErrorKind.ALREADY_EXISTS
    if "does not exist" in lowered or "not found" in lowered:
        return ErrorKind.NOT_FOUND
    if "rate limit" in lowered or "resource exhausted" in lowered or "429" in lowered:
        return ErrorKind.RATE_LIMITED
    return ErrorKind.UNKNOWN
