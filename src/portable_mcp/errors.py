"""Typed errors raised by the resolver, merge pipeline and publisher.

Every failure surfaced to the CLI is a ``PortableMcpError`` subclass carrying
an ``ErrorCode``. None of them are retried: each one ends the current command.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    SOURCE_INVALID = "SOURCE_INVALID"
    FETCH_FAILED = "FETCH_FAILED"
    PARSE_FAILED = "PARSE_FAILED"
    NOT_FOUND = "NOT_FOUND"
    AMBIGUOUS_SOURCE = "AMBIGUOUS_SOURCE"
    PUBLISH_FAILED = "PUBLISH_FAILED"
    CONFIG_MISSING = "CONFIG_MISSING"
    DESTINATION_INVALID = "DESTINATION_INVALID"
    UNSUPPORTED_CLIENT = "UNSUPPORTED_CLIENT"


class PortableMcpError(Exception):
    """Base class for all errors the CLI knows how to render."""

    code: ErrorCode = ErrorCode.SOURCE_INVALID

    def __init__(self, message: str, *, suggestion: str = "", recoverable: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message} ({self.suggestion})"
        return self.message


class SourceError(PortableMcpError):
    """No source given, both given, or the descriptor is malformed."""

    code = ErrorCode.SOURCE_INVALID


class FetchError(PortableMcpError):
    code = ErrorCode.FETCH_FAILED

    def __init__(self, message: str, *, status: int | None = None, suggestion: str = "") -> None:
        # 5xx and transport failures may succeed on a later invocation
        recoverable = status is None or status >= 500
        super().__init__(message, suggestion=suggestion, recoverable=recoverable)
        self.status = status


class ParseError(PortableMcpError):
    code = ErrorCode.PARSE_FAILED


class NotFoundError(PortableMcpError):
    code = ErrorCode.NOT_FOUND


class AmbiguousSourceError(PortableMcpError):
    """Several gist files qualify; the caller must name one."""

    code = ErrorCode.AMBIGUOUS_SOURCE

    def __init__(self, message: str, *, candidates: list[str]) -> None:
        super().__init__(message, suggestion="retry with one of: " + ", ".join(candidates))
        self.candidates = candidates


class PublishError(PortableMcpError):
    code = ErrorCode.PUBLISH_FAILED

    def __init__(self, message: str, *, status: int | None = None, suggestion: str = "") -> None:
        super().__init__(message, suggestion=suggestion)
        self.status = status


class ConfigError(PortableMcpError):
    """Neither a GitHub token nor an authenticated GitHub CLI is available."""

    code = ErrorCode.CONFIG_MISSING


class DestinationError(PortableMcpError):
    code = ErrorCode.DESTINATION_INVALID


class UnsupportedClientError(PortableMcpError):
    code = ErrorCode.UNSUPPORTED_CLIENT
