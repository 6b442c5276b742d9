"""Error hierarchy for markfluence.

Every public error class inherits from MarkfluenceError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

The renderers themselves are total over ``str`` input; these errors only
surface for contract violations by the caller or when strict handling is
requested through configuration.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error markfluence can raise."""

    INVALID_INPUT = "INVALID_INPUT"
    UNSUPPORTED_REPRESENTATION = "UNSUPPORTED_REPRESENTATION"
    CONVERSION_ERROR = "CONVERSION_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class MarkfluenceError(Exception):
    """Base exception for all markfluence errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Caller errors
# ---------------------------------------------------------------------------

class MarkfluenceInvalidInputError(MarkfluenceError):
    """The value handed to a renderer is not a Markdown string.

    Context keys: ``received_type``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_INPUT,
            message=message,
            context=context,
            cause=cause,
        )


class MarkfluenceUnsupportedRepresentationError(MarkfluenceError):
    """A content body was requested in a representation we cannot produce.

    Context keys: ``representation``, ``supported``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED_REPRESENTATION,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Conversion errors
# ---------------------------------------------------------------------------

class MarkfluenceConversionError(MarkfluenceError):
    """A token could not be converted and strict handling was requested.

    Only raised when ``unknown_token_policy="raise"``; the default policy
    skips the token and records a warning instead.

    Context keys: ``token_type``, ``target``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONVERSION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
