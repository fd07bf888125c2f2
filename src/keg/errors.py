"""Structured errors for keg.

Every error carries a stable code so that `keg --json-errors` callers can
branch on it without parsing messages.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    KEG_NOT_FOUND = "KEG_NOT_FOUND"
    DEX_NOT_FOUND = "DEX_NOT_FOUND"
    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    PARSE_ERROR = "PARSE_ERROR"
    CHOOSE_FAILED = "CHOOSE_FAILED"
    NO_ENTRY_SELECTED = "NO_ENTRY_SELECTED"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


def format_error_json(code: str, message: str, details: dict | None = None) -> str:
    """Format an error as a single JSON object."""
    error: dict[str, dict[str, Any]] = {"error": {"code": str(code), "message": message}}
    if details:
        error["error"]["details"] = details
    return json.dumps(error, default=str)


class KegError(Exception):
    """Base class for errors raised by keg."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data

    def to_json(self) -> str:
        return format_error_json(self.code.value, self.message, self.details)


class IdentifierParseError(KegError):
    """A stored node id could not be turned back into an integer."""

    def __init__(self, value: str, details: dict[str, Any] | None = None):
        super().__init__(
            ErrorCode.INVALID_IDENTIFIER,
            f"could not parse identifier: {value!r}",
            {"value": value, **(details or {})},
        )
        self.value = value


class ChooseError(KegError):
    """The interactive chooser failed or was aborted."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(ErrorCode.CHOOSE_FAILED, message, details)


class ConfigurationError(KegError):
    """Raised when required configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
    ):
        super().__init__(code, message, details)
