"""Errors raised by the metadata directory and its collaborators."""

from __future__ import annotations

from typing import Any


class DirectoryError(Exception):
    """Base class for request-level directory failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DecodeError(DirectoryError):
    """The payload is not well-formed in its source format."""


class ValidationError(DirectoryError):
    """A required field is missing or a field value is invalid."""

    def __init__(self, field: str, message: str, value: Any = None) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.value = value


class InvalidQueryError(DirectoryError):
    """A read supplied neither a source nor a company."""
