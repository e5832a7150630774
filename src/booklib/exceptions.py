"""
booklib exception hierarchy.

Provides typed exceptions so callers can tell a bad record from a broken
library file.

Exception Hierarchy:
    BookLibError (base)
    ├── ConfigurationError - Config file issues, invalid settings
    ├── InvalidArgumentError - Bad field values when building a record
    ├── DuplicateRecordError - Adding a book that is already in the library
    ├── NotFoundError - Removing/looking up a book or author that is absent
    ├── InconsistentStateError - Book/author index found out of sync
    ├── SchemaViolationError - Unrecognized tag or bad value in a library file
    └── LibraryIOError - Read/write failure on a library file
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class BookLibError(Exception):
    """Base exception for all booklib errors."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """
        Initialize booklib exception.

        Args:
            message: Human-readable error message
            details: Optional structured error details for logging/debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(BookLibError):
    """Configuration file or settings error."""

    def __init__(
        self,
        message: str,
        *,
        config_file: Path | str | None = None,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if config_file:
            details["config_file"] = str(config_file)
        if field:
            details["field"] = field
        super().__init__(message, details=details)
        self.config_file = config_file
        self.field = field


# =============================================================================
# Record Errors
# =============================================================================


class InvalidArgumentError(BookLibError, ValueError):
    """A record was built from missing or out-of-range field values."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details=details)
        self.field = field


class DuplicateRecordError(BookLibError):
    """A book equal to the one being added is already in the library."""

    def __init__(
        self,
        message: str,
        *,
        title: str | None = None,
        isbn: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if title:
            details["title"] = title
        if isbn:
            details["isbn"] = isbn
        super().__init__(message, details=details)
        self.title = title
        self.isbn = isbn


class NotFoundError(BookLibError, LookupError):
    """The requested book or author is not in the library."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if key:
            details["key"] = key
        super().__init__(message, details=details)
        self.key = key


class InconsistentStateError(BookLibError):
    """The book list and the author index no longer agree."""

    def __init__(
        self,
        message: str,
        *,
        author: str | None = None,
        title: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if author:
            details["author"] = author
        if title:
            details["title"] = title
        super().__init__(message, details=details)
        self.author = author
        self.title = title


# =============================================================================
# File Errors
# =============================================================================


class SchemaViolationError(BookLibError):
    """A library document contains something the parser does not accept."""

    def __init__(
        self,
        message: str,
        *,
        tag: str | None = None,
        container: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if tag:
            details["tag"] = tag
        if container:
            details["container"] = container
        super().__init__(message, details=details)
        self.tag = tag
        self.container = container


class LibraryIOError(BookLibError):
    """Reading or writing a library file failed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if path:
            details["path"] = str(path)
        if operation:
            details["operation"] = operation
        super().__init__(message, details=details)
        self.path = path
        self.operation = operation
