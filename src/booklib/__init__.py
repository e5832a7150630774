"""booklib - a personal book library kept in an XML file."""

from booklib.exceptions import (
    BookLibError,
    ConfigurationError,
    DuplicateRecordError,
    InconsistentStateError,
    InvalidArgumentError,
    LibraryIOError,
    NotFoundError,
    SchemaViolationError,
)
from booklib.library import Library
from booklib.models import Author, Book, CoverType
from booklib.search import BookQuery, SearchType

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Records
    "Author",
    "Book",
    "CoverType",
    "Library",
    # Search
    "BookQuery",
    "SearchType",
    # Base exception
    "BookLibError",
    # Errors
    "ConfigurationError",
    "InvalidArgumentError",
    "DuplicateRecordError",
    "NotFoundError",
    "InconsistentStateError",
    "SchemaViolationError",
    "LibraryIOError",
]
