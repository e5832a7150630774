"""
XML codec for book library files (``.bdb``).

Reading walks an ElementTree document with one schema table per record type
(tag name -> field setter). Any element or node that is not in the table is
a SchemaViolationError and aborts the whole parse.

Writing builds the document text by hand so that the layout is fixed:
two-space indentation, one tag per line, fields in a fixed order, optional
fields left out when unset.

Two legacy behaviours are kept on purpose:

- Unknown ``<covertype>`` text is not an error; the book stays Hard Cover.
- Only the book title is escaped on output. Other fields are written as-is,
  so an ``&`` or ``<`` in, say, a series name produces a file that will not
  read back.

Document layout:
    <?xml version='1.0'?>
    <?xml-stylesheet type='text/xsl' href='booklibrary.xsl'?>
    <booklibrary xmlns:xsi='...' xsi:noNamspaceSchemaLocation='booklibrary.xsd'>
      <book>
        <title>...</title>
        <covertype>Hard Cover|Soft Cover</covertype>
        <series>...</series>
        <author>
          <title/first/middle/last/surtitle>
        </author>
        <year>NNNN</year>
        <isbn>...</isbn>
      </book>
    </booklibrary>
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
import shutil
import xml.etree.ElementTree as ET
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from booklib.exceptions import InvalidArgumentError, LibraryIOError, SchemaViolationError
from booklib.models import BACKUP_SUFFIX, BADDATE, COVER_NAMES, Author, Book, CoverType

if TYPE_CHECKING:
    from booklib.library import Library

logger = logging.getLogger(__name__)

XML_PROLOG = "<?xml version='1.0'?>\n"
XML_STYLESHEET = "<?xml-stylesheet type='text/xsl' href='booklibrary.xsl'?>\n"
# Attribute string written verbatim on the root element (typo included)
LIBRARY_NAMESPACE = (
    " xmlns:xsi='http://www.w3.org/2001/XMLSchema-instance'"
    " xsi:noNamspaceSchemaLocation='booklibrary.xsd'"
)

TAG_LIBRARY = "booklibrary"
TAG_BOOK = "book"
TAG_AUTHOR = "author"

INDENT = "  "

# Optional sign and ASCII digits only
_YEAR_RE = re.compile(r"[+-]?[0-9]+")

FieldSetter = Callable[[dict[str, Any], ET.Element], None]


# =============================================================================
# Parsing
# =============================================================================


def _text(elem: ET.Element) -> str | None:
    """Element text, or None for an empty element."""
    return elem.text if elem.text else None


def _set(field: str) -> FieldSetter:
    def setter(fields: dict[str, Any], elem: ET.Element) -> None:
        fields[field] = _text(elem)

    return setter


def _set_year(fields: dict[str, Any], elem: ET.Element) -> None:
    text = _text(elem)
    if text is None or not _YEAR_RE.fullmatch(text):
        raise SchemaViolationError(
            f"Invalid publish year in book definition: {text!r}",
            tag=elem.tag,
            container=TAG_BOOK,
        )
    fields["publish_year"] = int(text)


def _set_cover(fields: dict[str, Any], elem: ET.Element) -> None:
    text = _text(elem)
    if text in COVER_NAMES:
        fields["cover_type"] = COVER_NAMES.index(text)
    else:
        # Leniency kept from older files: unknown text keeps the default
        logger.warning("Unrecognized cover type %r, keeping %s", text, COVER_NAMES[0])


def _add_author(fields: dict[str, Any], elem: ET.Element) -> None:
    fields["authors"].append(parse_author(elem))


AUTHOR_SCHEMA: dict[str, FieldSetter] = {
    "title": _set("title"),
    "first": _set("first_name"),
    "middle": _set("middle_name"),
    "last": _set("last_name"),
    "surtitle": _set("sur_title"),
}

BOOK_SCHEMA: dict[str, FieldSetter] = {
    "title": _set("title"),
    "covertype": _set_cover,
    "series": _set("series"),
    "year": _set_year,
    "isbn": _set("isbn"),
    TAG_AUTHOR: _add_author,
}


def _walk(
    container: ET.Element,
    schema: dict[str, FieldSetter],
    fields: dict[str, Any],
) -> None:
    """Apply ``schema`` to every child element of ``container``.

    Whitespace between elements is ignored. Comments and processing
    instructions are not allowed inside a record.
    """
    name = container.tag
    for child in container:
        if child.tag is ET.Comment or child.tag is ET.ProcessingInstruction:
            raise SchemaViolationError(
                f"Invalid XML node type for defining {'an' if name == TAG_AUTHOR else 'a'} "
                f"{name}: {'comment' if child.tag is ET.Comment else 'processing instruction'}",
                container=name,
            )
        setter = schema.get(child.tag)
        if setter is None:
            raise SchemaViolationError(
                f"Invalid XML node name for defining {'an' if name == TAG_AUTHOR else 'a'} "
                f"{name}: {child.tag}",
                tag=str(child.tag),
                container=name,
            )
        setter(fields, child)


def parse_author(elem: ET.Element) -> Author:
    """Build an Author from an ``<author>`` element.

    Raises:
        SchemaViolationError: Unknown child tag or missing last name
    """
    fields: dict[str, Any] = {"last_name": None}
    _walk(elem, AUTHOR_SCHEMA, fields)
    try:
        return Author(**fields)
    except InvalidArgumentError as e:
        raise SchemaViolationError(
            f"Invalid author definition: {e}", tag="last", container=TAG_AUTHOR
        ) from e


def parse_book(elem: ET.Element) -> Book:
    """Build a Book from a ``<book>`` element.

    Raises:
        SchemaViolationError: Unknown child tag, bad year, or a book that is
            missing its title or authors
    """
    fields: dict[str, Any] = {
        "title": None,
        "authors": [],
        "publish_year": BADDATE,
        "cover_type": CoverType.HARDCOVER,
    }
    _walk(elem, BOOK_SCHEMA, fields)
    try:
        return Book(**fields)
    except InvalidArgumentError as e:
        raise SchemaViolationError(
            f"Invalid book definition: {e}",
            tag=e.field,
            container=TAG_BOOK,
            details={"title": fields.get("title")},
        ) from e


def _parse_document(data: str | bytes) -> ET.Element:
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
    try:
        return ET.fromstring(data, parser=parser)
    except ET.ParseError as e:
        raise SchemaViolationError(f"Unable to parse library document: {e}") from e


def parse_books(data: str | bytes) -> list[Book]:
    """Parse every ``<book>`` element in a library document, in file order."""
    root = _parse_document(data)
    if root.tag != TAG_LIBRARY:
        logger.debug("Library document root is <%s>, expected <%s>", root.tag, TAG_LIBRARY)
    return [parse_book(elem) for elem in root.iter(TAG_BOOK)]


def parse_library(data: str | bytes) -> Library:
    """Parse a library document into a new Library.

    Books are added one at a time, so a document that lists the same book
    twice fails with DuplicateRecordError.
    """
    from booklib.library import Library

    library = Library()
    for book in parse_books(data):
        library.add_book(book)
    return library


def read_library(path: Path | str) -> Library:
    """
    Load a library file.

    Args:
        path: Path to a ``.bdb`` file

    Returns:
        The parsed Library

    Raises:
        LibraryIOError: If the file cannot be read
        SchemaViolationError: If the document is not a valid library
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise LibraryIOError(
            f"Unable to read library file {path}: {e.strerror or e}",
            path=path,
            operation="read",
        ) from e
    try:
        library = parse_library(data)
    except SchemaViolationError as e:
        e.details.setdefault("path", str(path))
        raise
    logger.info("Loaded %d book(s) from %s", len(library), path)
    return library


# =============================================================================
# Serialization
# =============================================================================


def escape_title(text: str) -> str:
    """Escape ``&``, ``<`` and ``>``. Used for book titles only."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _element(indent: str, tag: str, value: object) -> str:
    return f"{indent}<{tag}>{value}</{tag}>\n"


def author_to_xml(author: Author, indent: str = "") -> str:
    """Serialize an author as an ``<author>`` element at ``indent``."""
    inner = indent + INDENT
    parts = [f"{indent}<{TAG_AUTHOR}>\n"]
    if author.title is not None:
        parts.append(_element(inner, "title", author.title))
    if author.first_name is not None:
        parts.append(_element(inner, "first", author.first_name))
    if author.middle_name is not None:
        parts.append(_element(inner, "middle", author.middle_name))
    parts.append(_element(inner, "last", author.last_name))
    if author.sur_title is not None:
        parts.append(_element(inner, "surtitle", author.sur_title))
    parts.append(f"{indent}</{TAG_AUTHOR}>\n")
    return "".join(parts)


def book_to_xml(book: Book, indent: str = "") -> str:
    """Serialize a book as a ``<book>`` element at ``indent``."""
    inner = indent + INDENT
    parts = [f"{indent}<{TAG_BOOK}>\n"]
    parts.append(_element(inner, "title", escape_title(book.title)))
    parts.append(_element(inner, "covertype", COVER_NAMES[book.cover_type]))
    if book.series is not None:
        parts.append(_element(inner, "series", book.series))
    parts.extend(author_to_xml(a, inner) for a in book.authors)
    parts.append(_element(inner, "year", book.publish_year))
    if book.isbn is not None:
        parts.append(_element(inner, "isbn", book.isbn))
    parts.append(f"{indent}</{TAG_BOOK}>\n")
    return "".join(parts)


def library_to_xml(library: Library) -> str:
    """Serialize the whole library, books in library order."""
    parts = [XML_PROLOG, XML_STYLESHEET, f"<{TAG_LIBRARY}{LIBRARY_NAMESPACE}>\n"]
    parts.extend(book_to_xml(b, INDENT) for b in library.books)
    parts.append(f"</{TAG_LIBRARY}>\n")
    return "".join(parts)


def backup_path(path: Path | str) -> Path:
    """Backup location for a library file: the full name plus ``.bak``."""
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def write_library(library: Library, path: Path | str) -> Path:
    """
    Write a library file, keeping the previous version as a backup.

    Safety guarantees:
    1. The whole document is generated before any file is touched
    2. An existing file is copied to ``<path>.bak`` (replacing an older backup)
    3. The document is written to a ``.tmp`` sibling and fsync'd
    4. ``os.replace()`` swaps it in, so a failed write never truncates the
       existing file

    Args:
        library: Library to write
        path: Target file

    Returns:
        The path written

    Raises:
        LibraryIOError: If the backup or the write fails
    """
    path = Path(path)
    document = library_to_xml(library)
    backup_file = backup_path(path)
    temp_file = path.with_name(path.name + ".tmp")

    try:
        if path.exists():
            shutil.copyfile(path, backup_file)
            logger.debug("Preserved backup: %s", backup_file)

        with open(temp_file, "w", encoding="utf-8") as f:
            f.write(document)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_file, path)

    except OSError as e:
        if temp_file.exists():
            with contextlib.suppress(OSError):
                temp_file.unlink()
        logger.error("Failed to write library %s: %s", path, e)
        raise LibraryIOError(
            f"Unable to write library file {path}: {e.strerror or e}",
            path=path,
            operation="write",
        ) from e

    logger.info("Saved %d book(s) to %s", len(library), path)
    return path
