"""Error types for fiatlux.

Parse errors are recoverable and carry the offending fragment (abbreviated)
for display. Corpus errors are fatal: the corpus is a build-time asset and a
malformed record is a data-authoring defect.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fiatlux.canon.books import Book
    from fiatlux.reference.location import PartialLocation


def abbreviate(text: str, limit: int) -> str:
    """Truncate text to limit characters, marking the cut with an ellipsis."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class FiatLuxError(Exception):
    """Base class for all fiatlux errors."""

    pass


class BookParseError(FiatLuxError, ValueError):
    """Raised when text does not name exactly one canonical book."""

    def __init__(self, text: str):
        self.text = abbreviate(text, 20)
        super().__init__(f"could not parse '{self.text}' as book")


class LocationParseError(FiatLuxError, ValueError):
    """Raised when a chapter or verse field is malformed.

    Attributes:
        kind: "chapter" or "verse"
        text: Offending text, abbreviated to 10 characters
    """

    CHAPTER = "chapter"
    VERSE = "verse"

    def __init__(self, kind: str, text: str, cause: str | None = None):
        self.kind = kind
        self.text = abbreviate(text, 10)
        self.cause = cause
        super().__init__(f"unable to parse {kind}: {self.text}")

    @classmethod
    def chapter(cls, text: str, cause: str | None = None) -> "LocationParseError":
        return cls(cls.CHAPTER, text, cause)

    @classmethod
    def verse(cls, text: str, cause: str | None = None) -> "LocationParseError":
        return cls(cls.VERSE, text, cause)


class ReferenceFormatError(FiatLuxError, ValueError):
    """Raised when a full reference is missing a required separator."""

    def __init__(self, text: str):
        self.text = abbreviate(text, 30)
        super().__init__(
            f"bad format: '{self.text}' (expected book.chapter:verse, e.g. john.3:16)"
        )


class Entity(str, Enum):
    """Level of the index at which a lookup failed."""

    BOOK = "book"
    CHAPTER = "chapter"
    VERSE = "verse"

    def __str__(self) -> str:
        return self.value


class NotFoundError(FiatLuxError, LookupError):
    """Raised when a well-formed address is absent from the index."""

    def __init__(
        self,
        entity: Entity,
        book: "Book",
        location: "PartialLocation | None" = None,
    ):
        self.entity = entity
        self.book = book
        self.location = location
        if location is None:
            message = f"{entity} not found: {book}"
        else:
            message = f"{entity} not found: {book} {location}"
        super().__init__(message)


class CorpusFormatError(FiatLuxError):
    """Raised when a corpus line has a malformed fixed-width header."""

    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number
        self.header = abbreviate(line, 12)
        self.reason = reason
        super().__init__(
            f"malformed corpus record at line {line_number}: {reason} "
            f"(header: {self.header!r})"
        )


class CorpusMissingError(FiatLuxError):
    """Raised when a translation's corpus file is not available.

    Provides actionable installation instructions.
    """

    def __init__(self, translation: str, path: str):
        self.translation = translation
        self.path = path
        super().__init__(
            f"Corpus not installed: {translation}\n\n"
            f"Expected corpus file at:\n\n"
            f"  {path}\n\n"
            f"Place the {translation} .dat file there, or point fiatlux at\n"
            f"another directory with --data-root or FIATLUX_DATA_ROOT."
        )


class SearchQueryError(FiatLuxError, ValueError):
    """Raised when the search engine rejects a query string."""

    def __init__(self, query: str, detail: str):
        self.query = abbreviate(query, 30)
        self.detail = detail
        super().__init__(f"invalid search query '{self.query}': {detail}")
