"""Addresses, verse ranges and the reference parser.

Grammar:
- Full reference: "<book>.<chapter>:<verse>" (e.g. "john.3:16")
- Location only: "<chapter>" or "<chapter>:<verse>" or "<chapter>:<start>-<end>"
- Loose reference (CLI/API input): "<book>", "<book>.<location>" or
  "<book> <location>" (e.g. "1 Kings 3:16", "psalms.23")

Numeric fields are unsigned 16-bit. Chapters and verses start at 1; zero is
rejected rather than clamped.
"""

from __future__ import annotations

from dataclasses import dataclass

from fiatlux.canon.books import Book, parse_book
from fiatlux.errors import LocationParseError, ReferenceFormatError

MAX_FIELD = 0xFFFF


def _parse_field(text: str) -> int:
    """Parse a positive 16-bit decimal field.

    Raises:
        ValueError: With a short description of what is wrong
    """
    if not text:
        raise ValueError("cannot parse integer from empty string")
    if not (text.isascii() and text.isdigit()):
        raise ValueError("invalid digit found in string")
    value = int(text)
    if value == 0:
        raise ValueError("number would be zero")
    if value > MAX_FIELD:
        raise ValueError("number too large to fit in target type")
    return value


def parse_chapter(text: str) -> int:
    try:
        return _parse_field(text)
    except ValueError as e:
        raise LocationParseError.chapter(text, str(e)) from e


@dataclass(frozen=True)
class VerseRange:
    """A single verse, or an inclusive span of verses in one chapter."""

    start: int
    end: int | None = None

    def __post_init__(self) -> None:
        if self.start <= 0:
            raise LocationParseError.verse(str(self), "verse would be zero")
        if self.end is not None and self.end < self.start:
            raise LocationParseError.verse(str(self), "range end precedes start")

    @classmethod
    def parse(cls, text: str) -> "VerseRange":
        """Parse "16" or "4-5".

        Raises:
            LocationParseError: If either bound is malformed or the range is
                inverted
        """
        start_text, sep, end_text = text.partition("-")
        try:
            start = _parse_field(start_text)
            end = _parse_field(end_text) if sep else None
        except ValueError as e:
            raise LocationParseError.verse(text, str(e)) from e

        if end is not None and end < start:
            raise LocationParseError.verse(text, "range end precedes start")
        return cls(start, end)

    @property
    def is_range(self) -> bool:
        return self.end is not None

    def contains(self, verse: int) -> bool:
        """Check whether verse falls within this range."""
        if verse <= 0:
            return False
        if self.end is None:
            return verse == self.start
        return self.start <= verse <= self.end

    def __str__(self) -> str:
        if self.end is None:
            return str(self.start)
        return f"{self.start}-{self.end}"


@dataclass(frozen=True)
class PartialLocation:
    """Chapter and optional verse (or verse range)."""

    chapter: int
    verse: VerseRange | None = None

    def __str__(self) -> str:
        if self.verse is None:
            return str(self.chapter)
        return f"{self.chapter}:{self.verse}"


@dataclass(frozen=True, order=True)
class Address:
    """Exact location of one verse."""

    book: Book
    chapter: int
    verse: int

    @classmethod
    def from_id(cls, verse_id: int) -> "Address":
        """Decode a packed BBCCCVVV integer id."""
        return cls(
            book=Book.from_ordinal(verse_id // 1_000_000),
            chapter=verse_id % 1_000_000 // 1000,
            verse=verse_id % 1000,
        )

    @property
    def id(self) -> int:
        """Packed BBCCCVVV integer id."""
        return int(self.book) * 1_000_000 + self.chapter * 1000 + self.verse

    @property
    def location(self) -> PartialLocation:
        return PartialLocation(self.chapter, VerseRange(self.verse))

    def __str__(self) -> str:
        return f"{self.book} {self.chapter}:{self.verse}"


@dataclass(frozen=True)
class PartialAddress:
    """A query address of varying specificity.

    book only; book + chapter; book + chapter + verse or verse range.
    """

    book: Book | None = None
    chapter: int | None = None
    verse: VerseRange | None = None

    def __post_init__(self) -> None:
        if self.chapter is not None and self.book is None:
            raise ValueError("a chapter requires a book")
        if self.verse is not None and self.chapter is None:
            raise ValueError("a verse requires a chapter")

    @classmethod
    def from_location(
        cls, book: Book, location: PartialLocation | None
    ) -> "PartialAddress":
        if location is None:
            return cls(book)
        return cls(book, location.chapter, location.verse)

    @property
    def location(self) -> PartialLocation | None:
        if self.chapter is None:
            return None
        return PartialLocation(self.chapter, self.verse)

    def __str__(self) -> str:
        if self.book is None:
            return "*"
        if self.location is None:
            return str(self.book)
        return f"{self.book} {self.location}"


def parse_location(text: str) -> PartialLocation:
    """Parse a chapter with an optional verse or verse range.

    Examples:
        >>> parse_location("23")
        PartialLocation(chapter=23, verse=None)
        >>> parse_location("127:4-5")
        PartialLocation(chapter=127, verse=VerseRange(start=4, end=5))

    Raises:
        LocationParseError: If the chapter or verse part is malformed
    """
    chapter_text, _, verse_text = text.partition(":")
    chapter = parse_chapter(chapter_text)

    # "3:" names the whole chapter, as "3" does
    if not verse_text:
        return PartialLocation(chapter)
    return PartialLocation(chapter, VerseRange.parse(verse_text))


def parse_full(text: str) -> Address:
    """Parse a full "<book>.<chapter>:<verse>" reference.

    Raises:
        ReferenceFormatError: If either separator is missing
        BookParseError: If the book is not recognized
        LocationParseError: If chapter or verse is malformed
    """
    book_text, dot, chapter_verse = text.partition(".")
    chapter_text, colon, verse_text = chapter_verse.partition(":")
    if not dot or not colon:
        raise ReferenceFormatError(text)

    book = parse_book(book_text)
    chapter = parse_chapter(chapter_text)
    try:
        verse = _parse_field(verse_text)
    except ValueError as e:
        raise LocationParseError.verse(verse_text, str(e)) from e

    return Address(book, chapter, verse)


def parse_reference(text: str) -> PartialAddress:
    """Parse a loose reference as typed by a user.

    Accepts "psalms", "psalms.23", "john.3:16", "John 3:16", "1 Kings 3:16-18".
    A trailing numeric token is read as a location; if the remaining text is
    not a book on its own, the whole text is tried as a book instead, so
    "Kings 1" still names 1 Kings.

    Raises:
        BookParseError, LocationParseError
    """
    text = text.strip()

    book_text, dot, location_text = text.partition(".")
    if dot:
        return PartialAddress.from_location(
            parse_book(book_text), parse_location(location_text.strip())
        )

    parts = text.rsplit(None, 1)
    if len(parts) == 2 and parts[1][:1].isdigit():
        head, tail = parts
        if ":" in tail:
            return PartialAddress.from_location(parse_book(head), parse_location(tail))
        try:
            book = parse_book(head)
        except ValueError:
            return PartialAddress(parse_book(text))
        return PartialAddress.from_location(book, parse_location(tail))

    return PartialAddress(parse_book(text))
