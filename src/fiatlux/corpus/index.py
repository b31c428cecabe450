"""In-memory three-level index over a flat verse corpus.

Corpus format: one verse per line, an 8-digit header BBCCCVVV (2-digit book
ordinal, 3-digit chapter, 3-digit verse), one separator character, then the
verse text to end of line:

    19023001 The LORD is my shepherd; I shall not want.

The index maps Book -> chapter -> verse -> text. Each level keeps corpus
order (dicts are insertion-ordered), which is canonical order for a
well-formed corpus; nothing is re-sorted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Union, cast

from fiatlux.canon.books import Book
from fiatlux.errors import CorpusFormatError, Entity, NotFoundError
from fiatlux.reference.location import Address, PartialLocation

logger = logging.getLogger(__name__)

HEADER_WIDTH = 8

ChapterIndex = dict[int, str]
BookIndex = dict[int, ChapterIndex]
FullIndex = dict[Book, BookIndex]

LookupResult = Union[str, ChapterIndex, BookIndex]


@dataclass(frozen=True)
class CorpusRecord:
    """One verse of one translation."""

    address: Address
    text: str


def parse_record(line: str, line_number: int) -> CorpusRecord:
    """Split one corpus line into its address and text.

    Raises:
        CorpusFormatError: If the fixed-width header is malformed
    """
    header = line[:HEADER_WIDTH]
    if len(line) <= HEADER_WIDTH:
        raise CorpusFormatError(line_number, line, "line shorter than header")
    if not (header.isascii() and header.isdigit()):
        raise CorpusFormatError(line_number, line, "header is not 8 ASCII digits")
    if line[HEADER_WIDTH].isdigit():
        raise CorpusFormatError(line_number, line, "header wider than 8 digits")

    ordinal = int(header[0:2])
    chapter = int(header[2:5])
    verse = int(header[5:8])
    try:
        book = Book.from_ordinal(ordinal)
    except ValueError as e:
        raise CorpusFormatError(line_number, line, str(e)) from e
    if chapter == 0 or verse == 0:
        raise CorpusFormatError(line_number, line, "chapter and verse start at 1")

    return CorpusRecord(Address(book, chapter, verse), line[HEADER_WIDTH + 1 :])


class CorpusIndex:
    """Read-only nested index of a corpus.

    Build once with CorpusIndex.build(); share freely between readers.
    """

    def __init__(self, index: FullIndex):
        self._index = index
        self._verse_count = sum(
            len(chapter) for book in index.values() for chapter in book.values()
        )

    @classmethod
    def build(cls, corpus_text: str) -> "CorpusIndex":
        """Parse corpus text into an index.

        Blank lines are skipped. A later record for an address already seen
        replaces the earlier text but keeps its position.

        Raises:
            CorpusFormatError: On the first malformed record
        """
        index: FullIndex = {}
        # Only "\n" and "\r\n" end a record; U+2028 and friends are verse text
        for line_number, line in enumerate(corpus_text.split("\n"), start=1):
            line = line.removesuffix("\r")
            if not line.strip():
                continue
            record = parse_record(line, line_number)
            address = record.address
            chapters = index.setdefault(address.book, {})
            chapters.setdefault(address.chapter, {})[address.verse] = record.text

        built = cls(index)
        logger.debug(f"Indexed {len(built)} verses across {len(index)} books")
        return built

    def __len__(self) -> int:
        return self._verse_count

    def __contains__(self, book: object) -> bool:
        return book in self._index

    def books(self) -> list[Book]:
        """Books present in the corpus, in corpus order."""
        return list(self._index)

    def book(self, book: Book) -> BookIndex:
        """Get the ordered chapter map for a book.

        Raises:
            NotFoundError: If the book is absent
        """
        try:
            return self._index[book]
        except KeyError:
            raise NotFoundError(Entity.BOOK, book) from None

    def lookup(
        self, book: Book, location: PartialLocation | None = None
    ) -> LookupResult:
        """Look up a book, chapter, verse or verse range.

        Returns:
            - the chapter map when location is None
            - the verse map of the chapter when no verse is given
            - the verse text for a single verse
            - the verse map restricted to the range for a verse range

        Raises:
            NotFoundError: Naming the first level that is absent
        """
        chapters = self.book(book)
        if location is None:
            return chapters

        verses = chapters.get(location.chapter)
        if verses is None:
            raise NotFoundError(Entity.CHAPTER, book, location)

        verse = location.verse
        if verse is None:
            return verses

        if not verse.is_range:
            text = verses.get(verse.start)
            if text is None:
                raise NotFoundError(Entity.VERSE, book, location)
            return text

        selected = {n: text for n, text in verses.items() if verse.contains(n)}
        if not selected:
            raise NotFoundError(Entity.VERSE, book, location)
        return selected

    def lookup_address(self, address: Address) -> str:
        """Get the text of exactly one verse."""
        return cast(str, self.lookup(address.book, address.location))

    def records(self) -> Iterator[CorpusRecord]:
        """Iterate all verses in corpus order."""
        for book, chapters in self._index.items():
            for chapter, verses in chapters.items():
                for verse, text in verses.items():
                    yield CorpusRecord(Address(book, chapter, verse), text)
