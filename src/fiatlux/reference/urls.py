"""Links to online reference sites for a passage."""

from __future__ import annotations

from enum import Enum

from fiatlux.canon.books import Book
from fiatlux.corpus.translations import Translation

BIBLIA_BASE = "https://biblia.com/bible"


def book_slug(book: Book) -> str:
    """URL slug of a book: display name lowercased without spaces.

    >>> book_slug(Book.KINGS1)
    '1kings'
    """
    return book.display_name.lower().replace(" ", "")


class ReferenceProvider(str, Enum):
    """Online reference sites a passage can be linked to."""

    BIBLIA = "biblia"

    def url(
        self,
        translation: Translation,
        book: Book,
        chapter: int,
        verse: int | None = None,
    ) -> str:
        """Build a link to a chapter, or to one verse of it."""
        path = f"{BIBLIA_BASE}/{translation.value}/{book_slug(book)}/{chapter}"
        if verse is not None:
            path += f"/{verse}"
        return path

    def __str__(self) -> str:
        return self.value
