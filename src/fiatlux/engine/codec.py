"""Hierarchical path encoding of addresses.

An address is stored in the search index as "/{book}/{chapter}/{verse}",
with the book as its ordinal. Queries are scoped by a prefix of that path:
"/43" is all of John, "/43/3" is John 3, "/43/3/16" is John 3:16.

The index stops at single-verse granularity. A verse range is encoded only
down to its chapter; the caller narrows the results afterwards with
filter_results().
"""

from __future__ import annotations

from typing import Callable, Iterable, Protocol, TypeVar, Union

from fiatlux.canon.books import Book
from fiatlux.reference.location import Address, PartialAddress


class Addressed(Protocol):
    address: Address


T = TypeVar("T", bound=Addressed)


def encode(address: Union[Address, PartialAddress]) -> str:
    """Encode an address, or the specified prefix of a partial one.

    Raises:
        ValueError: If a partial address names no book
    """
    if isinstance(address, Address):
        return f"/{int(address.book)}/{address.chapter}/{address.verse}"

    if address.book is None:
        raise ValueError("cannot encode an address without a book")

    path = f"/{int(address.book)}"
    if address.chapter is None:
        return path
    path += f"/{address.chapter}"
    if address.verse is None or address.verse.is_range:
        return path
    return path + f"/{address.verse.start}"


def decode(path: str) -> Address:
    """Decode a full "/book/chapter/verse" path.

    Raises:
        ValueError: If the path is not exactly three numeric segments, or
            names chapter or verse 0
    """
    segments = path.split("/")
    if len(segments) != 4 or segments[0] != "":
        raise ValueError(f"not a verse path: {path!r}")

    _, book, chapter, verse = segments
    if not all(s.isascii() and s.isdigit() for s in (book, chapter, verse)):
        raise ValueError(f"not a verse path: {path!r}")

    if int(chapter) == 0 or int(verse) == 0:
        raise ValueError(f"chapter and verse start at 1: {path!r}")

    return Address(Book.from_ordinal(int(book)), int(chapter), int(verse))


def scope_filter(scope: PartialAddress | None) -> Callable[[Address], bool]:
    """Build a predicate that applies the verse range the path cannot carry."""
    if scope is None or scope.verse is None:
        return lambda address: True

    verse_range = scope.verse
    return lambda address: verse_range.contains(address.verse)


def filter_results(scope: PartialAddress | None, results: Iterable[T]) -> list[T]:
    """Keep results whose verse lies in the scope's verse range."""
    accept = scope_filter(scope)
    return [r for r in results if accept(r.address)]


def sort_canonical(results: Iterable[T]) -> list[T]:
    """Order results by book, chapter, verse."""
    return sorted(results, key=lambda r: r.address)
