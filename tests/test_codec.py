"""Tests for hierarchical path encoding of addresses."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from fiatlux.canon.books import Book
from fiatlux.engine import codec
from fiatlux.reference.location import Address, PartialAddress, VerseRange


@dataclass
class Result:
    address: Address


class TestEncode:
    def test_full_address(self):
        assert codec.encode(Address(Book.JOHN, 3, 16)) == "/43/3/16"

    def test_partial_prefixes(self):
        assert codec.encode(PartialAddress(Book.JOHN)) == "/43"
        assert codec.encode(PartialAddress(Book.JOHN, 3)) == "/43/3"
        assert codec.encode(PartialAddress(Book.JOHN, 3, VerseRange(16))) == "/43/3/16"

    def test_verse_range_stops_at_chapter(self):
        scope = PartialAddress(Book.PSALMS, 127, VerseRange(4, 5))
        assert codec.encode(scope) == "/19/127"

    def test_no_book(self):
        with pytest.raises(ValueError):
            codec.encode(PartialAddress())


class TestDecode:
    def test_round_trip(self):
        address = Address(Book.JOHN1, 4, 8)
        assert codec.decode(codec.encode(address)) == address

    def test_decode(self):
        assert codec.decode("/19/23/1") == Address(Book.PSALMS, 23, 1)

    def test_malformed(self):
        for path in ["43/3/16", "/43/3", "/43/3/16/1", "/43/x/1", "", "/43//16"]:
            with pytest.raises(ValueError):
                codec.decode(path)

    def test_unknown_book(self):
        with pytest.raises(ValueError):
            codec.decode("/0/1/1")

    def test_zero_chapter_or_verse(self):
        for path in ["/43/0/1", "/43/3/0", "/43/0/0"]:
            with pytest.raises(ValueError):
                codec.decode(path)


class TestFiltering:
    """Verse ranges are applied after the path-prefix query."""

    results = [
        Result(Address(Book.PSALMS, 127, 5)),
        Result(Address(Book.PSALMS, 127, 3)),
        Result(Address(Book.PSALMS, 127, 4)),
    ]

    def test_range_filter(self):
        scope = PartialAddress(Book.PSALMS, 127, VerseRange(4, 5))
        kept = codec.filter_results(scope, self.results)
        assert [r.address.verse for r in kept] == [5, 4]

    def test_no_scope_keeps_everything(self):
        assert codec.filter_results(None, self.results) == self.results
        chapter = PartialAddress(Book.PSALMS, 127)
        assert codec.filter_results(chapter, self.results) == self.results

    def test_sort_canonical(self):
        mixed = self.results + [
            Result(Address(Book.GENESIS, 1, 1)),
            Result(Address(Book.REVELATION, 1, 1)),
        ]
        ordered = codec.sort_canonical(mixed)
        assert [r.address for r in ordered] == [
            Address(Book.GENESIS, 1, 1),
            Address(Book.PSALMS, 127, 3),
            Address(Book.PSALMS, 127, 4),
            Address(Book.PSALMS, 127, 5),
            Address(Book.REVELATION, 1, 1),
        ]
