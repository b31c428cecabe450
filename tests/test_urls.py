"""Tests for online reference links."""

from fiatlux.canon.books import Book
from fiatlux.corpus.translations import Translation
from fiatlux.reference.urls import ReferenceProvider, book_slug


def test_book_slug():
    assert book_slug(Book.KINGS1) == "1kings"
    assert book_slug(Book.SONG_OF_SONGS) == "songofsongs"
    assert book_slug(Book.GENESIS) == "genesis"


def test_verse_url():
    url = ReferenceProvider.BIBLIA.url(Translation.KJV, Book.JOHN, 3, 16)
    assert url == "https://biblia.com/bible/kjv/john/3/16"


def test_chapter_url():
    url = ReferenceProvider.BIBLIA.url(Translation.ASV, Book.PSALMS, 23)
    assert url == "https://biblia.com/bible/asv/psalms/23"
