"""Canonical book registry."""

from fiatlux.canon.books import Book, book_name, parse_book

__all__ = ["Book", "book_name", "parse_book"]
