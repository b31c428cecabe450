"""Console rendering of passages and search results."""

from __future__ import annotations

from contextlib import nullcontext
from typing import ContextManager, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from fiatlux.canon.books import Book
from fiatlux.corpus.index import BookIndex, ChapterIndex
from fiatlux.corpus.translations import Translation
from fiatlux.engine.matcher import Match
from fiatlux.engine.search import SearchHit
from fiatlux.reference.location import Address
from fiatlux.reference.urls import ReferenceProvider


def paged(console: Console, enabled: bool) -> ContextManager:
    """Route console output through the system pager when enabled."""
    if enabled:
        return console.pager(styles=True)
    return nullcontext()


def chapter_table(
    book: Book,
    chapter: int,
    verses: ChapterIndex,
    link: str | None = None,
) -> Table:
    table = Table(
        title=f"[bold]{book} {chapter}[/bold]",
        caption=link,
        box=box.SIMPLE,
        show_header=False,
        expand=True,
    )
    table.add_column("Verse", justify="right", style="cyan", no_wrap=True)
    table.add_column("Text", ratio=1)
    for verse, text in verses.items():
        table.add_row(str(verse), text)
    return table


def print_chapter(
    console: Console,
    book: Book,
    chapter: int,
    verses: ChapterIndex,
    translation: Translation,
    provider: ReferenceProvider | None = None,
) -> None:
    link = provider.url(translation, book, chapter) if provider else None
    console.print(chapter_table(book, chapter, verses, link))


def print_book(
    console: Console,
    book: Book,
    chapters: BookIndex,
    translation: Translation,
    provider: ReferenceProvider | None = None,
) -> None:
    for chapter, verses in chapters.items():
        print_chapter(console, book, chapter, verses, translation, provider)


def print_verse(
    console: Console,
    address: Address,
    text: str,
    translation: Translation,
    provider: ReferenceProvider | None = None,
) -> None:
    console.print(f"[bold]{address.book}[/bold]")
    console.print(f"[cyan]{address.chapter}:{address.verse}[/cyan] {text}")
    if provider:
        url = provider.url(translation, address.book, address.chapter, address.verse)
        console.print(f"[dim]{url}[/dim]")


def print_hits(
    console: Console,
    hits: Sequence[SearchHit | Match],
    translation: Translation,
    provider: ReferenceProvider | None = None,
    title: str | None = None,
) -> None:
    """Print search hits or matcher results as a table."""
    show_distance = any(isinstance(hit, Match) for hit in hits)

    table = Table(title=title, box=box.SIMPLE_HEAD, expand=True)
    table.add_column("Reference", style="cyan", no_wrap=True)
    if show_distance:
        table.add_column("Dist", justify="right", style="yellow")
    table.add_column("Text", ratio=1)
    if provider:
        table.add_column("Link", style="dim", overflow="fold")

    for hit in hits:
        address = hit.address
        row = [str(address)]
        if show_distance:
            row.append(str(hit.distance) if isinstance(hit, Match) else "")
        row.append(hit.text)
        if provider:
            row.append(
                provider.url(translation, address.book, address.chapter, address.verse)
            )
        table.add_row(*row)

    console.print(table)
