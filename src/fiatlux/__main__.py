"""CLI entry point for fiatlux."""

from __future__ import annotations

import logging
import os
import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fiatlux import __version__
from fiatlux.config import DATA_ROOT_ENV, Settings
from fiatlux.corpus.translations import LoadedCorpus, Translation, load_corpus
from fiatlux.engine.matcher import ApproximateMatcher
from fiatlux.engine.search import SearchIndex, open_search_index
from fiatlux.errors import FiatLuxError
from fiatlux.reference.location import Address, parse_reference
from fiatlux.reference.urls import ReferenceProvider
from fiatlux.render import paged, print_book, print_chapter, print_hits, print_verse

console = Console()
logger = logging.getLogger(__name__)


def translation_options(func):
    """Add the --kjv/--asv translation switches to a command."""
    func = click.option(
        "--asv", is_flag=True, help="American Standard Version"
    )(func)
    func = click.option("--kjv", is_flag=True, help="King James Version")(func)
    return func


def pick_translation(settings: Settings, kjv: bool, asv: bool) -> Translation:
    if kjv and asv:
        raise click.UsageError("--kjv and --asv are mutually exclusive")
    if kjv:
        return Translation.KJV
    if asv:
        return Translation.ASV
    return Translation(settings.default_translation)


def fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    sys.exit(1)


def load(settings: Settings, translation: Translation) -> LoadedCorpus:
    try:
        return load_corpus(translation, settings.data_root)
    except FiatLuxError as e:
        fail(e)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--data-root",
    type=click.Path(file_okay=False),
    help=f"Directory holding corpus files (default: ${DATA_ROOT_ENV} or ~/.fiatlux/data)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, data_root: str | None, verbose: bool):
    """fiatlux - offline terminal Bible.

    Look up passages by reference, or search the text.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = Settings.load(data_root)
    logger.debug(f"Data root: {ctx.obj.data_root}")


@cli.command()
@click.argument("reference", nargs=-1, required=True)
@translation_options
@click.option("--url", is_flag=True, help="Show a link to the passage online")
@click.option("--pager", is_flag=True, help="Page long output")
@click.pass_obj
def read(
    settings: Settings,
    reference: tuple[str, ...],
    kjv: bool,
    asv: bool,
    url: bool,
    pager: bool,
):
    """Print a book, chapter, verse or verse range.

    Examples:

        fiatlux read psalms.23

        fiatlux read 1 Kings 3:16

        fiatlux read john.3:16-18 --asv
    """
    translation = pick_translation(settings, kjv, asv)
    provider = ReferenceProvider(settings.reference_provider) if url else None

    try:
        ref = parse_reference(" ".join(reference))
    except FiatLuxError as e:
        fail(e)

    corpus = load(settings, translation)
    book = ref.book
    location = ref.location

    try:
        result = corpus.index.lookup(book, location)
    except FiatLuxError as e:
        fail(e)

    with paged(console, pager):
        if location is None:
            print_book(console, book, result, translation, provider)
        elif isinstance(result, str):
            print_verse(
                console,
                Address(book, location.chapter, location.verse.start),
                result,
                translation,
                provider,
            )
        else:
            print_chapter(
                console, book, location.chapter, result, translation, provider
            )


@cli.command()
@click.argument("query")
@click.option(
    "--in", "-i", "scope", default=None, help="Limit to a reference, e.g. 'John 3'"
)
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of hits",
)
@click.option("--raw", is_flag=True, help="Treat QUERY as an FTS5 expression")
@translation_options
@click.option("--url", is_flag=True, help="Show links to each verse online")
@click.pass_obj
def search(
    settings: Settings,
    query: str,
    scope: str | None,
    limit: int | None,
    raw: bool,
    kjv: bool,
    asv: bool,
    url: bool,
):
    """Full-text search, ranked by relevance.

    Example: fiatlux search "shepherd" --in psalms
    """
    translation = pick_translation(settings, kjv, asv)
    provider = ReferenceProvider(settings.reference_provider) if url else None

    try:
        parsed_scope = parse_reference(scope) if scope else None
    except FiatLuxError as e:
        fail(e)

    corpus = load(settings, translation)
    with open_search_index(settings, corpus) as search_index:
        try:
            hits = search_index.search(
                query,
                translation,
                scope=parsed_scope,
                limit=settings.default_search_limit if limit is None else limit,
                raw=raw,
            )
        except FiatLuxError as e:
            fail(e)

    if not hits:
        console.print(f"[yellow]No matches for {escape(query)}[/yellow]")
        return
    print_hits(console, hits, translation, provider)


@cli.command()
@click.argument("query")
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of hits",
)
@click.option(
    "--max-distance",
    "-d",
    type=click.IntRange(min=0),
    default=None,
    help="Drop worse matches",
)
@translation_options
@click.option("--url", is_flag=True, help="Show links to each verse online")
@click.pass_obj
def fuzzy(
    settings: Settings,
    query: str,
    limit: int | None,
    max_distance: int | None,
    kjv: bool,
    asv: bool,
    url: bool,
):
    """Approximate search by word-aligned letter substitutions.

    Example: fiatlux fuzzy "lord is my shepard"
    """
    translation = pick_translation(settings, kjv, asv)
    provider = ReferenceProvider(settings.reference_provider) if url else None
    corpus = load(settings, translation)

    matcher = ApproximateMatcher()
    matches = matcher.search(
        query,
        corpus.index.records(),
        settings.default_fuzzy_limit if limit is None else limit,
        max_distance=max_distance,
    )

    if not matches:
        console.print(f"[yellow]No matches for {escape(query)}[/yellow]")
        return
    print_hits(console, matches, translation, provider)


@cli.group()
def index():
    """Manage the persisted search index."""
    pass


@index.command("build")
@translation_options
@click.option("--force", is_flag=True, help="Rebuild even if up to date")
@click.pass_obj
def index_build(settings: Settings, kjv: bool, asv: bool, force: bool):
    """Build the search index for a translation."""
    translation = pick_translation(settings, kjv, asv)
    corpus = load(settings, translation)

    with SearchIndex.open(settings) as search_index:
        if not force and search_index.is_current(translation, corpus.sha256):
            console.print(f"[green]✓ {translation.full_name} index is up to date[/green]")
            return
        count = search_index.build(corpus.index, translation, corpus.sha256)

    console.print(
        f"[green]✓ Indexed {count} verses of the {translation.full_name} "
        f"at {settings.db_path}[/green]"
    )


@index.command("status")
@click.pass_obj
def index_status(settings: Settings):
    """Show which translations are indexed."""
    table = Table(title="Search Index")
    table.add_column("Translation", style="cyan")
    table.add_column("Verses", justify="right")
    table.add_column("Corpus SHA256")
    table.add_column("Built")

    if not settings.db_path.exists():
        console.print(f"[yellow]No search index at {settings.db_path}[/yellow]")
        return

    with SearchIndex.open(settings) as search_index:
        for translation in Translation:
            status = search_index.status(translation)
            if status is None:
                table.add_row(translation.value, "-", "[dim]not built[/dim]", "-")
            else:
                table.add_row(
                    translation.value,
                    str(status.verse_count),
                    status.corpus_sha256[:16] + "...",
                    status.built_at,
                )

    console.print(table)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind host")
@click.option("--port", default=8000, help="Bind port")
@click.pass_obj
def serve(settings: Settings, host: str, port: int):
    """Start the API server."""
    import uvicorn

    os.environ[DATA_ROOT_ENV] = str(settings.data_root)
    console.print(f"[bold blue]Starting fiatlux API at http://{host}:{port}[/bold blue]")
    uvicorn.run("fiatlux.api.main:app", host=host, port=port)


def main():
    cli()


if __name__ == "__main__":
    main()
