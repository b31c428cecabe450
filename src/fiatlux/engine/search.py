"""Full-text search over a persisted SQLite FTS5 index.

Each verse is stored as a document {translation, path, content} where path
is the hierarchical /book/chapter/verse facet from fiatlux.engine.codec.
A query is scoped by exact path prefix; verse ranges are applied afterwards
because the facet stops at single verses.

Results are the top matches by bm25 relevance, returned in canonical
(book, chapter, verse) order.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone

from fiatlux.config import Settings
from fiatlux.corpus.index import CorpusIndex
from fiatlux.corpus.translations import LoadedCorpus, Translation
from fiatlux.db.connection import get_connection, init_db
from fiatlux.engine import codec
from fiatlux.errors import SearchQueryError
from fiatlux.reference.location import Address, PartialAddress

logger = logging.getLogger(__name__)

TERM_PATTERN = re.compile(r"\w+", re.ASCII)


@dataclass(frozen=True)
class SearchHit:
    """A verse returned by the search engine."""

    address: Address
    text: str
    score: float


@dataclass
class IndexStatus:
    """Provenance row for one translation's documents."""

    translation: str
    corpus_sha256: str
    verse_count: int
    built_at: str


def match_expression(query: str) -> str:
    """Turn free text into an FTS5 expression matching any of its words.

    Words are quoted so punctuation in user input never reaches the FTS5
    query grammar.
    """
    terms = TERM_PATTERN.findall(query)
    return " OR ".join(f'"{term}"' for term in terms)


class SearchIndex:
    """Search documents for all translations in one database."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        init_db(conn)

    @classmethod
    def open(cls, settings: Settings) -> "SearchIndex":
        settings.db_path.parent.mkdir(parents=True, exist_ok=True)
        return cls(get_connection(settings.db_path))

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "SearchIndex":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def status(self, translation: Translation) -> IndexStatus | None:
        row = self.conn.execute(
            "SELECT translation, corpus_sha256, verse_count, built_at "
            "FROM index_meta WHERE translation = ?",
            (translation.value,),
        ).fetchone()
        if row is None:
            return None
        return IndexStatus(
            translation=row["translation"],
            corpus_sha256=row["corpus_sha256"],
            verse_count=row["verse_count"],
            built_at=row["built_at"],
        )

    def is_current(self, translation: Translation, corpus_sha256: str) -> bool:
        """Check whether stored documents came from this exact corpus."""
        status = self.status(translation)
        return status is not None and status.corpus_sha256 == corpus_sha256

    def build(
        self,
        index: CorpusIndex,
        translation: Translation,
        corpus_sha256: str,
    ) -> int:
        """Replace a translation's documents with the corpus contents.

        Returns:
            Number of documents written
        """
        rows = [
            (translation.value, codec.encode(record.address), record.text)
            for record in index.records()
        ]
        with self.conn:
            self.conn.execute(
                "DELETE FROM verses WHERE translation = ?", (translation.value,)
            )
            self.conn.executemany(
                "INSERT INTO verses (translation, path, content) VALUES (?, ?, ?)",
                rows,
            )
            self.conn.execute(
                "INSERT OR REPLACE INTO index_meta "
                "(translation, corpus_sha256, verse_count, built_at) "
                "VALUES (?, ?, ?, ?)",
                (
                    translation.value,
                    corpus_sha256,
                    len(rows),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )

        logger.info(f"Built search index for {translation.value}: {len(rows)} verses")
        return len(rows)

    def search(
        self,
        query: str,
        translation: Translation,
        scope: PartialAddress | None = None,
        limit: int = 10,
        raw: bool = False,
    ) -> list[SearchHit]:
        """Find verses matching query.

        Args:
            query: Free text, or an FTS5 expression when raw is True
            translation: Translation to search
            scope: Restrict to a book, chapter, verse or verse range
            limit: Maximum number of hits
            raw: Pass query to FTS5 unchanged

        Returns:
            Up to limit best hits, in canonical order

        Raises:
            SearchQueryError: If the engine rejects the query
            ValueError: If limit is less than 1
        """
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        expression = query if raw else match_expression(query)
        if not expression.strip():
            logger.warning("Empty search query; returning no results.")
            return []

        sql = (
            "SELECT path, content, bm25(verses) AS score FROM verses "
            "WHERE verses MATCH ? AND translation = ?"
        )
        params: list = [expression, translation.value]

        if scope is not None and scope.book is not None:
            prefix = codec.encode(scope)
            sql += " AND (path = ? OR path LIKE ? || '/%')"
            params += [prefix, prefix]

        sql += " ORDER BY score"

        # A verse range is filtered after the query, so the SQL limit only
        # applies when the path scope is exact.
        ranged = scope is not None and scope.verse is not None and scope.verse.is_range
        if not ranged:
            sql += " LIMIT ?"
            params.append(limit)

        try:
            rows = self.conn.execute(sql, params).fetchall()
        except sqlite3.OperationalError as e:
            raise SearchQueryError(query, str(e)) from e

        hits = [
            SearchHit(codec.decode(row["path"]), row["content"], row["score"])
            for row in rows
        ]
        hits = codec.filter_results(scope, hits)[:limit]
        logger.debug(f"Search {expression!r} in {scope or '*'}: {len(hits)} hits")
        return codec.sort_canonical(hits)


def open_search_index(settings: Settings, corpus: LoadedCorpus) -> SearchIndex:
    """Open the persisted index, rebuilding it if it does not match corpus."""
    search_index = SearchIndex.open(settings)
    if not search_index.is_current(corpus.translation, corpus.sha256):
        logger.info(f"Search index for {corpus.translation.value} is stale, rebuilding")
        search_index.build(corpus.index, corpus.translation, corpus.sha256)
    return search_index
