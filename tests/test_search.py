"""Tests for the persisted full-text search index."""

from __future__ import annotations

import pytest

from fiatlux.canon.books import Book
from fiatlux.config import Settings
from fiatlux.corpus.translations import Translation, load_corpus
from fiatlux.db.connection import get_connection
from fiatlux.engine.search import SearchIndex, match_expression, open_search_index
from fiatlux.errors import SearchQueryError
from fiatlux.reference.location import Address, PartialAddress, VerseRange


@pytest.fixture
def search_index(kjv_index, asv_index):
    index = SearchIndex(get_connection(":memory:"))
    index.build(kjv_index, Translation.KJV, "kjv-sha")
    index.build(asv_index, Translation.ASV, "asv-sha")
    yield index
    index.close()


class TestMatchExpression:
    def test_words_are_quoted_and_joined(self):
        assert match_expression("my shepherd") == '"my" OR "shepherd"'

    def test_punctuation_dropped(self):
        assert match_expression("LORD's") == '"LORD" OR "s"'

    def test_no_words(self):
        assert match_expression("  ;; ") == ""


class TestBuild:
    """Tests for SearchIndex.build() and provenance."""

    def test_status(self, search_index):
        status = search_index.status(Translation.KJV)
        assert status.verse_count == 15
        assert status.corpus_sha256 == "kjv-sha"

    def test_is_current(self, search_index):
        assert search_index.is_current(Translation.KJV, "kjv-sha")
        assert not search_index.is_current(Translation.KJV, "other")

    def test_rebuild_replaces_documents(self, search_index, kjv_index):
        search_index.build(kjv_index, Translation.KJV, "kjv-sha-2")
        count = search_index.conn.execute(
            "SELECT COUNT(*) FROM verses WHERE translation = ?", ("kjv",)
        ).fetchone()[0]
        assert count == 15
        assert search_index.is_current(Translation.KJV, "kjv-sha-2")

    def test_missing_translation_has_no_status(self, kjv_index):
        index = SearchIndex(get_connection(":memory:"))
        index.build(kjv_index, Translation.KJV, "kjv-sha")
        assert index.status(Translation.ASV) is None
        index.close()


class TestSearch:
    """Tests for SearchIndex.search()."""

    def test_single_word(self, search_index):
        hits = search_index.search("shepherd", Translation.KJV)
        assert [hit.address for hit in hits] == [Address(Book.PSALMS, 23, 1)]
        assert hits[0].text == "The LORD is my shepherd; I shall not want."

    def test_case_insensitive(self, search_index):
        hits = search_index.search("SHEPHERD", Translation.KJV)
        assert len(hits) == 1

    def test_results_in_canonical_order(self, search_index):
        hits = search_index.search("God", Translation.KJV)
        addresses = [hit.address for hit in hits]
        assert addresses == sorted(addresses)
        assert addresses[0] == Address(Book.GENESIS, 1, 1)
        assert Address(Book.JOHN1, 4, 8) in addresses

    def test_limit(self, search_index):
        hits = search_index.search("God", Translation.KJV, limit=2)
        assert len(hits) == 2

    def test_book_scope(self, search_index):
        hits = search_index.search(
            "God", Translation.KJV, scope=PartialAddress(Book.GENESIS)
        )
        assert hits
        assert all(hit.address.book is Book.GENESIS for hit in hits)

    def test_book_prefix_is_exact(self, search_index):
        # "/1" must not match "/19" or "/11"
        hits = search_index.search(
            "LORD", Translation.KJV, scope=PartialAddress(Book.GENESIS)
        )
        assert hits == []

    def test_chapter_scope(self, search_index):
        hits = search_index.search(
            "the", Translation.KJV, scope=PartialAddress(Book.PSALMS, 23), limit=50
        )
        assert [hit.address.verse for hit in hits] == [1, 2, 3, 4]

    def test_verse_scope(self, search_index):
        hits = search_index.search(
            "God",
            Translation.KJV,
            scope=PartialAddress(Book.JOHN, 3, VerseRange(17)),
        )
        assert [hit.address for hit in hits] == [Address(Book.JOHN, 3, 17)]

    def test_verse_range_scope(self, search_index):
        hits = search_index.search(
            "children",
            Translation.KJV,
            scope=PartialAddress(Book.PSALMS, 127, VerseRange(4, 5)),
        )
        assert [hit.address for hit in hits] == [Address(Book.PSALMS, 127, 4)]

    def test_no_matches(self, search_index):
        assert search_index.search("Melchizedek", Translation.KJV) == []

    def test_translations_are_isolated(self, search_index):
        assert search_index.search("Jehovah", Translation.KJV) == []
        hits = search_index.search("Jehovah", Translation.ASV)
        assert [hit.address for hit in hits] == [Address(Book.PSALMS, 23, 1)]

    def test_punctuation_is_harmless(self, search_index):
        hits = search_index.search("LORD's", Translation.KJV)
        assert Address(Book.PSALMS, 24, 1) in [hit.address for hit in hits]

    def test_empty_query(self, search_index):
        assert search_index.search("   ", Translation.KJV) == []

    def test_raw_expression(self, search_index):
        hits = search_index.search("loved AND world", Translation.KJV, raw=True)
        assert [hit.address for hit in hits] == [Address(Book.JOHN, 3, 16)]

    def test_limit_must_be_positive(self, search_index):
        for limit in (0, -1):
            with pytest.raises(ValueError):
                search_index.search("God", Translation.KJV, limit=limit)

    def test_raw_syntax_error(self, search_index):
        with pytest.raises(SearchQueryError):
            search_index.search('"unbalanced', Translation.KJV, raw=True)


class TestOpenSearchIndex:
    """The persisted index is rebuilt only when the corpus changes."""

    def test_builds_on_first_open(self, data_root):
        settings = Settings.load(data_root)
        corpus = load_corpus(Translation.KJV, data_root)
        with open_search_index(settings, corpus) as search_index:
            assert search_index.is_current(Translation.KJV, corpus.sha256)
        assert settings.db_path.is_file()

    def test_stale_index_is_rebuilt(self, data_root):
        settings = Settings.load(data_root)
        corpus = load_corpus(Translation.KJV, data_root)
        open_search_index(settings, corpus).close()

        with open(data_root / "kjv.dat", "a", encoding="utf-8") as f:
            f.write("66022021 The grace of our Lord Jesus Christ be with you all.\n")
        corpus = load_corpus(Translation.KJV, data_root)

        with open_search_index(settings, corpus) as search_index:
            assert search_index.status(Translation.KJV).verse_count == 16
            hits = search_index.search("grace", Translation.KJV)
        assert [hit.address.book for hit in hits] == [Book.REVELATION]
