"""API route definitions."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from fiatlux import __version__
from fiatlux.api.models import (
    HealthModel,
    PassageResponseModel,
    SearchHitModel,
    SearchResponseModel,
    VerseModel,
)
from fiatlux.config import Settings
from fiatlux.corpus.translations import LoadedCorpus, Translation, load_corpus
from fiatlux.engine.matcher import ApproximateMatcher
from fiatlux.engine.search import open_search_index
from fiatlux.errors import (
    CorpusFormatError,
    CorpusMissingError,
    FiatLuxError,
    NotFoundError,
)
from fiatlux.reference.location import Address, parse_reference
from fiatlux.reference.urls import ReferenceProvider

logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings() -> Settings:
    return Settings.load()


@lru_cache(maxsize=8)
def _cached_corpus(translation: Translation, data_root: str) -> LoadedCorpus:
    return load_corpus(translation, Path(data_root))


def corpus_for(settings: Settings, translation: Translation) -> LoadedCorpus:
    """Load a corpus once per process, mapping failures to HTTP errors."""
    try:
        return _cached_corpus(translation, str(settings.data_root))
    except FiatLuxError as e:
        raise http_error(e)


def http_error(error: FiatLuxError) -> HTTPException:
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, CorpusMissingError):
        return HTTPException(status_code=503, detail=str(error))
    if isinstance(error, CorpusFormatError):
        return HTTPException(status_code=500, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


def verse_model(
    address: Address,
    text: str,
    translation: Translation,
    provider: ReferenceProvider,
) -> dict:
    return dict(
        reference=str(address),
        book=str(address.book),
        book_ordinal=int(address.book),
        chapter=address.chapter,
        verse=address.verse,
        text=text,
        url=provider.url(translation, address.book, address.chapter, address.verse),
    )


TranslationParam = Annotated[
    Translation, Query(description="Translation code (kjv or asv)")
]


@router.get("/health", response_model=HealthModel)
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint."""
    translations = {
        t.value: t.corpus_path(settings.data_root).is_file() for t in Translation
    }
    return HealthModel(
        status="ok" if any(translations.values()) else "degraded",
        version=__version__,
        translations=translations,
    )


@router.get("/verses", response_model=PassageResponseModel)
async def get_verses(
    ref: Annotated[str, Query(description="Reference, e.g. 'John 3:16' or 'psalms.23'")],
    translation: TranslationParam = Translation.KJV,
    settings: Settings = Depends(get_settings),
):
    """Look up a book, chapter, verse or verse range."""
    try:
        parsed = parse_reference(ref)
    except FiatLuxError as e:
        raise http_error(e)

    corpus = corpus_for(settings, translation)
    provider = ReferenceProvider(settings.reference_provider)
    book = parsed.book
    location = parsed.location

    try:
        result = corpus.index.lookup(book, location)
    except FiatLuxError as e:
        raise http_error(e)

    if isinstance(result, str):
        verses = [
            verse_model(
                Address(book, location.chapter, location.verse.start),
                result,
                translation,
                provider,
            )
        ]
    elif location is None:
        verses = [
            verse_model(Address(book, chapter, verse), text, translation, provider)
            for chapter, chapter_verses in result.items()
            for verse, text in chapter_verses.items()
        ]
    else:
        verses = [
            verse_model(
                Address(book, location.chapter, verse), text, translation, provider
            )
            for verse, text in result.items()
        ]

    return PassageResponseModel(
        reference=ref,
        normalized=str(parsed),
        translation=translation.value,
        verses=[VerseModel(**v) for v in verses],
    )


@router.get("/search", response_model=SearchResponseModel)
async def search_verses(
    q: Annotated[str, Query(description="Words to search for")],
    scope: Annotated[
        Optional[str], Query(description="Limit to a reference, e.g. 'John 3'")
    ] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 10,
    translation: TranslationParam = Translation.KJV,
    settings: Settings = Depends(get_settings),
):
    """Full-text search ranked by relevance, returned in canonical order."""
    try:
        parsed_scope = parse_reference(scope) if scope else None
    except FiatLuxError as e:
        raise http_error(e)

    corpus = corpus_for(settings, translation)
    provider = ReferenceProvider(settings.reference_provider)

    with open_search_index(settings, corpus) as search_index:
        try:
            hits = search_index.search(q, translation, scope=parsed_scope, limit=limit)
        except FiatLuxError as e:
            raise http_error(e)

    return SearchResponseModel(
        query=q,
        scope=str(parsed_scope) if parsed_scope else None,
        translation=translation.value,
        hits=[
            SearchHitModel(
                **verse_model(hit.address, hit.text, translation, provider),
                score=hit.score,
            )
            for hit in hits
        ],
    )


@router.get("/fuzzy", response_model=SearchResponseModel)
async def fuzzy_search(
    q: Annotated[str, Query(description="Text to match approximately")],
    limit: Annotated[int, Query(ge=1, le=500)] = 10,
    max_distance: Annotated[Optional[int], Query(ge=0)] = None,
    translation: TranslationParam = Translation.KJV,
    settings: Settings = Depends(get_settings),
):
    """Approximate search by word-aligned letter substitutions."""
    corpus = corpus_for(settings, translation)
    provider = ReferenceProvider(settings.reference_provider)

    matches = ApproximateMatcher().search(
        q, corpus.index.records(), limit, max_distance=max_distance
    )
    logger.debug(f"Fuzzy search {q!r}: {len(matches)} matches")

    return SearchResponseModel(
        query=q,
        translation=translation.value,
        hits=[
            SearchHitModel(
                **verse_model(m.address, m.text, translation, provider),
                distance=m.distance,
            )
            for m in matches
        ],
    )
