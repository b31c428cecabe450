"""Pydantic models for API."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class HealthModel(BaseModel):
    """Service health."""

    status: str
    version: str
    translations: Dict[str, bool] = Field(
        ..., description="Whether each translation's corpus is installed"
    )


class VerseModel(BaseModel):
    """A single verse."""

    reference: str = Field(..., description="Display reference, e.g. 'John 3:16'")
    book: str = Field(..., description="Canonical book name")
    book_ordinal: int = Field(..., description="Canonical book number (1-66)")
    chapter: int
    verse: int
    text: str
    url: Optional[str] = Field(None, description="Link to the verse online")


class PassageResponseModel(BaseModel):
    """Response for a passage lookup."""

    reference: str = Field(..., description="Original reference string")
    normalized: str = Field(..., description="Canonical form of the reference")
    translation: str
    verses: List[VerseModel]


class SearchHitModel(VerseModel):
    """A verse returned by a search."""

    score: Optional[float] = Field(None, description="bm25 relevance (lower is better)")
    distance: Optional[int] = Field(None, description="Approximate match distance")


class SearchResponseModel(BaseModel):
    """Response for full-text and approximate searches."""

    query: str
    scope: Optional[str] = Field(None, description="Reference the search was limited to")
    translation: str
    hits: List[SearchHitModel]
