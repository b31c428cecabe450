"""Approximate free-text matching over corpus records.

A cheap substitution-only scorer: the query is compared against fixed-width
windows of each verse, where windows may only start at the beginning of a
word. Distance is Hamming distance (differing positions at equal offsets).
There is no insertion/deletion alignment, so this is not Levenshtein.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from fiatlux.corpus.index import CorpusRecord
from fiatlux.reference.location import Address

logger = logging.getLogger(__name__)


class SplitWindows:
    """Produces fixed-width windows anchored at word starts."""

    def __init__(self) -> None:
        self.expr = re.compile(r"(^\w|\b\w)", re.ASCII)

    def windows(self, text: str, length: int) -> Iterator[str]:
        """Yield each window of length characters that starts a word.

        Windows that would run past the end of the text are dropped.
        """
        for match in self.expr.finditer(text):
            start = match.start()
            if start + length <= len(text):
                yield text[start : start + length]


def hamming(left: str, right: str) -> int:
    """Count differing positions of two equal-length strings."""
    if len(left) != len(right):
        raise ValueError("hamming distance needs strings of equal length")
    return sum(1 for a, b in zip(left, right) if a != b)


@dataclass(frozen=True)
class Match:
    """A scored candidate verse."""

    distance: int
    address: Address
    text: str


class ApproximateMatcher:
    """Ranks verses by best word-aligned window distance to a query."""

    def __init__(self, splitter: SplitWindows | None = None):
        self.splitter = splitter or SplitWindows()

    def score(self, query: str, text: str) -> int | None:
        """Best distance of query against text, or None if nothing qualifies.

        Both sides are compared uppercased. Only windows whose first
        character equals the query's first character are scored.
        """
        query = query.upper()
        if not query:
            return None

        best: int | None = None
        for window in self.splitter.windows(text.upper(), len(query)):
            if window[0] != query[0]:
                continue
            distance = hamming(query, window)
            if best is None or distance < best:
                best = distance
                if best == 0:
                    break
        return best

    def search(
        self,
        query: str,
        records: Iterable[CorpusRecord],
        limit: int,
        max_distance: int | None = None,
    ) -> list[Match]:
        """Rank records against query.

        Args:
            query: Free text to look for
            records: Candidate verses in corpus order
            limit: Maximum number of matches returned
            max_distance: Drop candidates scoring above this, if given

        Returns:
            Matches ascending by distance; ties keep corpus order

        Raises:
            ValueError: If limit is less than 1
        """
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        matches = []
        for record in records:
            distance = self.score(query, record.text)
            if distance is None:
                continue
            if max_distance is not None and distance > max_distance:
                continue
            matches.append(Match(distance, record.address, record.text))

        # list.sort is stable, so equal distances stay in corpus order
        matches.sort(key=lambda m: m.distance)
        logger.debug(f"Matcher scored {len(matches)} candidates for {query!r}")
        return matches[:limit]
