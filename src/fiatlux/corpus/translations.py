"""Translations and corpus loading.

Each translation is a corpus file named {code}.dat under the data root.
Loading verifies nothing beyond the record format, but records the SHA256
of the file so a persisted search index can tell when it is stale.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from fiatlux.corpus.index import CorpusIndex
from fiatlux.errors import CorpusFormatError, CorpusMissingError

logger = logging.getLogger(__name__)


class Translation(str, Enum):
    """Supported translations, valued by short code."""

    KJV = "kjv"
    ASV = "asv"

    @property
    def full_name(self) -> str:
        return TITLES[self]

    def corpus_path(self, data_root: Path) -> Path:
        return Path(data_root) / f"{self.value}.dat"

    def __str__(self) -> str:
        return self.value


TITLES = {
    Translation.KJV: "King James Version",
    Translation.ASV: "American Standard Version",
}


@dataclass
class LoadedCorpus:
    """A translation's corpus, indexed and fingerprinted."""

    translation: Translation
    path: Path
    sha256: str
    index: CorpusIndex


def decode_corpus(data: bytes) -> str:
    """Decode corpus bytes as UTF-8.

    Raises:
        CorpusFormatError: Naming the line and byte offset of the first
            invalid sequence
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        line_start = data.rfind(b"\n", 0, e.start) + 1
        line_end = data.find(b"\n", e.start)
        if line_end == -1:
            line_end = len(data)
        line = data[line_start:line_end].decode("utf-8", errors="replace")
        raise CorpusFormatError(
            data.count(b"\n", 0, e.start) + 1,
            line,
            f"invalid UTF-8 at byte offset {e.start}",
        ) from e


def load_corpus(translation: Translation, data_root: Path) -> LoadedCorpus:
    """Read and index a translation's corpus.

    Raises:
        CorpusMissingError: If the corpus file does not exist
        CorpusFormatError: If any record is malformed
    """
    path = translation.corpus_path(data_root)
    if not path.is_file():
        raise CorpusMissingError(translation.full_name, str(path))

    data = path.read_bytes()
    sha256 = hashlib.sha256(data).hexdigest()
    index = CorpusIndex.build(decode_corpus(data))
    logger.info(f"Loaded {translation.value} corpus: {len(index)} verses from {path}")

    return LoadedCorpus(translation=translation, path=path, sha256=sha256, index=index)
