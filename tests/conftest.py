"""Shared fixtures for fiatlux tests."""

import shutil
from pathlib import Path

import pytest

from fiatlux.corpus.index import CorpusIndex

FIXTURES_DIR = Path(__file__).parent / "fixtures"
KJV_SAMPLE = FIXTURES_DIR / "kjv.dat"
ASV_SAMPLE = FIXTURES_DIR / "asv.dat"


@pytest.fixture
def kjv_text() -> str:
    return KJV_SAMPLE.read_text(encoding="utf-8")


@pytest.fixture
def kjv_index(kjv_text) -> CorpusIndex:
    return CorpusIndex.build(kjv_text)


@pytest.fixture
def asv_index() -> CorpusIndex:
    return CorpusIndex.build(ASV_SAMPLE.read_text(encoding="utf-8"))


@pytest.fixture
def data_root(tmp_path) -> Path:
    """Data root holding both sample corpora."""
    root = tmp_path / "data"
    root.mkdir()
    shutil.copy(KJV_SAMPLE, root / "kjv.dat")
    shutil.copy(ASV_SAMPLE, root / "asv.dat")
    return root
