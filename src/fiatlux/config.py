"""Configuration settings for fiatlux."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DATA_ROOT_ENV = "FIATLUX_DATA_ROOT"


def resolve_data_root(override: Path | str | None = None) -> Path:
    """Resolve the data root directory.

    Precedence: explicit override, FIATLUX_DATA_ROOT, ~/.fiatlux/data.
    """
    if override:
        return Path(override)

    env_root = os.environ.get(DATA_ROOT_ENV)
    if env_root:
        return Path(env_root)

    return Path.home() / ".fiatlux" / "data"


@dataclass
class Settings:
    """Application settings."""

    # Corpus files ({code}.dat) and the persisted search index live here
    data_root: Path = field(default_factory=resolve_data_root)

    default_translation: str = "kjv"
    default_search_limit: int = 10
    default_fuzzy_limit: int = 10

    # Reference links
    reference_provider: str = "biblia"

    @classmethod
    def load(cls, data_root: Path | str | None = None) -> "Settings":
        return cls(data_root=resolve_data_root(data_root))

    @property
    def db_path(self) -> Path:
        return self.data_root / "search.db"
