from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger("aggregator.config")

DEFAULT_SOURCES = "daily=Daily Journal|daily"


@dataclass(frozen=True)
class NoteSource:
    key: str
    name: str
    path: Path


@dataclass(frozen=True)
class Settings:
    vault_dir: Path
    sources: tuple[NoteSource, ...]
    aggregates_dir: Path
    api_debug_log: bool
    log_level: str

    def source(self, key: str) -> NoteSource | None:
        for s in self.sources:
            if s.key == key:
                return s
        return None


def parse_sources(raw: str, vault_dir: Path) -> tuple[NoteSource, ...]:
    """Parse `key=Display Name|relative/path` entries separated by `;`."""
    sources: list[NoteSource] = []
    seen: set[str] = set()
    for entry in raw.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, rest = entry.partition("=")
        name, sep2, rel = rest.partition("|")
        key, name, rel = key.strip(), name.strip(), rel.strip()
        if not sep or not sep2 or not key or not rel:
            raise ValueError(f"invalid NOTE_SOURCES entry: {entry!r}")
        if key in seen:
            raise ValueError(f"duplicate NOTE_SOURCES key: {key!r}")
        seen.add(key)
        sources.append(NoteSource(key=key, name=name or key, path=(vault_dir / rel).resolve()))
    return tuple(sources)


def load_settings() -> Settings:
    vault_dir = Path(os.environ.get("VAULT_DIR", "./vault")).resolve()
    sources = parse_sources(os.environ.get("NOTE_SOURCES", DEFAULT_SOURCES), vault_dir)
    aggregates_dir = Path(os.environ.get("AGGREGATES_DIR", "./output")).resolve()
    api_debug_log = os.environ.get("API_DEBUG_LOG", "false").lower() == "true"
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    return Settings(
        vault_dir=vault_dir,
        sources=sources,
        aggregates_dir=aggregates_dir,
        api_debug_log=api_debug_log,
        log_level=log_level,
    )


def validate_sources(settings: Settings) -> bool:
    """Log the state of every configured source; return whether all of them exist."""
    ok = True
    for s in settings.sources:
        if s.path.is_dir():
            logger.info("source_ok", extra={"source": s.key, "path": str(s.path)})
        else:
            ok = False
            logger.warning("source_missing", extra={"source": s.key, "path": str(s.path)})
    logger.info("aggregates_dir", extra={"path": str(settings.aggregates_dir)})
    return ok
