from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Union

AggregationType = Literal["all-notes", "single-tag", "multi-tag"]


@dataclass(frozen=True)
class Note:
    path: Path
    filename_date: str
    tags: list[str]
    privacy: Any
    body: str


@dataclass(frozen=True)
class NoteOutcome:
    """Result of reading one source file: either a note or the reason it was skipped."""

    path: Path
    note: Note | None = None
    skip_reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.note is not None


@dataclass(frozen=True)
class MatchAll:
    pass


@dataclass(frozen=True)
class MatchAny:
    tags: tuple[str, ...]

    @classmethod
    def of(cls, tags) -> MatchAny:
        return cls(tags=tuple(dict.fromkeys(tags)))


RequiredTags = Union[MatchAll, MatchAny]


@dataclass(frozen=True)
class DateRange:
    lower: str | None = None
    upper: str | None = None

    @property
    def bounded(self) -> bool:
        return bool(self.lower or self.upper)

    def contains(self, value: str) -> bool:
        if self.lower and value < self.lower:
            return False
        if self.upper and value > self.upper:
            return False
        return True

    def describe(self) -> str:
        return f"[{self.lower or 'any'} - {self.upper or 'any'}]"


@dataclass(frozen=True)
class FilterSpec:
    notes_dir: Path
    aggregates_dir: Path
    required_tags: RequiredTags = field(default_factory=MatchAll)
    allowed_privacy: tuple[str, ...] = ()
    date_range: DateRange = field(default_factory=DateRange)
    extra_tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class AggregationResult:
    aggregation_type: AggregationType
    output_path: Path
    frontmatter: dict
    body: str
    files_scanned: int
    notes_included: int
    skipped: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class AvailableOptions:
    tags: list[str]
    privacy_levels: list[Any]
