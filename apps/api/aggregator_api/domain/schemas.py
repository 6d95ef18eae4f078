from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class SourceOut(BaseModel):
    key: str
    name: str


class SourcesOut(BaseModel):
    items: list[SourceOut] = Field(default_factory=list)


class OptionsOut(BaseModel):
    tags: list[str] = Field(default_factory=list)
    privacyLevels: list[Any] = Field(default_factory=list)


class ConfigOptionsOut(BaseModel):
    sources: list[SourceOut] = Field(default_factory=list)
    options: dict[str, OptionsOut] = Field(default_factory=dict)


class AggregateIn(BaseModel):
    sourceDirKey: str
    # null means "all tags"; the key itself is mandatory.
    requiredTags: Optional[list[str]]
    allowedPrivacy: list[str] = Field(default_factory=list)
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    extraTags: list[str] = Field(default_factory=list)


class SkippedFileOut(BaseModel):
    file: str
    reason: str


class AggregateOut(BaseModel):
    outputFile: str
    aggregationType: str
    filesScanned: int
    notesIncluded: int
    skipped: list[SkippedFileOut] = Field(default_factory=list)
