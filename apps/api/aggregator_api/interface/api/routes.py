import logging
import os
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from aggregator_api.aggregation import aggregate
from aggregator_api.config import NoteSource, Settings
from aggregator_api.dependencies import get_settings
from aggregator_api.domain.entities import DateRange, FilterSpec, MatchAll, MatchAny
from aggregator_api.domain.exceptions import AggregationError, OutputCollision, WriteFailure
from aggregator_api.domain.schemas import (
    AggregateIn,
    AggregateOut,
    ConfigOptionsOut,
    OptionsOut,
    SkippedFileOut,
    SourceOut,
    SourcesOut,
)
from aggregator_api.options import scan_options

router = APIRouter()
logger = logging.getLogger("aggregator.api")


def _options_out(source: NoteSource) -> OptionsOut:
    options = scan_options(source.path)
    return OptionsOut(tags=options.tags, privacyLevels=options.privacy_levels)


def _status_for(error: AggregationError) -> int:
    if error.not_found:
        return 404
    if isinstance(error, OutputCollision):
        return 409
    if isinstance(error, WriteFailure):
        return 500
    return 400


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/api/sources", response_model=SourcesOut)
def list_sources(settings: Settings = Depends(get_settings)):
    return SourcesOut(items=[SourceOut(key=s.key, name=s.name) for s in settings.sources])


@router.get("/api/config-options")
def config_options(source: Optional[str] = None, settings: Settings = Depends(get_settings)):
    if source:
        note_source = settings.source(source)
        if note_source is None:
            raise HTTPException(status_code=404, detail=f"Source key '{source}' not found.")
        if not note_source.path.is_dir():
            raise HTTPException(status_code=404, detail=f"Source directory for '{source}' not found.")
        return _options_out(note_source)

    out = ConfigOptionsOut(sources=[SourceOut(key=s.key, name=s.name) for s in settings.sources])
    if settings.sources:
        first = settings.sources[0]
        if first.path.is_dir():
            out.options[first.key] = _options_out(first)
        else:
            logger.warning("options_prefetch_skipped", extra={"source": first.key, "path": str(first.path)})
    return out


@router.post("/api/aggregate", response_model=AggregateOut)
def aggregate_notes(payload: AggregateIn, request: Request, settings: Settings = Depends(get_settings)):
    note_source = settings.source(payload.sourceDirKey)
    if note_source is None:
        raise HTTPException(status_code=400, detail="invalid_source")
    if payload.requiredTags is not None and not payload.requiredTags:
        raise HTTPException(status_code=400, detail="required_tags_empty")
    if not note_source.path.is_dir():
        logger.error("aggregate_source_missing", extra={"source": note_source.key, "path": str(note_source.path)})
        raise HTTPException(status_code=400, detail="source_not_found")

    spec = FilterSpec(
        notes_dir=note_source.path,
        aggregates_dir=settings.aggregates_dir,
        required_tags=MatchAll() if payload.requiredTags is None else MatchAny.of(payload.requiredTags),
        allowed_privacy=tuple(dict.fromkeys(payload.allowedPrivacy)),
        date_range=DateRange(lower=payload.startDate or None, upper=payload.endDate or None),
        extra_tags=tuple(payload.extraTags),
    )
    logger.info(
        "aggregate_request",
        extra={"rid": request.state.request_id, "source": note_source.key, "tags": payload.requiredTags},
    )
    try:
        result = aggregate(spec)
    except AggregationError as e:
        logger.warning("aggregate_failed", extra={"rid": request.state.request_id, "error": type(e).__name__})
        raise HTTPException(status_code=_status_for(e), detail=str(e)) from e

    output_file = os.path.relpath(result.output_path, settings.aggregates_dir.parent)
    return AggregateOut(
        outputFile=output_file,
        aggregationType=result.aggregation_type,
        filesScanned=result.files_scanned,
        notesIncluded=result.notes_included,
        skipped=[SkippedFileOut(file=f, reason=r) for f, r in result.skipped],
    )
