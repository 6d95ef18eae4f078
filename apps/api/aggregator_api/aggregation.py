from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from .domain.entities import (
    AggregationResult,
    AggregationType,
    FilterSpec,
    MatchAll,
    MatchAny,
    Note,
    RequiredTags,
)
from .domain.exceptions import (
    EmptySource,
    InvalidFilter,
    NoFilesInRange,
    NoMatchingNotes,
    OutputCollision,
    WriteFailure,
)
from .parsing import extract_relevant_content, render_markdown_with_frontmatter
from .util import atomic_create_text, iso_date, safe_filename_token
from .vault import NoteDirectory

logger = logging.getLogger("aggregator.engine")

NOTE_SEPARATOR = "\n\n---\n\n"


def validate_required_tags(required_tags: RequiredTags) -> None:
    if isinstance(required_tags, MatchAll):
        return
    if isinstance(required_tags, MatchAny) and required_tags.tags:
        return
    raise InvalidFilter(
        "Invalid required tags: expected match-all or a non-empty set of tags."
    )


def classify(required_tags: RequiredTags) -> tuple[AggregationType, str]:
    """Return the aggregation type and the primary tag token used for naming."""
    if isinstance(required_tags, MatchAll):
        return "all-notes", "all"
    if len(required_tags.tags) == 1:
        return "single-tag", required_tags.tags[0]
    return "multi-tag", "multi-tag"


def output_path_for(aggregates_dir: Path, token: str, today: str) -> Path:
    return aggregates_dir / f"{safe_filename_token(token)}-{today}.md"


def matches_tags(note: Note, required_tags: RequiredTags) -> bool:
    if isinstance(required_tags, MatchAll):
        return True
    return bool(note.tags) and any(t in required_tags.tags for t in note.tags)


def matches_privacy(note: Note, allowed_privacy: tuple[str, ...]) -> bool:
    if not allowed_privacy:
        return True
    return note.privacy is not None and note.privacy in allowed_privacy


def describe_filter(spec: FilterSpec) -> str:
    if isinstance(spec.required_tags, MatchAll):
        tags = "all tags"
    else:
        tags = f"tag(s) [{', '.join(spec.required_tags.tags)}]"
    privacy = ", ".join(spec.allowed_privacy) or "any"
    return f"{tags} and privacy levels [{privacy}]"


def build_frontmatter(spec: FilterSpec, aggregation_type: AggregationType, token: str, today: str) -> dict:
    tags = [t for t in dict.fromkeys(["aggregated", safe_filename_token(token), *spec.extra_tags]) if t]
    source_tags = None if isinstance(spec.required_tags, MatchAll) else list(spec.required_tags.tags)
    return {
        "tags": tags,
        "date": today,
        "aggregation_type": aggregation_type,
        "source_tags": source_tags,
        "source_directory": spec.notes_dir.name,
        "filter_privacy": list(spec.allowed_privacy),
        "filter_start_date": spec.date_range.lower or None,
        "filter_end_date": spec.date_range.upper or None,
    }


def aggregate(spec: FilterSpec, today: date | None = None) -> AggregationResult:
    """Combine the notes selected by `spec` into a single new Markdown file.

    Raises an AggregationError subclass, without writing anything, when the
    filter is invalid, the output file already exists, or nothing qualifies.
    Notes that cannot be read or parsed are skipped and reported in the result.
    """
    validate_required_tags(spec.required_tags)

    aggregation_type, token = classify(spec.required_tags)
    today_str = iso_date(today)
    output_path = output_path_for(spec.aggregates_dir, token, today_str)
    if output_path.exists():
        raise OutputCollision(f"File already exists: {output_path.name}. Aborting aggregation.")

    directory = NoteDirectory(spec.notes_dir)
    paths = directory.list_paths()
    logger.info("aggregate_files_found", extra={"path": str(spec.notes_dir), "count": len(paths)})
    if not paths:
        raise EmptySource(f"No files found in {directory.name}.")

    if spec.date_range.bounded:
        paths = [p for p in paths if spec.date_range.contains(p.stem)]
        logger.info(
            "aggregate_date_filtered",
            extra={"range": spec.date_range.describe(), "count": len(paths)},
        )
        if not paths:
            raise NoFilesInRange(
                f"No files found in {directory.name} within the date range {spec.date_range.describe()}."
            )

    contents: list[str] = []
    skipped: list[tuple[str, str]] = []
    files_scanned = 0
    for outcome in directory.read_notes(paths):
        files_scanned += 1
        note = outcome.note
        if note is None:
            logger.warning("aggregate_file_skipped", extra={"file": outcome.path.name, "reason": outcome.skip_reason})
            skipped.append((outcome.path.name, outcome.skip_reason or "unknown"))
            continue
        if not (matches_tags(note, spec.required_tags) and matches_privacy(note, spec.allowed_privacy)):
            continue
        content = extract_relevant_content(note.body)
        if not content:
            logger.warning("aggregate_note_empty", extra={"file": note.path.name})
            continue
        contents.append(content)

    if not contents:
        raise NoMatchingNotes(f"No notes found matching {describe_filter(spec)} within the selected files.")

    frontmatter = build_frontmatter(spec, aggregation_type, token, today_str)
    body = NOTE_SEPARATOR.join(contents)
    text = render_markdown_with_frontmatter(frontmatter, body) + "\n"
    try:
        spec.aggregates_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteFailure(f"Could not create {spec.aggregates_dir.name}: {e.strerror or e}") from e
    try:
        atomic_create_text(output_path, text)
    except FileExistsError as e:
        raise OutputCollision(f"File already exists: {output_path.name}. Aborting aggregation.") from e
    except OSError as e:
        raise WriteFailure(f"Could not write {output_path.name}: {e.strerror or e}") from e

    logger.info(
        "aggregate_written",
        extra={"path": str(output_path), "included": len(contents), "scanned": files_scanned},
    )
    return AggregationResult(
        aggregation_type=aggregation_type,
        output_path=output_path,
        frontmatter=frontmatter,
        body=body,
        files_scanned=files_scanned,
        notes_included=len(contents),
        skipped=tuple(skipped),
    )
