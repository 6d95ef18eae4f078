from __future__ import annotations

import logging
from collections.abc import Hashable
from pathlib import Path

from .domain.entities import AvailableOptions
from .vault import NoteDirectory

logger = logging.getLogger("aggregator.options")


def scan_options(notes_dir: Path) -> AvailableOptions:
    """Collect the distinct tags and privacy levels used in a note directory.

    A missing directory yields empty collections. Unreadable files and files
    with broken frontmatter are logged and left out.
    """
    directory = NoteDirectory(notes_dir)
    if not directory.exists():
        logger.warning("options_dir_missing", extra={"path": str(notes_dir)})
        return AvailableOptions(tags=[], privacy_levels=[])

    tags: set[str] = set()
    privacy_levels: set = set()
    for outcome in directory.read_notes(strings_only=True):
        if outcome.note is None:
            logger.warning("options_file_skipped", extra={"file": outcome.path.name, "reason": outcome.skip_reason})
            continue
        tags.update(outcome.note.tags)
        privacy = outcome.note.privacy
        if privacy is None:
            continue
        if not isinstance(privacy, Hashable):
            logger.warning("options_privacy_unhashable", extra={"file": outcome.path.name})
            continue
        privacy_levels.add(privacy)

    return AvailableOptions(tags=sorted(tags), privacy_levels=sorted(privacy_levels, key=str))
