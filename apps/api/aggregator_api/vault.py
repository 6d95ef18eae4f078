from __future__ import annotations

from pathlib import Path

from .domain.entities import Note, NoteOutcome
from .parsing import extract_frontmatter_tags, extract_privacy, parse_frontmatter


def filename_date(path: Path) -> str:
    return path.stem


def list_note_paths(notes_dir: Path) -> list[Path]:
    """Non-hidden Markdown files directly inside `notes_dir`, in ascending filename order."""
    if not notes_dir.is_dir():
        return []
    return sorted(
        (p for p in notes_dir.glob("*.md") if p.is_file() and not p.name.startswith(".")),
        key=lambda p: p.name,
    )


def read_text(path: Path) -> tuple[str | None, str | None]:
    try:
        return path.read_text(encoding="utf-8-sig"), None
    except (OSError, UnicodeDecodeError) as e:
        return None, f"read_error:{type(e).__name__}"


def read_note(path: Path, *, strings_only: bool = False) -> NoteOutcome:
    content, error = read_text(path)
    if content is None:
        return NoteOutcome(path=path, skip_reason=error)

    fm = parse_frontmatter(content)
    if fm.error:
        return NoteOutcome(path=path, skip_reason=fm.error)

    return NoteOutcome(
        path=path,
        note=Note(
            path=path,
            filename_date=filename_date(path),
            tags=extract_frontmatter_tags(fm.frontmatter, strings_only=strings_only),
            privacy=extract_privacy(fm.frontmatter),
            body=fm.body,
        ),
    )


class NoteDirectory:
    def __init__(self, notes_dir: Path) -> None:
        self.notes_dir = notes_dir

    @property
    def name(self) -> str:
        return self.notes_dir.name

    def exists(self) -> bool:
        return self.notes_dir.is_dir()

    def list_paths(self) -> list[Path]:
        return list_note_paths(self.notes_dir)

    def read_notes(self, paths: list[Path] | None = None, *, strings_only: bool = False) -> list[NoteOutcome]:
        if paths is None:
            paths = self.list_paths()
        return [read_note(p, strings_only=strings_only) for p in paths]
