from __future__ import annotations

from pathlib import Path

import pytest


def _write_note(notes_dir: Path, name: str, body: str, **frontmatter) -> Path:
    notes_dir.mkdir(parents=True, exist_ok=True)
    lines = []
    for key, value in frontmatter.items():
        if isinstance(value, list):
            lines.append(f"{key}: [{', '.join(value)}]")
        else:
            lines.append(f"{key}: {value}")
    text = body if not lines else "---\n" + "\n".join(lines) + "\n---\n" + body
    path = notes_dir / name
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def journal(tmp_path: Path) -> Path:
    """Two dated notes: a public trip note and an untagged-privacy work note."""
    notes_dir = tmp_path / "daily"
    _write_note(notes_dir, "2024-01-01.md", "Went hiking\n---\nsecret stuff", tags=["trip"], privacy="public")
    _write_note(notes_dir, "2024-01-02.md", "Did work", tags=["work"])
    return notes_dir


@pytest.fixture
def write_note():
    return _write_note
