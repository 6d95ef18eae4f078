from __future__ import annotations

import os
import re
import uuid
from datetime import date
from pathlib import Path


def iso_date(d: date | None = None) -> str:
    return (d or date.today()).isoformat()


def atomic_create_text(path: Path, content: str) -> None:
    """Publish `content` at `path` in one step, refusing to replace an existing file.

    The parent directory must already exist. The text is written to a
    temporary sibling and hard-linked into place;
    `os.link` raises FileExistsError when `path` is already taken.
    """
    tmp_path = path.with_name(f".{path.name}.tmp.{uuid.uuid4().hex}")
    try:
        with tmp_path.open("w", encoding="utf-8") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.link(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)


_SAFE_TOKEN_RE = re.compile(r"[^A-Za-z0-9_-]")


def safe_filename_token(token: str) -> str:
    return _SAFE_TOKEN_RE.sub("-", token).lower()
