from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import yaml


@dataclass(frozen=True)
class FrontmatterParse:
    frontmatter: dict
    body: str
    error: str | None


def parse_frontmatter(markdown: str) -> FrontmatterParse:
    if not markdown.startswith("---"):
        return FrontmatterParse(frontmatter={}, body=markdown, error=None)

    first_newline = markdown.find("\n")
    if first_newline == -1:
        return FrontmatterParse(frontmatter={}, body=markdown, error=None)

    first_line = markdown[:first_newline].rstrip("\r")
    if first_line != "---":
        return FrontmatterParse(frontmatter={}, body=markdown, error=None)

    # Find a subsequent line that is exactly `---`
    search_from = first_newline + 1
    while True:
        next_newline = markdown.find("\n", search_from)
        line_end = len(markdown) if next_newline == -1 else next_newline
        line = markdown[search_from:line_end].rstrip("\r")
        if line == "---":
            yaml_block = markdown[first_newline + 1 : search_from]
            body = "" if next_newline == -1 else markdown[next_newline + 1 :]
            try:
                parsed = yaml.safe_load(yaml_block) or {}
            except yaml.YAMLError:
                return FrontmatterParse(frontmatter={}, body=markdown, error="frontmatter_yaml_error")
            if not isinstance(parsed, dict):
                return FrontmatterParse(frontmatter={}, body=markdown, error="frontmatter_not_mapping")
            return FrontmatterParse(frontmatter=parsed, body=body, error=None)
        if next_newline == -1:
            return FrontmatterParse(frontmatter={}, body=markdown, error=None)
        search_from = next_newline + 1


def extract_frontmatter_tags(frontmatter: dict, *, strings_only: bool = False) -> list[str]:
    """Return the cleaned `tags` list of a note.

    Only a list-valued `tags` key is honoured. Entries are trimmed and empty
    ones dropped. With ``strings_only`` non-string entries are ignored;
    otherwise scalars such as ``2024`` are coerced to ``"2024"``.
    """
    raw = frontmatter.get("tags")
    if not isinstance(raw, list):
        return []
    values: list[str] = []
    for v in raw:
        if isinstance(v, str):
            values.append(v)
        elif not strings_only and v is not None and not isinstance(v, (list, dict)):
            values.append(str(v))
    return [t for t in (v.strip() for v in values) if t]


def extract_privacy(frontmatter: dict) -> Any:
    privacy = frontmatter.get("privacy")
    if not privacy:
        return None
    return privacy


_SEPARATOR_LINE_RE = re.compile(r"^[ \t]*---[ \t]*\r?$", re.MULTILINE)
_DATE_HEADING_RE = re.compile(r"\A##[ \t]+\d{4}-\d{2}-\d{2}[ \t]*(?:\r?\n|\Z)")


def extract_relevant_content(body: str) -> str:
    """Keep the part of a note body that belongs in an aggregate.

    Everything from the first bare ``---`` line on is dropped, then a leading
    ``## YYYY-MM-DD`` heading is removed.
    """
    match = _SEPARATOR_LINE_RE.search(body)
    head = body[: match.start()] if match else body
    head = head.strip()
    head = _DATE_HEADING_RE.sub("", head, count=1)
    return head.strip()


def render_markdown_with_frontmatter(frontmatter: dict, body: str) -> str:
    if not frontmatter:
        return body
    yaml_text = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True).strip("\n")
    return f"---\n{yaml_text}\n---\n\n{body.lstrip()}"
