# formatting.py
from __future__ import annotations

from typing import Optional
import re

from config_loader import ContentConfig, DEFAULT_CONFIG


FORMATS = ("bold", "italic", "link", "quote", "code", "heading")

# (regex, replacement) applied in order; inline markers first, then block prefixes
_PREVIEW_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\*\*\*(.+?)\*\*\*"), r"\1"),
    (re.compile(r"\*\*(.+?)\*\*"), r"\1"),
    (re.compile(r"\*(.+?)\*"), r"\1"),
    (re.compile(r"_(.+?)_"), r"\1"),
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"^#+\s*", re.MULTILINE), ""),
    (re.compile(r"^>\s*", re.MULTILINE), ""),
    (re.compile(r"^[-*•]\s*", re.MULTILINE), ""),
    (re.compile(r"^\d+[.)]\s*", re.MULTILINE), ""),
]


def format_content_preview(
    content: str,
    max_length: Optional[int] = None,
    cfg: ContentConfig = DEFAULT_CONFIG,
) -> str:
    """
    Plain-text excerpt of a post body for thread lists and notifications.

    Markers are stripped, line breaks are kept. Longer results are cut to
    max_length characters and suffixed with '...'.
    """
    if max_length is None:
        max_length = cfg.preview_max_length

    stripped = content
    for regex, replacement in _PREVIEW_RULES:
        stripped = regex.sub(replacement, stripped)

    if len(stripped) > max_length:
        stripped = stripped[:max_length] + "..."
    return stripped


def insert_formatting(text: str, start: int, end: int, fmt: str) -> tuple[str, int]:
    """
    Apply an editor toolbar action to `text` with selection [start, end).

    Returns (new_text, cursor_offset). Without a selection a placeholder is
    inserted and the cursor lands inside it.

    Example:
        insert_formatting("hello world", 0, 5, "bold")
    ->  ("**hello** world", 9)
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unknown format: {fmt!r}")

    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))
    before, selected, after = text[:start], text[start:end], text[end:]

    if fmt == "bold":
        if selected:
            return f"{before}**{selected}**{after}", end + 4
        return f"{before}**text**{after}", start + 2

    if fmt == "italic":
        if selected:
            return f"{before}*{selected}*{after}", end + 2
        return f"{before}*text*{after}", start + 1

    if fmt == "link":
        if selected:
            return f"{before}[{selected}](url){after}", end + 3
        return f"{before}[link text](url){after}", start + 1

    if fmt == "quote":
        if selected:
            quoted = "\n".join(f"> {line}" for line in selected.split("\n"))
            return f"{before}{quoted}{after}", start + len(quoted)
        return f"{before}> {after}", start + 2

    if fmt == "code":
        if selected:
            return f"{before}`{selected}`{after}", end + 2
        return f"{before}`code`{after}", start + 1

    # heading: prefix the line holding the cursor
    line_start = text.rfind("\n", 0, start) + 1
    return f"{text[:line_start]}## {text[line_start:]}", start + 3
