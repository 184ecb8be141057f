# mentions.py
"""
@mention helpers used when a post is saved (notifications) and for content
that does not go through the full renderer.

Mentions inside `code` spans are ignored here, unlike in the inline
tokenizer where only position/length decide.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import quote
import html
import re

from config_loader import ContentConfig, DEFAULT_CONFIG
from sanitize import sanitize_html

MAX_MENTIONS_PER_POST = DEFAULT_CONFIG.max_mentions

MENTION_RE = re.compile(r"@(\w+)", re.ASCII)
CODE_SPAN_RE = re.compile(r"`[^`]*`")


def _split_code_spans(content: str) -> list[tuple[bool, str]]:
    """Split content into (is_code, chunk) pieces, in order."""
    pieces: list[tuple[bool, str]] = []
    pos = 0
    for m in CODE_SPAN_RE.finditer(content):
        if m.start() > pos:
            pieces.append((False, content[pos:m.start()]))
        pieces.append((True, m.group(0)))
        pos = m.end()
    if pos < len(content):
        pieces.append((False, content[pos:]))
    return pieces


def parse_mentions(content: Optional[str], cfg: ContentConfig = DEFAULT_CONFIG) -> list[str]:
    """
    Extract unique @usernames (lowercased, without '@').

    - order of first appearance is kept
    - duplicates are removed case-insensitively
    - mentions inside `code` spans are skipped
    - at most cfg.max_mentions names are returned
    """
    if not content or not isinstance(content, str):
        return []

    found: dict[str, None] = {}
    for is_code, chunk in _split_code_spans(content):
        if is_code:
            continue
        for m in MENTION_RE.finditer(chunk):
            found.setdefault(m.group(1).lower(), None)
            if len(found) >= cfg.max_mentions:
                return list(found)
    return list(found)


def linkify_mentions(content: Optional[str], cfg: ContentConfig = DEFAULT_CONFIG) -> Optional[str]:
    """
    Wrap @mentions in anchor tags, leaving `code` spans untouched.

    The result is passed through sanitize_html, so raw HTML in the post
    cannot smuggle handlers or scripts along with the links.

    Empty or non-string input is returned as-is.
    """
    if not content or not isinstance(content, str):
        return content

    def _link(m: re.Match) -> str:
        username = m.group(1)
        href = cfg.mention_href_prefix + quote(username)
        return f'<a href="{html.escape(href)}" class="mention">@{username}</a>'

    out: list[str] = []
    for is_code, chunk in _split_code_spans(content):
        out.append(chunk if is_code else MENTION_RE.sub(_link, chunk))
    return sanitize_html("".join(out))


def is_user_mentioned(
    content: Optional[str],
    username: str,
    cfg: ContentConfig = DEFAULT_CONFIG,
) -> bool:
    """Case-insensitive check whether `username` is mentioned in `content`."""
    return username.lower() in parse_mentions(content, cfg)
