# config_loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any
import re

import yaml  # PyYAML


INLINE_SEGMENT_TYPES = ("bolditalic", "bold", "italic", "code", "link", "mention", "hashtag")


class ContentConfig:
    """
    Immutable-ish container for content renderer configuration.

    inline_patterns is an ordered list of (segment_type, compiled regex).
    Order only matters as a tie-breaker for matches of equal start and length.
    """

    def __init__(
        self,
        *,
        inline_patterns: list[tuple[str, re.Pattern]],
        hr_re: re.Pattern,
        heading_re: re.Pattern,
        unordered_list_re: re.Pattern,
        ordered_list_re: re.Pattern,
        quote_marker: str,
        mention_href_prefix: str,
        tag_href_prefix: str,
        preview_max_length: int,
        max_mentions: int,
        max_content_length: int,
    ):
        self.inline_patterns = inline_patterns
        self.hr_re = hr_re
        self.heading_re = heading_re
        self.unordered_list_re = unordered_list_re
        self.ordered_list_re = ordered_list_re
        self.quote_marker = quote_marker
        self.mention_href_prefix = mention_href_prefix
        self.tag_href_prefix = tag_href_prefix
        self.preview_max_length = preview_max_length
        self.max_mentions = max_mentions
        self.max_content_length = max_content_length


# ---------------- Defaults ---------------------------------------------------

# mention / hashtag words follow the forum's username rules: ASCII \w only
_ASCII_TYPES = {"mention", "hashtag"}

DEFAULT_INLINE_PATTERNS: list[tuple[str, str]] = [
    ("bolditalic", r"\*\*\*(.+?)\*\*\*"),
    ("bold", r"\*\*(.+?)\*\*"),
    ("italic", r"(?<!\*)\*([^*]+)\*(?!\*)"),
    ("italic", r"(?<!_)_([^_]+)_(?!_)"),
    ("code", r"`([^`]+)`"),
    ("link", r"\[([^\]]+)\]\(([^)]+)\)"),
    ("mention", r"@(\w+)"),
    ("hashtag", r"#(\w+)"),
]


def compile_inline_pattern(segment_type: str, pattern: str) -> re.Pattern:
    """Compile one inline pattern, applying the flags its segment type needs."""
    if segment_type not in INLINE_SEGMENT_TYPES:
        raise ValueError(f"Unknown inline segment type: {segment_type!r}")
    flags = re.ASCII if segment_type in _ASCII_TYPES else 0
    compiled = re.compile(pattern, flags)

    # group 1 is the content; links also need group 2 for the target
    required_groups = 2 if segment_type == "link" else 1
    if compiled.groups < required_groups:
        raise ValueError(
            f"Inline pattern for {segment_type!r} needs {required_groups} capture group(s): {pattern!r}"
        )
    return compiled


DEFAULT_CONFIG = ContentConfig(
    inline_patterns=[(t, compile_inline_pattern(t, p)) for t, p in DEFAULT_INLINE_PATTERNS],
    hr_re=re.compile(r"^[-*_]{3,}$"),
    heading_re=re.compile(r"^(#{1,3})\s+(.+)$"),
    unordered_list_re=re.compile(r"^[-*•]\s+(.+)$"),
    ordered_list_re=re.compile(r"^\d+[.)]\s+(.+)$"),
    quote_marker=">",
    mention_href_prefix="/u/",
    tag_href_prefix="/tag/",
    preview_max_length=200,
    max_mentions=10,
    max_content_length=20000,
)

# ---------------- Loader -----------------------------------------------------


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    return value


def _as_positive_int(value: Any, name: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise TypeError(f"{name} must be a positive integer")
    return value


def _load_inline_patterns(value: Any) -> list[tuple[str, re.Pattern]]:
    """
    Parse the `inline_patterns` section.

    Expected shape:
        inline_patterns:
          - type: bold
            regex: '\\*\\*(.+?)\\*\\*'
    """
    if value is None:
        return list(DEFAULT_CONFIG.inline_patterns)
    if not isinstance(value, list):
        raise TypeError("inline_patterns must be a list of {type, regex} mappings")

    patterns: list[tuple[str, re.Pattern]] = []
    for entry in value:
        if not isinstance(entry, dict):
            raise TypeError("inline_patterns entries must be mappings")
        segment_type = _as_str(entry.get("type"), "inline_patterns[].type")
        regex = _as_str(entry.get("regex"), "inline_patterns[].regex")
        patterns.append((segment_type, compile_inline_pattern(segment_type, regex)))
    return patterns


def load_config(path: Path) -> ContentConfig:
    """
    Load YAML config and return a ContentConfig instance.

    Keys that are absent fall back to DEFAULT_CONFIG.
    """
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise TypeError("Config root must be a mapping")

    regex = raw.get("regex", {}) or {}
    if not isinstance(regex, dict):
        raise TypeError("regex must be a mapping")
    links = raw.get("links", {}) or {}
    if not isinstance(links, dict):
        raise TypeError("links must be a mapping")
    limits = raw.get("limits", {}) or {}
    if not isinstance(limits, dict):
        raise TypeError("limits must be a mapping")

    return ContentConfig(
        inline_patterns=_load_inline_patterns(raw.get("inline_patterns")),
        hr_re=re.compile(regex.get("hr_re", DEFAULT_CONFIG.hr_re.pattern)),
        heading_re=re.compile(regex.get("heading_re", DEFAULT_CONFIG.heading_re.pattern)),
        unordered_list_re=re.compile(
            regex.get("unordered_list_re", DEFAULT_CONFIG.unordered_list_re.pattern)
        ),
        ordered_list_re=re.compile(
            regex.get("ordered_list_re", DEFAULT_CONFIG.ordered_list_re.pattern)
        ),
        quote_marker=_as_str(raw.get("quote_marker", DEFAULT_CONFIG.quote_marker), "quote_marker"),
        mention_href_prefix=_as_str(
            links.get("mention_href_prefix", DEFAULT_CONFIG.mention_href_prefix),
            "links.mention_href_prefix",
        ),
        tag_href_prefix=_as_str(
            links.get("tag_href_prefix", DEFAULT_CONFIG.tag_href_prefix),
            "links.tag_href_prefix",
        ),
        preview_max_length=_as_positive_int(
            limits.get("preview_max_length", DEFAULT_CONFIG.preview_max_length),
            "limits.preview_max_length",
        ),
        max_mentions=_as_positive_int(
            limits.get("max_mentions", DEFAULT_CONFIG.max_mentions),
            "limits.max_mentions",
        ),
        max_content_length=_as_positive_int(
            limits.get("max_content_length", DEFAULT_CONFIG.max_content_length),
            "limits.max_content_length",
        ),
    )
