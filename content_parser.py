#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Any, NamedTuple

from config_loader import ContentConfig, DEFAULT_CONFIG


SEGMENT_TYPES = frozenset(
    {"text", "bold", "italic", "bolditalic", "link", "code", "mention", "hashtag"}
)
LINE_TYPES = frozenset(
    {"paragraph", "quote", "heading", "listitem", "codeblock", "hr", "empty"}
)


@dataclass
class ParsedSegment:
    """
    A run of inline text with a single type.

    type:
      - "text"
      - "bold"
      - "italic"
      - "bolditalic"
      - "link"        (url holds the target, content the label)
      - "code"
      - "mention"     (content keeps the leading '@')
      - "hashtag"     (content keeps the leading '#')
    """
    type: str
    content: str
    url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type, "content": self.content}
        if self.url is not None:
            data["url"] = self.url
        return data


@dataclass
class ParsedLine:
    """
    One classified line of a post body.

    `level` is set for headings (1-3) and quotes (nesting depth).
    `segments` is empty for "hr" and "empty" lines.
    """
    type: str
    segments: list[ParsedSegment] = field(default_factory=list)
    level: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "segments": [s.to_dict() for s in self.segments],
        }
        if self.level is not None:
            data["level"] = self.level
        return data


class _InlineMatch(NamedTuple):
    start: int
    end: int
    type: str
    content: str
    url: Optional[str]


def _collect_inline_matches(text: str, cfg: ContentConfig) -> list[_InlineMatch]:
    """Run every inline pattern over the whole line and collect all candidates."""
    matches: list[_InlineMatch] = []
    for segment_type, regex in cfg.inline_patterns:
        for m in regex.finditer(text):
            url: Optional[str] = None
            content = m.group(1)
            if segment_type == "link":
                url = m.group(2)
            elif segment_type == "mention":
                content = "@" + content
            elif segment_type == "hashtag":
                content = "#" + content
            matches.append(_InlineMatch(m.start(), m.end(), segment_type, content, url))
    return matches


def _resolve_overlaps(matches: list[_InlineMatch]) -> list[_InlineMatch]:
    """
    Keep a non-overlapping subset of matches.

    Earliest start wins; at the same start the longest match wins. The sort is
    stable, so equal (start, length) pairs keep pattern order.
    """
    ordered = sorted(matches, key=lambda m: (m.start, -(m.end - m.start)))

    accepted: list[_InlineMatch] = []
    last_end = 0
    for match in ordered:
        if match.start >= last_end:
            accepted.append(match)
            last_end = match.end
    return accepted


def parse_inline_formatting(
    text: str,
    cfg: ContentConfig = DEFAULT_CONFIG,
) -> list[ParsedSegment]:
    """
    Tokenize one line into ParsedSegment spans.

    Supported:
      ***x***            -> bolditalic "x"
      **x**              -> bold "x"
      *x* or _x_         -> italic "x"
      `x`                -> code "x"
      [label](url)       -> link "label" (url=url)
      @name              -> mention "@name"
      #tag               -> hashtag "#tag"

    Everything between matches becomes "text". The result always covers
    the whole input and is never empty.

    Notes:
    - Non-nested: a link label or bold span is not tokenized again.
    - Never raises: malformed markup degrades to plain text.
    """
    segments: list[ParsedSegment] = []

    pos = 0
    for match in _resolve_overlaps(_collect_inline_matches(text, cfg)):
        if match.start > pos:
            segments.append(ParsedSegment("text", text[pos:match.start]))
        segments.append(ParsedSegment(match.type, match.content, match.url))
        pos = match.end

    if pos < len(text):
        segments.append(ParsedSegment("text", text[pos:]))

    if not segments:
        segments.append(ParsedSegment("text", text))

    return segments


def _handle_hr_if_present(trimmed: str, cfg: ContentConfig) -> Optional[ParsedLine]:
    if not cfg.hr_re.match(trimmed):
        return None
    return ParsedLine(type="hr")


def _handle_heading_if_present(trimmed: str, cfg: ContentConfig) -> Optional[ParsedLine]:
    match = cfg.heading_re.match(trimmed)
    if not match:
        return None
    return ParsedLine(
        type="heading",
        level=len(match.group(1)),
        segments=parse_inline_formatting(match.group(2), cfg),
    )


def _handle_quote_if_present(trimmed: str, cfg: ContentConfig) -> Optional[ParsedLine]:
    """
    Detect quotes like:
      > text
      >> nested text
      > > nested text

    Each leading marker raises the level by one; whitespace after each
    marker is dropped.
    """
    marker = cfg.quote_marker
    if not trimmed.startswith(marker):
        return None

    level = 0
    content = trimmed
    while content.startswith(marker):
        level += 1
        content = content[len(marker):].strip()

    return ParsedLine(
        type="quote",
        level=level,
        segments=parse_inline_formatting(content, cfg),
    )


def _handle_unordered_list_if_present(trimmed: str, cfg: ContentConfig) -> Optional[ParsedLine]:
    """
    Detect unordered list items like:
      - item
      * item
      • item
    """
    match = cfg.unordered_list_re.match(trimmed)
    if not match:
        return None
    return ParsedLine(type="listitem", segments=parse_inline_formatting(match.group(1), cfg))


def _handle_ordered_list_if_present(trimmed: str, cfg: ContentConfig) -> Optional[ParsedLine]:
    """
    Detect ordered list items like:
      1. first
      2) second

    The number itself is not kept.
    """
    match = cfg.ordered_list_re.match(trimmed)
    if not match:
        return None
    return ParsedLine(type="listitem", segments=parse_inline_formatting(match.group(1), cfg))


def parse_line(line: str, cfg: ContentConfig = DEFAULT_CONFIG) -> ParsedLine:
    """Classify a single line. The first handler that matches wins."""
    trimmed = line.strip()

    if not trimmed:
        return ParsedLine(type="empty")

    for handler in (
        _handle_hr_if_present,
        _handle_heading_if_present,
        _handle_quote_if_present,
        _handle_unordered_list_if_present,
        _handle_ordered_list_if_present,
    ):
        parsed = handler(trimmed, cfg)
        if parsed is not None:
            return parsed

    return ParsedLine(type="paragraph", segments=parse_inline_formatting(trimmed, cfg))


def parse_content(content: str, cfg: ContentConfig = DEFAULT_CONFIG) -> list[ParsedLine]:
    """Split on '\\n' and classify every line independently."""
    return [parse_line(line, cfg) for line in content.split("\n")]


def strip_markers(segments: list[ParsedSegment]) -> str:
    """Concatenate segment contents, i.e. the line with its syntax markers removed."""
    return "".join(s.content for s in segments)
