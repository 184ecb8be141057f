#!/usr/bin/env python3
"""
content_to_html.py

Small forum-post → HTML renderer built on the parsing pipeline:

- config_loader.load_config() for regex + link settings
- content_reader.read_content() for reading post bodies from disk
- content_parser.parse_content() for line classification + inline segments

Scope:
- Headings -> <h1>/<h2>/<h3>
- Quotes -> <blockquote data-level="n">
- Consecutive list items -> one <ul>
- Horizontal rules -> <hr />
- Inline bold/italic/code/links/mentions/hashtags
"""
from __future__ import annotations
from config_loader import load_config, ContentConfig, DEFAULT_CONFIG
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote
import argparse
import html
import sys

from content_parser import ParsedLine, ParsedSegment, parse_content
from content_reader import read_content
from sanitize import sanitize_url


def escape_html(text: str) -> str:
    """Escape text for HTML output."""
    return html.escape(text, quote=True)


def heading_tag_for_level(level: Optional[int]) -> str:
    """Level 1 -> h1, level 3 -> h3, anything else -> h2."""
    if level == 1:
        return "h1"
    if level == 3:
        return "h3"
    return "h2"


def is_external_link(url: Optional[str]) -> bool:
    """Links with an http(s) scheme or a protocol-relative target open in a new tab."""
    return bool(url) and url.startswith(("http", "//"))


def render_segment(segment: ParsedSegment, cfg: ContentConfig = DEFAULT_CONFIG) -> str:
    """
    Render one inline segment to HTML.

    segment types:
      - text        -> escaped text
      - bold        -> <strong>
      - italic      -> <em>
      - bolditalic  -> <strong><em>
      - code        -> <code class="inline-code">
      - link        -> <a class="content-link"> (external links get target=_blank)
      - mention     -> profile link, '@' stripped from the href
      - hashtag     -> tag page link, '#' stripped from the href
    """
    content = escape_html(segment.content)

    if segment.type == "bold":
        return f"<strong>{content}</strong>"

    if segment.type == "italic":
        return f"<em>{content}</em>"

    if segment.type == "bolditalic":
        return f"<strong><em>{content}</em></strong>"

    if segment.type == "code":
        return f'<code class="inline-code">{content}</code>'

    if segment.type == "link":
        href = sanitize_url(segment.url or "") or "#"
        if is_external_link(href):
            return (
                f'<a href="{escape_html(href)}" target="_blank" '
                f'rel="noopener noreferrer" class="content-link external">{content}</a>'
            )
        return f'<a href="{escape_html(href)}" class="content-link">{content}</a>'

    if segment.type == "mention":
        username = segment.content[1:]
        href = cfg.mention_href_prefix + quote(username)
        return f'<a href="{escape_html(href)}" class="content-mention">{content}</a>'

    if segment.type == "hashtag":
        tag = segment.content[1:]
        href = cfg.tag_href_prefix + quote(tag)
        return f'<a href="{escape_html(href)}" class="content-hashtag">{content}</a>'

    # text + fallback
    return content


def render_segments(segments: list[ParsedSegment], cfg: ContentConfig = DEFAULT_CONFIG) -> str:
    return "".join(render_segment(s, cfg) for s in segments)


def render_line(line: ParsedLine, cfg: ContentConfig = DEFAULT_CONFIG) -> str:
    """Render one classified line. Empty lines and blank paragraphs render as ''."""
    if line.type == "empty":
        return ""

    if line.type == "hr":
        return '<hr class="content-hr" />\n'

    inner = render_segments(line.segments, cfg)

    if line.type == "heading":
        tag = heading_tag_for_level(line.level)
        level = line.level if line.level is not None else 2
        return f'<{tag} class="content-heading content-h{level}">{inner}</{tag}>\n'

    if line.type == "quote":
        return f'<blockquote class="content-quote" data-level="{line.level}">{inner}</blockquote>\n'

    if line.type == "listitem":
        return f'<li class="content-list-item">{inner}</li>\n'

    if line.type == "codeblock":
        raw = "".join(s.content for s in line.segments)
        return f'<pre class="content-codeblock"><code>{escape_html(raw)}</code></pre>\n'

    # paragraph
    if not any(s.content.strip() for s in line.segments):
        return ""
    return f"<p>{inner}</p>\n"


def group_lines(lines: list[ParsedLine]) -> list[Union[ParsedLine, list[ParsedLine]]]:
    """
    Group consecutive list items.

    Non-list lines are passed through in order; every run of "listitem"
    lines becomes one nested list.
    """
    grouped: list[Union[ParsedLine, list[ParsedLine]]] = []
    current_list: list[ParsedLine] = []

    for line in lines:
        if line.type == "listitem":
            current_list.append(line)
            continue
        if current_list:
            grouped.append(current_list)
            current_list = []
        grouped.append(line)

    if current_list:
        grouped.append(current_list)

    return grouped


def _class_attr(base: str, extra: str) -> str:
    return f"{base} {extra}".strip()


def render_content_html(
    content: str,
    *,
    css_class: str = "",
    cfg: ContentConfig = DEFAULT_CONFIG,
) -> str:
    """Render a full post body into a <div class="rich-content"> block."""
    out: list[str] = []
    for item in group_lines(parse_content(content, cfg)):
        if isinstance(item, list):
            out.append('<ul class="content-list">\n')
            out.extend(render_line(li, cfg) for li in item)
            out.append("</ul>\n")
        else:
            out.append(render_line(item, cfg))

    return (
        f'<div class="{escape_html(_class_attr("rich-content", css_class))}">\n'
        + "".join(out)
        + "</div>\n"
    )


def render_inline_html(
    content: str,
    *,
    css_class: str = "",
    cfg: ContentConfig = DEFAULT_CONFIG,
) -> str:
    """
    Render content without block elements (titles, previews, single-line fields).

    All segments of all lines are rendered back to back.
    """
    segments = [s for line in parse_content(content, cfg) for s in line.segments]
    return (
        f'<span class="{escape_html(_class_attr("rich-content-inline", css_class))}">'
        f"{render_segments(segments, cfg)}</span>"
    )


def open_html_document(title: Optional[str]) -> str:
    """Return the HTML prolog."""
    safe_title = escape_html(title or "Forum post")
    return (
        "<!doctype html>\n"
        "<html lang=\"en\">\n"
        "<head>\n"
        "  <meta charset=\"utf-8\" />\n"
        f"  <title>{safe_title}</title>\n"
        "  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />\n"
        '  <link rel="stylesheet" href="/static/content.css" />\n'
        "</head>\n"
        "<body>\n"
    )


def close_html_document() -> str:
    """Return the HTML epilog."""
    return "</body>\n</html>\n"


def render_content_to_html_document(
    input_path: Path,
    cfg: ContentConfig,
    *,
    inline: bool = False,
) -> str:
    """
    Render a post body file into a complete HTML document.
    """
    content = read_content(input_path)
    if inline:
        body_html = render_inline_html(content, cfg=cfg) + "\n"
    else:
        body_html = render_content_html(content, cfg=cfg)
    return open_html_document(input_path.stem) + body_html + close_html_document()


def content_to_html(
    input_path: Path,
    output_path: Path,
    cfg: ContentConfig,
    *,
    inline: bool = False,
) -> None:
    """
    Convert a post body file to a minimal HTML document and write it to disk.
    """
    document = render_content_to_html_document(input_path, cfg, inline=inline)
    output_path.write_text(document, encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Convert a forum post body to minimal HTML.")
    parser.add_argument("input", help="Post body file (UTF-8 text)")

    parser.add_argument("-o", "--output", default="out.html", help="Output HTML file (default: out.html)")
    parser.add_argument("-c", "--config", default=None, help="Config YAML file (default: built-in defaults)")
    parser.add_argument("--inline", action="store_true", help="Render without block elements")
    args = parser.parse_args(argv)

    try:
        cfg = load_config(Path(args.config)) if args.config else DEFAULT_CONFIG
    except Exception as e:
        print(f"[content_to_html] Failed to load config: {e}", file=sys.stderr)
        return 2

    try:
        content_to_html(Path(args.input), Path(args.output), cfg, inline=args.inline)
    except (OSError, UnicodeDecodeError) as e:
        print(f"[content_to_html] Error while converting: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
