# sanitize.py
from __future__ import annotations

import re

import bleach


_BLOCKED_SCHEMES = ("javascript:", "data:", "vbscript:", "file:")
_ALLOWED_PREFIXES = ("http://", "https://", "/", "#")

_SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
_IFRAME_RE = re.compile(r"<iframe[^>]*>.*?</iframe>", re.IGNORECASE | re.DOTALL)
_OBJECT_RE = re.compile(r"<object[^>]*>.*?</object>", re.IGNORECASE | re.DOTALL)
_EMBED_RE = re.compile(r"<embed[^>]*>", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(
    r"""(?<![\w-])on\w+\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]+)""", re.IGNORECASE
)
_JS_SCHEME_RE = re.compile(r"javascript:", re.IGNORECASE)

_TAG_RE = re.compile(r"<[^>]*>")
_ANCHOR_OPEN_RE = re.compile(r"<a\s+([^>]*)>", re.IGNORECASE)
_ATTR_RE = re.compile(r'([^\s=]+)="([^"]*)"')

# Allow-list for user HTML; everything else is stripped (content kept).
ALLOWED_TAGS = frozenset(
    {
        # text
        "p", "br", "strong", "em", "b", "i", "u", "s", "del", "ins", "sub", "sup",
        # links and images
        "a", "img",
        # lists
        "ul", "ol", "li",
        # code
        "code", "pre",
        # blocks
        "blockquote", "hr",
        # headings
        "h1", "h2", "h3", "h4", "h5", "h6",
        # tables
        "table", "thead", "tbody", "tr", "th", "td",
        # semantic
        "mark", "abbr", "cite", "q", "kbd", "samp", "var", "span", "div",
    }
)

ALLOWED_ATTRIBUTES = {
    "*": [
        "href", "target", "rel",
        "src", "alt", "width", "height",
        "title", "class", "id",
        "lang",
        "colspan", "rowspan",
        "data-level",
    ],
}

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})


def sanitize_url(url: str) -> str:
    """
    Validate a link target.

    Returns the trimmed URL for http(s), site-absolute ('/...') and
    fragment ('#...') targets, and "" for everything else
    (javascript:, data:, vbscript:, file:, bare relative paths, ...).
    """
    if not url or not isinstance(url, str):
        return ""

    lowered = url.strip().lower()
    if lowered.startswith(_BLOCKED_SCHEMES):
        return ""
    if not lowered.startswith(_ALLOWED_PREFIXES):
        return ""

    return url.strip()


def sanitize_markdown(text: str) -> str:
    """
    Remove embedded HTML that could bypass the content parser.

    Drops script/iframe/object/embed tags, inline on*= handlers (quoted or
    not) and javascript: schemes. Everything else is returned untouched.
    """
    if not text or not isinstance(text, str):
        return ""

    for regex in (_SCRIPT_RE, _IFRAME_RE, _OBJECT_RE, _EMBED_RE, _EVENT_HANDLER_RE, _JS_SCHEME_RE):
        text = regex.sub("", text)
    return text


def _force_external_link_attrs(html: str) -> str:
    """Make every absolute http(s) or protocol-relative link open in a new tab."""

    def _rewrite(m: re.Match) -> str:
        attrs = dict(_ATTR_RE.findall(m.group(1)))
        href = attrs.get("href", "").lower()
        if not href.startswith(("http://", "https://", "//")):
            return m.group(0)
        attrs["target"] = "_blank"
        attrs["rel"] = "noopener noreferrer"
        return "<a " + " ".join(f'{k}="{v}"' for k, v in attrs.items()) + ">"

    return _ANCHOR_OPEN_RE.sub(_rewrite, html)


def sanitize_html(html: str) -> str:
    """
    Clean user-supplied HTML with bleach.

    - tags outside ALLOWED_TAGS are stripped, their text kept
    - script/style bodies are dropped entirely
    - attributes outside ALLOWED_ATTRIBUTES (on*=, style, ...) are removed
    - URLs must use http, https or mailto (relative URLs pass)
    - external links get target="_blank" rel="noopener noreferrer"

    Example:
        sanitize_html('<script>alert("x")</script><p>Safe</p>')
    ->  '<p>Safe</p>'
    """
    if not html or not isinstance(html, str):
        return ""

    html = _STYLE_RE.sub("", _SCRIPT_RE.sub("", html))
    cleaned = bleach.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )
    return _force_external_link_attrs(cleaned)


def strip_html(html: str) -> str:
    """Sanitize, then drop every remaining tag. Entities stay escaped."""
    if not html or not isinstance(html, str):
        return ""
    return _TAG_RE.sub("", sanitize_html(html)).strip()


def create_safe_excerpt(html: str, max_length: int = 200) -> str:
    """Plain-text excerpt of an HTML fragment, cut to max_length plus '...'."""
    if not html or not isinstance(html, str):
        return ""

    plain_text = strip_html(html)
    if len(plain_text) <= max_length:
        return plain_text
    return plain_text[:max_length].strip() + "..."
