#!/usr/bin/env python3
from __future__ import annotations
from pathlib import Path

from flask import Flask, abort, jsonify, render_template_string, request

from config_loader import ContentConfig, DEFAULT_CONFIG, load_config
from content_parser import parse_content
from content_to_html import render_content_html, render_inline_html
from formatting import format_content_preview
from mentions import parse_mentions

BASE_DIR = Path.cwd()
CONFIG_PATH = BASE_DIR / "config.yml"

app = Flask(__name__, static_folder="static", static_url_path="/static")
cfg: ContentConfig = load_config(CONFIG_PATH) if CONFIG_PATH.is_file() else DEFAULT_CONFIG


LAYOUT_TEMPLATE = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ page_title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="stylesheet" href="/static/content.css">
</head>
<body>
  <main class="content">
    <h1>Post preview</h1>
    <form method="post" action="/">
      <textarea name="content" rows="12" cols="80">{{ raw_content }}</textarea>
      <div><button type="submit">Preview</button></div>
    </form>

    <section class="preview">
    {{ content|safe }}
    </section>
  </main>
</body>
</html>
"""


def _content_from_form() -> str:
    content = request.form.get("content", "")
    _check_length(content)
    return content


def _check_length(content: str) -> None:
    if len(content) > cfg.max_content_length:
        app.logger.warning(
            "rejected content of %d chars (limit %d)", len(content), cfg.max_content_length
        )
        abort(413)


@app.route("/", methods=["GET", "POST"])
def index():
    raw_content = _content_from_form() if request.method == "POST" else ""
    body_html = render_content_html(raw_content, cfg=cfg) if raw_content else ""

    return render_template_string(
        LAYOUT_TEMPLATE,
        page_title="Post preview",
        raw_content=raw_content,
        content=body_html,
    )


@app.route("/preview", methods=["POST"])
def preview():
    content = _content_from_form()
    if request.form.get("inline") in {"1", "true", "on"}:
        return render_inline_html(content, cfg=cfg)
    return render_content_html(content, cfg=cfg)


@app.route("/api/render", methods=["POST"])
def api_render():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not isinstance(payload.get("content"), str):
        app.logger.info("api_render: missing or non-string 'content'")
        abort(400)

    content: str = payload["content"]
    _check_length(content)

    return jsonify(
        html=render_content_html(content, cfg=cfg),
        lines=[line.to_dict() for line in parse_content(content, cfg)],
        mentions=parse_mentions(content, cfg),
        preview=format_content_preview(content, cfg=cfg),
    )


@app.route("/health")
def health():
    return jsonify(status="ok")


if __name__ == "__main__":
    # Run in dev mode
    app.run(debug=False)
