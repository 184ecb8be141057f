from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterator

from config_loader import ContentConfig, DEFAULT_CONFIG, load_config
from content_parser import ParsedLine, parse_content
from helper import format_parsed_line, print_event_gray


def safe_input_path(raw: str, *, root: Path | None = None) -> Path:
    """
    Parse and validate a user-supplied path.

    Goals:
    - reject obvious malicious / malformed inputs (NUL, empty)
    - avoid directory traversal surprises when a root is given
    - resolve symlinks and return an absolute path
    """
    if not raw or raw.strip() == "":
        raise ValueError("Empty input path.")

    if "\x00" in raw:
        raise ValueError("NUL byte in path is not allowed.")

    p = Path(raw).expanduser()

    if any(part == ".." for part in p.parts):
        raise ValueError("Path traversal ('..') is not allowed.")

    # strict=False so it can still be resolved even if it doesn't exist (we check after)
    resolved = p.resolve(strict=False)

    if root is not None:
        root_resolved = root.resolve(strict=True)
        try:
            resolved.relative_to(root_resolved)
        except ValueError as e:
            raise ValueError(f"Input path must be within root: {root_resolved}") from e

    if not resolved.exists():
        raise FileNotFoundError(f"File not found: {resolved}")
    if not resolved.is_file():
        raise IsADirectoryError(f"Not a file: {resolved}")

    return resolved


def normalize_newlines(text: str) -> str:
    """Turn CRLF / CR line endings into '\\n' and drop a leading BOM."""
    if text.startswith("\ufeff"):
        text = text[1:]
    return text.replace("\r\n", "\n").replace("\r", "\n")


def read_content(path: Path) -> str:
    """Read a post body from disk as UTF-8 text with '\\n' line endings."""
    return normalize_newlines(Path(path).read_text(encoding="utf-8"))


def iter_parsed_lines(path: Path, cfg: ContentConfig = DEFAULT_CONFIG) -> Iterator[ParsedLine]:
    """Yield the classified lines of a post body file, in order."""
    yield from parse_content(read_content(path), cfg)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content_reader.py",
        description="Parse a forum post body and dump its classified lines.",
    )
    parser.add_argument("input", help="Post body file to read")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yml (default: built-in defaults)",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Optional root directory: input file must be within this directory.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed lines as one JSON document instead of gray text.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        cfg = load_config(Path(args.config)) if args.config else DEFAULT_CONFIG
    except Exception as e:
        print(f"[content_reader] Failed to load config: {e}", file=sys.stderr)
        return 2

    root_dir: Path | None = None
    if args.root:
        try:
            root_dir = Path(args.root).expanduser().resolve(strict=True)
        except OSError as e:
            print(f"[content_reader] Invalid --root: {e}", file=sys.stderr)
            return 2

    try:
        input_path = safe_input_path(args.input, root=root_dir)
    except (ValueError, OSError) as e:
        print(f"[content_reader] Invalid input path: {e}", file=sys.stderr)
        return 2

    try:
        lines = list(iter_parsed_lines(input_path, cfg))
    except (OSError, UnicodeDecodeError) as e:
        print(f"[content_reader] Error while reading: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([line.to_dict() for line in lines], ensure_ascii=False, indent=2))
        return 0

    for number, line in enumerate(lines, start=1):
        print_event_gray(format_parsed_line(number, line))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
