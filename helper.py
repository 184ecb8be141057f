from content_parser import ParsedLine

GRAY = "\033[90m"
RESET = "\033[0m"


def format_parsed_line(number: int, line: ParsedLine) -> str:
    """
    One-line debug representation, e.g.
      3 heading(1): text='Hello' bold='world'
    """
    head = f"{number:>4} {line.type}"
    if line.level is not None:
        head += f"({line.level})"
    parts = [f"{s.type}={s.content!r}" + (f"->{s.url}" if s.url else "") for s in line.segments]
    return f"{head}: {' '.join(parts)}" if parts else head


def print_event_gray(text: str) -> None:
    """
    Print event/debug output in gray using ANSI escape codes.
    """
    print(f"{GRAY}{text}{RESET}")
