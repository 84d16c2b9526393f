"""Event intake: document parsing plus the stdin and HTTP host loops."""

from .events import EventParseError, normalize_level, parse_body, parse_event, parse_line, render_template

__all__ = [
    "EventParseError",
    "normalize_level",
    "parse_body",
    "parse_event",
    "parse_line",
    "render_template",
]
