"""Event document parsing and message-template rendering."""

from __future__ import annotations

import json
import re
from datetime import datetime
from typing import Any, Iterable

from seqteams.models import IncomingEvent, LogEventLevel


class EventParseError(ValueError):
    """Raised when an incoming document cannot be read as a log event."""


# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------

_LEVEL_ALIASES = {
    "verbose": LogEventLevel.VERBOSE,
    "trace": LogEventLevel.VERBOSE,
    "vrb": LogEventLevel.VERBOSE,
    "debug": LogEventLevel.DEBUG,
    "dbg": LogEventLevel.DEBUG,
    "information": LogEventLevel.INFORMATION,
    "info": LogEventLevel.INFORMATION,
    "inf": LogEventLevel.INFORMATION,
    "warning": LogEventLevel.WARNING,
    "warn": LogEventLevel.WARNING,
    "wrn": LogEventLevel.WARNING,
    "error": LogEventLevel.ERROR,
    "err": LogEventLevel.ERROR,
    "eror": LogEventLevel.ERROR,
    "fatal": LogEventLevel.FATAL,
    "ftl": LogEventLevel.FATAL,
    "critical": LogEventLevel.FATAL,
    "crit": LogEventLevel.FATAL,
}


def normalize_level(raw: Any) -> str:
    """Map a level label onto a LogEventLevel name.

    A missing level means Information (as in CLEF); unrecognized labels
    are passed through unchanged.
    """
    if raw is None or raw == "":
        return LogEventLevel.INFORMATION.value
    label = str(raw)
    level = _LEVEL_ALIASES.get(label.strip().lower())
    return level.value if level is not None else label


# ---------------------------------------------------------------------------
# Message templates
# ---------------------------------------------------------------------------

_HOLE_RE = re.compile(
    r"\{\{|\}\}|\{(?P<op>[@$]?)(?P<name>[A-Za-z0-9_]+)"
    r"(?:,(?P<align>-?\d+))?(?::(?P<fmt>[^{}]+))?\}"
)


def _render_value(value: Any, op: str, fmt: str | None) -> str:
    if op == "@" and isinstance(value, (dict, list)):
        return json.dumps(value)
    if fmt and op != "$":
        try:
            return format(value, fmt)
        except (TypeError, ValueError):
            pass
    return str(value)


def render_template(template: str, properties: dict[str, Any]) -> str:
    """Render a message template such as ``"Disk {Drive} at {Pct:.1f}%"``."""

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "{{":
            return "{"
        if token == "}}":
            return "}"
        name = match.group("name")
        if name not in properties:
            return token
        rendered = _render_value(properties[name], match.group("op"), match.group("fmt"))
        align = match.group("align")
        if align:
            width = int(align)
            rendered = rendered.ljust(-width) if width < 0 else rendered.rjust(width)
        return rendered

    return _HOLE_RE.sub(_replace, template)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

def _first(doc: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in doc and doc[key] is not None:
            return doc[key]
    return None


def _properties(doc: dict[str, Any]) -> dict[str, Any]:
    props = doc.get("Properties")
    if isinstance(props, dict):
        return dict(props)
    if isinstance(props, list):
        # Seq API shape: [{"Name": ..., "Value": ...}, ...]
        return {
            p["Name"]: p.get("Value")
            for p in props
            if isinstance(p, dict) and isinstance(p.get("Name"), str)
        }
    # CLEF: every key not reserved with a leading '@' is a property
    result: dict[str, Any] = {}
    for key, value in doc.items():
        if key.startswith("@@"):
            result[key[1:]] = value
        elif not key.startswith("@"):
            result[key] = value
    return result


def _timestamp(raw: Any) -> datetime | None:
    if not isinstance(raw, str):
        return None
    text = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_event(doc: Any) -> IncomingEvent:
    """Build an IncomingEvent from a CLEF or Seq JSON event document."""
    if not isinstance(doc, dict):
        raise EventParseError(f"expected a JSON object, got {type(doc).__name__}")

    properties = _properties(doc)

    message = _first(doc, "RenderedMessage", "@m")
    if message is None:
        template = _first(doc, "MessageTemplate", "@mt")
        message = render_template(str(template), properties) if template is not None else ""

    event_id = _first(doc, "Id", "@seqid", "@i")

    return IncomingEvent(
        id="" if event_id is None else str(event_id),
        level=normalize_level(_first(doc, "Level", "@l")),
        rendered_message=str(message),
        timestamp=_timestamp(_first(doc, "Timestamp", "@t")),
        properties=properties,
    )


def parse_line(line: str) -> IncomingEvent:
    """Parse one line of newline-delimited CLEF."""
    try:
        doc = json.loads(line)
    except json.JSONDecodeError as exc:
        raise EventParseError(f"invalid JSON: {exc.msg}") from exc
    return parse_event(doc)


def parse_body(body: bytes | str, content_type: str = "application/json") -> list[IncomingEvent]:
    """Parse an HTTP request body holding one or more events."""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    if "clef" in content_type:
        return [parse_line(line) for line in _nonblank(body.splitlines())]

    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise EventParseError(f"invalid JSON: {exc.msg}") from exc

    if isinstance(payload, dict) and isinstance(payload.get("Events"), list):
        payload = payload["Events"]
    if isinstance(payload, list):
        return [parse_event(doc) for doc in payload]
    return [parse_event(payload)]


def _nonblank(lines: Iterable[str]) -> Iterable[str]:
    return (line for line in lines if line.strip())
