"""Maps a Seq event onto a Teams connector card."""

from __future__ import annotations

from types import MappingProxyType
from urllib.parse import quote

from seqteams.config import Settings
from seqteams.models import IncomingEvent, LogEventLevel, PotentialAction, TeamsCard

MAX_TEXT_LENGTH = 1000
DEFAULT_COLOR = "gray"
ACTION_NAME = "Click here to open in Seq"

LEVEL_COLORS = MappingProxyType({
    LogEventLevel.VERBOSE: "gray",
    LogEventLevel.DEBUG: "gray",
    LogEventLevel.INFORMATION: "green",
    LogEventLevel.WARNING: "yellow",
    LogEventLevel.ERROR: "red",
    LogEventLevel.FATAL: "red",
})


def build_permalink(base_url: str, event_id: str) -> str:
    """Deep link into the Seq event view, filtered to a single event.

    An empty ``base_url`` yields a relative (and useless) link; that is
    tolerated rather than rejected.
    """
    quoted = quote(event_id, safe="")
    return f"{base_url}/#/events?filter=@Id%20%3D%3D%20%22{quoted}%22&show=expanded"


def resolve_color(level: str, override: str = "") -> str:
    if override and override.strip():
        return override
    try:
        return LEVEL_COLORS[LogEventLevel(level)]
    except ValueError:
        # Custom levels have no table entry
        return DEFAULT_COLOR


def build_card(event: IncomingEvent, settings: Settings) -> TeamsCard:
    link = build_permalink(settings.base_url, event.id)

    text = f"** {event.level} :** <a href={link}> link </a> {event.rendered_message} "
    text = text[:MAX_TEXT_LENGTH]

    color = resolve_color(event.level, settings.color)

    action = PotentialAction(name=ACTION_NAME, target=[link])

    return TeamsCard(
        title=f"<span style='color:{color}'>{event.level}</span>",
        theme_color=color,
        text=text,
        potential_action=[action],
    )
