"""Typed event and card models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class LogEventLevel(str, Enum):
    VERBOSE = "Verbose"
    DEBUG = "Debug"
    INFORMATION = "Information"
    WARNING = "Warning"
    ERROR = "Error"
    FATAL = "Fatal"


@dataclass(frozen=True)
class IncomingEvent:
    id: str
    level: str
    rendered_message: str
    timestamp: datetime | None = None
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PotentialAction:
    name: str
    target: list[str]
    type: str = "ViewAction"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "name": self.name, "target": list(self.target)}


@dataclass(frozen=True)
class TeamsCard:
    """Legacy Office 365 connector card (MessageCard)."""

    title: str
    theme_color: str
    text: str
    potential_action: list[PotentialAction] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "@type": "MessageCard",
            "@context": "http://schema.org/extensions",
            "title": self.title,
            "themeColor": self.theme_color,
            "text": self.text,
            "potentialAction": [a.to_dict() for a in self.potential_action],
        }
