"""Card building and webhook delivery."""

from .card import build_card, build_permalink, resolve_color
from .dispatcher import DeliveryResult, DeliveryStatus, Dispatcher

__all__ = [
    "build_card",
    "build_permalink",
    "resolve_color",
    "DeliveryResult",
    "DeliveryStatus",
    "Dispatcher",
]
