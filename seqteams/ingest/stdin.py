"""Seq app-host loop: one CLEF event per stdin line."""

from __future__ import annotations

import asyncio
from typing import TextIO

from seqteams.core.dispatcher import Dispatcher
from seqteams.ingest.events import EventParseError, parse_line
from seqteams.utils.logging import get_logger

log = get_logger(__name__)


async def run_stdin(stream: TextIO, dispatcher: Dispatcher) -> int:
    """Dispatch events read from ``stream`` until EOF.

    Returns the number of events dispatched. Lines that don't parse are
    logged and skipped.
    """
    dispatched = 0
    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            break
        if not line.strip():
            continue

        try:
            event = parse_line(line)
        except EventParseError as exc:
            log.warning("event_parse_error", error=str(exc), line=line[:200])
            continue

        await dispatcher.dispatch(event)
        dispatched += 1

    log.info("stdin_closed", dispatched=dispatched)
    return dispatched
