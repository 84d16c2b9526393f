"""seqteams entry point: wires settings, logging and a host loop together."""

from __future__ import annotations

import asyncio
import signal
import sys
from datetime import datetime, timezone
from uuid import uuid4

import click
from pydantic import ValidationError

from seqteams import __version__
from seqteams.config import Settings, load_settings
from seqteams.core.dispatcher import Dispatcher
from seqteams.ingest.events import normalize_level
from seqteams.ingest.server import IngestServer
from seqteams.ingest.stdin import run_stdin
from seqteams.models import IncomingEvent
from seqteams.utils.logging import get_logger, setup_logging

log = get_logger(__name__)


def _load(options: dict[str, str | None]) -> Settings:
    try:
        settings = load_settings(options["config_path"], log_level=options["log_level"])
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration:\n{exc}") from exc
    setup_logging(level=settings.log_level, fmt=settings.log_format)
    return settings


async def serve(settings: Settings) -> None:
    server = IngestServer(settings.ingest, Dispatcher(settings))

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        log.info("shutdown_signal")
        stop_event.set()

    if sys.platform != "win32":
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _signal_handler)

    await server.start()

    try:
        if sys.platform == "win32":
            while not stop_event.is_set():
                await asyncio.sleep(1)
        else:
            await stop_event.wait()
    except KeyboardInterrupt:
        pass
    finally:
        await server.stop()


@click.group()
@click.version_option(__version__, prog_name="seqteams")
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str | None) -> None:
    """Forward Seq log events to a Microsoft Teams webhook."""
    ctx.obj = {"config_path": config_path, "log_level": log_level}


@cli.command()
@click.pass_obj
def run(options: dict[str, str | None]) -> None:
    """Read CLEF events from stdin, as hosted by Seq, and forward each one."""
    settings = _load(options)
    dispatcher = Dispatcher(settings)
    asyncio.run(run_stdin(click.get_text_stream("stdin"), dispatcher))


@cli.command("serve")
@click.pass_obj
def serve_command(options: dict[str, str | None]) -> None:
    """Accept events over HTTP and forward each one."""
    settings = _load(options)
    asyncio.run(serve(settings))


@cli.command()
@click.option("--id", "event_id", default=None, help="Event id used in the permalink")
@click.option("--level", default="Information", show_default=True, help="Event level")
@click.option("--message", required=True, help="Rendered message text")
@click.pass_obj
def send(
    options: dict[str, str | None],
    event_id: str | None,
    level: str,
    message: str,
) -> None:
    """Send a single test event to the configured webhook."""
    settings = _load(options)
    event = IncomingEvent(
        id=event_id or f"event-{uuid4().hex[:12]}",
        level=normalize_level(level),
        rendered_message=message,
        timestamp=datetime.now(timezone.utc),
    )
    result = asyncio.run(Dispatcher(settings).dispatch(event))
    if not result.ok:
        raise click.ClickException(f"Delivery failed ({result.status.value})")
    click.echo(f"Delivered: {result.status_code} {result.status_message}")


if __name__ == "__main__":
    cli()
