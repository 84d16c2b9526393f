"""Event intake HTTP server using aiohttp."""

from __future__ import annotations

import hmac

from aiohttp import web

from seqteams.config import IngestConfig
from seqteams.core.dispatcher import Dispatcher
from seqteams.ingest.events import EventParseError, parse_body
from seqteams.utils.logging import get_logger

log = get_logger(__name__)


def validate_secret(provided: str, configured: str) -> bool:
    """Validate the shared secret via constant-time comparison.

    Returns False if no secret is configured (rejects unauthenticated requests).
    """
    if not configured:
        return False
    if not provided:
        return False
    # compare_digest rejects non-ASCII str; header values may carry any bytes
    return hmac.compare_digest(
        provided.encode("utf-8", "surrogateescape"),
        configured.encode("utf-8", "surrogateescape"),
    )


class IngestServer:
    """Receives POSTed log events and dispatches each one to Teams."""

    def __init__(self, config: IngestConfig, dispatcher: Dispatcher) -> None:
        self._config = config
        self._dispatcher = dispatcher
        self._runner: web.AppRunner | None = None

    @property
    def path(self) -> str:
        path = self._config.path
        return path if path.startswith("/") else f"/{path}"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if not self._config.secret:
            log.warning(
                "ingest_no_secret",
                path=self.path,
                msg="No secret configured; all requests will be rejected. Set ingest.secret in config.",
            )
        app = self._build_app()
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._config.bind, self._config.port)
        await site.start()
        log.info("ingest_server_started", bind=self._config.bind, port=self._config.port)

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        log.info("ingest_server_stopped")

    # ------------------------------------------------------------------
    # App construction
    # ------------------------------------------------------------------

    def _build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post(self.path, self._handle_events)
        return app

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    async def _handle_events(self, request: web.Request) -> web.Response:
        provided = request.headers.get(
            "X-Seqteams-Secret",
            request.headers.get("Authorization", ""),
        ).removeprefix("Bearer ")
        if not validate_secret(provided, self._config.secret):
            return web.Response(status=401, text="Invalid secret")

        body = await request.read()
        try:
            events = parse_body(body, request.content_type)
        except EventParseError as exc:
            log.warning("ingest_parse_error", error=str(exc))
            return web.Response(status=400, text=str(exc))

        delivered = failed = 0
        for event in events:
            result = await self._dispatcher.dispatch(event)
            if result.ok:
                delivered += 1
            else:
                failed += 1

        log.info("ingest_batch_processed", delivered=delivered, failed=failed)
        return web.json_response({"delivered": delivered, "failed": failed})
