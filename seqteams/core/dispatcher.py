"""Single-attempt delivery of cards to a Teams incoming webhook."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from seqteams.config import Settings
from seqteams.core.card import build_card
from seqteams.models import IncomingEvent
from seqteams.utils.logging import get_logger

log = get_logger(__name__)

_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class DeliveryStatus(str, Enum):
    DELIVERED = "delivered"
    FAILED_RESPONSE = "failed_response"
    FAILED_EXCEPTION = "failed_exception"


@dataclass(frozen=True)
class DeliveryResult:
    status: DeliveryStatus
    uri: str
    status_code: int | None = None
    status_message: str = ""
    body: str = ""
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status is DeliveryStatus.DELIVERED


class Dispatcher:
    """Posts one card per event and reports the outcome to the log.

    ``dispatch`` never raises: transport errors, error responses and
    successes all come back as a ``DeliveryResult`` and produce at most one
    outcome record on the injected logger.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        logger: Any = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._log = logger if logger is not None else log
        self._transport = transport

    @property
    def webhook_url(self) -> str:
        return self._settings.webhook_url

    async def dispatch(self, event: IncomingEvent) -> DeliveryResult:
        try:
            if self._settings.trace_message:
                self._log.bind(uri=self.webhook_url).info(
                    "start_processing", message=event.rendered_message
                )

            card = build_card(event, self._settings)
            content = json.dumps(card.to_dict())

            # Client lives for exactly one delivery
            async with httpx.AsyncClient(
                transport=self._transport, follow_redirects=True
            ) as client:
                response = await client.post(
                    self.webhook_url, content=content, headers=_HEADERS
                )

            result = DeliveryResult(
                status=(
                    DeliveryStatus.DELIVERED
                    if response.is_success
                    else DeliveryStatus.FAILED_RESPONSE
                ),
                uri=str(response.request.url),
                status_code=response.status_code,
                status_message=response.reason_phrase,
                body=response.text,
            )
        except Exception as exc:
            result = DeliveryResult(
                status=DeliveryStatus.FAILED_EXCEPTION,
                uri=self.webhook_url,
                error=exc,
            )

        self._report(result)
        return result

    def _report(self, result: DeliveryResult) -> None:
        bound = self._log.bind(uri=result.uri)

        if result.status is DeliveryStatus.FAILED_EXCEPTION:
            bound.error(
                "teams_request_error",
                error=str(result.error),
                error_type=type(result.error).__name__,
                exc_info=result.error,
            )
        elif result.status is DeliveryStatus.FAILED_RESPONSE:
            bound.error(
                "teams_send_failed",
                status_code=result.status_code,
                status_message=result.status_message,
                body=result.body,
            )
        elif self._settings.trace_message:
            bound.info(
                "teams_send_succeeded",
                status_code=result.status_code,
                status_message=result.status_message,
                body=result.body,
            )
