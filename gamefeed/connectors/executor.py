"""
gamefeed/connectors/executor.py

Bounded retry loop around one logical HTTP request.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable

from gamefeed.config import FetchSettings
from gamefeed.connectors.backoff import compute_backoff_seconds, rate_limit_hint
from gamefeed.connectors.transport import HTTPResponse, RequestSpec, Transport
from gamefeed.errors import TransportError

logger = logging.getLogger(__name__)

RATE_LIMITED_STATUS = 429


class ResilientRequestExecutor:
    """
    Executes requests with per-attempt timeout, backoff and rate-limit handling.

    Status interpretation:
      - 429: retried with the server hint (or computed backoff) while attempts
        remain; the final 429 response is returned to the caller.
      - 5xx: retried with computed backoff; the final response is returned.
      - anything else: returned immediately.
    Transport failures are retried and re-raised as ``TransportError`` once
    the attempt budget is spent.
    """

    def __init__(
        self,
        *,
        transport: Transport,
        settings: FetchSettings,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._transport = transport
        self._settings = settings
        self._max_attempts = max(1, settings.max_attempts)
        self._sleep = sleep
        self._rng = rng

    def execute(self, request: RequestSpec) -> HTTPResponse:
        last_error: TransportError | None = None

        for attempt in range(1, self._max_attempts + 1):
            has_next_attempt = attempt < self._max_attempts
            try:
                response = self._transport.send(
                    request,
                    timeout=self._settings.request_timeout_seconds,
                )
            except TransportError as exc:
                last_error = exc
                if not has_next_attempt:
                    break
                self._wait(attempt=attempt, request=request, reason=str(exc))
                continue

            if response.status_code == RATE_LIMITED_STATUS and has_next_attempt:
                hint = rate_limit_hint(response.headers, self._settings.rate_limit_headers)
                self._wait(attempt=attempt, request=request, reason="status=429", hint_seconds=hint)
                continue

            if 500 <= response.status_code < 600 and has_next_attempt:
                self._wait(attempt=attempt, request=request, reason=f"status={response.status_code}")
                continue

            if attempt > 1:
                logger.info(
                    "Request settled url=%s status=%s attempt=%s/%s",
                    request.url,
                    response.status_code,
                    attempt,
                    self._max_attempts,
                )
            return response

        logger.error(
            "Request exhausted retries url=%s attempts=%s error=%s",
            request.url,
            self._max_attempts,
            last_error,
        )
        raise TransportError(
            f"request failed after {self._max_attempts} attempt(s) url={request.url}"
        ) from last_error

    def _wait(
        self,
        *,
        attempt: int,
        request: RequestSpec,
        reason: str,
        hint_seconds: float | None = None,
    ) -> None:
        delay_seconds = compute_backoff_seconds(
            attempt,
            hint_seconds,
            unit_seconds=self._settings.backoff_unit_seconds,
            cap_seconds=self._settings.backoff_cap_seconds,
            rng=self._rng,
        )
        logger.warning(
            "Request retry url=%s attempt=%s/%s reason=%s wait_seconds=%.2f",
            request.url,
            attempt,
            self._max_attempts,
            reason,
            delay_seconds,
        )
        self._sleep(delay_seconds)
