"""
Test doubles for transports and sleeps. No test touches the network.
"""

from __future__ import annotations

import json
import threading
from typing import Any

from requests.structures import CaseInsensitiveDict

from gamefeed.connectors.transport import HTTPResponse, RequestSpec


def make_response(
    status_code: int = 200,
    payload: Any = None,
    *,
    headers: dict[str, str] | None = None,
    body: bytes | None = None,
) -> HTTPResponse:
    if body is None:
        body = json.dumps(payload if payload is not None else {}).encode("utf-8")
    return HTTPResponse(
        status_code=status_code,
        headers=CaseInsensitiveDict(headers or {}),
        body=body,
    )


class ScriptedTransport:
    """
    Replays scripted responses (or raises scripted exceptions) in order.
    """

    def __init__(self, script: list[Any]) -> None:
        self._script = list(script)
        self.calls: list[tuple[RequestSpec, float]] = []

    def send(self, request: RequestSpec, *, timeout: float) -> HTTPResponse:
        self.calls.append((request, timeout))
        step = self._script.pop(0) if len(self._script) > 1 else self._script[0]
        if isinstance(step, Exception):
            raise step
        return step


class RoutingTransport:
    """
    Answers by endpoint URL; thread-safe so the batch fetcher can fan out.
    """

    def __init__(self, routes: dict[str, Any]) -> None:
        self._routes = routes
        self._lock = threading.Lock()
        self.calls: list[RequestSpec] = []

    def send(self, request: RequestSpec, *, timeout: float) -> HTTPResponse:
        with self._lock:
            self.calls.append(request)
        route = self._routes[request.url]
        step = route(request) if callable(route) else route
        if isinstance(step, Exception):
            raise step
        return step


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
