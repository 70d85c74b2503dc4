"""
gamefeed/connectors/transport.py

Outbound HTTP transport and request/response value types.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import quote, urlencode

import requests
from requests.structures import CaseInsensitiveDict

from gamefeed.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestSpec:
    """
    One logical outbound request.
    """

    url: str
    method: str = "GET"
    params: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class HTTPResponse:
    """
    Transport-neutral response snapshot.
    """

    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


class Transport(Protocol):
    """
    Sends exactly one request per call.
    """

    def send(self, request: RequestSpec, *, timeout: float) -> HTTPResponse:
        ...


class ProxyUrlRewriter:
    """
    Wraps a fully built URL into a forwarding proxy URL.
    """

    def __init__(self, prefix: str) -> None:
        self._prefix = prefix

    def __call__(self, url: str) -> str:
        return self._prefix + quote(url, safe="")


class RequestsTransport:
    """
    ``requests.Session`` backed transport.

    The query string is encoded before URL rewriting so proxy strategies see
    the complete target URL. Commas in id lists are kept literal.

    ``timeout`` is a whole-attempt deadline. ``requests`` only bounds connect
    and each socket read, so the body is streamed and the elapsed time is
    checked after every chunk. A stalled read can overrun the deadline by at
    most one read timeout.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        url_rewriter: Callable[[str], str] | None = None,
        default_headers: Mapping[str, str] | None = None,
        chunk_size: int = 16_384,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._session = session or requests.Session()
        self._url_rewriter = url_rewriter
        self._default_headers = dict(default_headers or {})
        self._chunk_size = chunk_size
        self._clock = clock

    def send(self, request: RequestSpec, *, timeout: float) -> HTTPResponse:
        target_url = self.build_url(request)
        headers = {**self._default_headers, **request.headers}
        logger.debug("Outbound request method=%s url=%s", request.method, target_url)
        deadline = self._clock() + timeout
        try:
            response = self._session.request(
                method=request.method,
                url=target_url,
                headers=headers,
                timeout=timeout,
                stream=True,
            )
            try:
                body = self._read_body(response, deadline, timeout, request.url)
            finally:
                response.close()
        except requests.Timeout as exc:
            raise TransportError(f"request timed out after {timeout:.1f}s url={request.url}") from exc
        except requests.ConnectionError as exc:
            raise TransportError(f"connection failed url={request.url}: {exc}") from exc
        except requests.RequestException as exc:
            raise TransportError(f"request failed url={request.url}: {exc}") from exc

        return HTTPResponse(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
            body=body,
        )

    def _read_body(self, response: Any, deadline: float, timeout: float, url: str) -> bytes:
        chunks: list[bytes] = []
        self._check_deadline(deadline, timeout, url)
        for chunk in response.iter_content(chunk_size=self._chunk_size):
            chunks.append(chunk)
            self._check_deadline(deadline, timeout, url)
        return b"".join(chunks)

    def _check_deadline(self, deadline: float, timeout: float, url: str) -> None:
        if self._clock() > deadline:
            raise TransportError(f"request exceeded {timeout:.1f}s deadline url={url}")

    def build_url(self, request: RequestSpec) -> str:
        """
        Return the final outbound URL, including query string and rewriting.
        """

        query = urlencode(request.params, safe=",")
        url = request.url
        if query:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{query}"
        if self._url_rewriter is not None:
            return self._url_rewriter(url)
        return url
