"""
Server-Sent Events subscription.

Opens a long-lived GET against the server's event endpoint and yields each
"message" event. Disconnects and HTTP failures are retried with exponential
backoff; the consumer only ever sees decoded events.
"""

import asyncio
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import httpx

from core.config import Settings, settings
from core.logging_utils import get_logger

logger = get_logger(__name__)

EVENT_STREAM_CONTENT_TYPE = "text/event-stream"
DEFAULT_EVENT = "message"


class StreamResponseError(Exception):
    """Server answered, but not with a usable event stream."""


class StreamClosedError(Exception):
    """Subscription gave up; no further events will arrive."""


@dataclass(frozen=True)
class ServerSentEvent:
    data: str
    event: str = DEFAULT_EVENT
    id: Optional[str] = None


class SSEDecoder:
    """Line-oriented event-stream parser. Feed lines without their terminators."""

    def __init__(self):
        self._event = ""
        self._data: list[str] = []
        self.last_event_id: Optional[str] = None
        self.retry: Optional[int] = None

    def decode(self, line: str) -> Optional[ServerSentEvent]:
        if not line:
            return self._dispatch()

        if line.startswith(":"):
            return None

        field, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if field == "event":
            self._event = value
        elif field == "data":
            self._data.append(value)
        elif field == "id":
            if "\0" not in value:
                self.last_event_id = value
        elif field == "retry":
            if value.isascii() and value.isdigit():
                self.retry = int(value)
        return None

    def _dispatch(self) -> Optional[ServerSentEvent]:
        if not self._data:
            self._event = ""
            return None
        event = ServerSentEvent(
            data="\n".join(self._data),
            event=self._event or DEFAULT_EVENT,
            id=self.last_event_id,
        )
        self._event = ""
        self._data = []
        return event


class EventStream:
    """Reconnecting subscription to one event-stream endpoint."""

    def __init__(
        self,
        url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        config: Settings = settings,
        event_type: str = DEFAULT_EVENT,
    ):
        self.url = url
        self.config = config
        self.event_type = event_type
        self._client = client
        self._owns_client = client is None
        self._closed = False

        self._connected = False
        self._last_event_id: Optional[str] = None
        self._server_retry_ms: Optional[int] = None
        self._reconnect_attempts = 0
        self._reconnect_delay = config.reconnect_base_delay
        self._total_reconnects = 0

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def total_reconnects(self) -> int:
        return self._total_reconnects

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            timeout = httpx.Timeout(None, connect=self.config.stream_connect_timeout)
            self._client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        self._closed = True
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    def _request_headers(self) -> dict[str, str]:
        headers = {
            "Accept": EVENT_STREAM_CONTENT_TYPE,
            "Cache-Control": "no-cache",
        }
        if self._last_event_id:
            headers["Last-Event-ID"] = self._last_event_id
        return headers

    async def messages(self) -> AsyncIterator[ServerSentEvent]:
        """Yield events forever, reconnecting as needed."""
        while not self._closed:
            try:
                async for event in self._listen_once():
                    yield event
                if self._closed:
                    return
                logger.warning("[SSE] Stream ended by server")
            except StreamResponseError as e:
                logger.warning("[SSE] Bad response from %s: %s", self.url, e)
            except httpx.HTTPError as e:
                logger.warning("[SSE] Connection error (%s): %s", type(e).__name__, e)

            self._connected = False
            self._reconnect_attempts += 1
            self._total_reconnects += 1

            max_attempts = self.config.max_reconnect_attempts
            if max_attempts > 0 and self._reconnect_attempts >= max_attempts:
                logger.error("[SSE] Max reconnect attempts (%s) reached, giving up", max_attempts)
                raise StreamClosedError(f"gave up on {self.url} after {self._reconnect_attempts} attempts")

            delay = self._next_delay()
            logger.warning(
                "[SSE] Reconnecting in %.1fs... (attempt %s)",
                delay,
                self._reconnect_attempts,
            )
            await asyncio.sleep(delay)

    def _next_delay(self) -> float:
        if self._server_retry_ms is not None:
            return self._server_retry_ms / 1000.0
        delay = self._reconnect_delay
        self._reconnect_delay = min(
            self._reconnect_delay * self.config.reconnect_multiplier,
            self.config.reconnect_max_delay,
        )
        return delay

    async def _listen_once(self) -> AsyncIterator[ServerSentEvent]:
        client = self._get_client()
        async with client.stream("GET", self.url, headers=self._request_headers()) as response:
            if response.status_code == 204:
                # Server asked us to stop reconnecting
                raise StreamClosedError(f"{self.url} returned 204 No Content")
            if response.status_code != 200:
                raise StreamResponseError(f"HTTP {response.status_code}")
            content_type = response.headers.get("content-type", "").partition(";")[0].strip().lower()
            if content_type != EVENT_STREAM_CONTENT_TYPE:
                raise StreamResponseError(f"unexpected content type {content_type!r}")

            if self._reconnect_attempts > 0:
                logger.info("[SSE] Reconnected after %s attempts", self._reconnect_attempts)
            else:
                logger.info("[SSE] Connected to %s", self.url)
            self._connected = True
            self._reconnect_attempts = 0
            self._reconnect_delay = self.config.reconnect_base_delay

            decoder = SSEDecoder()
            decoder.last_event_id = self._last_event_id
            async for line in response.aiter_lines():
                event = decoder.decode(line.rstrip("\r\n"))
                self._last_event_id = decoder.last_event_id
                if decoder.retry is not None:
                    self._server_retry_ms = decoder.retry
                if event is None or event.event != self.event_type:
                    continue
                yield event
