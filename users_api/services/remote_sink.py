"""
Users API: Remote Log Sink
============================

What:  Ships event log records to a Logtail (Better Stack) HTTP ingestion
       endpoint without blocking the request path.
How:   Three pieces, composed by the application factory:

    EventLogger ──▶ BoundedQueueHandler ──▶ queue.Queue(maxsize=N)
                                                 │
                        DrainingQueueListener ◀──┘ (background thread)
                                 │
                                 ▼
                         RemoteLogHandler ──▶ POST LOGTAIL_URL (httpx)

Delivery policy:
    - Fire-and-forget: the caller only enqueues.
    - Queue full: the new record is dropped and counted in `dropped`.
    - Delivery failure (network error, non-2xx): counted in `failed`.
      Never retried and never raised to the caller.
    - Shutdown: queued records are posted until the drain deadline; the
      rest are counted in the listener's `dropped`.

Payload (one JSON object per record):
    {"dt": "2024-01-15T12:00:00.000Z", "level": "info",
     "message": "GET /users - users listed", ...metadata}
"""

import json
import logging
import queue
import time
from logging.handlers import QueueHandler, QueueListener
from typing import Any, Dict, Optional

import httpx

from users_api.services.event_logger import iso_timestamp, record_label, serialize_meta

# Internal diagnostics go to the root (console) logger only, never back into
# the remote sink.
logger = logging.getLogger(__name__)


class RemoteLogHandler(logging.Handler):
    """
    Posts each record to the remote collector with a bearer token.

    Runs on the queue listener thread, so the blocking httpx.Client is fine.

    Attributes:
        delivered: Records accepted by the collector (2xx).
        failed:    Records lost to network errors or non-2xx responses.
    """

    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__()
        self.url = url
        self._headers = {"Authorization": f"Bearer {token}"}
        self._client = client or httpx.Client(timeout=timeout)
        self.delivered = 0
        self.failed = 0

    def build_payload(self, record: logging.LogRecord) -> Dict[str, Any]:
        meta = getattr(record, "meta", None)
        # Round-trip through JSON so arbitrary metadata values become strings
        payload: Dict[str, Any] = json.loads(serialize_meta(meta)) if meta else {}
        payload["dt"] = iso_timestamp(record.created)
        payload["level"] = record_label(record).lower()
        payload["message"] = record.getMessage()
        return payload

    def emit(self, record: logging.LogRecord) -> None:
        try:
            response = self._client.post(
                self.url,
                json=self.build_payload(record),
                headers=self._headers,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            self.failed += 1
            logger.debug("Remote log delivery failed: %s", type(e).__name__)
            return
        except Exception:
            self.failed += 1
            self.handleError(record)
            return
        self.delivered += 1

    def close(self) -> None:
        self._client.close()
        super().close()


class BoundedQueueHandler(QueueHandler):
    """
    QueueHandler over a bounded queue that drops instead of blocking.

    Attributes:
        dropped: Records discarded because the queue was full.
    """

    def __init__(self, capacity: int):
        super().__init__(queue.Queue(maxsize=capacity))
        self.dropped = 0

    def enqueue(self, record: logging.LogRecord) -> None:
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            self.dropped += 1


class DrainingQueueListener(QueueListener):
    """
    QueueListener whose stop() drains the queue within a deadline.

    The stock listener enqueues its stop sentinel with put_nowait, which
    fails on a full bounded queue. A blocking put lets the listener thread
    drain pending records first.

    With drain_timeout set, stop() gives the listener that many seconds to
    keep shipping; records dequeued after the deadline are discarded and
    counted in `dropped`. A record already in flight still finishes, so
    stop() returns within drain_timeout plus one delivery timeout.
    """

    def __init__(self, queue, *handlers, drain_timeout: Optional[float] = None):
        super().__init__(queue, *handlers)
        self.drain_timeout = drain_timeout
        self.dropped = 0
        self._deadline: Optional[float] = None

    def start(self) -> None:
        self._deadline = None
        super().start()

    def stop(self) -> None:
        if self.drain_timeout is not None:
            self._deadline = time.monotonic() + self.drain_timeout
        super().stop()

    def handle(self, record: logging.LogRecord) -> None:
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self.dropped += 1
            return
        super().handle(record)

    def enqueue_sentinel(self) -> None:
        self.queue.put(self._sentinel)


def build_remote_sink(
    url: str,
    token: str,
    capacity: int = 1000,
    timeout: float = 5.0,
    drain_timeout: Optional[float] = None,
    client: Optional[httpx.Client] = None,
):
    """
    Assemble the remote sink pipeline and start its listener thread.

    Returns:
        (queue_handler, listener, remote_handler). Attach queue_handler to
        the event logger; stop listener, then close remote_handler, at
        shutdown. drain_timeout bounds how long stopping the listener keeps
        posting queued records (None waits for all of them).
    """
    remote_handler = RemoteLogHandler(url=url, token=token, timeout=timeout, client=client)
    queue_handler = BoundedQueueHandler(capacity)
    listener = DrainingQueueListener(queue_handler.queue, remote_handler, drain_timeout=drain_timeout)
    listener.start()
    return queue_handler, listener, remote_handler
