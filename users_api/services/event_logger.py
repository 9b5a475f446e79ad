"""
Users API: Event Logger
=========================

What:  Leveled application event log with a fixed set of levels and
       structured metadata, delivered to every attached sink.
Why:   Route handlers need one small, injectable logging capability. Whether
       events go to the console, the remote collector, both, or nowhere is
       decided by the application factory, not by the handlers.
How:   EventLogger wraps a stdlib logging.Logger ("users_api.events") that does
       not propagate to the root logger. Sinks are ordinary logging handlers
       sharing LogLineFormatter.

Levels (lower priority number = more severe):
    alert  0   custom stdlib level 60, above CRITICAL, always emitted
    error  1
    warn   2
    info   3
    debug  4

Line format:
    [2024-01-15T12:00:00.000Z] INFO: POST /users - user created: Ana {"id":1}
    The trailing JSON is the metadata mapping; it is empty when no metadata
    was given.
"""

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

EVENT_LOGGER_NAME = "users_api.events"

ALERT = 60
logging.addLevelName(ALERT, "ALERT")


class LogLevel(str, Enum):
    """Fixed enumeration of event levels with explicit priority ordering."""

    ALERT = "alert"
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"

    @property
    def priority(self) -> int:
        return _PRIORITIES[self]

    @property
    def levelno(self) -> int:
        """The stdlib logging level this event level is emitted at."""
        return _LEVELNOS[self]

    @property
    def label(self) -> str:
        return self.value.upper()

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Case-insensitive lookup; WARNING is accepted for WARN."""
        upper = name.upper()
        if upper == "WARNING":
            upper = "WARN"
        return cls[upper]


_PRIORITIES = {
    LogLevel.ALERT: 0,
    LogLevel.ERROR: 1,
    LogLevel.WARN: 2,
    LogLevel.INFO: 3,
    LogLevel.DEBUG: 4,
}

_LEVELNOS = {
    LogLevel.ALERT: ALERT,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


# ══════════════════════════════════════════════════════════════════════════
# Formatting helpers (shared with the remote sink)
# ══════════════════════════════════════════════════════════════════════════

def iso_timestamp(created: float) -> str:
    """UTC ISO 8601 with millisecond precision and a Z suffix."""
    dt = datetime.fromtimestamp(created, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def record_label(record: logging.LogRecord) -> str:
    """Upper-case level label for a record, in event-level vocabulary."""
    event_level = getattr(record, "event_level", None)
    if event_level:
        return str(event_level).upper()
    if record.levelno == logging.WARNING:
        return "WARN"
    return record.levelname


def serialize_meta(meta: Optional[Mapping[str, Any]]) -> str:
    """Compact JSON for a metadata mapping; empty string when there is none."""
    if not meta:
        return ""
    return json.dumps(dict(meta), default=str, separators=(",", ":"), ensure_ascii=False)


class LogLineFormatter(logging.Formatter):
    """Renders `[<timestamp>] <LEVEL>: <message> <metadata JSON>`."""

    def format(self, record: logging.LogRecord) -> str:
        line = "[{}] {}: {} {}".format(
            iso_timestamp(record.created),
            record_label(record),
            record.getMessage(),
            serialize_meta(getattr(record, "meta", None)),
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


# ══════════════════════════════════════════════════════════════════════════
# Logger
# ══════════════════════════════════════════════════════════════════════════

class EventLogger:
    """
    Injectable event logging capability.

    Every call takes a message and an optional metadata mapping with string
    keys. Delivery is whatever the attached handlers do; a remote sink sits
    behind a queue so these calls never wait on the network.

    Args:
        logger: The stdlib logger carrying the sinks. Defaults to
                "users_api.events".
        resources: Objects with a stop() or close() method released by close()
                   (queue listeners, HTTP-backed handlers).
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        resources: Iterable[Any] = (),
    ):
        self._logger = logger or logging.getLogger(EVENT_LOGGER_NAME)
        self._resources = list(resources)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def log(self, level: LogLevel, message: str, meta: Optional[Mapping[str, Any]] = None) -> None:
        self._logger.log(
            level.levelno,
            message,
            extra={"meta": dict(meta or {}), "event_level": level.value},
        )

    def debug(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.DEBUG, message, meta)

    def info(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.INFO, message, meta)

    def warn(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.WARN, message, meta)

    def error(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.ERROR, message, meta)

    def alert(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.ALERT, message, meta)

    def close(self) -> None:
        """Stop queue listeners (flushing pending records) and close sinks."""
        for resource in self._resources:
            if hasattr(resource, "stop"):
                resource.stop()
            else:
                resource.close()
        self._resources.clear()


class NullEventLogger(EventLogger):
    """Discards every event. Used when the app runs without event logging."""

    def __init__(self):
        super().__init__(logger=logging.getLogger(f"{EVENT_LOGGER_NAME}.null"))

    def log(self, level: LogLevel, message: str, meta: Optional[Mapping[str, Any]] = None) -> None:
        return None
