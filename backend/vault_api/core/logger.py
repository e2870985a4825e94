"""Logging setup: JSON lines on stdout, correlated by request id.

Credential material must never reach a log line. Besides not passing it,
:class:`JSONFormatter` promotes every ``extra`` key to a top-level field
and masks those whose name looks like a secret.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
# Inbound headers accepted as the correlation id, in priority order
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")
MAX_REQUEST_ID_LENGTH = 128

# Attributes every LogRecord carries; anything else came from ``extra=``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "request_id",
    "taskName",
}
MASK = "***"
SECRET_MARKERS = ("password", "secret", "token")

PLAIN_FORMAT = "%(asctime)s %(levelname)-7s %(name)s rid=%(request_id)s | %(message)s"


def _looks_secret(key: str) -> bool:
    key = key.lower()
    return any(marker in key for marker in SECRET_MARKERS)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, UTC timestamps with millisecond precision."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
        doc: dict[str, Any] = {
            "ts": f"{stamp}.{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        doc.update(
            (key, MASK if _looks_secret(key) else value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            doc["exc"] = self.formatException(record.exc_info)
        return json.dumps(doc, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``record.request_id`` unless the caller passed one (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = ensure_request_id() if has_request_context() else None
        return True


def _inbound_request_id() -> str | None:
    for header in INBOUND_ID_HEADERS:
        value = (request.headers.get(header) or "").strip()
        if value:
            return value[:MAX_REQUEST_ID_LENGTH]
    return None


def ensure_request_id() -> str:
    """Return the id of the current request, adopting or minting one on first use.

    Outside a request context every call returns a fresh id.
    """
    if not has_request_context():
        return uuid4().hex
    rid = g.get("request_id")
    if rid is None:
        rid = _inbound_request_id() or uuid4().hex
        g.request_id = rid
    return rid


def configure_logging(level: str | int = "INFO", *, json_output: bool = True) -> None:
    """Replace the root handlers with a single stdout handler.

    :param level: Level name (case-insensitive) or number.
    :param json_output: JSON lines when ``True``; :data:`PLAIN_FORMAT` otherwise.
    """
    formatter = JSONFormatter() if json_output else logging.Formatter(PLAIN_FORMAT)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Give every request an id and echo it in ``X-Request-ID``."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _assign_request_id() -> None:
        # The app context, and with it ``g``, may outlive a single request
        g.pop("request_id", None)
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response

    @app.teardown_request
    def _forget_request_id(_exc: BaseException | None) -> None:
        g.pop("request_id", None)


__all__ = [
    "REQUEST_ID_HEADER",
    "JSONFormatter",
    "RequestIdFilter",
    "configure_logging",
    "ensure_request_id",
    "init_app",
]
