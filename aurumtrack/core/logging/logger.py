"""JSON-lines logging on top of loguru.

Every record carries ``trace_id``, ``provider`` and ``error_code`` at the top
level; any other bound or contextual field lands under ``context``. A refresh
cycle opens a :func:`log_context` so the per-instrument and per-route events
it emits share one trace id.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterator, TextIO
from uuid import uuid4

from loguru import logger

from aurumtrack.core.logging.config import LogConfig

_TOP_LEVEL = ("trace_id", "provider", "error_code")

_trace: ContextVar[str | None] = ContextVar("aurumtrack_trace", default=None)
_fields: ContextVar[dict[str, Any]] = ContextVar("aurumtrack_fields", default={})


def _new_trace() -> str:
    return uuid4().hex


def _attach_context(record: dict[str, Any]) -> None:
    extra = record["extra"]
    if not extra.get("trace_id"):
        trace_id = _trace.get()
        if trace_id is None:
            trace_id = _new_trace()
            _trace.set(trace_id)
        extra["trace_id"] = trace_id

    for key, value in _fields.get().items():
        if extra.get(key) is None:
            extra[key] = value
    for key in _TOP_LEVEL:
        extra.setdefault(key, None)


def _encode(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def render_record(record: dict[str, Any]) -> str:
    """Serialise a loguru record to a single JSON line."""

    extra = record["extra"]
    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
    }
    payload.update({key: extra.get(key) for key in _TOP_LEVEL})
    context = {key: value for key, value in extra.items() if key not in _TOP_LEVEL}
    if context:
        payload["context"] = context
    if record["exception"] is not None:
        payload["exception"] = str(record["exception"].value)
    return json.dumps(payload, default=_encode)


class JsonLinesSink:
    """Loguru sink writing one JSON object per line to a stream or a file."""

    def __init__(self, stream: TextIO | None = None, path: str | Path | None = None):
        if (stream is None) == (path is None):
            raise ValueError("exactly one of stream or path is required")
        self.stream = stream
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def __call__(self, message: Any) -> None:
        line = render_record(message.record) + "\n"
        if self.path is not None:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(line)
            return
        self.stream.write(line)
        self.stream.flush()


def _install(config: LogConfig) -> None:
    handlers: list[dict[str, Any]] = []
    if config.console_output:
        handlers.append({"sink": JsonLinesSink(stream=config.console_stream or sys.stderr), "level": config.level})
    if config.file_output and config.file_path:
        handlers.append({"sink": JsonLinesSink(path=config.file_path), "level": config.level})
    logger.configure(handlers=handlers, patcher=_attach_context, extra=dict(config.extra))


def configure_logging(level: str = "INFO", **options: Any) -> LogConfig:
    """Replace every loguru handler with JSON sinks built from ``options``."""

    config = LogConfig(level=level, **options)
    _install(config)
    return config


@contextmanager
def log_context(*, trace_id: str | None = None, **fields: Any) -> Iterator[str]:
    """Attach ``fields`` and a trace id to every record logged inside the block.

    Nested blocks merge their fields over the enclosing ones and start a
    fresh trace unless ``trace_id`` is given.
    """

    active = trace_id or _new_trace()
    trace_token = _trace.set(active)
    fields_token = _fields.set({**_fields.get(), **fields})
    try:
        yield active
    finally:
        _fields.reset(fields_token)
        _trace.reset(trace_token)


configure_logging()


__all__ = [
    "JsonLinesSink",
    "configure_logging",
    "log_context",
    "logger",
    "render_record",
]
