"""Structured JSON logging."""

from aurumtrack.core.logging.config import LEVELS, LogConfig
from aurumtrack.core.logging.logger import (
    JsonLinesSink,
    configure_logging,
    log_context,
    logger,
    render_record,
)

__all__ = [
    "LEVELS",
    "JsonLinesSink",
    "LogConfig",
    "configure_logging",
    "log_context",
    "logger",
    "render_record",
]
