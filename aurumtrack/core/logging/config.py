"""Settings accepted by :func:`aurumtrack.core.logging.configure_logging`."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class LogConfig(BaseModel):
    """Where JSON log lines go and how verbose they are.

    ``console_stream`` defaults to stderr at configuration time; stdout is
    reserved for the dashboard and command output.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    level: str = "INFO"
    console_output: bool = True
    console_stream: Any = None
    file_output: bool = False
    file_path: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level


__all__ = ["LEVELS", "LogConfig"]
