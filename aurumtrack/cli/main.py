"""Main entry point for the AurumTrack command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from aurumtrack.core.logging import LEVELS, configure_logging

from .calendar import register as register_calendar_commands
from .config import register as register_config_commands
from .dashboard import register as register_dashboard_commands
from .formatters import create_formatter


def create_app() -> typer.Typer:
    """Create a Typer application instance for AurumTrack."""

    app = typer.Typer(add_completion=False, help="Live gold and silver dashboard with next-open gap prediction")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or jsonl).",
            show_default=True,
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write output to a file instead of stdout.",
        ),
        config: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help="Configuration file (defaults to ~/.aurumtrack/config.toml).",
        ),
        log_level: str = typer.Option(
            "WARNING",
            "--log-level",
            help="Log level for the stderr JSON log.",
            show_default=True,
        ),
        log_file: Path | None = typer.Option(None, "--log-file", help="Also append JSON logs to this file."),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        level = log_level.strip().upper()
        if level not in LEVELS:
            raise typer.BadParameter(f"Unknown log level '{log_level}'.", param_hint="--log-level")

        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "config_path": config,
                "log_level": level,
                "no_color": no_color,
            }
        )
        configure_logging(level, file_output=log_file is not None, file_path=str(log_file) if log_file else None)

    register_dashboard_commands(app)
    register_calendar_commands(app)
    register_config_commands(app)
    return app


app = create_app()
