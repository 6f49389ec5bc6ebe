"""Trading calendar inspection command."""

from __future__ import annotations

from datetime import datetime, timedelta

import typer

from aurumtrack.core.exceptions import ConfigurationError
from aurumtrack.core.services.calendars import TradingCalendar
from aurumtrack.core.services.gating import gating_state

from .constants import VALIDATION_EXIT_CODE
from .utils import emit_error, load_config, prepare_output

COLUMNS = ["at", "session", "gating", "trading_day", "next_trading_day", "tomorrow_trading_day"]


def register(app: typer.Typer) -> None:
    app.command("calendar")(calendar_command)


def calendar_command(
    ctx: typer.Context,
    at: str | None = typer.Option(
        None,
        "--at",
        help="ISO timestamp to evaluate; naive values are read as exchange local time.",
    ),
    days: int = typer.Option(0, "--days", min=0, help="Also list trading days in the next N days."),
) -> None:
    """Show the session and prediction gating state for an instant."""

    config = load_config(ctx)
    try:
        calendar = TradingCalendar.from_config(config.session)
    except ConfigurationError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from error
    if at is None:
        instant = calendar.local_now()
    else:
        try:
            instant = calendar.to_local(datetime.fromisoformat(at))
        except ValueError as exc:
            emit_error(f"Invalid timestamp '{at}': {exc}", "INVALID_TIMESTAMP")
            raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc

    rows: list[dict[str, object]] = [
        {
            "at": instant.isoformat(timespec="minutes"),
            "session": calendar.session_state(instant).value,
            "gating": gating_state(calendar, instant).value,
            "trading_day": calendar.is_trading_day(instant.date()),
            "next_trading_day": calendar.next_trading_day(instant).isoformat(),
            "tomorrow_trading_day": calendar.is_tomorrow_trading_day(instant),
        }
    ]

    formatter, stream, stack = prepare_output(ctx)
    try:
        formatter.render(rows, stream=stream, columns=COLUMNS)
        if days:
            start = instant.date() + timedelta(days=1)
            upcoming = calendar.trading_days(start, start + timedelta(days=days - 1))
            formatter.render(
                [{"trading_day": day.isoformat(), "weekday": day.strftime("%A")} for day in upcoming],
                stream=stream,
                title="Upcoming trading days",
            )
    finally:
        stack.close()


__all__ = ["calendar_command", "register"]
