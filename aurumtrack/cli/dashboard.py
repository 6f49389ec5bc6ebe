"""Live dashboard and one-shot fetch commands."""

from __future__ import annotations

import asyncio
from typing import Any

import typer

from aurumtrack.core.client import AurumTrackClient
from aurumtrack.core.config import AurumTrackConfig
from aurumtrack.core.exceptions import AurumTrackError, ProviderError
from aurumtrack.core.interfaces import PresentationSink
from aurumtrack.core.logging import logger
from aurumtrack.core.models import DashboardView
from aurumtrack.core.services.dashboard import RefreshReport

from .constants import PROVIDER_EXIT_CODE, SYSTEM_EXIT_CODE
from .sinks import RichDashboardSink, instrument_rows, prediction_rows
from .utils import emit_error, get_cli_options, load_config, prepare_output

INSTRUMENT_COLUMNS = ["key", "label", "price", "change", "percent", "inr_per_gram", "premium"]
PREDICTION_COLUMNS = ["pair", "coefficient", "anchor", "anchor_quality", "current", "overnight", "expected_open"]
SECTIONS = ("all", "prices", "predictions")


def register(app: typer.Typer) -> None:
    app.command("watch")(watch_command)
    app.command("fetch")(fetch_command)


def build_client(config: AurumTrackConfig, sink: PresentationSink | None = None) -> AurumTrackClient:
    """Factory hook for obtaining an :class:`AurumTrackClient`."""

    return AurumTrackClient(config=config, sink=sink)


def _overrides(interval: float | None, provider: str | None) -> dict[str, Any]:
    updates: dict[str, Any] = {}
    if interval is not None:
        updates["refresh"] = {"interval_seconds": interval}
    if provider is not None:
        updates["providers"] = {"kind": provider.strip().lower()}
    return updates


def watch_command(
    ctx: typer.Context,
    interval: float | None = typer.Option(None, "--interval", help="Seconds between refresh cycles."),
    provider: str | None = typer.Option(None, "--provider", help="Quote provider (chart or scanner)."),
    once: bool = typer.Option(False, "--once", help="Run a single refresh cycle and exit."),
) -> None:
    """Show the live dashboard until interrupted."""

    options = get_cli_options(ctx)
    config = load_config(ctx, **_overrides(interval, provider))
    try:
        with RichDashboardSink(no_color=options.no_color) as sink:
            client = build_client(config, sink)
            asyncio.run(_watch(client, once))
    except KeyboardInterrupt:
        logger.info("Dashboard stopped")
    except AurumTrackError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error


async def _watch(client: AurumTrackClient, once: bool) -> None:
    async with client:
        client.service.restore()
        if once:
            await client.service.refresh()
            client.service.tick()
            return
        await client.scheduler().run(asyncio.Event())


def fetch_command(
    ctx: typer.Context,
    provider: str | None = typer.Option(None, "--provider", help="Quote provider (chart or scanner)."),
    section: str = typer.Option("all", "--section", help="What to print: all, prices or predictions."),
) -> None:
    """Run one refresh cycle and print the resulting dashboard."""

    normalized = section.strip().lower()
    if normalized not in SECTIONS:
        raise typer.BadParameter(
            f"Unsupported section '{section}'. Allowed values: {', '.join(SECTIONS)}",
            param_hint="--section",
        )

    formatter, stream, stack = prepare_output(ctx)
    config = load_config(ctx, **_overrides(None, provider))
    try:
        view, report = asyncio.run(_fetch(build_client(config)))
    except ProviderError as error:
        stack.close()
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=PROVIDER_EXIT_CODE) from error
    except AurumTrackError as error:
        stack.close()
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error

    if not report.updated:
        stack.close()
        emit_error("No instrument could be refreshed.", "NO_QUOTES", details={"failed": ",".join(report.failed)})
        raise typer.Exit(code=PROVIDER_EXIT_CODE)

    try:
        if normalized in ("all", "prices"):
            formatter.render(instrument_rows(view), stream=stream, columns=INSTRUMENT_COLUMNS, title="Prices")
        if normalized in ("all", "predictions"):
            formatter.render(prediction_rows(view), stream=stream, columns=PREDICTION_COLUMNS, title="Next open")
    finally:
        stack.close()


async def _fetch(client: AurumTrackClient) -> tuple[DashboardView, RefreshReport]:
    async with client:
        report = await client.service.refresh()
        return client.service.build_view(client.calendar.local_now()), report


__all__ = ["build_client", "fetch_command", "register", "watch_command"]
