"""Configuration inspection commands."""

from __future__ import annotations

from typing import Any

import typer

from aurumtrack.core.config import ConfigManager, get_default_config

from .constants import VALIDATION_EXIT_CODE
from .utils import emit_error, get_cli_options, load_config, prepare_output

config_app = typer.Typer(help="Configuration operations.")


def register(app: typer.Typer) -> None:
    app.add_typer(config_app, name="config", help="Inspect or initialise the configuration")


@config_app.command("show")
def show_command(
    ctx: typer.Context,
    section: str | None = typer.Option(None, "--section", help="Only show one section, e.g. providers."),
) -> None:
    """Print the effective configuration after file and environment overrides."""

    settings = load_config(ctx).to_dict()
    if section is not None:
        if section not in settings:
            raise typer.BadParameter(
                f"Unknown section '{section}'. Available: {', '.join(settings)}",
                param_hint="--section",
            )
        settings = {section: settings[section]}

    rows = [
        {"section": name, "key": key, "value": _display(value)}
        for name, values in settings.items()
        for key, value in values.items()
    ]
    formatter, stream, stack = prepare_output(ctx)
    try:
        formatter.render(rows, stream=stream, columns=["section", "key", "value"])
    finally:
        stack.close()


@config_app.command("init")
def init_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing configuration file."),
) -> None:
    """Write the default configuration to the configuration file."""

    options = get_cli_options(ctx)
    manager = ConfigManager(options.config_path, use_env=False)
    if manager.config_path.exists() and not force:
        emit_error(
            "Configuration file already exists, pass --force to overwrite it.",
            "CONFIG_EXISTS",
            details={"path": str(manager.config_path)},
        )
        raise typer.Exit(code=VALIDATION_EXIT_CODE)

    manager.config = get_default_config()
    try:
        manager.save_config()
    except OSError as exc:
        emit_error(f"Failed to write configuration: {exc}", "CONFIG_WRITE_ERROR", details={"path": str(manager.config_path)})
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc
    typer.echo(str(manager.config_path))


@config_app.command("path")
def path_command(ctx: typer.Context) -> None:
    """Print the configuration file location."""

    options = get_cli_options(ctx)
    typer.echo(str(ConfigManager(options.config_path, use_env=False).config_path))


def _display(value: Any) -> Any:
    if isinstance(value, list) and len(value) > 4:
        return f"[{len(value)} entries]"
    return value


__all__ = ["config_app", "register"]
