"""Configuration inspection commands."""

from __future__ import annotations

from typing import Any

import typer

from core.config import Settings, get_settings
from .shared import emit_json


app = typer.Typer(
    help="Show effective configuration",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    no_args_is_help=True,
)

_SECRET_FIELDS = {"psi_api_key"}


@app.command("show", help="Show the effective configuration")
def show_config(
    json_out: bool = typer.Option(True, "--json/--no-json", help="Emit JSON"),
) -> None:
    payload = get_settings().model_dump(mode="json", exclude=_SECRET_FIELDS)
    if json_out:
        emit_json(payload)
        return
    for key, value in payload.items():
        typer.echo(f"{key}={value}")


@app.command("diff", help="Show values that differ from the defaults")
def diff_config() -> None:
    current = get_settings().model_dump(mode="json", exclude=_SECRET_FIELDS)
    defaults = _settings_defaults()
    diff: dict[str, dict[str, Any]] = {}
    for key, value in current.items():
        default = defaults.get(key)
        if value != default:
            diff[key] = {"value": value, "default": default}
    emit_json(diff)


def _settings_defaults() -> dict[str, Any]:
    defaults: dict[str, Any] = {}
    for name, field in Settings.model_fields.items():
        if name in _SECRET_FIELDS:
            continue
        default = field.get_default(call_default_factory=True)
        defaults[name] = str(default) if hasattr(default, "__fspath__") else default
    return defaults


__all__ = ["app"]
