"""Write-side commands: running audits and retention sweeps."""

from __future__ import annotations

from datetime import datetime, timezone

import typer

from .shared import emit_json, open_services


app = typer.Typer(
    help="Run audits and retention cleanup",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    no_args_is_help=True,
)


@app.command("run", help="Audit a URL through PageSpeed Insights and save the result")
def run_audit(
    url: str = typer.Argument(..., metavar="URL"),
    replace: bool = typer.Option(
        True,
        "--replace/--append",
        help="Overwrite the latest run instead of adding a new one",
    ),
) -> None:
    from services.audit_runner import run_lighthouse_api

    with open_services() as services:
        outcome = run_lighthouse_api(services.reports, services.audit_client, url, replace)
    emit_json(outcome.model_dump(mode="json"))
    if not outcome.ok:
        raise typer.Exit(code=1)


@app.command("cleanup", help="Erase URLs not viewed within the retention window")
def cleanup(
    days: int | None = typer.Option(None, "--days", min=1, help="Defaults to RETENTION_DAYS"),
    before: datetime | None = typer.Option(
        None,
        "--before",
        help="Explicit cutoff timestamp; overrides --days",
    ),
) -> None:
    from services.retention import default_cutoff, remove_stale_urls

    with open_services() as services:
        if before is not None:
            cutoff = before if before.tzinfo else before.replace(tzinfo=timezone.utc)
        else:
            cutoff = default_cutoff(days or services.settings.retention_days)
        removed = remove_stale_urls(services.reports, cutoff)
    emit_json({"cutoff": cutoff.isoformat(), "removed": removed})


__all__ = ["app"]
