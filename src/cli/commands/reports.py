"""Read-side commands: saved URLs, runs and medians."""

from __future__ import annotations

from typing import Any

import typer

from .shared import emit_json, open_services


app = typer.Typer(
    help="Inspect saved reports and score medians",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    no_args_is_help=True,
)


@app.command("urls", help="List every URL with saved reports")
def list_urls(
    use_cache: bool = typer.Option(True, "--cache/--no-cache", help="Read through the cache"),
) -> None:
    with open_services() as services:
        emit_json(services.reports.get_all_saved_urls(use_cache))


@app.command("list", help="Show recent runs for a URL, oldest first")
def list_reports(
    url: str = typer.Argument(..., metavar="URL"),
    max_results: int | None = typer.Option(None, "--max-results", min=1),
    use_cache: bool | None = typer.Option(None, "--cache/--no-cache"),
    full: bool = typer.Option(False, "--full", help="Keep the attached full report"),
) -> None:
    options: dict[str, Any] = {}
    if max_results is not None:
        options["max_results"] = max_results
    if use_cache is not None:
        options["use_cache"] = use_cache
    with open_services() as services:
        runs = services.reports.get_reports(url, options)
    exclude = None if full else {"lhr"}
    emit_json([run.model_dump(mode="json", exclude=exclude) for run in runs])


@app.command("full", help="Print the latest full Lighthouse report for a URL")
def full_report(url: str = typer.Argument(..., metavar="URL")) -> None:
    from core.errors import NotFoundError

    with open_services() as services:
        try:
            emit_json(services.reports.get_full_report(url))
        except NotFoundError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1)


@app.command("medians", help="Median category scores for a URL, or pooled across all URLs")
def medians(
    url: str | None = typer.Argument(None, metavar="[URL]"),
    max_results: int | None = typer.Option(None, "--max-results", min=1),
    use_cache: bool = typer.Option(True, "--cache/--no-cache"),
) -> None:
    with open_services() as services:
        if url:
            emit_json(services.reports.get_median_scores(url, max_results))
            return
        options: dict[str, Any] = {"use_cache": use_cache}
        if max_results is not None:
            options["max_results"] = max_results
        emit_json(services.reports.get_median_scores_of_all_urls(options))


__all__ = ["app"]
