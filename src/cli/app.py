"""Typer CLI entrypoint for the Lighthouse score store."""

from __future__ import annotations

import logging
import os
import shlex
import sys
from importlib import import_module

import typer
from rich.console import Console
from rich.logging import RichHandler

from lhscores import __version__

_SUBCOMMAND_SPECS: list[tuple[str, str, str]] = [
    ("reports", "cli.commands.reports", "Inspect saved reports and score medians"),
    ("audit", "cli.commands.audit", "Run audits and retention cleanup"),
    ("cache", "cli.commands.cache", "Inspect and clear the query cache"),
    ("config", "cli.commands.config", "Show effective configuration"),
]
_SUBCOMMAND_NAMES = {name for name, _, _ in _SUBCOMMAND_SPECS}
_SUBCOMMANDS_REGISTERED = False

app = typer.Typer(
    help="Lighthouse score store\n\nAudit pages, keep their score history and serve medians.\n",
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    add_completion=True,
)


@app.callback()
def root(
    ctx: typer.Context,
    version_flag: bool = typer.Option(
        False,
        "-v",
        "--version",
        help="Print the version and exit",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="DEBUG|INFO|WARNING|ERROR",
    ),
) -> None:
    if version_flag:
        typer.echo(__version__)
        raise typer.Exit()
    _configure_logging(log_level)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise typer.BadParameter(f"Unknown log level: {level}")
    logging.basicConfig(
        level=resolved,
        format="%(message)s",
        handlers=[
            RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
        ],
        force=True,
    )


def _parse_invoked_subcommand() -> str | None:
    completion_args = os.getenv("_TYPER_COMPLETE_ARGS")
    tokens: list[str]
    if completion_args:
        try:
            tokens = shlex.split(completion_args)
        except ValueError:
            tokens = completion_args.split()
        if tokens:
            tokens = tokens[1:]
    else:
        tokens = sys.argv[1:]

    for token in tokens:
        if token in _SUBCOMMAND_NAMES:
            return token
        if token.startswith("-"):
            continue
        break
    return None


def _register_subcommands(*, eager: bool = False) -> None:
    global _SUBCOMMANDS_REGISTERED
    if _SUBCOMMANDS_REGISTERED:
        return

    selected = _parse_invoked_subcommand()
    for name, module_path, help_text in _SUBCOMMAND_SPECS:
        if eager or selected == name:
            module = import_module(module_path)
            app.add_typer(module.app, name=name)
            continue
        app.add_typer(
            typer.Typer(
                help=help_text,
                add_completion=False,
                no_args_is_help=True,
            ),
            name=name,
        )

    _SUBCOMMANDS_REGISTERED = True


def main() -> None:
    _register_subcommands()
    app()


__all__ = ["app", "main"]
