"""Shared helpers for CLI subcommands."""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Iterator

import typer

from core.config import get_settings
from services.container import Services, build_services


def emit_json(data: Any) -> None:
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2, default=str))


@contextmanager
def open_services() -> Iterator[Services]:
    services = build_services(get_settings())
    try:
        yield services
    finally:
        services.close()


__all__ = ["emit_json", "open_services"]
