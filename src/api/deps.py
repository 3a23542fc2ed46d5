"""Request-scoped access to the process-wide services."""

from __future__ import annotations

from fastapi import Request

from services.container import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


__all__ = ["get_services"]
