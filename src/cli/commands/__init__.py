"""CLI command groups."""

__all__ = ["audit", "cache", "config", "reports"]
