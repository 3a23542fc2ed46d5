"""Reversible mapping between URLs and storage identifiers."""

from __future__ import annotations

import re

_SLASH = "/"
_SLASH_ESCAPE = "__"

# Underscores and percent signs are escaped before substitution so that every
# underscore in an identifier comes from a slash.
_UNESCAPES = {"25": "%", "5F": "_"}
_UNESCAPE_PATTERN = re.compile(r"%(25|5F)")


def slugify(url: str) -> str:
    """Return the storage identifier for ``url``."""
    escaped = url.replace("%", "%25").replace("_", "%5F")
    return escaped.replace(_SLASH, _SLASH_ESCAPE)


def deslugify(url_id: str) -> str:
    """Return the URL for an identifier produced by :func:`slugify`."""
    restored = url_id.replace(_SLASH_ESCAPE, _SLASH)
    return _UNESCAPE_PATTERN.sub(lambda match: _UNESCAPES[match.group(1)], restored)


__all__ = ["deslugify", "slugify"]
