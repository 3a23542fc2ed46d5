"""PageSpeed Insights client returning raw Lighthouse results."""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from core.errors import RemoteAuditError

DEFAULT_PSI_ENDPOINT = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
PSI_CATEGORIES = ("PERFORMANCE", "ACCESSIBILITY", "BEST_PRACTICES", "SEO")


class AuditClient(Protocol):
    def audit(self, url: str) -> dict[str, Any]: ...


class PageSpeedClient:
    """Runs Lighthouse through the PSI v5 API.

    ``audit`` returns ``{"lhr": <lighthouseResult>, "crux": <originLoadingExperience>}``.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        endpoint: str = DEFAULT_PSI_ENDPOINT,
        strategy: str = "mobile",
        timeout: float = 120.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._endpoint = endpoint
        self._strategy = strategy
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def audit(self, url: str) -> dict[str, Any]:
        params: list[tuple[str, str]] = [("url", url), ("strategy", self._strategy)]
        params.extend(("category", category) for category in PSI_CATEGORIES)
        if self._api_key:
            params.append(("key", self._api_key))

        try:
            response = self._client.get(self._endpoint, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RemoteAuditError(
                f"HTTP_{exc.response.status_code}", _error_message(exc.response)
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteAuditError("NETWORK_ERROR", str(exc)) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise RemoteAuditError("INVALID_RESPONSE", "Response body is not JSON") from exc
        if not isinstance(body, dict):
            raise RemoteAuditError("INVALID_RESPONSE", "Response body is not a JSON object")
        lhr = body.get("lighthouseResult")
        if not isinstance(lhr, dict):
            raise RemoteAuditError("NO_LIGHTHOUSE_RESULT", "Response has no lighthouseResult")
        return {"lhr": lhr, "crux": body.get("originLoadingExperience") or {}}

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "PageSpeedClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.text[:200]


__all__ = ["AuditClient", "DEFAULT_PSI_ENDPOINT", "PSI_CATEGORIES", "PageSpeedClient"]
