from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient

from api.main import app
from core.config import Settings
from core.errors import RemoteAuditError
from services.container import build_services


class ScriptedClient:
    def __init__(self, payloads: dict[str, dict[str, Any]]) -> None:
        self._payloads = payloads
        self.closed = False

    def audit(self, url: str) -> dict[str, Any]:
        if url not in self._payloads:
            raise RemoteAuditError("FAILED_DOCUMENT_REQUEST", f"unreachable: {url}")
        return self._payloads[url]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def audit_client(make_payload) -> ScriptedClient:
    return ScriptedClient(
        {
            "https://example.com/": make_payload({"performance": 0.8, "seo": 0.9}),
            "https://web.dev/": make_payload({"performance": 1.0, "seo": 0.7}),
        }
    )


@pytest.fixture
def client(tmp_path: Path, audit_client: ScriptedClient) -> Iterator[TestClient]:
    settings = Settings(DATA_DIR=str(tmp_path), PSI_API_KEY="secret-key")
    app.state.services = build_services(settings, audit_client=audit_client)
    with TestClient(app) as test_client:
        yield test_client
