from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli.app import _register_subcommands, app
from cli.commands import shared
from core.config import Settings, get_settings
from services.container import build_report_store, build_services

URL = "https://example.com/"


class StaticClient:
    def __init__(self, payload) -> None:
        self._payload = payload

    def audit(self, url: str):
        return self._payload


@pytest.fixture
def runner(tmp_path: Path, monkeypatch, make_payload) -> CliRunner:
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    get_settings.cache_clear()
    monkeypatch.setattr(
        shared,
        "build_services",
        lambda settings: build_services(
            settings, audit_client=StaticClient(make_payload({"performance": 0.6}))
        ),
    )
    _register_subcommands(eager=True)
    yield CliRunner()
    get_settings.cache_clear()


def _json(result) -> object:
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip()


def test_audit_then_read(runner: CliRunner) -> None:
    outcome = _json(runner.invoke(app, ["audit", "run", URL, "--append"]))
    assert outcome["errors"] is None

    assert _json(runner.invoke(app, ["reports", "urls"])) == [URL]

    runs = _json(runner.invoke(app, ["reports", "list", URL]))
    assert len(runs) == 1
    assert "lhr" not in runs[0]

    medians = _json(runner.invoke(app, ["reports", "medians"]))
    assert medians["performance"] == pytest.approx(60)


def test_cleanup_with_explicit_cutoff(runner: CliRunner, tmp_path: Path, make_payload) -> None:
    store = build_report_store(Settings(DATA_DIR=str(tmp_path)))
    store.save_report(URL, make_payload({"performance": 0.5}))

    payload = _json(runner.invoke(app, ["audit", "cleanup", "--before", "2999-01-01T00:00:00"]))
    assert payload["removed"] == [URL]
    assert store.get_all_saved_urls(use_cache=False) == []


def test_cache_clear_and_stats(runner: CliRunner, tmp_path: Path, make_payload) -> None:
    store = build_report_store(Settings(DATA_DIR=str(tmp_path)))
    store.save_report(URL, make_payload({"performance": 0.5}))
    store.get_all_saved_urls()

    stats = _json(runner.invoke(app, ["cache", "stats"]))
    assert stats["keys"] == ["getAllSavedUrls"]

    assert _json(runner.invoke(app, ["cache", "clear"])) == {"removed": 1}


def test_config_show_hides_secret(runner: CliRunner, monkeypatch) -> None:
    monkeypatch.setenv("PSI_API_KEY", "secret-key")
    get_settings.cache_clear()

    payload = _json(runner.invoke(app, ["config", "show"]))
    assert "psi_api_key" not in payload
    assert payload["delete_batch_size"] == 20
