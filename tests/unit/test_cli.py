"""Tests for the catalyst-gen command line."""

import json
import logging

import pytest
import structlog
from typer.testing import CliRunner

from catalyst.core import get_settings
from catalyst.main import app

runner = CliRunner()

MANIFEST = {
    "schemaVersion": "1.0.0",
    "components": {
        "card": {"id": "card", "displayName": "Card", "type": "div", "children": ["button"]},
        "button": {"id": "button", "displayName": "Button", "type": "button"},
    },
}


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Project with a manifest; quiet logging restored after the test."""
    monkeypatch.setenv("CATALYST_LOG_LEVEL", "ERROR")
    get_settings.cache_clear()
    path = tmp_path / ".catalyst" / "manifest.json"
    path.parent.mkdir()
    path.write_text(json.dumps(MANIFEST))
    yield tmp_path
    get_settings.cache_clear()
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.mark.integration
def test_generate(project):
    result = runner.invoke(app, ["generate", str(project)])

    assert result.exit_code == 0, result.output
    assert "files written: 4" in result.stdout
    assert (project / "src" / "components" / "Card.jsx").exists()
    assert (project / "src" / "App.jsx").exists()
    assert (project / "src" / "main.jsx").exists()
    assert (project / ".catalyst" / "hash-cache.json").exists()


@pytest.mark.integration
def test_generate_twice_skips(project):
    runner.invoke(app, ["generate", str(project)])
    result = runner.invoke(app, ["generate", str(project)])

    assert result.exit_code == 0, result.output
    assert "No changes" in result.stdout


@pytest.mark.integration
def test_generate_full_json(project):
    result = runner.invoke(app, ["generate", str(project), "--full", "--json"])

    assert result.exit_code == 0, result.output
    summary = json.loads(result.stdout)
    assert summary["type"] == "full"
    assert summary["files_written"] == 4
    assert summary["breakdown"]["added"] == 2


@pytest.mark.integration
def test_generate_failure_exit_code(project):
    manifest = dict(MANIFEST)
    manifest["components"] = {
        **MANIFEST["components"],
        "bad": {"id": "bad", "displayName": "not valid", "type": "div"},
    }
    (project / ".catalyst" / "manifest.json").write_text(json.dumps(manifest))

    result = runner.invoke(app, ["generate", str(project)])

    assert result.exit_code == 1


@pytest.mark.integration
def test_missing_manifest(tmp_path, project):
    result = runner.invoke(app, ["generate", str(tmp_path / "empty")])
    assert result.exit_code != 0

    (tmp_path / "empty").mkdir()
    result = runner.invoke(app, ["generate", str(tmp_path / "empty")])
    assert result.exit_code == 2


@pytest.mark.integration
def test_status(project):
    result = runner.invoke(app, ["status", str(project)])

    assert result.exit_code == 0, result.output
    assert "components: 2 (cached: 0)" in result.stdout
    assert "added: 2" in result.stdout
