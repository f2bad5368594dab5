"""Tests for the shiprisk CLI commands."""

import json

import pytest
from typer.testing import CliRunner

from src.cli import main as cli_main
from src.cli.config import AppConfig
from src.errors import ExternalServiceError
from src.orchestrator.models.intent import QueryIntent
from src.orchestrator.models.result import PipelineResult

runner = CliRunner()


class StubOrchestrator:
    """Orchestrator double returning a canned result or raising."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.messages = []

    async def run(self, message):
        self.messages.append(message)
        if self.error is not None:
            raise self.error
        return self.result


def _complete_config() -> AppConfig:
    return AppConfig(
        completion={"api_key": "sk-test-123456"},
        shipment_api={"url": "https://shipments.example.test"},
        prediction={"endpoint": "https://ml.example.test", "api_key": "ml-secret"},
    )


@pytest.fixture
def patched(monkeypatch):
    """Patch config loading, logging and wiring in the CLI module."""
    state = {"config": _complete_config(), "orchestrator": StubOrchestrator()}
    monkeypatch.setattr(cli_main, "load_config", lambda config_path=None: state["config"])
    monkeypatch.setattr(cli_main, "configure_logging", lambda *args, **kwargs: None)

    def build(config):
        config.require_runtime()
        return state["orchestrator"]

    monkeypatch.setattr(cli_main, "build_orchestrator", build)
    return state


class TestAsk:
    """Tests for `shiprisk ask`."""

    def test_json_output(self, patched):
        patched["orchestrator"].result = PipelineResult(
            intent=QueryIntent.SLA, message="Analyzed 1 shipment(s) for SLA risk", summary="All fine."
        )
        result = runner.invoke(cli_main.app, ["ask", "anything late?", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "message": "Analyzed 1 shipment(s) for SLA risk",
            "summary": "All fine.",
        }
        assert patched["orchestrator"].messages == ["anything late?"]

    def test_rich_output(self, patched):
        patched["orchestrator"].result = PipelineResult(intent=QueryIntent.GENERAL, message="Try asking")
        result = runner.invoke(cli_main.app, ["ask", "hello"])
        assert result.exit_code == 0
        assert "Try asking" in result.output

    def test_pipeline_error_shows_stable_message(self, patched):
        patched["orchestrator"].error = ExternalServiceError("shipment_api", "connect to 10.0.0.5 refused")
        result = runner.invoke(cli_main.app, ["ask", "shipments from NYC"])
        assert result.exit_code == 1
        assert "Database error occurred." in result.output

    def test_unexpected_error_hides_exception_text(self, patched):
        patched["orchestrator"].error = ValueError("Expecting value: api_key=sk-live-secret")
        result = runner.invoke(cli_main.app, ["ask", "hi"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error E-4999:" in result.stdout
        assert "An unexpected error occurred." in result.stdout
        assert "sk-live-secret" not in result.stdout
        assert "10.0.0.5" not in result.output

    def test_missing_config(self, patched):
        patched["config"] = AppConfig()
        result = runner.invoke(cli_main.app, ["ask", "hello"])
        assert result.exit_code == 1
        assert "shipment_api.url" in result.output


class TestConfigCommands:
    """Tests for `shiprisk config`."""

    def test_show_masks_secrets(self, patched):
        result = runner.invoke(cli_main.app, ["config", "show", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["completion"]["api_key"] == "***REDACTED***"
        assert data["prediction"]["api_key"] == "***REDACTED***"
        assert data["shipment_api"]["url"] == "https://shipments.example.test"

    def test_show_text(self, patched):
        result = runner.invoke(cli_main.app, ["config", "show"])
        assert result.exit_code == 0
        assert "ml-secret" not in result.output
        assert "shipment_api" in result.output

    def test_validate_ok(self, patched):
        result = runner.invoke(cli_main.app, ["config", "validate"])
        assert result.exit_code == 0
        assert "Config is valid." in result.output

    def test_validate_incomplete(self, patched):
        patched["config"] = AppConfig()
        result = runner.invoke(cli_main.app, ["config", "validate"])
        assert result.exit_code == 1
        assert "completion.api_key" in result.output

    def test_missing_file(self, monkeypatch):
        def raise_missing(config_path=None):
            raise FileNotFoundError("Config file not found: nope.yaml")

        monkeypatch.setattr(cli_main, "load_config", raise_missing)
        result = runner.invoke(cli_main.app, ["--config", "nope.yaml", "config", "validate"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestServe:
    """Tests for `shiprisk serve` preconditions."""

    def test_refuses_incomplete_config(self, patched):
        patched["config"] = AppConfig()
        result = runner.invoke(cli_main.app, ["serve"])
        assert result.exit_code == 1
        assert "Missing configuration" in result.output
