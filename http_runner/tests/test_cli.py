"""
Tests for the command line interface and its exit codes.

Requests are routed to the in-process target app by wrapping
``run_requests`` with the ASGI transport.
"""

import json

import pytest
from click.testing import CliRunner

from http_runner import __version__
from http_runner import main as cli_module
from http_runner.main import (
    EXIT_DEFINITION_ERROR,
    EXIT_OK,
    EXIT_REQUEST_FAILED,
    cli,
)
from http_runner.services.runner import run_requests

from conftest import BASE_URL


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def route_to_target(monkeypatch, transport, tmp_path):
    """Send CLI requests to the target app and isolate the working directory."""
    async def run_against_target(definitions, context, on_outcome=None):
        return await run_requests(definitions, context, transport=transport, on_outcome=on_outcome)

    monkeypatch.setattr(cli_module, "run_requests", run_against_target)
    monkeypatch.chdir(tmp_path)


def write_definitions(tmp_path, definitions) -> str:
    path = tmp_path / "requests.json"
    path.write_text(json.dumps(definitions), encoding="utf-8")
    return str(path)


class TestExitCodes:
    """The exit code reflects overall success."""

    def test_all_requests_succeed(self, runner, tmp_path):
        path = write_definitions(tmp_path, [
            {"name": "one", "url": f"{BASE_URL}/get", "method": "GET"},
            {"name": "two", "url": f"{BASE_URL}/status/201", "method": "POST"},
        ])

        result = runner.invoke(cli, ["--file", path])

        assert result.exit_code == EXIT_OK

    def test_any_failed_request_fails_the_run(self, runner, tmp_path):
        path = write_definitions(tmp_path, [
            {"name": "ok", "url": f"{BASE_URL}/get", "method": "GET"},
            {"name": "broken", "url": f"{BASE_URL}/status/500", "method": "GET"},
        ])

        result = runner.invoke(cli, ["--file", path])

        assert result.exit_code == EXIT_REQUEST_FAILED == 1

    def test_empty_definitions_succeed(self, runner, tmp_path):
        path = write_definitions(tmp_path, [])

        result = runner.invoke(cli, ["--file", path, "--output", "json"])

        assert result.exit_code == EXIT_OK
        assert json.loads(result.stdout)["total"] == 0

    def test_invalid_definitions(self, runner, tmp_path):
        path = write_definitions(tmp_path, [
            {"url": f"{BASE_URL}/get", "method": "GET", "body": {}, "form": {}},
        ])

        result = runner.invoke(cli, ["--file", path])

        assert result.exit_code == EXIT_DEFINITION_ERROR == 2
        assert "Error: entry 0" in result.output
        assert "HTTP Request Test Started" not in result.output

    def test_malformed_json(self, runner, tmp_path):
        path = tmp_path / "requests.json"
        path.write_text("[{", encoding="utf-8")

        result = runner.invoke(cli, ["--file", str(path)])

        assert result.exit_code == EXIT_DEFINITION_ERROR
        assert "Invalid JSON" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["--file", str(tmp_path / "nope.json")])

        assert result.exit_code == EXIT_DEFINITION_ERROR
        assert "Cannot read definitions file" in result.output


class TestOutputFormats:
    """Pretty and JSON output."""

    def test_pretty_output(self, runner, tmp_path):
        path = write_definitions(tmp_path, [
            {"name": "users", "url": f"{BASE_URL}/get", "method": "get"},
            {"name": "slow", "url": f"{BASE_URL}/delay/5", "method": "GET"},
        ])

        result = runner.invoke(cli, ["-f", path, "-t", "1"])

        assert result.exit_code == EXIT_REQUEST_FAILED
        output = result.output
        assert "HTTP Request Test Started (Timeout: 1s)" in output
        assert "[1/2] users" in output
        assert "[2/2] slow" in output
        assert "Request timeout (1s)" in output
        assert "Test Summary" in output
        assert "Success rate: 50.0%" in output
        assert output.index("[1/2]") < output.index("[2/2]") < output.index("Test Summary")

    def test_json_output(self, runner, tmp_path):
        path = write_definitions(tmp_path, [
            {"name": "first", "url": f"{BASE_URL}/get", "method": "GET"},
            {"name": "second", "url": f"{BASE_URL}/status/404", "method": "DELETE"},
        ])

        result = runner.invoke(cli, ["--file", path, "--output", "json"])

        document = json.loads(result.stdout)
        assert document["total"] == 2
        assert document["succeeded"] == 1
        assert document["failed"] == 1
        assert document["success_rate"] == 50.0
        assert [o["name"] for o in document["outcomes"]] == ["first", "second"]
        assert document["outcomes"][1]["status_code"] == 404
        assert document["outcomes"][1]["method"] == "DELETE"

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_invalid_output_format(self, runner, tmp_path):
        path = write_definitions(tmp_path, [])

        result = runner.invoke(cli, ["--file", path, "--output", "xml"])

        assert result.exit_code == 2


class TestEnvironmentOptions:
    """Variables from .env files and the process environment."""

    def test_process_environment_overrides_env_file(self, runner, tmp_path, monkeypatch):
        env_file = tmp_path / "vars.env"
        env_file.write_text(f"RUNNER_BASE={BASE_URL}\nRUNNER_ITEM=from-file\n")
        monkeypatch.setenv("RUNNER_ITEM", "from-process")
        path = write_definitions(tmp_path, [
            {"url": "{{RUNNER_BASE}}/anything/{{RUNNER_ITEM}}", "method": "GET"},
        ])

        result = runner.invoke(cli, ["--file", path, "--env-file", str(env_file), "-o", "json"])

        assert result.exit_code == EXIT_OK
        outcome = json.loads(result.stdout)["outcomes"][0]
        assert outcome["url"] == f"{BASE_URL}/anything/from-process"

    def test_default_env_file_in_working_directory(self, runner, tmp_path):
        (tmp_path / ".env").write_text(f'RUNNER_DEFAULT_BASE="{BASE_URL}"\n')
        path = write_definitions(tmp_path, [
            {"url": "{{RUNNER_DEFAULT_BASE}}/get", "method": "GET"},
        ])

        result = runner.invoke(cli, ["--file", path, "-o", "json"])

        assert result.exit_code == EXIT_OK
        assert json.loads(result.stdout)["outcomes"][0]["url"] == f"{BASE_URL}/get"

    def test_strict_variables(self, runner, tmp_path):
        path = write_definitions(tmp_path, [
            {"url": f"{BASE_URL}/anything/{{{{RUNNER_UNDEFINED_VARIABLE}}}}", "method": "GET"},
        ])

        lenient = runner.invoke(cli, ["--file", path, "-o", "json"])
        strict = runner.invoke(cli, ["--file", path, "-o", "json", "--strict-variables"])

        lenient_outcome = json.loads(lenient.stdout)["outcomes"][0]
        assert lenient.exit_code == EXIT_OK
        assert lenient_outcome["warnings"] == ["Undefined variable in URL: {{RUNNER_UNDEFINED_VARIABLE}}"]

        strict_outcome = json.loads(strict.stdout)["outcomes"][0]
        assert strict.exit_code == EXIT_REQUEST_FAILED
        assert strict_outcome["error_type"] == "unresolved_variable"
        assert strict_outcome["status_code"] is None
