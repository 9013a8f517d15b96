"""Tests for the jsonws-proxy command line."""

from __future__ import annotations

import sys

import pytest
from click.testing import CliRunner

from jsonws.cli import cli

API_YAML = """\
name: Tester API
enums:
  Mode: {A: 0, B: 1}
methods:
  - {name: vray.start, returns: async}
"""

SERVICE_MODULE = """\
from jsonws import Service

service = Service("1.0", "Module API")
service.register_method(name="jobs.list", returns=["string"])


def build():
    return service
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("JSONWS_LANGUAGE", "JSONWS_PROXY_NAME", "JSONWS_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def api_yaml(tmp_path):
    path = tmp_path / "api.yaml"
    path.write_text(API_YAML, encoding="utf-8")
    return path


@pytest.fixture
def service_module(tmp_path, monkeypatch):
    """An importable module defining a Service."""
    (tmp_path / "render_service_def.py").write_text(SERVICE_MODULE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    yield "render_service_def"
    sys.modules.pop("render_service_def", None)


class TestGenerate:
    """jsonws-proxy generate."""

    def test_python_to_stdout(self, runner, api_yaml) -> None:
        result = runner.invoke(cli, ["generate", str(api_yaml), "-n", "Tester"])

        assert result.exit_code == 0, result.output
        assert "class Tester(ProxyBase):" in result.output

    def test_javascript(self, runner, api_yaml) -> None:
        result = runner.invoke(cli, ["generate", str(api_yaml), "--language", "javascript", "--name", "Tester"])

        assert result.exit_code == 0, result.output
        assert "module.exports = Tester;" in result.output

    def test_output_file(self, runner, api_yaml, tmp_path) -> None:
        target = tmp_path / "tester.py"
        result = runner.invoke(cli, ["generate", str(api_yaml), "-o", str(target)])

        assert result.exit_code == 0, result.output
        assert "class Proxy(ProxyBase):" in target.read_text(encoding="utf-8")

    def test_module_attribute(self, runner, service_module) -> None:
        result = runner.invoke(cli, ["generate", f"{service_module}:service", "-l", "Python"])

        assert result.exit_code == 0, result.output
        assert '"jobs.list",' in result.output

    def test_module_callable(self, runner, service_module) -> None:
        result = runner.invoke(cli, ["generate", f"{service_module}:build", "-l", "Python"])

        assert result.exit_code == 0, result.output
        assert "Module API" in result.output

    def test_language_from_environment(self, runner, api_yaml, monkeypatch) -> None:
        monkeypatch.setenv("JSONWS_LANGUAGE", "JavaScript")
        result = runner.invoke(cli, ["generate", str(api_yaml)])

        assert result.exit_code == 0, result.output
        assert "module.exports = Proxy;" in result.output

    def test_unsupported_language(self, runner, api_yaml) -> None:
        result = runner.invoke(cli, ["generate", str(api_yaml), "-l", "Cobol"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Cobol" in result.output

    def test_bad_source(self, runner) -> None:
        result = runner.invoke(cli, ["generate", "no-such-thing"])

        assert result.exit_code == 1
        assert "module:attribute" in result.output

    def test_missing_module(self, runner) -> None:
        result = runner.invoke(cli, ["generate", "no_such_module_xyz:service"])

        assert result.exit_code == 1
        assert "cannot import" in result.output

    def test_missing_file(self, runner, tmp_path) -> None:
        result = runner.invoke(cli, ["generate", str(tmp_path / "absent.yaml")])

        assert result.exit_code == 1

    def test_bad_timeout_environment(self, runner, api_yaml, monkeypatch) -> None:
        """An unusable JSONWS_TIMEOUT is reported, not raised as a traceback."""
        monkeypatch.setenv("JSONWS_TIMEOUT", "soon")
        result = runner.invoke(cli, ["generate", str(api_yaml)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "JSONWS_TIMEOUT" in result.output


class TestLanguages:
    def test_lists_languages(self, runner) -> None:
        result = runner.invoke(cli, ["languages"])

        assert result.exit_code == 0
        assert result.output.splitlines() == ["JavaScript", "Python"]

    def test_debug_flag(self, runner) -> None:
        result = runner.invoke(cli, ["--debug", "languages"])
        assert result.exit_code == 0
