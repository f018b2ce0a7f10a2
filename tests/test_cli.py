"""
Command-line interface (kestrel.cli)
"""

import pytest
from click.testing import CliRunner

from kestrel.cli.__main__ import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestCheck:

    def test_check_sample_app(self, runner, sample_env_path):
        result = runner.invoke(cli, ["check", "sample_app", "--config", str(sample_env_path)])
        assert result.exit_code == 0, result.output
        assert "GreetingClient" in result.output
        assert "english" in result.output
        assert "no cycles" in result.output

    def test_check_quiet(self, runner, sample_env_path):
        result = runner.invoke(cli, ["-q", "check", "sample_app", "-c", str(sample_env_path)])
        assert result.exit_code == 0
        assert result.output.strip() == "5 components"

    def test_check_without_config_fails(self, runner):
        result = runner.invoke(cli, ["check", "sample_app"])
        assert result.exit_code == 1
        assert "app.name" in result.output

    def test_check_missing_config_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["check", "sample_app", "--config", str(tmp_path / "nope.env")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_check_unknown_package(self, runner):
        result = runner.invoke(cli, ["check", "no_such_package_anywhere"])
        assert result.exit_code == 1
        assert "no_such_package_anywhere" in result.output

    def test_verbose(self, runner, sample_env_path):
        result = runner.invoke(cli, ["-v", "check", "sample_app", "-c", str(sample_env_path)])
        assert result.exit_code == 0


class TestGraphCommands:

    def test_tree(self, runner, sample_env_path):
        result = runner.invoke(cli, ["tree", "sample_app", "-c", str(sample_env_path)])
        assert result.exit_code == 0
        assert "ReportService (singleton)" in result.output
        assert "EnglishGreeter (singleton)" in result.output

    def test_graph_stdout(self, runner, sample_env_path):
        result = runner.invoke(cli, ["graph", "sample_app", "-c", str(sample_env_path)])
        assert result.exit_code == 0
        assert result.output.startswith("digraph DependencyGraph {")
        assert "sample_app.greetings.GreetingClient" in result.output

    def test_graph_output_file(self, runner, sample_env_path, tmp_path):
        target = tmp_path / "deps.dot"
        result = runner.invoke(
            cli,
            ["graph", "sample_app", "-c", str(sample_env_path), "--output", str(target)],
        )
        assert result.exit_code == 0
        assert target.read_text().startswith("digraph")


class TestResolve:

    def test_resolve_by_qualifier(self, runner, sample_env_path):
        result = runner.invoke(cli, ["resolve", "sample_app", "english", "-c", str(sample_env_path)])
        assert result.exit_code == 0
        assert "EnglishGreeter" in result.output

    def test_resolve_by_class_path(self, runner, sample_env_path):
        result = runner.invoke(
            cli,
            ["-q", "resolve", "sample_app", "sample_app.greetings:GreetingClient",
             "-c", str(sample_env_path)],
        )
        assert result.exit_code == 0
        assert result.output.strip() == "GreetingClient(greeter=EnglishGreeter)"

    def test_resolve_unknown_target(self, runner, sample_env_path):
        result = runner.invoke(cli, ["resolve", "sample_app", "french", "-c", str(sample_env_path)])
        assert result.exit_code == 1
        assert "french" in result.output

    def test_resolve_unknown_class(self, runner, sample_env_path):
        result = runner.invoke(
            cli,
            ["resolve", "sample_app", "sample_app.greetings:Nope", "-c", str(sample_env_path)],
        )
        assert result.exit_code == 1


def test_version(runner):
    from kestrel import __version__

    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
