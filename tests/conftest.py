"""Shared test fixtures and helpers for docreflect tests.

Provides:
- Git helpers: git_init()
- CliRunner fixtures: cli_runner, invoke_cli()
- Conversion helpers: convert_ts() for in-memory TypeScript sources
- Factory fixture: project_factory for custom file combinations
- JSON validation helpers: parse_json_output(), assert_json_envelope()
"""

from __future__ import annotations

import json
import os
import subprocess

import pytest
from click.testing import CliRunner

# ===========================================================================
# Git helpers
# ===========================================================================


def git_init(path):
    """Initialize a git repo, add all files, and commit."""
    subprocess.run(["git", "init"], cwd=path, capture_output=True)
    subprocess.run(["git", "config", "user.email", "t@t.com"], cwd=path, capture_output=True)
    subprocess.run(["git", "config", "user.name", "Test"], cwd=path, capture_output=True)
    subprocess.run(["git", "add", "."], cwd=path, capture_output=True)
    subprocess.run(["git", "commit", "-m", "init"], cwd=path, capture_output=True)


# ===========================================================================
# Conversion helpers
# ===========================================================================


def convert_ts(source, file_name="input.ts"):
    """Convert one TypeScript source string with the default plugins."""
    from docreflect.converter.converter import Converter

    return Converter().convert_source(source, file_name)


def find(context, full_name, kind=None):
    """Return the reflection with dotted *full_name* (optionally of *kind*)."""
    for reflection in context.project.iter_reflections():
        if reflection.full_name() != full_name:
            continue
        if kind is None or reflection.kind == kind:
            return reflection
    raise AssertionError(f"no reflection named {full_name!r}")


# ===========================================================================
# CliRunner helpers
# ===========================================================================


@pytest.fixture
def cli_runner():
    """Provide a Click CliRunner for in-process CLI testing."""
    return CliRunner()


def invoke_cli(runner, args, cwd=None, json_mode=False, input=None):
    """Invoke the docreflect CLI via CliRunner.

    Args:
        runner: CliRunner instance
        args: list of CLI arguments (e.g. ["comments", "src"])
        cwd: directory to run in
        json_mode: if True, prepend --json flag
        input: text fed to stdin
    Returns:
        click.testing.Result
    """
    from docreflect.cli import cli

    full_args = []
    if json_mode:
        full_args.append("--json")
    full_args.extend(args)

    old_cwd = os.getcwd()
    try:
        if cwd:
            os.chdir(str(cwd))
        result = runner.invoke(cli, full_args, input=input, catch_exceptions=False)
    finally:
        os.chdir(old_cwd)

    return result


# ===========================================================================
# JSON validation helpers
# ===========================================================================


def parse_json_output(result, command=None):
    """Parse JSON from a CliRunner result.

    Raises AssertionError with context on a non-zero exit or bad JSON.
    """
    assert result.exit_code == 0, f"Command {command or '?'} failed (exit {result.exit_code}):\n{result.output}"
    try:
        return json.loads(result.output)
    except json.JSONDecodeError as e:
        pytest.fail(f"Invalid JSON from {command or '?'}: {e}\nOutput was:\n{result.output[:500]}")


def assert_json_envelope(data, command=None):
    """Validate that a parsed JSON dict follows the docreflect envelope contract."""
    assert isinstance(data, dict), f"Expected dict, got {type(data)}"
    assert data.get("schema") == "docreflect-envelope-v1"
    assert "command" in data, "Missing 'command' key in envelope"
    assert "version" in data, "Missing 'version' key in envelope"
    assert "summary" in data, "Missing 'summary' key in envelope"
    assert "timestamp" in data.get("_meta", {}), "Missing 'timestamp' in _meta"
    if command:
        assert data["command"] == command, f"Expected command={command}, got {data['command']}"
    assert isinstance(data["summary"], dict), f"summary should be dict, got {type(data['summary'])}"


# ===========================================================================
# Project fixtures
# ===========================================================================


@pytest.fixture(autouse=True)
def _isolated_plugins(monkeypatch):
    """Keep plugin discovery state and env from leaking between tests."""
    from docreflect import plugins

    monkeypatch.delenv("DOCREFLECT_PLUGIN_MODULES", raising=False)
    plugins._reset_plugin_state_for_tests()
    yield
    plugins._reset_plugin_state_for_tests()


@pytest.fixture
def project_factory(tmp_path_factory):
    """Factory fixture for creating custom project layouts.

    Usage:
        def test_something(project_factory):
            proj = project_factory({
                "src/app.ts": "export function main() {}",
            })

    Returns a callable that accepts a dict of {relative_path: content}
    and returns the project path (a committed git repo unless git=False).
    """

    def _create(files, *, git=True):
        proj = tmp_path_factory.mktemp("project")
        (proj / ".gitignore").write_text(".docreflect/\n")

        for rel_path, content in files.items():
            fp = proj / rel_path
            fp.parent.mkdir(parents=True, exist_ok=True)
            fp.write_text(content)

        if git:
            git_init(proj)
        return proj

    return _create
