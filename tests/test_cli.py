"""Tests for depstage CLI entrypoints."""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from rich.console import Console

import depstage.main as main
from depstage.cli.resolve import key_command, resolve_command
from depstage.resolvers.git import Git
from depstage.resolvers.uri import SourceURI


def _console() -> Console:
    return Console(record=True, width=400)


def test_main_dispatches_resolve_command(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Verify that `main` parses args and dispatches resolve_command."""

    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)
    captured: dict[str, object] = {}

    def fake_resolve_command(args) -> int:
        captured["args"] = args
        return 0

    monkeypatch.setattr(main, "resolve_command", fake_resolve_command)
    argv = ["depstage", "resolve", "git:https://example.com/r.git#dev", str(tmp_path), "-s", "stage", "-j", "2"]
    monkeypatch.setattr(sys, "argv", argv)

    assert main.main() == 0
    parsed = captured["args"]
    assert parsed.sources == ["git:https://example.com/r.git#dev", str(tmp_path)]
    assert parsed.staging == "stage"
    assert parsed.jobs == 2


def test_main_requires_command(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Ensure missing subcommands make the CLI print help and fail."""

    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)
    monkeypatch.setattr(sys, "argv", ["depstage"])

    assert main.main() == 1
    assert "Depstage" in capsys.readouterr().out


def test_resolve_command_stages_local_directory(tmp_path: Path) -> None:
    source = tmp_path / "src"
    source.mkdir()
    (source / "BUILD").write_text("x", encoding="utf-8")
    staging = tmp_path / "staging"
    console = _console()

    args = SimpleNamespace(sources=[str(source)], staging=str(staging), config=None, jobs=None)
    exit_code = resolve_command(args, console=console)

    assert exit_code == 0
    staged = list(staging.iterdir())
    assert len(staged) == 1
    assert (staged[0] / "BUILD").exists()
    assert staged[0].name in console.export_text()


def test_resolve_command_reports_failures(tmp_path: Path) -> None:
    console = _console()
    args = SimpleNamespace(
        sources=["ftp://example.com/x.zip"], staging=str(tmp_path), config=None, jobs=1
    )

    assert resolve_command(args, console=console) == 1
    assert "failed" in console.export_text()


def test_resolve_command_rejects_bad_config(tmp_path: Path) -> None:
    args = SimpleNamespace(
        sources=[str(tmp_path)], staging=None, config='{"max_workers": 0}', jobs=None
    )

    assert resolve_command(args, console=_console()) == 1


def test_key_command_prints_both_tiers(tmp_path: Path) -> None:
    console = _console()
    source = "git:https://example.com/repo.git#dev"
    args = SimpleNamespace(source=source, staging=str(tmp_path), config=None)

    assert key_command(args, console=console) == 0

    output = console.export_text()
    uri = SourceURI.parse(source)
    assert f"mirror: {Git().mirror_dir(uri, tmp_path)}" in output
    assert f"branch: {Git().branch_dir(uri, tmp_path)}" in output
    assert not any(tmp_path.iterdir())


def test_key_command_unsupported(tmp_path: Path) -> None:
    args = SimpleNamespace(source="gopher://example.com/x", staging=str(tmp_path), config=None)

    assert key_command(args, console=_console()) == 1


def test_resolve_command_reports_unparsable_source(tmp_path: Path) -> None:
    console = _console()
    args = SimpleNamespace(
        sources=["~nosuchuser_depstage/x"], staging=str(tmp_path), config=None, jobs=1
    )

    assert resolve_command(args, console=console) == 1
    assert "failed" in console.export_text()


def test_key_command_rejects_unparsable_source(tmp_path: Path) -> None:
    args = SimpleNamespace(source="~nosuchuser_depstage/x", staging=str(tmp_path), config=None)

    assert key_command(args, console=_console()) == 1
