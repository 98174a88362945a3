"""End-to-end tests for the typer command line, against the in-memory API."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from beeline.repository.beeminder import BeeminderRepository
from beeline.terminal.app import app
from tests.fakes import T1, T2, FakeBeeminder, FakeEditor, make_datapoint

runner = CliRunner()


def flat(output: str) -> str:
    """Collapse the line wrapping Rich applies to long messages."""
    return " ".join(output.split())


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """The app callback installs a console handler on the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def cli_repository(
    monkeypatch: pytest.MonkeyPatch,
    repository: BeeminderRepository,
    fake_beeminder: FakeBeeminder,
) -> FakeBeeminder:
    for module in ("goal", "datapoint", "backup"):
        monkeypatch.setattr(f"beeline.terminal.{module}.BEEMINDER_REPO", repository)
    fake_beeminder.add_goal("pushups", safebuf=1)
    fake_beeminder.add_goal("reading", safebuf=0)
    fake_beeminder.add_datapoint("pushups", make_datapoint("a", T1, 1.0, "first"))
    fake_beeminder.add_datapoint("pushups", make_datapoint("b", T2, 2.0))
    return fake_beeminder


def test_no_arguments_shows_help() -> None:
    result = runner.invoke(app, [])

    assert "Usage" in result.output
    assert "list, ls" in result.output


def test_list_orders_by_urgency(cli_repository: FakeBeeminder) -> None:
    result = runner.invoke(app, ["list"])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].strip().startswith("reading")
    assert lines[1].strip().startswith("pushups")
    assert "[+1 within 1 day]" in lines[0]


def test_list_alias(cli_repository: FakeBeeminder) -> None:
    result = runner.invoke(app, ["ls"])

    assert result.exit_code == 0, result.output
    assert "pushups" in result.output


def test_missing_api_key(
    cli_repository: FakeBeeminder, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("BEEMINDER_API_KEY")

    result = runner.invoke(app, ["list"])

    assert result.exit_code == 1
    assert "BEEMINDER_API_KEY" in result.output
    assert cli_repository.requests == []


def test_help_works_without_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BEEMINDER_API_KEY")

    result = runner.invoke(app, ["edit", "--help"])

    assert result.exit_code == 0
    assert "--dry-run" in result.output


def test_add_datapoint(cli_repository: FakeBeeminder) -> None:
    result = runner.invoke(app, ["add", "pushups", "15", "after lunch"])

    assert result.exit_code == 0, result.output
    assert "Added datapoint 15 to pushups (new1)" in result.output
    created = cli_repository.datapoints["pushups"][-1]
    assert created["value"] == 15.0
    assert created["comment"] == "after lunch"


def test_add_to_unknown_goal(cli_repository: FakeBeeminder) -> None:
    result = runner.invoke(app, ["a", "nope", "1"])

    assert result.exit_code == 1
    assert "Failed to add datapoint to goal 'nope'" in result.output


def test_edit_without_changes(
    cli_repository: FakeBeeminder, fake_editor: FakeEditor
) -> None:
    result = runner.invoke(app, ["edit", "pushups"])

    assert result.exit_code == 0, result.output
    assert "No changes." in result.output
    assert cli_repository.mutations() == []
    assert fake_editor.commands[0][0] == "nano"


def test_edit_uses_configured_editor_and_limit(
    cli_repository: FakeBeeminder, fake_editor: FakeEditor
) -> None:
    runner.invoke(app, ["config", "set", "--editor", "vim -n", "--edit-limit", "1"])

    result = runner.invoke(app, ["e", "pushups"])

    assert result.exit_code == 0, result.output
    assert fake_editor.commands[0][:2] == ["vim", "-n"]
    assert cli_repository.requests[0].url.params["count"] == "1"


def test_edit_limit_option_overrides_config(
    cli_repository: FakeBeeminder, fake_editor: FakeEditor
) -> None:
    result = runner.invoke(app, ["edit", "pushups", "--limit", "7"])

    assert result.exit_code == 0, result.output
    assert cli_repository.requests[0].url.params["count"] == "7"


def test_edit_applies_changes(
    cli_repository: FakeBeeminder, fake_editor: FakeEditor
) -> None:
    fake_editor.edit = lambda text: text.splitlines(keepends=True)[0]

    result = runner.invoke(app, ["edit", "pushups"])

    assert result.exit_code == 0, result.output
    assert "Deleting datapoint 'a'." in result.output
    assert cli_repository.datapoints["pushups"] == []


def test_edit_dry_run(cli_repository: FakeBeeminder, fake_editor: FakeEditor) -> None:
    fake_editor.edit = lambda text: text.splitlines(keepends=True)[0]

    result = runner.invoke(app, ["edit", "pushups", "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "Dry run, nothing was sent" in result.output
    assert "Deleting datapoint 'b'." in result.output
    assert cli_repository.mutations() == []


def test_edit_parse_error(cli_repository: FakeBeeminder, fake_editor: FakeEditor) -> None:
    fake_editor.edit = lambda text: text + "garbage\n"

    result = runner.invoke(app, ["edit", "pushups"])

    assert result.exit_code == 1
    assert "nothing was changed" in flat(result.output)
    assert "Line 4" in flat(result.output)
    assert cli_repository.mutations() == []


def test_edit_reports_failed_operations(
    cli_repository: FakeBeeminder, fake_editor: FakeEditor
) -> None:
    cli_repository.fail.add(("DELETE", "a"))
    fake_editor.edit = lambda text: text.splitlines(keepends=True)[0]

    result = runner.invoke(app, ["edit", "pushups"])

    assert result.exit_code == 1
    assert "1 of 2 changes to goal 'pushups' failed" in flat(result.output)
    assert [d["id"] for d in cli_repository.datapoints["pushups"]] == ["a"]


def test_backup_to_file(cli_repository: FakeBeeminder, tmp_path: Path) -> None:
    target = tmp_path / "out.json"

    result = runner.invoke(app, ["backup", str(target)])

    assert result.exit_code == 0, result.output
    assert "Backup completed successfully!" in result.output
    data = json.loads(target.read_text(encoding="utf-8"))
    assert [entry["goal"]["slug"] for entry in data["goals"]["active"]] == [
        "pushups",
        "reading",
    ]


def test_backup_default_filename_from_config(
    cli_repository: FakeBeeminder, tmp_path: Path
) -> None:
    target = tmp_path / "configured.json"
    runner.invoke(app, ["c", "s", "--backup-filename", str(target)])

    result = runner.invoke(app, ["b"])

    assert result.exit_code == 0, result.output
    assert target.is_file()


def test_backup_failure(cli_repository: FakeBeeminder, tmp_path: Path) -> None:
    cli_repository.fail.add(("GET", "reading"))

    result = runner.invoke(app, ["backup", str(tmp_path / "out.json")])

    assert result.exit_code == 1
    assert "Failed to fetch datapoints for active goal: reading" in flat(result.output)
    assert not (tmp_path / "out.json").exists()


def test_config_set_and_view(isolated_config: Path) -> None:
    result = runner.invoke(app, ["config", "set", "--edit-limit", "40", "--log-level", "info"])

    assert result.exit_code == 0, result.output
    assert "Configuration updated successfully!" in result.output
    saved = yaml.safe_load(isolated_config.read_text())
    assert saved["edit_limit"] == 40
    assert saved["log_level"] == "INFO"

    result = runner.invoke(app, ["config", "view"])

    assert result.exit_code == 0, result.output
    assert "edit_limit" in result.output
    assert "40" in result.output
    assert "None (using nano)" in result.output


def test_config_set_rejects_bad_log_level(isolated_config: Path) -> None:
    result = runner.invoke(app, ["config", "set", "--log-level", "loud"])

    assert result.exit_code == 1
    assert "Invalid log level: loud" in result.output
    assert not isolated_config.exists()


def test_bad_global_log_level() -> None:
    result = runner.invoke(app, ["--log-level", "loud", "config", "view"])

    assert result.exit_code == 1
    assert "Invalid log level" in result.output


def test_edit_non_utf8_file(cli_repository: FakeBeeminder, fake_editor: FakeEditor) -> None:
    fake_editor.encoding = "latin-1"
    fake_editor.edit = lambda text: text + "2024-03-05 10:00:00\t3\tcafé\t\n"

    result = runner.invoke(app, ["edit", "pushups"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "Error:" in result.output
    assert "nothing was changed" in flat(result.output)
    assert cli_repository.mutations() == []
