"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from code_diff.cli import cli, handle_shell_command
from code_diff.errors import PreconditionError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def profiles(tmp_path):
    """Idle recording (behavior absent) and a recording with the behavior."""
    idle = tmp_path / "idle.json"
    idle.write_text(json.dumps([["204", 5], ["304", 1]]), encoding="utf-8")
    hp = tmp_path / "hp.json"
    hp.write_text(json.dumps([{"address": "104", "hits": 3}, {"address": "204", "hits": 1}]), encoding="utf-8")
    return idle, hp


def test_symbols_command(runner, map_file):
    result = runner.invoke(cli, ["symbols", str(map_file)])
    assert result.exit_code == 0
    assert "foo" in result.output
    assert "baz qux" in result.output


def test_narrow_applies_steps_in_order(runner, map_file, profiles):
    idle, hp = profiles
    result = runner.invoke(cli, ["narrow", str(map_file), "-s", f"exclude:{idle}", "-s", f"include:{hp}"])
    assert result.exit_code == 0, result.output
    assert "foo" in result.output
    assert "Excluded: 2" in result.output
    assert "Included: 1" in result.output


def test_narrow_writes_log(runner, map_file, profiles, tmp_path):
    _, hp = profiles
    log = tmp_path / "narrow.log"
    result = runner.invoke(cli, ["narrow", str(map_file), "-s", f"include:{hp}", "--log-output", str(log)])
    assert result.exit_code == 0, result.output
    assert "Included: 2" in log.read_text(encoding="utf-8")


def test_narrow_rejects_bad_step(runner, map_file):
    result = runner.invoke(cli, ["narrow", str(map_file), "-s", "sideways:x.json"])
    assert result.exit_code == 2
    assert "include:FILE" in result.output


def test_narrow_reports_missing_profile(runner, map_file, tmp_path):
    result = runner.invoke(cli, ["narrow", str(map_file), "-s", f"include:{tmp_path / 'nope.json'}"])
    assert result.exit_code == 1
    assert "Profile not found" in result.output


def test_narrow_reports_unreadable_profile(runner, map_file, tmp_path):
    result = runner.invoke(cli, ["narrow", str(map_file), "-s", f"include:{tmp_path}"])
    assert result.exit_code == 1
    assert "Cannot read profile" in result.output


def test_shell_session(runner, map_file, profiles):
    _, hp = profiles
    commands = "\n".join([
        f"/include {hp}",
        "/record",
        f"/include {hp}",
        "/goto 1",
        "/stub 1",
        "/delete 9",
        "/exit",
    ]) + "\n"
    result = runner.invoke(cli, ["shell", str(map_file)], input=commands)
    assert result.exit_code == 0, result.output
    assert "Start recording before marking" in result.output
    assert "Symbol starts at 0x00000200" in result.output
    assert "Stubbed symbol at 0x00000200" in result.output
    assert "Nothing to do for row 9" in result.output


def test_shell_survives_unreadable_profile(runner, map_file, profiles, tmp_path):
    _, hp = profiles
    commands = "\n".join([
        "/record",
        f"/include {hp}",
        f"/include {tmp_path}",
        "/list",
        "/exit",
    ]) + "\n"
    result = runner.invoke(cli, ["shell", str(map_file)], input=commands)
    assert result.exit_code == 0, result.output
    assert "Cannot read profile" in result.output
    assert "Included: 2" in result.output


class TestShellCommands:
    def test_exit(self, session, engine):
        assert handle_shell_command("/exit", session, engine) is False

    def test_help(self, session, engine, capsys):
        assert handle_shell_command("/help", session, engine)
        assert "Marking 'include' twice" in capsys.readouterr().out

    def test_mark_before_record_raises(self, session, engine, profiles):
        _, hp = profiles
        with pytest.raises(PreconditionError):
            handle_shell_command(f"/include {hp}", session, engine)

    def test_record_include_reset(self, session, engine, profiles):
        idle, hp = profiles
        handle_shell_command("/record", session, engine)
        handle_shell_command(f"/exclude {idle}", session, engine)
        handle_shell_command(f"/include {hp}", session, engine)
        assert [r.symbol_name for r in session.include] == ["foo"]
        handle_shell_command("/reset", session, engine)
        assert session.current_exclude_count == 0
        assert not session.marks_enabled

    def test_row_argument_required(self, session, engine, capsys):
        assert handle_shell_command("/delete", session, engine)
        assert "Usage: /delete ROW" in capsys.readouterr().out

    def test_unknown_command(self, session, engine, capsys):
        assert handle_shell_command("/bogus", session, engine)
        assert "Unknown command" in capsys.readouterr().out
