"""Tests for cli.py - CLI interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from calc_history.cli import handle_session_line, main
from calc_history.session import CalcSession


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def project(tmp_path):
    """Empty project directory for configuration."""
    return tmp_path


def invoke(runner, project, args, **kwargs):
    return runner.invoke(main, ["--path", str(project)] + args, **kwargs)


class TestCLIBasics:
    """Basic CLI tests."""

    def test_version(self, runner):
        """Test --version flag."""
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "calc-history" in result.output

    def test_help(self, runner):
        """Test --help flag."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Calc History" in result.output
        assert "divide" in result.output
        assert "session" in result.output


class TestOperationCommands:
    """Tests for one-shot operation commands."""

    def test_add(self, runner, project):
        result = invoke(runner, project, ["add", "2", "2"])
        assert result.exit_code == 0
        assert "2 + 2 = 4" in result.output

    def test_add_negative_operands(self, runner, project):
        """Test negative numbers are not mistaken for options."""
        result = invoke(runner, project, ["add", "-5", "-3"])
        assert result.exit_code == 0
        assert "-5 + -3 = -8" in result.output

    def test_subtract(self, runner, project):
        result = invoke(runner, project, ["subtract", "4", "3"])
        assert result.exit_code == 0
        assert "4 - 3 = 1" in result.output

    def test_multiply(self, runner, project):
        result = invoke(runner, project, ["multiply", "3", "3"])
        assert result.exit_code == 0
        assert "3 * 3 = 9" in result.output

    def test_divide_truncates(self, runner, project):
        result = invoke(runner, project, ["divide", "5", "2"])
        assert result.exit_code == 0
        assert "5 / 2 = 2" in result.output

    def test_non_integer_rejected(self, runner, project):
        result = invoke(runner, project, ["add", "1.5", "2"])
        assert result.exit_code == 2

    def test_compact_mode(self, runner, project):
        """Test compact mode prints only the result."""
        config_dir = project / ".calc-history"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"compact_mode": True}))

        result = invoke(runner, project, ["multiply", "6", "7"])
        assert result.exit_code == 0
        assert result.output.strip() == "42"

    def test_int_bits_from_config(self, runner, project):
        config_dir = project / ".calc-history"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"int_bits": 8}))

        result = invoke(runner, project, ["add", "127", "1"])
        assert "127 + 1 = -128" in result.output


class TestConfigFileValues:
    """Tests for commands with bad values in config.json."""

    def _write(self, project, data):
        config_dir = project / ".calc-history"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps(data))

    def test_negative_int_bits_ignored(self, runner, project):
        self._write(project, {"int_bits": -1})

        result = invoke(runner, project, ["add", "1", "1"])
        assert result.exit_code == 0
        assert "1 + 1 = 2" in result.output

    def test_string_int_bits_ignored(self, runner, project):
        self._write(project, {"int_bits": "32"})

        result = invoke(runner, project, ["multiply", "2", "3"])
        assert result.exit_code == 0
        assert "2 * 3 = 6" in result.output

    def test_string_compact_mode_ignored(self, runner, project):
        """Test "false" as a string keeps full records."""
        self._write(project, {"compact_mode": "false"})

        result = invoke(runner, project, ["add", "1", "1"])
        assert result.exit_code == 0
        assert "1 + 1 = 2" in result.output

    def test_negative_history_limit_ignored(self, runner, project):
        self._write(project, {"history_limit": -2})

        result = invoke(runner, project, ["run", "add", "1", "1"])
        assert result.exit_code == 0
        assert "1 + 1 = 2" in result.output


class TestOperandRange:
    """Tests for operands wider than the configured integer width."""

    def test_single_operation_rejected(self, runner, project):
        result = invoke(runner, project, ["add", "3000000000", "0"])
        assert result.exit_code == 2
        assert "out of range" in result.output
        assert "-1294967296" not in result.output

    def test_run_rejected_before_any_step(self, runner, project):
        result = invoke(runner, project, ["run", "add", "1", "1", "add", "3000000000", "0"])
        assert result.exit_code == 2
        assert "1 + 1 = 2" not in result.output

    def test_unbounded_width_accepts(self, runner, project):
        config_dir = project / ".calc-history"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"int_bits": 0}))

        result = invoke(runner, project, ["add", "3000000000", "0"])
        assert result.exit_code == 0
        assert "3000000000 + 0 = 3000000000" in result.output

    @patch("calc_history.cli.questionary")
    def test_interactive_reports_and_continues(self, mock_questionary, runner, project):
        mock_questionary.select.return_value.ask.side_effect = ["add", "add", "Quit"]
        mock_questionary.text.return_value.ask.side_effect = ["3000000000", "0", "1", "2"]

        result = invoke(runner, project, ["interactive"])
        assert result.exit_code == 0
        assert "out of range" in result.output
        assert "1 + 2 = 3" in result.output


class TestRunCommand:
    """Tests for run command."""

    def test_run_sequence(self, runner, project):
        """Test several steps share one history."""
        result = invoke(
            runner, project, ["run", "add", "1", "1", "mul", "2", "2", "sub", "4", "3"]
        )
        assert result.exit_code == 0
        assert "1 + 1 = 2" in result.output
        assert "2 * 2 = 4" in result.output
        assert "4 - 3 = 1" in result.output

    def test_run_last(self, runner, project):
        """Test --last limits the listing."""
        result = invoke(
            runner,
            project,
            ["run", "--last", "2", "add", "1", "1", "mul", "2", "2", "sub", "4", "3"],
        )
        assert result.exit_code == 0
        assert "1 + 1 = 2" not in result.output
        assert "2 * 2 = 4" in result.output
        assert "4 - 3 = 1" in result.output

    def test_run_last_zero(self, runner, project):
        result = invoke(runner, project, ["run", "-n", "0", "add", "1", "1"])
        assert result.exit_code == 0
        assert "No operations in history" in result.output

    def test_run_negative_operands(self, runner, project):
        result = invoke(runner, project, ["run", "div", "-7", "2"])
        assert result.exit_code == 0
        assert "-7 / 2 = -3" in result.output

    def test_run_incomplete_step(self, runner, project):
        result = invoke(runner, project, ["run", "add", "1"])
        assert result.exit_code == 2

    def test_run_unknown_operation(self, runner, project):
        result = invoke(runner, project, ["run", "pow", "2", "3"])
        assert result.exit_code == 2
        assert "Unknown operation" in result.output


class TestSessionCommand:
    """Tests for session command."""

    def test_session_operations_and_history(self, runner, project):
        result = invoke(
            runner,
            project,
            ["session"],
            input="add 2 2\nmul 3 3\nhistory 1\nquit\n",
        )
        assert result.exit_code == 0
        assert "2 + 2 = 4" in result.output
        assert "3 * 3 = 9" in result.output

    def test_session_ends_on_eof(self, runner, project):
        result = invoke(runner, project, ["session"], input="add 1 1\n")
        assert result.exit_code == 0
        assert "1 + 1 = 2" in result.output

    def test_session_bad_line_continues(self, runner, project):
        result = invoke(
            runner, project, ["session"], input="pow 2 3\nadd x 1\nadd 1 2\nquit\n"
        )
        assert result.exit_code == 0
        assert "Unknown operation" in result.output
        assert "Not an integer" in result.output
        assert "1 + 2 = 3" in result.output


class TestHandleSessionLine:
    """Tests for handle_session_line function."""

    @pytest.fixture
    def session(self):
        return CalcSession()

    def test_quit(self, session):
        assert handle_session_line(session, "quit") is False
        assert handle_session_line(session, "exit") is False

    def test_blank_line(self, session):
        assert handle_session_line(session, "   ") is True

    def test_operation_recorded(self, session):
        assert handle_session_line(session, "div 6 3") is True
        assert session.last(1) == ["6 / 3 = 2"]

    def test_use_switches_history(self, session):
        handle_session_line(session, "add 1 1")
        handle_session_line(session, "use scratch")
        handle_session_line(session, "add 2 2")

        assert session.current == "scratch"
        assert session.last(5) == ["2 + 2 = 4"]
        assert session.stores["default"].get_last_operations(5) == ["1 + 1 = 2"]

    def test_wrong_arity_not_recorded(self, session):
        assert handle_session_line(session, "add 1") is True
        assert session.last(5) == []

    def test_negative_history_count(self, session, capsys):
        handle_session_line(session, "history -1")
        assert "non-negative" in capsys.readouterr().out

    def test_non_numeric_history_count(self, session, capsys):
        """Test a bad count is reported as a count, not as an operand."""
        handle_session_line(session, "history abc")
        output = capsys.readouterr().out
        assert "History count" in output
        assert "Not an integer" not in output

    def test_out_of_range_operand(self, session, capsys):
        handle_session_line(session, "add 3000000000 0")
        assert "out of range" in capsys.readouterr().out
        assert session.last(5) == []

    def test_stores_listing(self, session, capsys):
        handle_session_line(session, "use other")
        handle_session_line(session, "stores")
        output = capsys.readouterr().out
        assert "default" in output
        assert "other" in output


class TestInteractiveCommand:
    """Tests for interactive command."""

    @patch("calc_history.cli.questionary")
    def test_interactive_flow(self, mock_questionary, runner, project):
        """Test one operation then quit, with mocked prompts."""
        mock_questionary.select.return_value.ask.side_effect = ["multiply", "Quit"]
        mock_questionary.text.return_value.ask.side_effect = ["3", "3"]

        result = invoke(runner, project, ["interactive"])
        assert result.exit_code == 0
        assert "3 * 3 = 9" in result.output

    @patch("calc_history.cli.questionary")
    def test_interactive_cancel(self, mock_questionary, runner, project):
        """Test Ctrl-C at the first prompt ends cleanly."""
        mock_questionary.select.return_value.ask.return_value = None

        result = invoke(runner, project, ["interactive"])
        assert result.exit_code == 0
        assert "No operations in history" in result.output


class TestConfigCommands:
    """Tests for config commands."""

    def test_config_show(self, runner, project):
        result = invoke(runner, project, ["config", "show"])
        assert result.exit_code == 0
        assert "int_bits" in result.output
        assert "history_limit" in result.output

    def test_config_set(self, runner, project):
        result = invoke(runner, project, ["config", "set", "history_limit", "3"])
        assert result.exit_code == 0

        data = json.loads((project / ".calc-history" / "config.json").read_text())
        assert data["history_limit"] == 3

    def test_config_set_unknown_key(self, runner, project):
        result = invoke(runner, project, ["config", "set", "colour", "blue"])
        assert result.exit_code == 2
        assert not (project / ".calc-history" / "config.json").exists()

    def test_config_set_bad_value(self, runner, project):
        result = invoke(runner, project, ["config", "set", "compact_mode", "maybe"])
        assert result.exit_code == 2
