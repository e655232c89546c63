"""
Tests for the zigkit command-line interface.
"""

import io
import json
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from zigkit.cli.commands import locate, server, workspace_config
from zigkit.cli.parser import CLI
from zigkit.core.exceptions import DownloadFailedError
from zigkit.zls.models import LanguageServerCommand


class TestParser:
    """Test argument parsing."""

    def test_no_command_shows_help(self, capsys):
        """Test running without a command prints help and fails."""
        assert CLI().run([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_global_options(self, tmp_path):
        """Test global options are parsed."""
        args = CLI().parse_args(["-v", "--cache-dir", str(tmp_path), "server"])

        assert args.verbose is True
        assert args.cache_dir == tmp_path
        assert args.command == "server"

    def test_locate_arguments(self):
        """Test locate mode and task source."""
        args = CLI().parse_args(["locate", "launch", "-", "--adapter", "GDB"])

        assert args.mode == "launch"
        assert args.task == "-"
        assert args.adapter == "GDB"

    def test_invalid_locate_mode(self):
        """Test an unknown locate mode is rejected."""
        with pytest.raises(SystemExit):
            CLI().parse_args(["locate", "attach", "-"])

    def test_errors_become_exit_code(self, tmp_path):
        """Test command failures are reported with exit code 1."""
        with patch(
            "zigkit.cli.commands.server.run",
            side_effect=DownloadFailedError("failed to download file: HTTP 404"),
        ):
            assert CLI().run(["-q", "server", "--worktree", str(tmp_path)]) == 1


class TestServerCommand:
    """Test the server command."""

    def test_prints_command(self, tmp_path, capsys):
        """Test the resolved command is printed as JSON."""
        resolver = Mock()
        resolver.language_server_command.return_value = LanguageServerCommand(
            command="/opt/zls/zls", args=["--foo"], env=[("A", "1")]
        )
        args = Mock(worktree=tmp_path, cache_dir=None)

        with patch("zigkit.cli.commands.server.ZlsResolver", return_value=resolver):
            assert server.run(args) == 0

        assert json.loads(capsys.readouterr().out) == {
            "command": "/opt/zls/zls",
            "args": ["--foo"],
            "env": [["A", "1"]],
        }

    def test_settings_override_end_to_end(self, tmp_path, capsys):
        """Test a zigkit.yaml binary path flows through to the output."""
        (tmp_path / "zigkit.yaml").write_text(
            "lsp:\n  zls:\n    binary:\n      path: /opt/zls/zls\n"
        )
        args = Mock(worktree=tmp_path, cache_dir=tmp_path / "cache")

        assert server.run(args) == 0

        assert json.loads(capsys.readouterr().out)["command"] == "/opt/zls/zls"


class TestWorkspaceConfigCommand:
    """Test the workspace-config command."""

    def test_prints_settings(self, tmp_path, capsys):
        """Test lsp.zls.settings are printed."""
        (tmp_path / "zigkit.yaml").write_text(
            "lsp:\n  zls:\n    settings:\n      enable_snippets: false\n"
        )
        args = Mock(worktree=tmp_path, cache_dir=tmp_path / "cache")

        assert workspace_config.run(args) == 0

        assert json.loads(capsys.readouterr().out) == {"enable_snippets": False}


class TestLocateCommand:
    """Test the locate command."""

    def write_task(self, tmp_path: Path, data) -> str:
        path = tmp_path / "task.json"
        path.write_text(json.dumps(data))
        return str(path)

    def test_scenario(self, tmp_path, capsys):
        """Test a scenario is printed for a build-run task."""
        source = self.write_task(
            tmp_path, {"label": "run", "command": "zig", "args": ["build", "run"]}
        )
        args = Mock(mode="scenario", task=source, label=None, adapter="CodeLLDB")

        assert locate.run(args) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["label"] == "run"
        assert output["build"]["template"]["args"] == ["build"]

    def test_scenario_unsupported(self, tmp_path, capsys):
        """Test an unsupported task prints null."""
        source = self.write_task(tmp_path, {"command": "zig", "args": ["fmt"]})
        args = Mock(mode="scenario", task=source, label=None, adapter="CodeLLDB")

        assert locate.run(args) == 0
        assert json.loads(capsys.readouterr().out) is None

    def test_launch_from_stdin(self, capsys, monkeypatch):
        """Test a launch request is built from a task on stdin."""
        monkeypatch.setattr(
            "sys.stdin",
            io.StringIO(json.dumps({"command": "zig", "args": ["build"], "cwd": "/home/u/myproj"})),
        )
        args = Mock(mode="launch", task="-", label=None, adapter="CodeLLDB")

        assert locate.run(args) == 0

        assert json.loads(capsys.readouterr().out)["program"] == "zig-out/bin/myproj"

    def test_launch_unsupported(self, tmp_path, capsys):
        """Test an unsupported launch task exits 1."""
        source = self.write_task(tmp_path, {"command": "zig", "args": ["fmt"]})
        args = Mock(mode="launch", task=source, label=None, adapter="CodeLLDB")

        assert locate.run(args) == 1
        assert capsys.readouterr().out == ""

    def test_invalid_task(self, tmp_path):
        """Test a JSON document without a command is rejected."""
        source = self.write_task(tmp_path, ["zig", "build"])

        with pytest.raises(ValueError, match="command"):
            locate.load_task(source)
