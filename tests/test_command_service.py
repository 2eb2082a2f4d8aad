"""Tests for shell command execution and ls colorizing."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from rich.text import Text

from kakashell.core.exceptions import CommandError
from kakashell.services.command_service import CommandService, colorize_ls_output, is_long_listing

LS_OUTPUT = (
    "total 12\n"
    "drwxr-xr-x 2 kaka kaka 4096 Jan  1 10:00 src\n"
    "-rwxr-xr-x 1 kaka kaka  120 Jan  1 10:00 run.sh\n"
    "-rw-r--r-- 1 kaka kaka   42 Jan  1 10:00 my notes.txt"
)


def _style_of(text: Text, fragment: str) -> str:
    start = text.plain.index(fragment)
    for span in text.spans:
        if span.start == start and span.end == start + len(fragment):
            return str(span.style)
    return ""


class TestColorize:
    def test_plain_text_kept(self):
        text = colorize_ls_output(LS_OUTPUT)
        assert text.plain.splitlines()[0] == "total 12"
        assert text.plain.splitlines()[1] == "drwxr-xr-x 2 kaka kaka 4096 Jan 1 10:00 src"

    def test_directory_blue(self):
        assert _style_of(colorize_ls_output(LS_OUTPUT), "src") == "blue"

    def test_executable_green(self):
        assert _style_of(colorize_ls_output(LS_OUTPUT), "run.sh") == "green"

    def test_other_red_and_names_with_spaces(self):
        assert _style_of(colorize_ls_output(LS_OUTPUT), "my notes.txt") == "red"

    def test_long_listing_detection(self):
        assert is_long_listing("ls -l")
        assert is_long_listing("  ls -la /tmp")
        assert not is_long_listing("ls")
        assert not is_long_listing("cat -l")


class TestExecute:
    def test_stdout(self):
        assert CommandService().execute("echo hello") == "hello\n"

    def test_stderr_when_stdout_empty(self):
        assert CommandService().execute("echo oops 1>&2") == "oops\n"

    def test_failure_returns_stderr(self):
        output = CommandService().execute("echo partial; echo broken 1>&2; exit 3")
        assert output == "broken\n"

    def test_failure_without_stderr_returns_stdout(self):
        assert CommandService().execute("echo only-out; exit 1") == "only-out\n"

    def test_long_listing_colorized(self, tmp_path):
        (tmp_path / "sub").mkdir()
        output = CommandService().execute(f"ls -l {tmp_path}")
        assert isinstance(output, Text)
        assert "sub" in output.plain

    def test_launch_failure(self):
        with patch("kakashell.services.command_service.subprocess.run", side_effect=FileNotFoundError("sh")):
            with pytest.raises(CommandError, match="Failed to execute"):
                CommandService().execute("ls")


class TestCd:
    def test_changes_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "inner").mkdir()
        assert CommandService().execute("cd inner") == ""
        assert os.getcwd() == str(tmp_path / "inner")

    def test_missing_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert CommandService().execute("cd nowhere").startswith("cd: no such file or directory")
        assert os.getcwd() == str(tmp_path)

    def test_not_a_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "f.txt").touch()
        assert CommandService().execute("cd f.txt").startswith("cd: not a directory")

    def test_bare_cd_goes_home(self, tmp_path, monkeypatch):
        home = tmp_path / "home"
        home.mkdir()
        monkeypatch.setenv("HOME", str(home))
        monkeypatch.chdir(tmp_path)
        CommandService().execute("cd")
        assert os.getcwd() == str(home)

    def test_compound_cd_goes_to_shell(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert CommandService().execute("cd / && pwd") == "/\n"
        assert os.getcwd() == str(tmp_path)
