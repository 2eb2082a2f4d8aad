"""Command service: runs shell commands and post-processes their output."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess

from rich.text import Text

from kakashell.core.exceptions import CommandError

logger = logging.getLogger(__name__)


def colorize_ls_output(output: str) -> Text:
    """Color file names in ``ls -l`` output by type.

    Directories are blue, executables green, everything else red. Lines
    with fewer than nine fields (totals, short listings) are left as is.
    """
    text = Text()
    for i, line in enumerate(output.splitlines()):
        if i:
            text.append("\n")
        parts = line.split()
        if len(parts) < 9:
            text.append(line)
            continue

        permissions = parts[0]
        if permissions.startswith("d"):
            style = "blue"
        elif "x" in permissions:
            style = "green"
        else:
            style = "red"
        text.append(" ".join(parts[:8]) + " ")
        text.append(" ".join(parts[8:]), style=style)
    return text


def is_long_listing(command: str) -> bool:
    command = command.strip()
    return command.startswith("ls") and "-l" in command


class CommandService:
    """Executes commands through ``sh -c``."""

    def __init__(self, shell: str = "sh", cd_command: str = "cd") -> None:
        self.shell = shell
        self.cd_command = cd_command

    def execute(self, command: str) -> str | Text:
        """Run ``command`` and return what it printed.

        A successful run returns stdout, falling back to stderr when stdout
        is empty; a failed run returns stderr, falling back to stdout.
        """
        builtin = self._run_cd(command)
        if builtin is not None:
            return builtin

        logger.info("exec: %s", command)
        try:
            result = subprocess.run([self.shell, "-c", command], capture_output=True)
        except OSError as e:
            raise CommandError(f"Failed to execute command: {e}") from e

        stdout = result.stdout.decode("utf-8", errors="replace")
        stderr = result.stderr.decode("utf-8", errors="replace")
        logger.debug("exit status %d for %r", result.returncode, command)

        if result.returncode == 0:
            if not stdout:
                return stderr
            if is_long_listing(command):
                return colorize_ls_output(stdout)
            return stdout
        return stderr or stdout

    def _run_cd(self, command: str) -> str | None:
        """Change the working directory in-process; None if not a plain cd."""
        try:
            tokens = shlex.split(command)
        except ValueError:
            return None
        if not tokens or tokens[0] != self.cd_command or len(tokens) > 2:
            return None

        target = os.path.expanduser(tokens[1] if len(tokens) > 1 else "~")
        try:
            os.chdir(target)
        except FileNotFoundError:
            return f"cd: no such file or directory: {target}"
        except NotADirectoryError:
            return f"cd: not a directory: {target}"
        except PermissionError:
            return f"cd: permission denied: {target}"
        logger.debug("cwd -> %s", os.getcwd())
        return ""
