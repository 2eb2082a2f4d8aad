"""Tab-completion engine: command names, directories and paths."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from enum import Enum

from kakashell.core.config import DEFAULT_COMMANDS
from kakashell.models.candidate import Candidate
from kakashell.services.filesystem import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)


class CompletionMode(str, Enum):
    COMMAND = "command"
    DIRECTORY = "directory"
    PATH = "path"


def extract_word(line: str, cursor: int) -> tuple[int, str]:
    """Return (start, word) for the word ending at the cursor.

    ``start`` is one past the nearest whitespace before the cursor, or 0.
    """
    before = line[:cursor]
    start = 0
    for i in range(len(before) - 1, -1, -1):
        if before[i].isspace():
            start = i + 1
            break
    return start, before[start:]


def classify(line: str, cursor: int, cd_command: str = "cd") -> CompletionMode:
    """Decide what kind of candidates the word under the cursor wants."""
    start, _ = extract_word(line, cursor)
    if not line[:start].split():
        return CompletionMode.COMMAND

    tokens = line.split()
    if tokens[0] == cd_command and len(tokens) <= 2:
        return CompletionMode.DIRECTORY
    return CompletionMode.PATH


def reduce_candidates(candidates: list[Candidate], word: str) -> list[Candidate]:
    """Collapse candidates to their common prefix when that makes progress.

    One candidate is returned as is. Several candidates whose replacements
    share a prefix longer than ``word`` become a single candidate holding
    that prefix. Otherwise the list is returned unchanged for the caller
    to display.
    """
    if len(candidates) == 1:
        return candidates
    if not candidates:
        return []

    prefix = os.path.commonprefix([c.replacement for c in candidates])
    if len(prefix) > len(word):
        return [Candidate.plain(prefix)]
    return candidates


class CompletionEngine:
    """Computes completions for a line editor.

    The command table and filesystem are injected so tests can swap in
    small fakes; both default to the real thing.
    """

    def __init__(
        self,
        commands: Iterable[str] = DEFAULT_COMMANDS,
        filesystem: FileSystem | None = None,
        cd_command: str = "cd",
    ) -> None:
        self.commands: tuple[str, ...] = tuple(commands)
        self.filesystem = filesystem if filesystem is not None else LocalFileSystem()
        self.cd_command = cd_command

    def complete(self, line: str, cursor: int) -> tuple[int, list[Candidate]]:
        """Return the splice start and the candidates for ``line[start:cursor]``."""
        cursor = max(0, min(cursor, len(line)))
        start, word = extract_word(line, cursor)
        mode = classify(line, cursor, self.cd_command)

        if mode is CompletionMode.COMMAND:
            candidates = self.complete_command(word)
        else:
            candidates = self.complete_path(word, directories_only=mode is CompletionMode.DIRECTORY)

        logger.debug("complete %r@%d mode=%s matches=%d", line, cursor, mode.value, len(candidates))
        return start, reduce_candidates(candidates, word)

    def complete_command(self, prefix: str) -> list[Candidate]:
        return [Candidate.plain(cmd) for cmd in self.commands if cmd.startswith(prefix)]

    def complete_path(self, path: str, directories_only: bool = False) -> list[Candidate]:
        """Complete the last segment of ``path`` against its directory.

        Absolute input completes to absolute paths built on the normalized
        parent, so ``/etc/../etc/pro`` offers ``/etc/profile``. Relative input
        keeps the directory part exactly as typed. Directories end with a
        separator. Any failure to resolve or list yields no candidates.
        """
        try:
            base_dir, prefix = self.filesystem.resolve(path)
            entries = self.filesystem.list_entries(base_dir)
        except (OSError, ValueError) as e:
            logger.debug("cannot list %r: %s", path, e)
            return []

        if os.path.isabs(path):
            typed_dir = base_dir
        else:
            typed_dir = os.path.dirname(path)

        candidates: list[Candidate] = []
        for name, is_dir in entries:
            if not name.startswith(prefix):
                continue
            if directories_only and not is_dir:
                continue
            replacement = os.path.join(typed_dir, name) if typed_dir else name
            display = name
            if is_dir:
                replacement += os.sep
                display += os.sep
            candidates.append(Candidate(display=display, replacement=replacement))
        return candidates
