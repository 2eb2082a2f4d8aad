"""Filesystem capability used by path completion."""

from __future__ import annotations

import os
from typing import Protocol, runtime_checkable


@runtime_checkable
class FileSystem(Protocol):
    """What the completion engine needs to know about the filesystem."""

    def resolve(self, path: str) -> tuple[str, str]:
        """Split a typed path into (absolute base directory, name prefix)."""
        ...

    def list_entries(self, directory: str) -> list[tuple[str, bool]]:
        """Return (name, is_directory) pairs in enumeration order.

        Raises OSError when the directory cannot be read.
        """
        ...


class LocalFileSystem:
    """FileSystem backed by the real disk and the process working directory."""

    def resolve(self, path: str) -> tuple[str, str]:
        dirname, prefix = os.path.split(path)
        if os.path.isabs(path):
            return os.path.abspath(dirname or os.sep), prefix
        if not dirname:
            return os.getcwd(), prefix
        return os.path.abspath(os.path.join(os.getcwd(), os.path.expanduser(dirname))), prefix

    def list_entries(self, directory: str) -> list[tuple[str, bool]]:
        entries: list[tuple[str, bool]] = []
        with os.scandir(directory) as it:
            for entry in it:
                try:
                    is_dir = entry.is_dir()
                except OSError:
                    is_dir = False
                entries.append((entry.name, is_dir))
        return entries
