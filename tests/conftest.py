"""Shared fixtures: isolate the config dir and API key from the developer's machine."""

from __future__ import annotations

import posixpath

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setenv("KAKASHELL_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return config_dir


class FakeFileSystem:
    """In-memory filesystem: {absolute dir: [(name, is_dir), ...]}."""

    def __init__(self, tree: dict[str, list[tuple[str, bool]]], cwd: str = "/home/kaka") -> None:
        self.tree = tree
        self.cwd = cwd
        self.listed: list[str] = []

    def resolve(self, path: str) -> tuple[str, str]:
        dirname, prefix = posixpath.split(path)
        if posixpath.isabs(path):
            return posixpath.normpath(dirname or "/"), prefix
        if not dirname:
            return self.cwd, prefix
        return posixpath.normpath(posixpath.join(self.cwd, dirname)), prefix

    def list_entries(self, directory: str) -> list[tuple[str, bool]]:
        self.listed.append(directory)
        if directory not in self.tree:
            raise FileNotFoundError(directory)
        return list(self.tree[directory])


@pytest.fixture
def fake_fs():
    return FakeFileSystem({
        "/home/kaka": [
            ("src", True),
            ("docs", True),
            ("report.txt", False),
            ("report2.txt", False),
            ("notes.md", False),
        ],
        "/home/kaka/src": [("main.py", False), ("main_test.py", False), ("lib", True)],
        "/home/kaka/docs": [("readme.txt", False), ("report", True)],
        "/etc": [("passwd", False), ("profile", False), ("profile.d", True)],
        "/": [("etc", True), ("tmp", True), ("tmpfile", False), ("home", True)],
        "/tmp": [],
    })
