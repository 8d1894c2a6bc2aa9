"""Pytest configuration and shared fixtures for gitstamp tests."""

import os
import subprocess
from pathlib import Path

import pytest


class GitRepo:
    """A throwaway git working tree with helpers for scripted commits."""

    def __init__(self, root: Path):
        self.root = root

    def git(self, *args, env=None) -> str:
        full_env = dict(os.environ)
        if env:
            full_env.update(env)
        result = subprocess.run(
            ["git", *args],
            cwd=self.root,
            check=True,
            capture_output=True,
            text=True,
            env=full_env,
        )
        return result.stdout.strip()

    def init(self) -> "GitRepo":
        self.root.mkdir(parents=True, exist_ok=True)
        self.git("init", "-q")
        self.git("symbolic-ref", "HEAD", "refs/heads/main")
        self.configure()
        return self

    def configure(self) -> None:
        self.git("config", "user.name", "Test User")
        self.git("config", "user.email", "test@example.com")
        self.git("config", "commit.gpgsign", "false")

    def write(self, relpath: str, content: str) -> Path:
        path = self.root / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def commit(self, relpath: str, content: str, date: str) -> str:
        """Write relpath, commit it with the given date, return the short hash."""
        self.write(relpath, content)
        self.git("add", relpath)
        self.git(
            "commit",
            "-q",
            "-m",
            f"update {relpath}",
            env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date},
        )
        return self.head()

    def head(self) -> str:
        return self.git("log", "-n", "1", "--pretty=format:%h")


@pytest.fixture(autouse=True)
def isolated_git_config(tmp_path_factory, monkeypatch):
    """Keep the user's global and system git config out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path_factory.mktemp("home")))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("GIT_DIR", raising=False)
    monkeypatch.delenv("GIT_WORK_TREE", raising=False)


@pytest.fixture
def git_repo(tmp_path):
    """An empty git repository on branch main."""
    return GitRepo(tmp_path / "repo").init()


@pytest.fixture
def synced_repo(tmp_path):
    """
    A working tree whose main branch is pushed to a bare 'origin'.

    Returns:
        Tuple of (work, remote_path). work is clean and in sync.
    """
    remote = tmp_path / "remote.git"
    subprocess.run(
        ["git", "init", "-q", "--bare", str(remote)], check=True, capture_output=True
    )
    subprocess.run(
        ["git", "symbolic-ref", "HEAD", "refs/heads/main"],
        cwd=remote,
        check=True,
        capture_output=True,
    )

    work = GitRepo(tmp_path / "work").init()
    work.commit("README.md", "hello\n", "2025-09-10 12:00:00")
    work.git("remote", "add", "origin", str(remote))
    work.git("push", "-q", "origin", "main")
    work.git("fetch", "-q", "origin")

    return work, remote


@pytest.fixture
def other_clone(tmp_path, synced_repo):
    """A second clone of synced_repo's remote for pushing competing commits."""
    _, remote = synced_repo
    other_path = tmp_path / "other"
    subprocess.run(
        ["git", "clone", "-q", "-b", "main", str(remote), str(other_path)],
        check=True,
        capture_output=True,
    )
    other = GitRepo(other_path)
    other.configure()
    return other
