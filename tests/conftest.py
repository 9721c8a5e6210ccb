"""Shared fixtures: throwaway git repositories in tmp_path."""

import subprocess
from pathlib import Path

import pytest


def run_git_sync(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    )
    return result.stdout


def _configure_identity(repo: Path) -> None:
    run_git_sync(repo, "config", "user.email", "writer@example.com")
    run_git_sync(repo, "config", "user.name", "Doc Writer")
    run_git_sync(repo, "config", "commit.gpgsign", "false")


@pytest.fixture(autouse=True)
def isolate_git(tmp_path, monkeypatch):
    """Keep git from reading the user's global config or parent repositories."""
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))


@pytest.fixture
def git():
    """Run a git command synchronously and return stdout."""
    return run_git_sync


@pytest.fixture
def git_repo(tmp_path):
    """An empty repository on branch main with a committer identity."""
    repo = (tmp_path / "repo")
    repo.mkdir()
    run_git_sync(repo, "init", "-b", "main")
    _configure_identity(repo)
    return repo.resolve()


@pytest.fixture
def docs_repo(git_repo):
    """Repository with a small documentation layout and one commit."""
    (git_repo / "docs" / "guides").mkdir(parents=True)
    (git_repo / "docs" / "intro.md").write_text("# Intro\n")
    (git_repo / "docs" / "guides" / "setup.md").write_text("# Setup\n")
    (git_repo / "docs" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\0\0")
    (git_repo / "docs" / ".draft.md").write_text("hidden\n")
    (git_repo / "README.md").write_text("# Project\n")
    run_git_sync(git_repo, "add", "-A")
    run_git_sync(git_repo, "commit", "-m", "Initial docs")
    return git_repo


@pytest.fixture
def remote_pair(tmp_path, docs_repo):
    """``docs_repo`` pushed to a bare remote, plus a second clone of it.

    Returns:
        (local checkout, other clone)
    """
    remote = tmp_path / "remote.git"
    run_git_sync(tmp_path, "init", "--bare", "-b", "main", str(remote))
    run_git_sync(docs_repo, "remote", "add", "origin", str(remote))
    run_git_sync(docs_repo, "push", "--set-upstream", "origin", "main")

    other = tmp_path / "other"
    run_git_sync(tmp_path, "clone", str(remote), str(other))
    _configure_identity(other)
    return docs_repo, other.resolve()
