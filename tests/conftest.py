"""Shared test fixtures — filter documents, changed-file lists, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest


def _git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def sample_filters_yaml() -> str:
    """A filters document using anchors, status maps and extglobs."""
    return textwrap.dedent("""\
        shared: &shared
          - common/**/*
          - config/**/*
        src:
          - *shared
          - src/**/*
        backend:
          - '!(**/*.tsx|**/*.less)'
        new_docs:
          - added|copied: "docs/**"
    """)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "commit.gpgsign", "false"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    # Initial commit
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path


@pytest.fixture
def git_commit(tmp_git_repo: Path) -> Callable[..., str]:
    """Write files (None deletes), commit them, and return the new HEAD sha."""

    def _commit(files: Dict[str, "str | None"], message: str = "change") -> str:
        for rel, content in files.items():
            path = tmp_git_repo / rel
            if content is None:
                path.unlink()
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        _git(tmp_git_repo, "add", "-A")
        _git(tmp_git_repo, "commit", "-m", message)
        return _git(tmp_git_repo, "rev-parse", "HEAD")

    return _commit


@pytest.fixture
def head_sha(tmp_git_repo: Path) -> str:
    return _git(tmp_git_repo, "rev-parse", "HEAD")
