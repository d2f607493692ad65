"""Git subprocess wrapper — lists changed files with their change status."""

from __future__ import annotations

import dataclasses
import logging
import re
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pathfilter.git.models import ChangeStatus, FileRecord

logger = logging.getLogger(__name__)

NULL_SHA = "0" * 40

_SHA_RE = re.compile(r"^[0-9a-f]{40}$")

_STATUS_MAP: Dict[str, ChangeStatus] = {
    "A": ChangeStatus.ADDED,
    "C": ChangeStatus.COPIED,
    "D": ChangeStatus.DELETED,
    "M": ChangeStatus.MODIFIED,
    "R": ChangeStatus.RENAMED,
    "T": ChangeStatus.MODIFIED,  # type change (file <-> symlink)
    "U": ChangeStatus.UNMERGED,
}


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: list[str], cwd: Path, timeout: int = 30, check: bool = True) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0 and check:
        stderr = result.stderr.strip() or f"exit code {result.returncode}"
        raise GitError(f"git {args[0]} failed: {stderr}")
    return result.stdout


# ---- ref helpers ----


def is_git_sha(ref: str) -> bool:
    return bool(_SHA_RE.match(ref))


def get_short_name(ref: Optional[str]) -> str:
    """Strip ``refs/heads/``, ``refs/tags/`` or ``refs/`` from *ref*."""
    if not ref:
        return ""
    for prefix in ("refs/heads/", "refs/tags/", "refs/"):
        if ref.startswith(prefix):
            return ref[len(prefix) :]
    return ref


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def get_current_ref(repo_root: Path) -> str:
    """Return the current branch, else an exact tag, else the HEAD sha."""
    branch = _run_git(["branch", "--show-current"], cwd=repo_root).strip()
    if branch:
        return branch
    tag = _run_git(["describe", "--tags", "--exact-match"], cwd=repo_root, check=False).strip()
    if tag:
        return tag
    return _run_git(["rev-parse", "HEAD"], cwd=repo_root).strip()


# ---- output parsing ----


def parse_name_status(output: str) -> List[FileRecord]:
    """Parse ``--name-status -z`` output (status and path NUL-separated)."""
    tokens = [t for t in output.split("\0") if t]
    files: List[FileRecord] = []
    for code, filename in zip(tokens[0::2], tokens[1::2]):
        status = _STATUS_MAP.get(code.strip()[:1])
        if status is None:
            logger.warning("Skipping %s: unknown change status %r", filename, code)
            continue
        files.append(FileRecord(filename=filename, status=status))
    return files


def parse_numstat(output: str) -> Dict[str, Tuple[int, int]]:
    """Parse ``--numstat -z`` output into ``{path: (additions, deletions)}``.

    Binary files report ``-`` for both counts and are stored as zeros.
    """
    stats: Dict[str, Tuple[int, int]] = {}
    for entry in output.split("\0"):
        parts = entry.strip("\n").split("\t", 2)
        if len(parts) != 3 or not parts[2]:
            continue
        added, deleted, path = parts
        stats[path] = (
            int(added) if added.isdigit() else 0,
            int(deleted) if deleted.isdigit() else 0,
        )
    return stats


def _with_numstat(files: List[FileRecord], stats: Dict[str, Tuple[int, int]]) -> List[FileRecord]:
    result = []
    for f in files:
        if f.filename in stats:
            additions, deletions = stats[f.filename]
            f = dataclasses.replace(f, additions=additions, deletions=deletions)
        result.append(f)
    return result


def _diff(repo_root: Path, revision_range: str) -> List[FileRecord]:
    base_args = ["diff", "--no-renames", "-z"]
    names = _run_git([*base_args, "--name-status", revision_range], cwd=repo_root)
    numstat = _run_git([*base_args, "--numstat", revision_range], cwd=repo_root)
    return _with_numstat(parse_name_status(names), parse_numstat(numstat))


# ---- change listings ----


def get_changes(repo_root: Path, base: str, head: str = "HEAD") -> List[FileRecord]:
    """Files changed between *base* and *head* (two-dot diff)."""
    logger.info("Changes will be detected between %s and %s", base, head)
    return _diff(repo_root, f"{base}..{head}")


def get_changes_since_merge_base(repo_root: Path, base: str, head: str = "HEAD") -> List[FileRecord]:
    """Files changed on *head* since it diverged from *base* (three-dot diff)."""
    merge_base = _run_git(["merge-base", base, head], cwd=repo_root, check=False).strip()
    if not merge_base:
        raise GitError(f"Can't find merge base between {base} and {head}")
    logger.info("Changes will be detected against the branch %s (merge base %s)", base, merge_base)
    return _diff(repo_root, f"{base}...{head}")


def get_changes_in_last_commit(repo_root: Path) -> List[FileRecord]:
    """Files changed by the HEAD commit."""
    logger.info("Changes will be detected from the last commit")
    out = _run_git(
        ["diff-tree", "--root", "--no-commit-id", "-r", "--no-renames", "--name-status", "-z", "HEAD"],
        cwd=repo_root,
    )
    return parse_name_status(out)


def list_all_files_as_added(repo_root: Path) -> List[FileRecord]:
    """Every tracked file, reported as added."""
    logger.info("Listing all files tracked by git as added")
    out = _run_git(["ls-files", "-z"], cwd=repo_root)
    return [FileRecord(filename=p, status=ChangeStatus.ADDED) for p in out.split("\0") if p]


def get_changed_files(
    repo_root: Path, base: Optional[str] = None, head: str = "HEAD"
) -> List[FileRecord]:
    """Pick the comparison that fits *base* and list changed files.

    * no base, or base is the current branch: the last commit
    * base is the null sha (first push): every tracked file as added
    * base is a sha: direct diff against that commit
    * otherwise: changes introduced since the merge base with *base*
    """
    base_ref = get_short_name(base)
    if not base_ref:
        return get_changes_in_last_commit(repo_root)

    if is_git_sha(base_ref):
        if base_ref == NULL_SHA:
            return list_all_files_as_added(repo_root)
        return get_changes(repo_root, base_ref, head)

    if head == "HEAD" and base_ref == get_current_ref(repo_root):
        return get_changes_in_last_commit(repo_root)

    return get_changes_since_merge_base(repo_root, base_ref, head)
