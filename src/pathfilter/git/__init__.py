"""Git interface layer — change detection and file models."""

from pathfilter.git.adapter import (
    NULL_SHA,
    GitError,
    get_changed_files,
    get_changes,
    get_changes_in_last_commit,
    get_changes_since_merge_base,
    get_current_ref,
    get_repo_root,
    get_short_name,
    is_git_sha,
    list_all_files_as_added,
    parse_name_status,
    parse_numstat,
)
from pathfilter.git.models import ChangeStatus, FileRecord

__all__ = [
    "NULL_SHA",
    "ChangeStatus",
    "FileRecord",
    "GitError",
    "get_changed_files",
    "get_changes",
    "get_changes_in_last_commit",
    "get_changes_since_merge_base",
    "get_current_ref",
    "get_repo_root",
    "get_short_name",
    "is_git_sha",
    "list_all_files_as_added",
    "parse_name_status",
    "parse_numstat",
]
