"""
Helpers for repository full names (owner/repo)
"""

import re
from typing import Optional, Tuple

_GITHUB_PREFIX = re.compile(r"^https?://github\.com/", re.IGNORECASE)
_GIT_SUFFIX = re.compile(r"\.git$", re.IGNORECASE)
_TRAILING_SLASHES = re.compile(r"/+$")


def normalize_repo_full_name(value: str) -> str:
    """Normalize e.g. "https://github.com/owner/repo.git/" -> "owner/repo" """
    name = str(value).strip()
    name = _GITHUB_PREFIX.sub("", name)
    name = _GIT_SUFFIX.sub("", name)
    return _TRAILING_SLASHES.sub("", name)


def split_repo_full_name(value: str) -> Tuple[str, str]:
    """Split a repository reference into (owner, repo)"""
    parts = normalize_repo_full_name(value).split("/")
    owner = parts[0] if parts else ""
    repo = parts[1] if len(parts) > 1 else ""
    if not owner or not repo:
        raise ValueError("Invalid repository format. Expected: owner/repo")
    return owner, repo


def is_repo_full_name(value: Optional[str]) -> bool:
    return bool(value) and "/" in value
