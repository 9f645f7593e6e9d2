"""
Git service for local repository state and HEAD change notifications
"""

import asyncio
import json
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Union

import structlog
from git import Repo, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from config.settings import settings
from src.services.tech_detect import detect_technologies

logger = structlog.get_logger()


class GitServiceError(Exception):
    """Custom exception for git service errors"""
    def __init__(self, message: str, command: str = None):
        self.message = message
        self.command = command
        super().__init__(message)


class GitService:
    """Read-only access to a local git repository"""

    def __init__(self, repo_path: Union[str, Path]):
        self.repo_path = Path(repo_path)

    def _open(self) -> Optional[Repo]:
        try:
            return Repo(self.repo_path)
        except (InvalidGitRepositoryError, NoSuchPathError):
            return None

    def head_sha(self) -> Optional[str]:
        """Current HEAD commit, or None when there is no repository or commit"""
        repo = self._open()
        if repo is None:
            return None
        try:
            return repo.head.commit.hexsha
        except ValueError:
            # unborn branch: repository without commits
            return None

    def diff_name_status(self, from_sha: str, to_sha: str) -> List[Dict[str, Any]]:
        """Files changed between two commits with their status letter"""
        repo = self._open()
        if repo is None:
            raise GitServiceError(f"Invalid git repository at {self.repo_path}")
        try:
            output = repo.git.diff("--name-status", f"{from_sha}..{to_sha}")
        except GitCommandError as e:
            logger.error("Git diff failed", repo_path=str(self.repo_path), error=str(e))
            raise GitServiceError(f"Git command failed: {str(e)}", command=str(e.command))

        changes = []
        for line in output.splitlines():
            parts = line.strip().split()
            if not parts:
                continue
            file_name = " ".join(parts[1:])
            changes.append({
                "status": parts[0],
                "file": file_name,
                "technologies": detect_technologies(file_name),
            })
        return changes


def _event(name: str, data: Dict[str, Any]) -> Dict[str, str]:
    return {"event": name, "data": json.dumps(data)}


class ChangeMonitor:
    """
    Tracks the last HEAD seen by any stream or status request.

    The last-seen HEAD is shared across requests and repositories; a new
    HEAD produces a "change" event (when a previous HEAD is known) followed
    by a "head" event. When the two HEADs cannot be diffed the change lists
    no files.
    """

    def __init__(self, poll_interval: Optional[float] = None):
        self.poll_interval = poll_interval if poll_interval is not None else settings.STREAM_POLL_INTERVAL
        self.last_head: Optional[str] = None

    def poll(self, repo_path: Union[str, Path]) -> List[Dict[str, str]]:
        """Check HEAD once and return the events to emit"""
        service = GitService(repo_path)
        sha = service.head_sha()
        if not sha or sha == self.last_head:
            return []

        events = []
        if self.last_head:
            try:
                changes = service.diff_name_status(self.last_head, sha)
            except GitServiceError as e:
                # previous HEAD may belong to another repository
                logger.warning("Diff against last HEAD failed", repo_path=str(repo_path), error=e.message)
                changes = []
            events.append(_event("change", {"from": self.last_head, "to": sha, "changes": changes}))
            logger.info("Repository HEAD changed", repo_path=str(repo_path), sha=sha[:8], files=len(changes))

        self.last_head = sha
        events.append(_event("head", {"sha": sha}))
        return events

    async def events(
        self,
        repo_path: Union[str, Path],
        is_disconnected: Callable[[], Awaitable[bool]],
    ) -> AsyncIterator[Dict[str, str]]:
        """SSE events: current HEAD immediately, then changes as they happen"""
        current = await asyncio.to_thread(GitService(repo_path).head_sha)
        if current:
            yield _event("head", {"sha": current})

        while not await is_disconnected():
            await asyncio.sleep(self.poll_interval)
            try:
                for event in await asyncio.to_thread(self.poll, repo_path):
                    yield event
            except GitServiceError as e:
                yield _event("error", {"message": e.message})

        logger.info("Change stream closed", repo_path=str(repo_path))
