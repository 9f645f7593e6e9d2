"""
Tests for local git access and the HEAD change monitor
"""

import json

import pytest
from git import Actor, Repo

from src.services.git_service import ChangeMonitor, GitService, GitServiceError

AUTHOR = Actor("Test User", "test@example.com")


def _commit(repo: Repo, files: dict, message: str) -> str:
    root = repo.working_tree_dir
    for name, content in files.items():
        path = f"{root}/{name}"
        with open(path, "w") as f:
            f.write(content)
    repo.index.add(list(files))
    return repo.index.commit(message, author=AUTHOR, committer=AUTHOR).hexsha


class TestGitService:
    """Test cases for GitService"""

    @pytest.fixture
    def repo(self, tmp_path):
        return Repo.init(tmp_path)

    def test_head_sha(self, repo, tmp_path):
        sha = _commit(repo, {"README.md": "# hello\n"}, "initial")
        assert GitService(tmp_path).head_sha() == sha

    def test_head_sha_without_commits(self, repo, tmp_path):
        assert GitService(tmp_path).head_sha() is None

    def test_head_sha_outside_repository(self, tmp_path):
        assert GitService(tmp_path / "missing").head_sha() is None
        (tmp_path / "plain").mkdir()
        assert GitService(tmp_path / "plain").head_sha() is None

    def test_diff_name_status(self, repo, tmp_path):
        first = _commit(repo, {"README.md": "# hello\n", "app.js": "x = 1\n"}, "initial")
        (tmp_path / "app.js").unlink()
        repo.index.remove(["app.js"])
        second = _commit(repo, {"README.md": "# hello again\n", "Button.jsx": "<b/>\n"}, "update")

        changes = GitService(tmp_path).diff_name_status(first, second)

        assert sorted(changes, key=lambda c: c["file"]) == [
            {"status": "A", "file": "Button.jsx", "technologies": ["React"]},
            {"status": "M", "file": "README.md", "technologies": ["Markdown", "Documentation"]},
            {"status": "D", "file": "app.js", "technologies": ["JavaScript"]},
        ]

    def test_diff_with_unknown_commit_raises(self, repo, tmp_path):
        sha = _commit(repo, {"a.txt": "a\n"}, "initial")
        with pytest.raises(GitServiceError):
            GitService(tmp_path).diff_name_status("0" * 40, sha)

    def test_diff_outside_repository_raises(self, tmp_path):
        with pytest.raises(GitServiceError, match="Invalid git repository"):
            GitService(tmp_path).diff_name_status("a", "b")


class TestChangeMonitor:
    """Test cases for ChangeMonitor"""

    @pytest.fixture
    def repo(self, tmp_path):
        return Repo.init(tmp_path)

    def test_first_poll_reports_head_only(self, repo, tmp_path):
        sha = _commit(repo, {"a.txt": "a\n"}, "initial")
        monitor = ChangeMonitor(poll_interval=0)

        events = monitor.poll(tmp_path)

        assert events == [{"event": "head", "data": json.dumps({"sha": sha})}]
        assert monitor.last_head == sha
        assert monitor.poll(tmp_path) == []

    def test_new_commit_reports_change_then_head(self, repo, tmp_path):
        first = _commit(repo, {"a.txt": "a\n"}, "initial")
        monitor = ChangeMonitor(poll_interval=0)
        monitor.poll(tmp_path)
        second = _commit(repo, {"style.css": "body {}\n"}, "styles")

        events = monitor.poll(tmp_path)

        assert [e["event"] for e in events] == ["change", "head"]
        change = json.loads(events[0]["data"])
        assert change["from"] == first
        assert change["to"] == second
        assert change["changes"] == [{"status": "A", "file": "style.css", "technologies": ["CSS"]}]
        assert monitor.last_head == second

    def test_switching_repositories_moves_to_new_head(self, tmp_path):
        repo_a = Repo.init(tmp_path / "a")
        repo_b = Repo.init(tmp_path / "b")
        head_a = _commit(repo_a, {"a.txt": "a\n"}, "first in a")
        head_b = _commit(repo_b, {"b.txt": "b\n"}, "first in b")
        monitor = ChangeMonitor(poll_interval=0)
        monitor.poll(tmp_path / "a")

        events = monitor.poll(tmp_path / "b")

        assert [e["event"] for e in events] == ["change", "head"]
        assert json.loads(events[0]["data"]) == {"from": head_a, "to": head_b, "changes": []}
        assert json.loads(events[1]["data"]) == {"sha": head_b}
        assert monitor.last_head == head_b
        assert monitor.poll(tmp_path / "b") == []

    def test_poll_without_commits(self, repo, tmp_path):
        monitor = ChangeMonitor(poll_interval=0)
        assert monitor.poll(tmp_path) == []
        assert monitor.last_head is None

    @pytest.mark.asyncio
    async def test_events_stream(self, repo, tmp_path):
        sha = _commit(repo, {"a.txt": "a\n"}, "initial")
        monitor = ChangeMonitor(poll_interval=0)
        checks = iter([False, True])

        async def is_disconnected():
            return next(checks)

        events = [event async for event in monitor.events(tmp_path, is_disconnected)]

        # immediate head, then one poll that records the same head
        assert events == [
            {"event": "head", "data": json.dumps({"sha": sha})},
            {"event": "head", "data": json.dumps({"sha": sha})},
        ]
        assert monitor.last_head == sha

    @pytest.mark.asyncio
    async def test_events_stream_reports_errors(self, tmp_path):
        monitor = ChangeMonitor(poll_interval=0)
        checks = iter([False, True])

        async def is_disconnected():
            return next(checks)

        def failing_poll(repo_path):
            raise GitServiceError("Git command failed: bad revision")

        monitor.poll = failing_poll
        events = [event async for event in monitor.events(tmp_path, is_disconnected)]

        assert events == [
            {"event": "error", "data": json.dumps({"message": "Git command failed: bad revision"})},
        ]
