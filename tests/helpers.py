"""
GitHub API stubs and sample payloads shared by the tests
"""

import base64
from typing import Any, Dict, List, Optional, Tuple

import httpx


class GitHubStub:
    """Canned GitHub API responses keyed by (method, path)"""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, payload: Any, status_code: int = 200) -> None:
        self.routes[(method.upper(), path)] = (status_code, payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": "Not Found"})
        status_code, payload = self.routes[key]
        return httpx.Response(status_code, json=payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last(self, path: str) -> Optional[httpx.Request]:
        for request in reversed(self.requests):
            if request.url.path == path:
                return request
        return None

    def add_repository(self, full_name: str = "octo/hello", branch: str = "main",
                       entries: Optional[List[Dict[str, Any]]] = None, **repo_fields) -> None:
        """Repository metadata, branch and recursive tree for full_name"""
        repo = {"full_name": full_name, "name": full_name.split("/")[1], "default_branch": branch}
        repo.update(repo_fields)
        self.add("GET", f"/repos/{full_name}", repo)
        self.add("GET", f"/repos/{full_name}/branches/{branch}",
                 {"name": branch, "commit": {"sha": "c0ffee", "commit": {"tree": {"sha": "tree123"}}}})
        self.add("GET", f"/repos/{full_name}/git/trees/tree123",
                 {"sha": "tree123", "tree": entries or [], "truncated": False})


def contents_payload(name: str, path: str, text: str) -> Dict[str, Any]:
    return {
        "name": name,
        "path": path,
        "type": "file",
        "encoding": "base64",
        "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
    }


def sample_entries() -> List[Dict[str, Any]]:
    return [
        {"path": "README.md", "type": "blob", "size": 120, "sha": "a1"},
        {"path": "package.json", "type": "blob", "size": 300, "sha": "a2"},
        {"path": "src", "type": "tree", "sha": "t1"},
        {"path": "src/components", "type": "tree", "sha": "t2"},
        {"path": "src/components/LoginButton.jsx", "type": "blob", "size": 800, "sha": "a3"},
        {"path": "src/api/auth.js", "type": "blob", "size": 900, "sha": "a4"},
        {"path": "src/styles.css", "type": "blob", "size": 200, "sha": "a5"},
    ]
