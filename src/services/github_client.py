"""
GitHub REST API client used by the proxy endpoints
"""

import base64
import binascii
from typing import List, Dict, Any, Optional, Tuple
from urllib.parse import quote

import httpx
import structlog

from config.settings import settings

logger = structlog.get_logger()

RATE_LIMIT_WARNING_THRESHOLD = 10


class GitHubAPIError(Exception):
    """Custom exception for GitHub API errors"""
    def __init__(self, message: str, status_code: int = None, response_data: dict = None):
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        super().__init__(message)

    @property
    def details(self) -> str:
        """Message reported by GitHub, falling back to our own"""
        if isinstance(self.response_data, dict):
            for key in ("message", "error_description", "error"):
                value = self.response_data.get(key)
                if value:
                    return str(value)
        return self.message


def decode_file_payload(payload: Dict[str, Any]) -> Optional[str]:
    """Decode a contents API payload to text, keeping raw content on failure"""
    content = payload.get("content")
    if payload.get("encoding") == "base64" and isinstance(content, str):
        try:
            return base64.b64decode(content).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            logger.warning(
                "Failed to decode file content", path=payload.get("path"), error=str(e)
            )
    return content


class GitHubClient:
    """GitHub API client, optionally authenticated with a user token"""

    def __init__(
        self,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.transport = transport

        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "OpenHub-AI/1.0",
        }
        if self.token:
            self.headers["Authorization"] = f"token {self.token}"

        self.client = httpx.AsyncClient(
            headers=self.headers,
            timeout=httpx.Timeout(30.0),
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            transport=transport,
        )
        self.rate_limit_remaining: Optional[int] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    def with_token(self, token: str) -> "GitHubClient":
        """New client authenticated with token, sharing this client's transport"""
        return GitHubClient(token=token, transport=self.transport)

    async def _make_request(self, method: str, url: str, **kwargs) -> Any:
        """Make a request to the GitHub API with error handling"""
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error("GitHub API request failed", error=str(e), url=url)
            raise GitHubAPIError(f"Request failed: {str(e)}")

        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is not None and remaining.isdigit():
            self.rate_limit_remaining = int(remaining)
            if self.rate_limit_remaining <= RATE_LIMIT_WARNING_THRESHOLD:
                logger.warning(
                    "GitHub rate limit nearly exhausted",
                    remaining=self.rate_limit_remaining,
                    reset=response.headers.get("X-RateLimit-Reset"),
                )

        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {"message": response.text[:300]}

            raise GitHubAPIError(
                f"GitHub API error: {response.status_code}",
                status_code=response.status_code,
                response_data=error_data if isinstance(error_data, dict) else {},
            )

        return response.json() if response.content else {}

    def _repo_url(self, full_name: str, suffix: str = "") -> str:
        return f"{settings.GITHUB_API_URL}/repos/{full_name}{suffix}"

    # OAuth
    async def exchange_oauth_code(self, code: str, redirect_uri: str) -> Dict[str, Any]:
        """Exchange an OAuth authorization code for an access token payload"""
        url = f"{settings.GITHUB_OAUTH_URL}/login/oauth/access_token"
        data = {
            "client_id": settings.GITHUB_CLIENT_ID,
            "client_secret": settings.GITHUB_CLIENT_SECRET,
            "code": code,
            "redirect_uri": redirect_uri,
        }
        return await self._make_request(
            "POST", url, json=data, headers={"Accept": "application/json"}
        )

    # User Operations
    async def get_authenticated_user(self) -> Dict[str, Any]:
        """Get the user the token belongs to"""
        return await self._make_request("GET", f"{settings.GITHUB_API_URL}/user")

    async def list_user_repos(self, sort: str = "updated", per_page: int = 100) -> List[Dict[str, Any]]:
        """List repositories of the authenticated user"""
        url = f"{settings.GITHUB_API_URL}/user/repos"
        return await self._make_request(
            "GET", url, params={"sort": sort, "per_page": per_page}
        )

    # Repository Operations
    async def get_repository(self, full_name: str) -> Dict[str, Any]:
        """Get repository information"""
        return await self._make_request("GET", self._repo_url(full_name))

    async def get_branch(self, full_name: str, branch: str) -> Dict[str, Any]:
        """Get a branch with its head commit"""
        return await self._make_request(
            "GET", self._repo_url(full_name, f"/branches/{quote(branch, safe='')}")
        )

    async def get_tree(self, full_name: str, tree_sha: str, recursive: bool = True) -> Dict[str, Any]:
        """Get a git tree, recursively by default"""
        params = {"recursive": 1} if recursive else None
        return await self._make_request(
            "GET", self._repo_url(full_name, f"/git/trees/{tree_sha}"), params=params
        )

    async def get_default_branch_tree(self, full_name: str) -> Tuple[str, List[Dict[str, Any]]]:
        """Resolve the default branch and return its full recursive tree"""
        repo_info = await self.get_repository(full_name)
        default_branch = repo_info.get("default_branch") or "main"

        branch_info = await self.get_branch(full_name, default_branch)
        tree_sha = (
            (branch_info.get("commit") or {}).get("commit", {}).get("tree", {}).get("sha")
        )
        if not tree_sha:
            raise GitHubAPIError("Failed to resolve repository tree SHA", status_code=500)

        tree = await self.get_tree(full_name, tree_sha)
        if tree.get("truncated"):
            logger.warning("GitHub returned a truncated tree", full_name=full_name)
        return default_branch, tree.get("tree", [])

    async def get_file_content(self, full_name: str, file_path: str, ref: Optional[str] = None) -> Any:
        """Get file (or directory listing) content from repository"""
        url = self._repo_url(full_name, f"/contents/{quote(file_path, safe='/')}")
        params = {"ref": ref} if ref else None
        return await self._make_request("GET", url, params=params)

    # Issue Operations
    async def list_issues(
        self, full_name: str, state: str = "open", per_page: int = 30
    ) -> List[Dict[str, Any]]:
        """List issues, newest first"""
        params = {
            "state": state,
            "per_page": per_page,
            "sort": "created",
            "direction": "desc",
        }
        return await self._make_request(
            "GET", self._repo_url(full_name, "/issues"), params=params
        )

    # Git Operations
    async def get_commit(self, full_name: str, ref: str) -> Dict[str, Any]:
        """Get the commit a ref points at"""
        return await self._make_request(
            "GET", self._repo_url(full_name, f"/commits/{quote(ref, safe='')}")
        )

    async def create_ref(self, full_name: str, ref: str, sha: str) -> Dict[str, Any]:
        """Create a git reference such as refs/heads/<branch>"""
        return await self._make_request(
            "POST", self._repo_url(full_name, "/git/refs"), json={"ref": ref, "sha": sha}
        )
