"""
Tests for GitHub API client
"""

import base64
import json

import httpx
import pytest

from src.services.github_client import GitHubAPIError, GitHubClient, decode_file_payload
from tests.helpers import sample_entries


class TestGitHubClient:
    """Test cases for GitHub API client"""

    def test_client_initialization(self):
        """Test client initialization"""
        client = GitHubClient(token="test_token")

        assert client.token == "test_token"
        assert client.headers["Authorization"] == "token test_token"
        assert client.headers["User-Agent"] == "OpenHub-AI/1.0"
        assert client.headers["Accept"] == "application/vnd.github.v3+json"

    def test_client_without_token(self):
        """Anonymous clients send no Authorization header"""
        client = GitHubClient()
        assert "Authorization" not in client.headers

    @pytest.mark.asyncio
    async def test_with_token_shares_transport(self, github_stub):
        github_stub.add("GET", "/user", {"login": "octocat"})
        transport = github_stub.transport

        async with GitHubClient(transport=transport) as anonymous:
            async with anonymous.with_token("abc") as authed:
                user = await authed.get_authenticated_user()

        assert user == {"login": "octocat"}
        assert authed.transport is transport
        assert github_stub.last("/user").headers["Authorization"] == "token abc"

    @pytest.mark.asyncio
    async def test_error_status_raises(self, github_stub):
        """Test GitHub API error handling"""
        github_stub.add("GET", "/repos/octo/private", {"message": "Bad credentials"}, status_code=401)

        async with GitHubClient(transport=github_stub.transport) as client:
            with pytest.raises(GitHubAPIError) as exc_info:
                await client.get_repository("octo/private")

        assert exc_info.value.status_code == 401
        assert exc_info.value.details == "Bad credentials"

    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad gateway"))

        async with GitHubClient(transport=transport) as client:
            with pytest.raises(GitHubAPIError) as exc_info:
                await client.get_repository("octo/hello")

        assert exc_info.value.status_code == 502
        assert exc_info.value.details == "Bad gateway"

    @pytest.mark.asyncio
    async def test_transport_error_has_no_status(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with GitHubClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(GitHubAPIError) as exc_info:
                await client.get_authenticated_user()

        assert exc_info.value.status_code is None
        assert "connection refused" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_rate_limit_is_tracked(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json=[], headers={"X-RateLimit-Remaining": "5"})
        )

        async with GitHubClient(transport=transport) as client:
            await client.list_user_repos()

        assert client.rate_limit_remaining == 5

    @pytest.mark.asyncio
    async def test_default_branch_tree(self, github_stub):
        github_stub.add_repository("octo/hello", branch="develop", entries=sample_entries())

        async with GitHubClient(transport=github_stub.transport) as client:
            branch, entries = await client.get_default_branch_tree("octo/hello")

        assert branch == "develop"
        assert entries == sample_entries()
        assert github_stub.last("/repos/octo/hello/git/trees/tree123").url.params["recursive"] == "1"

    @pytest.mark.asyncio
    async def test_default_branch_tree_without_sha(self, github_stub):
        github_stub.add("GET", "/repos/octo/hello", {"default_branch": "main"})
        github_stub.add("GET", "/repos/octo/hello/branches/main", {"name": "main", "commit": {}})

        async with GitHubClient(transport=github_stub.transport) as client:
            with pytest.raises(GitHubAPIError) as exc_info:
                await client.get_default_branch_tree("octo/hello")

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to resolve repository tree SHA"

    @pytest.mark.asyncio
    async def test_file_content_path_is_quoted(self, github_stub):
        github_stub.add("GET", "/repos/octo/hello/contents/docs/my notes.md", {"name": "my notes.md"})

        async with GitHubClient(transport=github_stub.transport) as client:
            payload = await client.get_file_content("octo/hello", "docs/my notes.md", ref="dev")

        assert payload == {"name": "my notes.md"}
        request = github_stub.requests[-1]
        assert request.url.raw_path.startswith(b"/repos/octo/hello/contents/docs/my%20notes.md")
        assert request.url.params["ref"] == "dev"

    @pytest.mark.asyncio
    async def test_list_issues_params(self, github_stub):
        github_stub.add("GET", "/repos/octo/hello/issues", [{"number": 1}])

        async with GitHubClient(transport=github_stub.transport) as client:
            issues = await client.list_issues("octo/hello", state="closed", per_page=5)

        assert issues == [{"number": 1}]
        params = github_stub.last("/repos/octo/hello/issues").url.params
        assert params["state"] == "closed"
        assert params["per_page"] == "5"
        assert params["sort"] == "created"
        assert params["direction"] == "desc"

    @pytest.mark.asyncio
    async def test_create_ref(self, github_stub):
        github_stub.add("POST", "/repos/octo/hello/git/refs", {"ref": "refs/heads/fix-1"}, status_code=201)

        async with GitHubClient(token="abc", transport=github_stub.transport) as client:
            ref = await client.create_ref("octo/hello", "refs/heads/fix-1", "c0ffee")

        assert ref == {"ref": "refs/heads/fix-1"}
        request = github_stub.last("/repos/octo/hello/git/refs")
        assert request.method == "POST"
        assert json.loads(request.read()) == {"ref": "refs/heads/fix-1", "sha": "c0ffee"}

    @pytest.mark.asyncio
    async def test_exchange_oauth_code(self, github_stub):
        github_stub.add("POST", "/login/oauth/access_token", {"access_token": "gho_123"})

        async with GitHubClient(transport=github_stub.transport) as client:
            data = await client.exchange_oauth_code("code-1", "http://localhost:3000/auth/callback")

        assert data == {"access_token": "gho_123"}
        request = github_stub.last("/login/oauth/access_token")
        assert request.url.host == "github.com"
        assert request.headers["Accept"] == "application/json"


class TestDecodeFilePayload:

    def test_decodes_base64(self):
        payload = {"encoding": "base64", "content": base64.b64encode(b"print('hi')\n").decode()}
        assert decode_file_payload(payload) == "print('hi')\n"

    def test_keeps_raw_content_on_failure(self):
        payload = {"encoding": "base64", "content": base64.b64encode(b"\xff\xfe\x00").decode()}
        assert decode_file_payload(payload) == payload["content"]

    def test_other_encodings_pass_through(self):
        assert decode_file_payload({"encoding": "none", "content": "raw"}) == "raw"
        assert decode_file_payload({}) is None
