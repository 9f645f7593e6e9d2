"""
Shared fixtures: a stubbed GitHub API and an app client with overrides
"""

from typing import Optional
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from main import app
from src.api.session import get_anonymous_github_client, get_github_client, get_session_token
from src.services.github_client import GitHubClient
from src.services.llm_client import LLMClient, LLMError
from src.services.shared_services import get_llm_client, reset_services
from tests.helpers import GitHubStub


@pytest.fixture
def github_stub():
    return GitHubStub()


@pytest.fixture
def mock_llm():
    """LLM that fails by default; tests set complete's side effect or return value"""
    llm = Mock(spec=LLMClient)
    llm.complete = AsyncMock(side_effect=LLMError("OpenRouter API key is not configured"))
    return llm


@pytest.fixture
def client(github_stub, mock_llm):
    async def stub_github_client(token: Optional[str] = Depends(get_session_token)):
        async with GitHubClient(token=token, transport=github_stub.transport) as gh:
            yield gh

    async def stub_anonymous_client():
        async with GitHubClient(transport=github_stub.transport) as gh:
            yield gh

    reset_services()
    app.dependency_overrides[get_github_client] = stub_github_client
    app.dependency_overrides[get_anonymous_github_client] = stub_anonymous_client
    app.dependency_overrides[get_llm_client] = lambda: mock_llm
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    reset_services()
