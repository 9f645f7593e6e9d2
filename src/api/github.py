"""
GitHub proxy and AI summary endpoints
"""

from typing import Optional, Tuple

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from src.api.session import get_github_client, github_error_response, require_session_token
from src.models.github import (
    AISummaryRequest,
    AnalyzeIssueRequest,
    AnalyzeRepoRequest,
    CreateIssueBranchRequest,
)
from src.services.github_client import GitHubAPIError, GitHubClient, decode_file_payload
from src.services.issue_analyzer import IssueAnalyzer
from src.services.llm_client import LLMClient
from src.services.repo_analyzer import RepoAnalyzer
from src.services.shared_services import get_llm_client
from src.services.summary_generator import SummaryGenerator
from src.services.tree_builder import build_nested_tree, github_entries_to_paths
from src.utils.repo_names import is_repo_full_name, split_repo_full_name

router = APIRouter()
logger = structlog.get_logger()

FULL_NAME_REQUIRED = "full_name query param required (owner/repo)"


def _full_name(value: Optional[str]) -> str:
    """Validated owner/repo from a query value"""
    if not is_repo_full_name(value):
        raise HTTPException(status_code=400, detail=FULL_NAME_REQUIRED)
    try:
        owner, repo = split_repo_full_name(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=FULL_NAME_REQUIRED)
    return f"{owner}/{repo}"


def _body_repo(value: str) -> Tuple[str, str, str]:
    """owner, repo and owner/repo from a request body value"""
    try:
        owner, repo = split_repo_full_name(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return owner, repo, f"{owner}/{repo}"


@router.get("/user")
async def get_user(
    _: str = Depends(require_session_token),
    github: GitHubClient = Depends(get_github_client),
):
    """
    The signed-in GitHub user
    """
    try:
        return await github.get_authenticated_user()
    except GitHubAPIError as e:
        return github_error_response(e, "Failed to fetch user", "get_user")


@router.get("/repos")
async def get_repos(
    _: str = Depends(require_session_token),
    github: GitHubClient = Depends(get_github_client),
):
    """
    Repositories of the signed-in user, most recently updated first
    """
    try:
        return await github.list_user_repos(sort="updated", per_page=100)
    except GitHubAPIError as e:
        return github_error_response(e, "Failed to fetch repositories", "get_repos")


@router.get("/repo")
async def get_repo_info(
    full_name: Optional[str] = Query(None),
    github: GitHubClient = Depends(get_github_client),
):
    """
    Repository metadata
    """
    name = _full_name(full_name)
    try:
        return await github.get_repository(name)
    except GitHubAPIError as e:
        return github_error_response(e, "Failed to fetch repository info", "get_repo_info")


@router.get("/tree")
async def get_repo_tree(
    full_name: Optional[str] = Query(None),
    nested: bool = Query(False, description="Return a nested folder tree"),
    github: GitHubClient = Depends(get_github_client),
):
    """
    Complete repository tree of the default branch (GitHub Trees API, recursive)
    """
    name = _full_name(full_name)
    try:
        default_branch, entries = await github.get_default_branch_tree(name)
    except GitHubAPIError as e:
        return github_error_response(e, "Failed to fetch repository tree", "get_repo_tree")

    tree = build_nested_tree(github_entries_to_paths(entries)) if nested else entries
    return {"default_branch": default_branch, "tree": tree}


@router.get("/file")
async def get_file_content(
    full_name: Optional[str] = Query(None),
    path: Optional[str] = Query(None),
    github: GitHubClient = Depends(get_github_client),
):
    """
    Decoded content of one file
    """
    name = _full_name(full_name)
    if not path:
        raise HTTPException(status_code=400, detail="path query param required")

    try:
        payload = await github.get_file_content(name, path)
    except GitHubAPIError as e:
        return github_error_response(e, "Failed to fetch file content", "get_file_content")

    if isinstance(payload, list):
        raise HTTPException(status_code=400, detail="Path is a directory, not a file")

    return {
        "name": payload.get("name"),
        "path": path,
        "type": payload.get("type"),
        "encoding": payload.get("encoding"),
        "content": decode_file_payload(payload),
    }


@router.get("/issues")
async def get_repo_issues(
    full_name: Optional[str] = Query(None),
    state: str = Query("open", pattern="^(open|closed|all)$"),
    per_page: int = Query(30, ge=1, le=100),
    github: GitHubClient = Depends(get_github_client),
):
    """
    Issues of a repository, newest first
    """
    name = _full_name(full_name)
    try:
        return await github.list_issues(name, state=state, per_page=per_page)
    except GitHubAPIError as e:
        return github_error_response(e, "Failed to fetch repository issues", "get_repo_issues")


@router.post("/ai-summary")
async def get_ai_summary(
    body: AISummaryRequest,
    llm: LLMClient = Depends(get_llm_client),
) -> JSONResponse:
    """
    Beginner-friendly summary of a file or folder
    """
    if not body.type or not body.path or not body.repo_name:
        raise HTTPException(status_code=400, detail="Missing required fields: type, path, repoName")
    if body.type not in ("file", "folder"):
        raise HTTPException(status_code=400, detail="type must be 'file' or 'folder'")

    generator = SummaryGenerator(llm)
    summary = await generator.summarize(
        body.type,
        body.path,
        body.repo_name,
        content=body.content,
        children=[child.name for child in body.children or []],
    )
    return JSONResponse(content={"summary": summary})


@router.post("/analyze-issue")
async def analyze_issue(
    body: AnalyzeIssueRequest,
    github: GitHubClient = Depends(get_github_client),
    llm: LLMClient = Depends(get_llm_client),
) -> JSONResponse:
    """
    Solution guide for an issue: summary, steps, branch and git commands
    """
    if not body.issue_number or not body.repo_full_name or not body.issue_title:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: issueNumber, repoFullName, issueTitle",
        )

    owner, repo, full_name = _body_repo(body.repo_full_name)

    # file suggestions are best effort; analysis goes on without them
    candidate_paths = None
    try:
        _, entries = await github.get_default_branch_tree(full_name)
        candidate_paths = github_entries_to_paths(entries)
    except GitHubAPIError as e:
        logger.info("Tree unavailable for file suggestions", full_name=full_name, status_code=e.status_code)

    analysis = await IssueAnalyzer(llm).analyze(
        body.issue_number,
        full_name,
        body.issue_title,
        body.issue_body,
        candidate_paths=candidate_paths,
    )

    return JSONResponse(content={
        "success": True,
        "analysis": analysis,
        "repoInfo": {"owner": owner, "repo": repo, "fullName": full_name},
    })


@router.post("/analyze-repo")
async def analyze_repo(
    body: AnalyzeRepoRequest,
    github: GitHubClient = Depends(get_github_client),
    llm: LLMClient = Depends(get_llm_client),
) -> JSONResponse:
    """
    Overview of a whole repository: summary, technologies and layout
    """
    if not body.repo_full_name:
        raise HTTPException(status_code=400, detail="Missing required field: repoFullName")

    owner, repo, full_name = _body_repo(body.repo_full_name)

    try:
        analysis = await RepoAnalyzer(llm).analyze(github, full_name)
    except GitHubAPIError as e:
        return github_error_response(e, "Failed to analyze repository", "analyze_repo")

    return JSONResponse(content={
        "success": True,
        "analysis": analysis,
        "repository": {"owner": owner, "repo": repo, "fullName": full_name},
    })


@router.post("/create-issue-branch")
async def create_issue_branch(
    body: CreateIssueBranchRequest,
    _: str = Depends(require_session_token),
    github: GitHubClient = Depends(get_github_client),
) -> JSONResponse:
    """
    Create a branch for an issue at the head of the default branch
    """
    if not body.repo_full_name or not body.branch_name or not body.issue_number:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: repoFullName, branchName, issueNumber",
        )

    _, _, full_name = _body_repo(body.repo_full_name)
    try:
        repo_info = await github.get_repository(full_name)
        default_branch = repo_info.get("default_branch") or "main"
        latest = await github.get_commit(full_name, default_branch)
        branch = await github.create_ref(full_name, f"refs/heads/{body.branch_name}", latest["sha"])
    except GitHubAPIError as e:
        return github_error_response(e, "Failed to create issue branch", "create_issue_branch")

    logger.info(
        "Issue branch created",
        repository=full_name,
        branch=body.branch_name,
        issue_number=body.issue_number,
    )

    commit_message = (
        f"feat: start work on issue #{body.issue_number}\n\n"
        f"- Created branch: {body.branch_name}\n"
        f"- Issue: {body.repo_full_name}#{body.issue_number}\n"
        f"- Status: In progress"
    )
    return JSONResponse(content={
        "success": True,
        "branch": branch,
        "commitMessage": commit_message,
        "nextSteps": [
            "Clone the repository locally",
            f"Checkout the new branch: git checkout {body.branch_name}",
            "Make your changes",
            f'Commit and push: git add . && git commit -m "your message" && git push origin {body.branch_name}',
            "Create a pull request when ready",
        ],
    })
