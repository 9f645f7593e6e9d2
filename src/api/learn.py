"""
Learning endpoints: local repository tree, resources, git change stream
and exports
"""

import asyncio
from pathlib import Path
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response
from sse_starlette.sse import EventSourceResponse

from src.api.session import get_github_client, github_error_response
from src.models.learn import CompressRequest
from src.services.archive_service import archive_name, build_archive
from src.services.git_service import ChangeMonitor, GitService
from src.services.github_client import GitHubAPIError, GitHubClient
from src.services.learning_resources import build_contextual_resources, resources_for
from src.services.shared_services import get_change_monitor, learn_rate_limiter
from src.services.tree_builder import build_nested_tree, github_entries_to_files, walk_directory
from src.utils.repo_names import split_repo_full_name

router = APIRouter()
logger = structlog.get_logger()


def _repo_root(repo_path: Optional[str], required_message: str = "repo_path query parameter is required") -> Path:
    """Resolved local repository path, 400 when missing and 404 when absent"""
    if not repo_path:
        raise HTTPException(status_code=400, detail=required_message)
    root = Path(repo_path).expanduser().resolve()
    if not root.exists():
        raise HTTPException(status_code=404, detail="Repository path not found")
    return root


@router.get("/tree")
async def get_local_tree(repo_path: Optional[str] = Query(None)) -> JSONResponse:
    """
    Nested file tree of a local repository with technology badges
    """
    root = _repo_root(repo_path)
    files = await asyncio.to_thread(walk_directory, root)
    return JSONResponse(content={"root": str(root), "tree": build_nested_tree(files)})


@router.get("/resources")
async def get_resources(technologies: str = Query("")) -> JSONResponse:
    """
    Curated resources for a comma-separated list of technologies
    """
    techs = [t.strip() for t in technologies.split(",") if t.strip()]
    return JSONResponse(content={"resources": resources_for(techs)})


@router.get("/status")
async def get_status(
    repo_path: Optional[str] = Query(None),
    monitor: ChangeMonitor = Depends(get_change_monitor),
) -> JSONResponse:
    """
    Current HEAD of a local repository and the last HEAD seen by the stream
    """
    root = _repo_root(repo_path)
    head = await asyncio.to_thread(GitService(root).head_sha)
    return JSONResponse(content={"head": head, "lastSeen": monitor.last_head})


@router.get("/stream")
async def stream_changes(
    request: Request,
    repo_path: Optional[str] = Query(None),
    monitor: ChangeMonitor = Depends(get_change_monitor),
) -> EventSourceResponse:
    """
    Server-sent events for HEAD changes of a local repository
    """
    root = _repo_root(repo_path)
    logger.info("Change stream opened", repo_path=str(root))
    return EventSourceResponse(
        monitor.events(root, request.is_disconnected),
        headers={"Cache-Control": "no-cache"},
    )


@router.post("/compress")
async def compress_selection(body: CompressRequest) -> Response:
    """
    Zip archive of the selected paths of a local repository
    """
    if not body.paths:
        raise HTTPException(status_code=400, detail="paths array required")
    root = _repo_root(body.repo_path, "repo_path is required")

    data = await asyncio.to_thread(build_archive, root, body.paths)
    return Response(
        content=data,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{archive_name()}"'},
    )


@router.get("/contextual", dependencies=[Depends(learn_rate_limiter)])
async def get_contextual_resources(
    path: Optional[str] = Query(None),
    language: str = Query("en"),
    max: int = Query(6, ge=1, le=25),
) -> JSONResponse:
    """
    Tutorials, courses and docs related to a file path
    """
    if not path:
        raise HTTPException(status_code=400, detail="path query param is required")
    return JSONResponse(content=await build_contextual_resources(path, language, max))


@router.get("/github-tree")
async def get_repo_tree_from_github(
    full_name: Optional[str] = Query(None),
    github: GitHubClient = Depends(get_github_client),
) -> JSONResponse:
    """
    Flat file list of a GitHub repository with technology badges
    """
    if not full_name:
        raise HTTPException(status_code=400, detail="full_name query parameter is required (owner/repo)")
    try:
        owner, repo = split_repo_full_name(full_name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    normalized = f"{owner}/{repo}"
    try:
        default_branch, entries = await github.get_default_branch_tree(normalized)
    except GitHubAPIError as e:
        return github_error_response(e, "Failed to fetch repository tree", "get_repo_tree_from_github")

    return JSONResponse(content={
        "default_branch": default_branch,
        "tree": github_entries_to_files(entries),
        "repository": {"name": repo, "owner": owner, "full_name": normalized},
    })


@router.get("/github-contextual", dependencies=[Depends(learn_rate_limiter)])
async def get_github_contextual_resources(
    full_name: Optional[str] = Query(None),
    path: Optional[str] = Query(None),
    language: str = Query("en"),
    max: int = Query(6, ge=1, le=25),
) -> JSONResponse:
    """
    Contextual resources for a file of a GitHub repository
    """
    if not path:
        raise HTTPException(status_code=400, detail="path query param is required")
    content = await build_contextual_resources(path, language, max)
    content.update({"repository": full_name, "filePath": path})
    return JSONResponse(content=content)
