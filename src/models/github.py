"""
Request models for the GitHub proxy endpoints
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ChildEntry(BaseModel):
    """One item of a folder listing sent by the explorer"""

    model_config = ConfigDict(extra="allow")

    name: str
    type: Optional[str] = None
    path: Optional[str] = None


class AISummaryRequest(BaseModel):
    """Body of POST /api/github/ai-summary"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: Optional[str] = None
    path: Optional[str] = None
    content: Optional[str] = None
    repo_name: Optional[str] = Field(default=None, alias="repoName")
    children: Optional[List[ChildEntry]] = None


class AnalyzeIssueRequest(BaseModel):
    """Body of POST /api/github/analyze-issue"""

    model_config = ConfigDict(populate_by_name=True)

    issue_number: Optional[int] = Field(default=None, alias="issueNumber")
    repo_full_name: Optional[str] = Field(default=None, alias="repoFullName")
    issue_title: Optional[str] = Field(default=None, alias="issueTitle")
    issue_body: Optional[str] = Field(default=None, alias="issueBody")


class AnalyzeRepoRequest(BaseModel):
    """Body of POST /api/github/analyze-repo"""

    model_config = ConfigDict(populate_by_name=True)

    repo_full_name: Optional[str] = Field(default=None, alias="repoFullName")


class CreateIssueBranchRequest(BaseModel):
    """Body of POST /api/github/create-issue-branch"""

    model_config = ConfigDict(populate_by_name=True)

    repo_full_name: Optional[str] = Field(default=None, alias="repoFullName")
    branch_name: Optional[str] = Field(default=None, alias="branchName")
    issue_number: Optional[int] = Field(default=None, alias="issueNumber")
