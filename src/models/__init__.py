"""
Data models and schemas for the application
"""

from .github import (
    AISummaryRequest,
    AnalyzeIssueRequest,
    AnalyzeRepoRequest,
    CreateIssueBranchRequest,
)
from .learn import CompressRequest

__all__ = [
    "AISummaryRequest",
    "AnalyzeIssueRequest",
    "AnalyzeRepoRequest",
    "CreateIssueBranchRequest",
    "CompressRequest",
]
