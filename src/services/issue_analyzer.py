"""
GitHub issue analysis: AI solution guide with a structured fallback
"""

import re
from typing import Any, Dict, Iterable, List, Optional

import structlog

from src.services.llm_client import LLMClient, LLMError, extract_json_object
from src.services.prompt_templates import render_prompt

logger = structlog.get_logger()

MAX_SUGGESTED_FILES = 10

SYSTEM_PROMPT = (
    "You are an expert software developer helping to analyze GitHub issues. "
    "Provide clear, actionable advice that helps developers understand and solve issues efficiently."
)

ANALYSIS_PROMPT = """Analyze this GitHub issue and provide a solution guide.

ISSUE: #{{ number }} - {{ title }}
DESCRIPTION: {{ body }}
REPO: {{ repo }}

Provide analysis in this JSON format:
{
  "issueSummary": "What this issue is about and what needs to be done",
  "affectedFiles": ["Files that need changes"],
  "solutionSteps": ["Step 1", "Step 2", "Step 3"],
  "codeChanges": "Specific code changes needed",
  "suggestedComment": "Comment to add when starting work",
  "branchName": "descriptive-branch-name",
  "difficulty": "easy|medium|hard",
  "estimatedTime": "time estimate",
  "gitCommands": [
    "git checkout -b [BRANCH_NAME]",
    "git add .",
    "git commit -m \\"[COMMIT_MESSAGE]\\"",
    "git push origin [BRANCH_NAME]"
  ],
  "commitMessage": "Descriptive commit message"
}

Be specific and actionable based on the issue content."""


def extract_keywords(text: str) -> List[str]:
    """Alphabetic words longer than three characters, lowercased, in order"""
    words = re.findall(r"[a-z]+", (text or "").lower())
    seen = set()
    keywords = []
    for word in words:
        if len(word) > 3 and word not in seen:
            seen.add(word)
            keywords.append(word)
    return keywords


def find_relevant_files(keywords: Iterable[str], paths: Iterable[str], limit: int = MAX_SUGGESTED_FILES) -> List[str]:
    """Paths whose lowercased form contains any keyword"""
    keywords = [k.lower() for k in keywords]
    if not keywords:
        return []
    matches = []
    for path in paths:
        lowered = path.lower()
        if any(k in lowered for k in keywords):
            matches.append(path)
            if len(matches) >= limit:
                break
    return matches


def slugify(text: str) -> str:
    return re.sub(r"^-+|-+$", "", re.sub(r"[^a-z0-9]+", "-", text.lower()))


def _default_branch(issue_number: int) -> str:
    return f"fix-issue-{issue_number}"


def _default_commit(issue_number: int, title: str) -> str:
    return f"fix: resolve issue #{issue_number} - {title}"


def _git_commands(branch: str, commit_message: str) -> List[str]:
    return [
        f"git checkout -b {branch}",
        "git add .",
        f'git commit -m "{commit_message}"',
        f"git push origin {branch}",
    ]


def default_analysis(issue_number: int, title: str) -> Dict[str, Any]:
    """Analysis used when the AI is unavailable"""
    branch = _default_branch(issue_number)
    commit = _default_commit(issue_number, title)
    return {
        "issueSummary": f"Issue #{issue_number}: {title}",
        "affectedFiles": [],
        "solutionSteps": [
            "Read and understand the issue description",
            "Identify which files are affected",
            "Make the necessary code changes",
            "Test your changes locally",
            "Create a pull request",
        ],
        "codeChanges": "Implement the fix based on the issue requirements",
        "suggestedComment": "I'll take a look at this issue and work on a solution.",
        "branchName": branch,
        "difficulty": "medium",
        "estimatedTime": "2-4 hours",
        "gitCommands": _git_commands(branch, commit),
        "commitMessage": commit,
    }


def unparsed_reply_analysis(issue_number: int, title: str, reply: str) -> Dict[str, Any]:
    """Analysis wrapping an AI reply that carried no usable JSON"""
    analysis = default_analysis(issue_number, title)
    analysis.update({
        "issueSummary": reply[:200] + "...",
        "solutionSteps": [
            "Analyze the issue description",
            "Identify affected files",
            "Implement the fix",
            "Test the changes",
        ],
        "codeChanges": "Review the issue and implement necessary changes based on the description",
        "suggestedComment": "I'll work on this issue. Let me analyze the codebase and implement a solution.",
    })
    return analysis


def complete_analysis(analysis: Dict[str, Any], issue_number: int, title: str) -> Dict[str, Any]:
    """Fill every missing field with its default"""
    branch = analysis.get("branchName") or _default_branch(issue_number)
    commit = analysis.get("commitMessage") or _default_commit(issue_number, title)
    return {
        "issueSummary": analysis.get("issueSummary") or f"Issue #{issue_number}: {title}",
        "affectedFiles": analysis.get("affectedFiles") or [],
        "solutionSteps": analysis.get("solutionSteps") or [],
        "codeChanges": analysis.get("codeChanges") or "Implement the fix based on the issue requirements",
        "suggestedComment": analysis.get("suggestedComment") or "I'll work on this issue.",
        "branchName": branch,
        "difficulty": analysis.get("difficulty") or "medium",
        "estimatedTime": analysis.get("estimatedTime") or "2-4 hours",
        "gitCommands": analysis.get("gitCommands") or _git_commands(branch, commit),
        "commitMessage": commit,
    }


class IssueAnalyzer:
    """Produces a solution guide for a GitHub issue"""

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def analyze(
        self,
        issue_number: int,
        repo_full_name: str,
        title: str,
        body: Optional[str] = None,
        candidate_paths: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        logger.info(
            "Analyzing issue",
            repository=repo_full_name,
            issue_number=issue_number,
            body_length=len(body or ""),
        )

        analysis: Optional[Dict[str, Any]] = None
        try:
            reply = await self.llm.complete(
                SYSTEM_PROMPT,
                render_prompt(
                    ANALYSIS_PROMPT,
                    number=issue_number,
                    title=title,
                    body=body or "No description provided",
                    repo=repo_full_name,
                ),
                max_tokens=600,
            )
            try:
                analysis = extract_json_object(reply)
            except ValueError as e:
                logger.warning("AI issue analysis was not JSON, using structured fallback", error=str(e))
                analysis = unparsed_reply_analysis(issue_number, title, reply)
        except LLMError as e:
            logger.warning("AI issue analysis failed, using fallback", issue_number=issue_number, error=str(e))

        if analysis is None:
            analysis = default_analysis(issue_number, title)

        result = complete_analysis(analysis, issue_number, title)

        if not result["affectedFiles"] and candidate_paths:
            keywords = extract_keywords(f"{title} {body or ''}")
            result["affectedFiles"] = find_relevant_files(keywords, candidate_paths)

        return result
