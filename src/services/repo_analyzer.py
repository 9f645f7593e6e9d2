"""
Whole-repository overview: metadata, layout and technologies summarized by
the LLM, with a heuristic overview when the LLM is unavailable
"""

from collections import Counter
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional

import structlog

from src.services.github_client import GitHubAPIError, GitHubClient, decode_file_payload
from src.services.llm_client import LLMClient, LLMError, extract_json_object
from src.services.prompt_templates import render_prompt
from src.services.tech_detect import detect_technologies
from src.services.tree_builder import github_entries_to_paths

logger = structlog.get_logger()

README_CHAR_LIMIT = 6000
TREE_LISTING_LIMIT = 150
MAX_TECHNOLOGIES = 10

# technologies describing repository housekeeping rather than the stack
HOUSEKEEPING_TECHNOLOGIES = frozenset({
    "Documentation", "License", "Changelog", "Contributing", "Git", "Environment",
    "JSON", "YAML", "TOML", "Markdown", "SVG", "XML",
})

KEY_FILE_NAMES = frozenset({
    "readme.md", "readme", "readme.rst", "package.json", "pyproject.toml",
    "setup.py", "requirements.txt", "cargo.toml", "go.mod", "pom.xml",
    "build.gradle", "gemfile", "dockerfile", "docker-compose.yml",
    "docker-compose.yaml", "makefile", "tsconfig.json", "next.config.js",
    "next.config.mjs", "vite.config.ts", "vite.config.js",
})

SYSTEM_PROMPT = (
    "You are a senior engineer helping a beginner understand a GitHub repository. "
    "Return ONLY raw JSON, no markdown fences and no commentary."
)

REPO_PROMPT = """Analyze this repository and return a JSON object with exactly three keys:
  "summary"       - 2-5 friendly sentences describing what the project does
  "technologies"  - list of the main languages, frameworks and tools (3-10 items, most important first)
  "structure"     - 2-4 sentences describing how the folders are organized

Be factual. Only mention what you can confirm from the information below.

Repository: {{ full_name }}
Description: {{ description }}
Primary language: {{ language }}
Detected technologies: {{ technologies }}
Top-level entries: {{ top_level }}

Files:
{{ files }}

README:
{{ readme }}"""


def rank_technologies(paths: List[str], limit: int = MAX_TECHNOLOGIES) -> List[str]:
    """Most frequent stack technologies across all file paths"""
    counts: Counter = Counter()
    for path in paths:
        for tech in detect_technologies(path):
            if tech not in HOUSEKEEPING_TECHNOLOGIES:
                counts[tech] += 1
    return [tech for tech, _ in counts.most_common(limit)]


def top_level_entries(entries: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    folders = sorted(
        e["path"] for e in entries if e.get("type") == "tree" and "/" not in e.get("path", "")
    )
    files = sorted(
        e["path"] for e in entries if e.get("type") == "blob" and "/" not in e.get("path", "")
    )
    return {"folders": folders, "files": files}


def key_files(paths: List[str]) -> List[str]:
    return [p for p in paths if PurePosixPath(p).name.lower() in KEY_FILE_NAMES and p.count("/") <= 1]


def fallback_overview(
    full_name: str,
    repo_info: Dict[str, Any],
    technologies: List[str],
    layout: Dict[str, List[str]],
) -> Dict[str, str]:
    """Heuristic summary and structure text"""
    name = repo_info.get("name") or full_name.split("/")[-1]
    description = (repo_info.get("description") or "").strip()
    language = repo_info.get("language")

    summary_parts = [f"**{name}** is a GitHub repository ({full_name})."]
    if description:
        summary_parts.append(description if description.endswith(".") else f"{description}.")
    if language:
        summary_parts.append(f"Most of its code is written in {language}.")
    if technologies:
        summary_parts.append(f"It appears to use {', '.join(technologies[:5])}.")

    folders = layout["folders"]
    if folders:
        shown = ", ".join(folders[:8])
        structure = f"The top level is organized into {len(folders)} folders: {shown}"
        structure += " and more." if len(folders) > 8 else "."
    else:
        structure = "All files live at the top level of the repository."
    if layout["files"]:
        structure += f" It also has {len(layout['files'])} top-level files."

    return {"summary": " ".join(summary_parts), "structure": structure}


class RepoAnalyzer:
    """Builds an overview of a whole repository"""

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def _readme(self, github: GitHubClient, full_name: str) -> Optional[str]:
        try:
            payload = await github.get_file_content(full_name, "README.md")
        except GitHubAPIError as e:
            logger.info("README not available", full_name=full_name, status_code=e.status_code)
            return None
        if not isinstance(payload, dict):
            return None
        return decode_file_payload(payload)

    async def analyze(self, github: GitHubClient, full_name: str) -> Dict[str, Any]:
        repo_info = await github.get_repository(full_name)
        _, entries = await github.get_default_branch_tree(full_name)
        readme = await self._readme(github, full_name)

        paths = github_entries_to_paths(entries)
        technologies = rank_technologies(paths)
        layout = top_level_entries(entries)
        important = key_files(paths)

        analysis: Dict[str, Any] = {
            "keyFiles": important,
            "topLevel": layout,
        }

        try:
            reply = await self.llm.complete(
                SYSTEM_PROMPT,
                render_prompt(
                    REPO_PROMPT,
                    full_name=full_name,
                    description=repo_info.get("description") or "none",
                    language=repo_info.get("language") or "unknown",
                    technologies=", ".join(technologies) or "none detected",
                    top_level=", ".join(layout["folders"] + layout["files"]) or "empty",
                    files="\n".join(paths[:TREE_LISTING_LIMIT]),
                    readme=(readme or "No README found")[:README_CHAR_LIMIT],
                ),
                max_tokens=800,
            )
            data = extract_json_object(reply)
            summary = str(data.get("summary") or "").strip()
            if not summary:
                raise ValueError("AI produced an empty summary")
            ai_technologies = data.get("technologies")
            if not isinstance(ai_technologies, list):
                ai_technologies = technologies
            analysis.update({
                "summary": summary,
                "technologies": [str(t) for t in ai_technologies],
                "structure": str(data.get("structure") or ""),
                "source": "ai",
            })
        except (LLMError, ValueError) as e:
            logger.warning("AI repository analysis failed, using heuristics", full_name=full_name, error=str(e))
            analysis.update(fallback_overview(full_name, repo_info, technologies, layout))
            analysis.update({"technologies": technologies, "source": "fallback"})

        return analysis
