"""
Beginner-friendly summaries of repository files and folders.

The LLM is asked first; when it fails (not configured, upstream error,
unusable reply) a rule-based summary is built from simple keyword probes on
the file content or on the folder's child names. Every summary is a list of
lines starting with "- ".
"""

import re
from pathlib import PurePosixPath
from typing import List, Optional, Sequence

import structlog

from src.services.llm_client import LLMClient, LLMError
from src.services.prompt_templates import render_prompt

logger = structlog.get_logger()

MIN_AI_SUMMARY_LENGTH = 10
FOLDER_LISTING_LIMIT = 15

FILE_SYSTEM_PROMPT = (
    "You are helping a beginner understand a codebase. Provide clear, simple "
    "explanations that help new developers understand code purpose and functionality."
)

FOLDER_SYSTEM_PROMPT = (
    "You are helping a beginner understand a project structure. Provide clear, simple "
    "explanations that help new developers understand code organization."
)

FILE_PROMPT = """You are helping a beginner understand a codebase.

Task: Read the file below and produce 5-7 short, clear bullet points explaining what this file is used for.
Style rules:
- Use simple, friendly language a non-expert understands.
- Do not mention file extensions or technologies/framework names.
- Focus on purpose, inputs/outputs, and how it helps the app.
- Start each line with "- " and keep each bullet under 18 words.

File name: {{ file_name }}
Code:
{{ content }}"""

FOLDER_PROMPT = """You are helping a beginner understand a project structure.

Task: Explain why this folder exists and what it contains using 4-6 simple bullet points.
Style rules:
- Use friendly, plain language.
- Do not mention file extensions or technology/framework names.
- Start each line with "- " and keep each bullet under 18 words.

Folder: {{ folder_name }}
Repository: {{ repo_name }}
Items: {{ items }}"""

# content probes for files (matched against lowercased content)
FILE_PROBES = [
    (re.compile(r"(get|post|put|delete|fetch|request|response|router|route|api)"),
     "- Handles incoming requests and prepares helpful responses"),
    (re.compile(r"(auth|login|signup|token|session|password)"),
     "- Checks who is signed in and what they can do"),
    (re.compile(r"(model|schema|db|database|query|insert|update|delete|select)"),
     "- Reads and writes data used by the app"),
    (re.compile(r"(config|settings|env|environment|process\.env)"),
     "- Keeps app settings like keys and service URLs"),
    (re.compile(r"(style|styles|color|spacing|font|layout)"),
     "- Controls the look and layout of screens"),
    (re.compile(r"(render|view|ui|component|page|title|button|input)"),
     "- Shows part of the interface and reacts to user actions"),
]

# child-name probes for folders
FOLDER_PROBES = [
    (re.compile(r"page|screen|view", re.I), "- Holds full screens users can open"),
    (re.compile(r"service|client|api", re.I), "- Keeps helpers for talking to other services"),
    (re.compile(r"controller", re.I), "- Stores functions that process requests and responses"),
    (re.compile(r"model|schema", re.I), "- Defines how important data is shaped"),
    (re.compile(r"route|router", re.I), "- Lists paths this part of the app responds to"),
    (re.compile(r"middleware|auth|validation", re.I), "- Adds checks like access and input validation"),
    (re.compile(r"style|styles|css|scss", re.I), "- Keeps files that control look and layout"),
    (re.compile(r"config|env", re.I), "- Stores settings and environment values"),
    (re.compile(r"public|static|assets", re.I), "- Holds images and other public assets"),
    (re.compile(r"test|spec|__tests__", re.I), "- Contains checks to make sure features work"),
]

PACKAGE_JSON_BULLETS = [
    "- Lists tools and libraries used by this project",
    "- Defines commands to run and build the app",
    "- Stores project name and basic info",
    "- Helps others install everything with one command",
]

FRONTEND_BULLETS = [
    "- Holds everything users see and click",
    "- Contains screens and small reusable pieces",
    "- Manages navigation and page layout",
    "- Includes styles and shared helpers",
]

BACKEND_BULLETS = [
    "- Handles app logic on the server side",
    "- Receives requests and returns useful data",
    "- Connects to storage and other services",
    "- Includes routes, controllers, and helpers",
]

EMPTY_FILE_BULLETS = [
    "- This file is part of the project structure",
    "- It looks empty or could not be read",
    "- Kept to organize the project correctly",
    "- Safe to ignore unless you are editing this area",
]

EMPTY_FOLDER_BULLETS = [
    "- This folder organizes related files in one place",
    "- Helps keep features tidy and easy to find",
    "- May be empty now or contain hidden files",
    "- Used to structure the project clearly",
]


def _base_name(path: str) -> str:
    return PurePosixPath(path.rstrip("/")).name or path


def _fit(bullets: List[str], minimum: int, maximum: int, filler: str) -> List[str]:
    limited = bullets[:maximum]
    while len(limited) < minimum:
        limited.append(filler)
    return limited


def fallback_file_bullets(file_name: str, content: str) -> str:
    """Rule-based 5-7 bullet summary of a file"""
    if file_name == "package.json":
        bullets = list(PACKAGE_JSON_BULLETS)
    else:
        lowered = content.lower()
        bullets = [text for pattern, text in FILE_PROBES if pattern.search(lowered)]
        bullets.append("- Connects this part with the rest of the app")
        bullets.append("- Organizes logic so the feature is easy to update")

    return "\n".join(
        _fit(bullets, 5, 7, "- Supports this feature with clear, reusable code")
    )


def fallback_folder_bullets(folder_name: str, child_names: Sequence[str]) -> str:
    """Rule-based 4-6 bullet summary of a folder"""
    name = folder_name.lower()
    if name == "frontend":
        bullets = list(FRONTEND_BULLETS)
    elif name == "backend":
        bullets = list(BACKEND_BULLETS)
    else:
        bullets = ["- Groups files for one clear area of the app"]

    for pattern, text in FOLDER_PROBES:
        if any(pattern.search(child) for child in child_names):
            bullets.append(text)

    return "\n".join(
        _fit(bullets, 4, 6, "- Explains this feature area and keeps it organized")
    )


def folder_listing(child_names: Sequence[str], limit: int = FOLDER_LISTING_LIMIT) -> str:
    lines = [f"• {name}" for name in child_names[:limit]]
    listing = "Files and subfolders in this directory:\n" + "\n".join(lines)
    if len(child_names) > limit:
        listing += f"\n... and {len(child_names) - limit} more items"
    return listing


def error_fallback_summary(summary_type: str, path: str) -> str:
    """Last-resort summary when summarizing itself failed"""
    name = _base_name(path)
    if summary_type == "file":
        return "\n".join([
            f"- {name} helps this part of the app work",
            "- Explains behavior and handles a small set of tasks",
            "- Connects with nearby files to complete the feature",
            "- Safe to read to understand how this area behaves",
        ])
    return "\n".join([
        f"- {name} groups related files together",
        "- Makes this feature easier to find and update",
        "- Use it to keep work for this area in one place",
    ])


class SummaryGenerator:
    """Generates file and folder summaries, AI first with a rule-based fallback"""

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def summarize(
        self,
        summary_type: str,
        path: str,
        repo_name: str,
        content: Optional[str] = None,
        children: Optional[Sequence[str]] = None,
    ) -> str:
        try:
            if summary_type == "file":
                return await self.summarize_file(path, content or "")
            return await self.summarize_folder(path, repo_name, list(children or []))
        except Exception as e:
            logger.error(
                "Summary generation failed", type=summary_type, path=path, error=str(e)
            )
            return error_fallback_summary(summary_type, path)

    async def summarize_file(self, path: str, content: str) -> str:
        if not content:
            return "\n".join(EMPTY_FILE_BULLETS)

        file_name = _base_name(path)
        try:
            reply = await self.llm.complete(
                FILE_SYSTEM_PROMPT,
                render_prompt(FILE_PROMPT, file_name=file_name, content=content),
                max_tokens=600,
            )
            if len(reply) < MIN_AI_SUMMARY_LENGTH:
                raise LLMError("AI response seems incorrect, using fallback")
            return reply
        except LLMError as e:
            logger.warning("AI file summary failed, using rule-based analysis", path=path, error=str(e))
            return fallback_file_bullets(file_name, content)

    async def summarize_folder(self, path: str, repo_name: str, child_names: List[str]) -> str:
        if not child_names:
            return "\n".join(EMPTY_FOLDER_BULLETS)

        folder_name = _base_name(path)
        try:
            summary = await self.llm.complete(
                FOLDER_SYSTEM_PROMPT,
                render_prompt(
                    FOLDER_PROMPT,
                    folder_name=folder_name,
                    repo_name=repo_name,
                    items=", ".join(child_names),
                ),
                max_tokens=300,
            )
        except LLMError as e:
            logger.warning("AI folder summary failed, using rule-based analysis", path=path, error=str(e))
            summary = fallback_folder_bullets(folder_name, child_names)

        return f"{summary}\n\n{folder_listing(child_names)}"
