"""
Technology detection from file paths
"""

from pathlib import PurePosixPath
from typing import Dict, List, Optional

EXTENSION_TECHNOLOGIES: Dict[str, str] = {
    ".js": "JavaScript",
    ".jsx": "React",
    ".ts": "TypeScript",
    ".tsx": "React TypeScript",
    ".css": "CSS",
    ".scss": "Sass",
    ".sass": "Sass",
    ".py": "Python",
    ".go": "Go",
    ".rs": "Rust",
    ".java": "Java",
    ".rb": "Ruby",
    ".php": "PHP",
    ".c": "C",
    ".cpp": "C++",
    ".cs": "C#",
    ".swift": "Swift",
    ".kt": "Kotlin",
    ".sql": "SQL",
    ".sh": "Shell",
    ".bat": "Batch",
    ".ps1": "PowerShell",
    ".yml": "YAML",
    ".yaml": "YAML",
    ".toml": "TOML",
    ".json": "JSON",
    ".xml": "XML",
    ".svg": "SVG",
    ".md": "Markdown",
}

# substring of the lowercased path -> technology, checked in order
FILENAME_MARKERS = [
    ("package.json", "Node.js"),
    ("next.config", "Next.js"),
    ("tailwind.config", "TailwindCSS"),
    ("vite.config", "Vite"),
    ("webpack.config", "Webpack"),
    ("rollup.config", "Rollup"),
    ("tsconfig", "TypeScript"),
    ("dockerfile", "Docker"),
    ("docker-compose", "Docker Compose"),
    ("requirements.txt", "Python"),
    ("pyproject.toml", "Python"),
    ("cargo.toml", "Rust"),
    ("go.mod", "Go"),
    ("pom.xml", "Maven"),
    ("build.gradle", "Gradle"),
    ("gemfile", "Ruby"),
    ("composer.json", "Composer"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "Yarn"),
    ("package-lock.json", "npm"),
    (".gitignore", "Git"),
    (".env", "Environment"),
    ("readme", "Documentation"),
    ("license", "License"),
    ("changelog", "Changelog"),
    ("contributing", "Contributing"),
]

EXTENSION_BADGES: Dict[str, Dict[str, str]] = {
    ".js": {"label": "JS", "color": "yellow"},
    ".jsx": {"label": "React", "color": "blue"},
    ".ts": {"label": "TS", "color": "blue"},
    ".tsx": {"label": "React", "color": "cyan"},
    ".md": {"label": "MD", "color": "gray"},
    ".css": {"label": "CSS", "color": "sky"},
    ".scss": {"label": "SCSS", "color": "pink"},
    ".sass": {"label": "Sass", "color": "pink"},
    ".html": {"label": "HTML", "color": "orange"},
    ".py": {"label": "Python", "color": "green"},
    ".go": {"label": "Go", "color": "cyan"},
    ".rs": {"label": "Rust", "color": "orange"},
    ".java": {"label": "Java", "color": "red"},
    ".rb": {"label": "Ruby", "color": "red"},
    ".php": {"label": "PHP", "color": "purple"},
    ".c": {"label": "C", "color": "blue"},
    ".cpp": {"label": "C++", "color": "blue"},
    ".cs": {"label": "C#", "color": "purple"},
    ".swift": {"label": "Swift", "color": "orange"},
    ".kt": {"label": "Kotlin", "color": "purple"},
    ".sql": {"label": "SQL", "color": "blue"},
    ".sh": {"label": "Shell", "color": "green"},
    ".yml": {"label": "YAML", "color": "gray"},
    ".yaml": {"label": "YAML", "color": "gray"},
    ".toml": {"label": "TOML", "color": "blue"},
    ".json": {"label": "JSON", "color": "yellow"},
    ".xml": {"label": "XML", "color": "orange"},
    ".svg": {"label": "SVG", "color": "green"},
    ".png": {"label": "Image", "color": "blue"},
    ".jpg": {"label": "Image", "color": "blue"},
    ".jpeg": {"label": "Image", "color": "blue"},
    ".gif": {"label": "Image", "color": "blue"},
    ".ico": {"label": "Icon", "color": "blue"},
    ".woff": {"label": "Font", "color": "purple"},
    ".woff2": {"label": "Font", "color": "purple"},
    ".ttf": {"label": "Font", "color": "purple"},
    ".lock": {"label": "Lock", "color": "gray"},
    ".txt": {"label": "Text", "color": "gray"},
}

TECHNOLOGY_COLORS: Dict[str, str] = {
    "JavaScript": "yellow",
    "React": "blue",
    "TypeScript": "blue",
    "React TypeScript": "cyan",
    "CSS": "sky",
    "Sass": "pink",
    "Python": "green",
    "Go": "cyan",
    "Rust": "orange",
    "Java": "red",
    "Ruby": "red",
    "PHP": "purple",
    "C#": "purple",
    "Kotlin": "purple",
    "Shell": "green",
    "JSON": "yellow",
    "Node.js": "green",
    "Next.js": "black",
    "TailwindCSS": "cyan",
    "Vite": "yellow",
    "Rollup": "red",
    "Docker": "blue",
    "Maven": "orange",
    "Gradle": "green",
    "Git": "orange",
    "npm": "red",
    "Contributing": "green",
}


def _extension(path: str) -> str:
    return PurePosixPath(path).suffix.lower()


def detect_technologies(path: str) -> List[str]:
    """Technologies suggested by a file path, without duplicates"""
    found: List[str] = []

    tech = EXTENSION_TECHNOLOGIES.get(_extension(path))
    if tech:
        found.append(tech)

    lowered = path.lower()
    for marker, marker_tech in FILENAME_MARKERS:
        if marker in lowered and marker_tech not in found:
            found.append(marker_tech)

    return found


def extension_badge(path: str) -> Optional[Dict[str, str]]:
    badge = EXTENSION_BADGES.get(_extension(path))
    return dict(badge) if badge else None


def technology_color(tech: str) -> str:
    return TECHNOLOGY_COLORS.get(tech, "gray")


def file_badge(path: str) -> Optional[Dict[str, str]]:
    """Explorer badge: the extension badge, else the first detected technology"""
    badge = extension_badge(path)
    if badge:
        return badge
    technologies = detect_technologies(path)
    if not technologies:
        return None
    return {"label": technologies[0], "color": technology_color(technologies[0])}
