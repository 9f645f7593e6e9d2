"""
Learning resources for the technologies and concepts found in a repository
"""

import asyncio
import re
from pathlib import PurePosixPath
from typing import Any, Dict, Iterable, List, Optional

import httpx
import structlog

from config.settings import settings
from src.services.tech_detect import detect_technologies

logger = structlog.get_logger()

YOUTUBE_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"

RESOURCES: Dict[str, List[Dict[str, str]]] = {
    "React": [
        {"title": "React Official Docs (Beta)", "url": "https://react.dev/learn", "type": "docs"},
        {"title": "React Hooks Course – freeCodeCamp", "url": "https://youtu.be/TNhaISOUy6Q", "type": "video"},
        {"title": "Epic React by Kent C. Dodds (free articles)", "url": "https://epicreact.dev/articles", "type": "course"},
    ],
    "Next.js": [
        {"title": "Next.js Learn", "url": "https://nextjs.org/learn", "type": "course"},
        {"title": "Next.js App Router Crash Course", "url": "https://youtu.be/Hiabp1GY8fA", "type": "video"},
        {"title": "Next.js Docs", "url": "https://nextjs.org/docs", "type": "docs"},
    ],
    "Node.js": [
        {"title": "Node.js Docs", "url": "https://nodejs.org/en/learn", "type": "docs"},
        {"title": "Node.js Crash Course – Traversy Media", "url": "https://youtu.be/fBNz5xF-Kx4", "type": "video"},
        {"title": "The Odin Project: NodeJS", "url": "https://www.theodinproject.com/paths/full-stack-javascript/courses/nodejs", "type": "course"},
    ],
    "TypeScript": [
        {"title": "TypeScript Handbook", "url": "https://www.typescriptlang.org/docs/handbook/intro.html", "type": "docs"},
        {"title": "TypeScript for Beginners – freeCodeCamp", "url": "https://youtu.be/30LWjhZzg50", "type": "video"},
        {"title": "Total TypeScript (free fundamentals)", "url": "https://www.totaltypescript.com/tutorials", "type": "course"},
    ],
    "TailwindCSS": [
        {"title": "TailwindCSS Docs", "url": "https://tailwindcss.com/docs/utility-first", "type": "docs"},
        {"title": "Tailwind From Scratch – Traversy Media", "url": "https://youtu.be/dFgzHOX84xQ", "type": "video"},
        {"title": "Tailwind CSS Course – Net Ninja", "url": "https://youtube.com/playlist?list=PL4cUxeGkcC9itC4TxYMzFCfS08S0CFgls", "type": "video"},
    ],
}

CURATED_FALLBACK: Dict[str, List[Dict[str, str]]] = {
    "React": [
        {"type": "docs", "title": "React Official Docs (Learn)", "url": "https://react.dev/learn"},
        {"type": "video", "title": "React Hooks Course – freeCodeCamp", "url": "https://www.youtube.com/watch?v=TNhaISOUy6Q"},
        {"type": "video", "title": "React 18 Crash Course – Traversy Media", "url": "https://www.youtube.com/watch?v=LDB4uaJ87e0"},
    ],
    "Next.js": [
        {"type": "course", "title": "Next.js Learn (Official)", "url": "https://nextjs.org/learn"},
        {"type": "video", "title": "Next.js 13 App Router Crash Course – Traversy", "url": "https://www.youtube.com/watch?v=Hiabp1GY8fA"},
        {"type": "docs", "title": "Next.js Docs", "url": "https://nextjs.org/docs"},
    ],
    "TypeScript": [
        {"type": "docs", "title": "TypeScript Handbook", "url": "https://www.typescriptlang.org/docs/handbook/intro.html"},
        {"type": "video", "title": "TypeScript Full Course – freeCodeCamp", "url": "https://www.youtube.com/watch?v=30LWjhZzg50"},
        {"type": "course", "title": "Total TypeScript – Free Fundamentals", "url": "https://www.totaltypescript.com/tutorials"},
    ],
    "Node.js": [
        {"type": "docs", "title": "Node.js Docs (Learn)", "url": "https://nodejs.org/en/learn"},
        {"type": "video", "title": "Node.js Crash Course – Traversy Media", "url": "https://www.youtube.com/watch?v=fBNz5xF-Kx4"},
        {"type": "course", "title": "The Odin Project – NodeJS", "url": "https://www.theodinproject.com/paths/full-stack-javascript/courses/nodejs"},
    ],
    "TailwindCSS": [
        {"type": "docs", "title": "TailwindCSS Docs", "url": "https://tailwindcss.com/docs/utility-first"},
        {"type": "video", "title": "Tailwind From Scratch – Traversy Media", "url": "https://www.youtube.com/watch?v=dFgzHOX84xQ"},
        {"type": "video", "title": "Tailwind CSS Course – Net Ninja", "url": "https://www.youtube.com/playlist?list=PL4cUxeGkcC9itC4TxYMzFCfS08S0CFgls"},
    ],
    "CSS": [
        {"type": "docs", "title": "MDN – Learn CSS", "url": "https://developer.mozilla.org/en-US/docs/Learn/CSS"},
        {"type": "video", "title": "CSS Grid Tutorial – Web Dev Simplified", "url": "https://www.youtube.com/watch?v=9zBsdzdE4sM"},
        {"type": "video", "title": "Flexbox in 15 Minutes – Web Dev Simplified", "url": "https://www.youtube.com/watch?v=fYq5PXgSsbE"},
    ],
    "Markdown": [
        {"type": "docs", "title": "Markdown Guide – Basic Syntax", "url": "https://www.markdownguide.org/basic-syntax/"},
        {"type": "docs", "title": "GitHub Flavored Markdown Spec", "url": "https://github.github.com/gfm/"},
    ],
    "JavaScript": [
        {"type": "docs", "title": "JavaScript Guide – MDN", "url": "https://developer.mozilla.org/en-US/docs/Web/JavaScript/Guide"},
        {"type": "video", "title": "JavaScript Crash Course – Traversy Media", "url": "https://www.youtube.com/watch?v=hdI2bqOjy3c"},
    ],
}

CONCEPT_DOC_LINKS: Dict[str, str] = {
    "React Components": "https://react.dev/learn/describing-the-ui",
    "Props and State": "https://react.dev/learn/state-a-components-memory",
    "Hooks": "https://react.dev/learn/hooks",
    "Component Composition": "https://react.dev/learn/passing-props-to-a-component",
    "Next.js Routing": "https://nextjs.org/docs/app/building-your-application/routing",
    "Next.js Data Fetching": "https://nextjs.org/docs/app/building-your-application/data-fetching/fetching",
    "Next.js Rendering (SSR/SSG)": "https://nextjs.org/docs/app/building-your-application/rendering",
    "TypeScript Types and Interfaces": "https://www.typescriptlang.org/docs/handbook/2/everyday-types.html",
    "Generics": "https://www.typescriptlang.org/docs/handbook/2/generics.html",
    "Tailwind Utility-First Styling": "https://tailwindcss.com/docs/utility-first",
    "Tailwind Configuration": "https://tailwindcss.com/docs/configuration",
    "CSS Flexbox": "https://developer.mozilla.org/en-US/docs/Web/CSS/CSS_flexible_box_layout/Basic_concepts_of_flexbox",
    "CSS Grid": "https://developer.mozilla.org/en-US/docs/Web/CSS/CSS_grid_layout",
    "Express Middleware": "https://expressjs.com/en/guide/using-middleware.html",
    "REST API Design": "https://www.ics.uci.edu/~fielding/pubs/dissertation/top.htm",
    "Repository Overview": "https://opensource.guide/how-to-contribute/#introduction",
    "Getting Started": "https://docs.github.com/en/get-started",
    "Contributing": "https://docs.github.com/en/get-started/quickstart/contributing-to-projects",
}

KEYWORD_EXTENSION_TECH = {
    ".jsx": "React", ".tsx": "React TypeScript", ".js": "JavaScript",
    ".ts": "TypeScript", ".css": "CSS", ".scss": "Sass",
    ".md": "Markdown", ".py": "Python", ".go": "Go", ".rs": "Rust",
    ".java": "Java", ".rb": "Ruby", ".php": "PHP",
}

# (pattern on the lowercased path, concepts), checked in order
CONCEPT_RULES = [
    (re.compile(r"(^|/)readme\.md$"), ["Repository Overview", "Getting Started", "Contributing"]),
    (re.compile(r"[\\/]components?[\\/]|\.(jsx|tsx)$"),
     ["React Components", "Props and State", "Hooks", "Component Composition"]),
    (re.compile(r"next\.config\.(js|mjs|ts)$|[\\/]app[\\/]|[\\/]pages[\\/]"),
     ["Next.js Routing", "Next.js Data Fetching", "Next.js Rendering (SSR/SSG)"]),
    (re.compile(r"\.(ts|tsx)$"), ["TypeScript Types and Interfaces", "Generics"]),
    (re.compile(r"tailwind\.config\.(js|ts)$"), ["Tailwind Utility-First Styling", "Tailwind Configuration"]),
    (re.compile(r"\.(css|scss)$"), ["CSS Flexbox", "CSS Grid"]),
]
SERVER_SCRIPT = re.compile(r"\.(js|mjs|cjs)$")
SERVER_DIR = re.compile(r"[\\/]server|backend|api[\\/]")


def resources_for(technologies: Iterable[str]) -> List[Dict[str, Any]]:
    """Curated resources grouped by technology, unknown ones skipped"""
    return [
        {"technology": tech, "items": RESOURCES[tech]}
        for tech in technologies
        if tech in RESOURCES
    ]


def derive_keywords(path: str) -> str:
    """Search keywords from a file name and its language"""
    p = PurePosixPath(path)
    tech = KEYWORD_EXTENSION_TECH.get(p.suffix.lower(), "")
    keywords = " ".join(part for part in (p.stem, tech) if part)
    return keywords or "software development"


def derive_concepts(path: str) -> List[str]:
    lowered = str(path).lower()
    concepts: List[str] = []
    for pattern, rule_concepts in CONCEPT_RULES:
        if pattern.search(lowered):
            concepts.extend(c for c in rule_concepts if c not in concepts)
    if SERVER_SCRIPT.search(lowered) and SERVER_DIR.search(lowered):
        concepts.extend(c for c in ("Express Middleware", "REST API Design") if c not in concepts)
    return concepts


def concept_doc_link(concept: str) -> Optional[str]:
    return CONCEPT_DOC_LINKS.get(concept)


def unique_items(items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    seen = set()
    out = []
    for item in items:
        key = (item.get("type"), item.get("title"), item.get("url") or "")
        if key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out


def curated_items(path: str) -> List[Dict[str, Any]]:
    items: List[Dict[str, Any]] = []
    for tech in detect_technologies(path):
        items.extend(CURATED_FALLBACK.get(tech, []))
    for concept in derive_concepts(path):
        link = concept_doc_link(concept)
        if link:
            items.append({"type": "docs", "title": concept, "url": link})
    return items


class YouTubeSearch:
    """Video and playlist search against the YouTube Data API"""

    def __init__(self, api_key: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key if api_key is not None else settings.YOUTUBE_API_KEY
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def search(
        self, client: httpx.AsyncClient, query: str, kind: str = "video", language: str = "en", max_results: int = 6
    ) -> List[Dict[str, Any]]:
        params = {
            "key": self.api_key,
            "part": "snippet",
            "q": query,
            "type": kind,
            "maxResults": str(max_results),
            "safeSearch": "moderate",
            "relevanceLanguage": language,
        }
        response = await client.get(YOUTUBE_SEARCH_URL, params=params)
        response.raise_for_status()
        return response.json().get("items", [])

    async def find(self, keywords: str, language: str, max_results: int) -> List[Dict[str, Any]]:
        """Tutorial videos and full-course playlists for the keywords"""
        async with httpx.AsyncClient(timeout=httpx.Timeout(15.0), transport=self.transport) as client:
            videos, playlists = await asyncio.gather(
                self.search(client, f"{keywords} tutorial", "video", language, max_results),
                self.search(client, f"{keywords} full course", "playlist", language, max(3, max_results // 2)),
            )

        items = [
            {
                "type": "video",
                "title": v["snippet"]["title"],
                "url": f"https://www.youtube.com/watch?v={v['id']['videoId']}",
                "channel": v["snippet"].get("channelTitle"),
                "publishedAt": v["snippet"].get("publishedAt"),
            }
            for v in videos
            if v.get("id", {}).get("videoId")
        ]
        items.extend(
            {
                "type": "course",
                "title": p["snippet"]["title"],
                "url": f"https://www.youtube.com/playlist?list={p['id']['playlistId']}",
                "channel": p["snippet"].get("channelTitle"),
                "publishedAt": p["snippet"].get("publishedAt"),
            }
            for p in playlists
            if p.get("id", {}).get("playlistId")
        )
        return items


async def build_contextual_resources(
    path: str, language: str = "en", max_results: int = 6, youtube: Optional[YouTubeSearch] = None
) -> Dict[str, Any]:
    """Curated resources for a path, plus YouTube results when configured"""
    youtube = youtube or YouTubeSearch()
    items = curated_items(path)

    if youtube.enabled:
        try:
            items.extend(await youtube.find(derive_keywords(path), language, max_results))
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.warning("YouTube search failed, using curated resources", path=path, error=str(e))

    return {
        "language": language,
        "availableLanguages": [language],
        "items": unique_items(items),
    }
