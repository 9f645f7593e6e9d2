"""
Repository tree construction for the explorer sidebar
"""

import os
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

import structlog

from src.services.tech_detect import detect_technologies, file_badge

logger = structlog.get_logger()

DEFAULT_IGNORE_DIRS = frozenset({"node_modules", ".next", ".git", "dist", "build"})


def _node_sort_key(node: Dict[str, Any]):
    return (node["type"] != "folder", node["name"].lower(), node["name"])


def build_nested_tree(
    paths: Iterable[str],
    annotate: Optional[Callable[[str], List[str]]] = detect_technologies,
) -> List[Dict[str, Any]]:
    """
    Turn flat slash-separated file paths into nested folder/file nodes.

    Folders sort before files, then by name. Only files carry technologies and a badge.
    """
    root: Dict[str, Any] = {}
    for file_path in paths:
        parts = [p for p in file_path.strip("/").split("/") if p]
        current = root
        for depth, part in enumerate(parts):
            is_leaf = depth == len(parts) - 1
            entry = current.get(part)
            if entry is None:
                entry = {
                    "type": "file" if is_leaf else "folder",
                    "path": "/".join(parts[: depth + 1]),
                    "children": {},
                }
                current[part] = entry
            elif not is_leaf:
                # a path seen earlier as a file is also a directory prefix
                entry["type"] = "folder"
            current = entry["children"]

    def to_nodes(level: Dict[str, Any]) -> List[Dict[str, Any]]:
        nodes = []
        for name, entry in level.items():
            if entry["type"] == "folder":
                nodes.append({
                    "name": name,
                    "type": "folder",
                    "path": entry["path"],
                    "technologies": [],
                    "children": to_nodes(entry["children"]),
                })
            else:
                nodes.append({
                    "name": name,
                    "type": "file",
                    "path": entry["path"],
                    "technologies": annotate(entry["path"]) if annotate else [],
                    "badge": file_badge(entry["path"]),
                })
        return sorted(nodes, key=_node_sort_key)

    return to_nodes(root)


def github_entries_to_paths(entries: Iterable[Dict[str, Any]]) -> List[str]:
    """Blob paths from a GitHub Trees API listing"""
    return [e["path"] for e in entries if e.get("type") == "blob" and e.get("path")]


def github_entries_to_files(entries: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flat file nodes (blobs only) annotated with technologies and a badge"""
    return [
        {
            "name": PurePosixPath(e["path"]).name,
            "type": "file",
            "path": e["path"],
            "technologies": detect_technologies(e["path"]),
            "badge": file_badge(e["path"]),
            "size": e.get("size"),
            "sha": e.get("sha"),
        }
        for e in entries
        if e.get("type") == "blob" and e.get("path")
    ]


def walk_directory(root: Path, ignore_dirs: Set[str] = DEFAULT_IGNORE_DIRS) -> List[str]:
    """Relative POSIX paths of every file under root, skipping ignored dirs"""
    root = Path(root)
    files: List[str] = []
    for current, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        dirnames[:] = [d for d in dirnames if d not in ignore_dirs]
        rel_dir = Path(current).relative_to(root)
        for filename in filenames:
            files.append((rel_dir / filename).as_posix())
    return sorted(files)


def _log_walk_error(error: OSError) -> None:
    logger.warning("Skipping unreadable path", path=error.filename, error=str(error))
