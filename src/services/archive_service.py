"""
Zip export of selected paths from a local repository
"""

import io
import time
import zipfile
from pathlib import Path
from typing import Iterable, Optional, Union

import structlog

logger = structlog.get_logger()


def archive_name() -> str:
    return f"export-{int(time.time() * 1000)}.zip"


def _resolve_inside(root: Path, rel: str) -> Optional[Path]:
    """Absolute path of rel under root, or None when it escapes root"""
    candidate = (root / rel).resolve()
    if candidate != root and root not in candidate.parents:
        return None
    return candidate


def build_archive(repo_root: Union[str, Path], paths: Iterable[str]) -> bytes:
    """Zip the selected files and directories, named relative to repo_root"""
    root = Path(repo_root).resolve()
    buffer = io.BytesIO()
    added = 0

    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for rel in paths:
            target = _resolve_inside(root, rel)
            if target is None:
                logger.warning("Skipping path outside repository", path=rel)
                continue
            if not target.exists():
                continue

            if target.is_dir():
                for file_path in sorted(target.rglob("*")):
                    if file_path.is_file():
                        archive.write(file_path, file_path.relative_to(root).as_posix())
                        added += 1
            else:
                archive.write(target, target.relative_to(root).as_posix())
                added += 1

    logger.info("Archive built", repo_root=str(root), files=added)
    return buffer.getvalue()
