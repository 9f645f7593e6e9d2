"""
Request models for the learning endpoints
"""

from typing import List, Optional
from pydantic import BaseModel


class CompressRequest(BaseModel):
    """Body of POST /api/learn/compress"""

    paths: Optional[List[str]] = None
    repo_path: Optional[str] = None
