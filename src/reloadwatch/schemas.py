from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field


class CheckerStatus(BaseModel):
    """
    Snapshot of an evented file update checker.
    """
    state: Literal["stopped", "watching", "degraded"]
    updated: bool = False  # Change flag at snapshot time
    watch_roots: List[str] = Field(default_factory=list)  # Directories registered with the backend
    missing: List[str] = Field(default_factory=list)  # Candidates that didn't exist on last start
    common_path: Optional[str] = None  # Walk bound for extension matching
    files: List[str] = Field(default_factory=list)
    directories: Dict[str, List[str]] = Field(default_factory=dict)  # Directory -> sorted extensions
