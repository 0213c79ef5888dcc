"""Pydantic models for diskfs."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PathKind(str, Enum):
    """What a resolved path points at."""

    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"
    MISSING = "missing"


class PathInfo(BaseModel):
    """Metadata about a path as seen through a filesystem."""

    path: str = Field(..., description="Path as given by the caller")
    resolved: str = Field(..., description="Path after prefix resolution")
    kind: PathKind = Field(PathKind.MISSING, description="Entry type")
    size: Optional[int] = Field(None, description="File size in bytes (files only)")
    mtime: Optional[int] = Field(None, description="Modification time, opaque, for comparison")

    @property
    def exists(self) -> bool:
        return self.kind != PathKind.MISSING
