"""Dataclasses exchanged between providers and the MCP tools.

Each result model has a `to_dict()` producing the JSON shape returned to
the calling agent (camelCase keys, optional fields omitted when unset).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional


EntryType = Literal["file", "directory"]


@dataclass(frozen=True)
class FileSystemEntry:
    """One child of a listed directory.

    `path` is relative to the unified namespace root and always uses '/'.
    """

    name: str
    type: EntryType
    path: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type, "path": self.path}


@dataclass(frozen=True)
class ReadOptions:
    """Pagination request for a read.

    Field groups:
    - Range: start_line, end_line / max_lines (mutually exclusive)
    - Payload: max_response_size (bytes)
    """

    start_line: Optional[int] = None
    end_line: Optional[int] = None
    max_lines: Optional[int] = None
    max_response_size: Optional[int] = None


@dataclass(frozen=True)
class ReadMetadata:
    start_line: int
    end_line: int
    total_lines: Optional[int] = None
    file_size: Optional[int] = None
    # Every read is bounded; a full file is never returned implicitly.
    is_partial: bool = True

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "startLine": self.start_line,
            "endLine": self.end_line,
            "isPartial": self.is_partial,
        }
        if self.total_lines is not None:
            out["totalLines"] = self.total_lines
        if self.file_size is not None:
            out["fileSize"] = self.file_size
        return out


@dataclass(frozen=True)
class ReadResult:
    content: str
    metadata: ReadMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {"content": self.content, "metadata": self.metadata.to_dict()}


@dataclass(frozen=True)
class SearchMatch:
    line: int  # 1-based, or UNKNOWN_LINE
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "content": self.content}


@dataclass(frozen=True)
class SearchResult:
    path: str
    matches: List[SearchMatch] = field(default_factory=list)
    score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "path": self.path,
            "matches": [m.to_dict() for m in self.matches],
        }
        if self.score is not None:
            out["score"] = self.score
        return out


@dataclass(frozen=True)
class FileInfo:
    path: str
    size: int
    file_type: str
    last_modified: datetime
    line_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "path": self.path,
            "size": self.size,
            "fileType": self.file_type,
            "lastModified": self.last_modified.isoformat(),
        }
        if self.line_count is not None:
            out["lineCount"] = self.line_count
        return out
