from __future__ import annotations

from typing import Tuple

"""
Path utilities used across the project.

Provides consistent POSIX-style normalization for caller paths, mount
prefixes and repository base paths.
"""


def normalize_posix_relpath(p: str) -> str:
    """Normalize a user path to a clean POSIX relative path.

    Converts backslashes to '/', trims whitespace, removes leading and
    trailing '/' and repeated './' markers.
    """
    s = (p or "").strip()
    s = s.replace("\\", "/")        # Unify path separators across OSes.
    s = s.lstrip("/")               # Prevent accidental absolute paths.
    while s.startswith("./"):       # Drop repeated "./" prefixes.
        s = s[2:]
    if s == ".":
        return ""
    return s.rstrip("/")


def strip_slashes(p: str) -> str:
    """Remove leading and trailing '/' (mount prefixes, base paths)."""
    return (p or "").strip().strip("/")


def split_posix(p: str) -> Tuple[str, ...]:
    """Split a POSIX path into non-empty segments."""
    s = (p or "").strip().replace("\\", "/").strip("/")
    if not s:
        return tuple()
    return tuple(seg for seg in s.split("/") if seg)


def is_within(path: str, prefix: str) -> bool:
    """True if `path` equals `prefix` or is nested under it (segment-wise)."""
    if not prefix:
        return True
    return path == prefix or path.startswith(prefix + "/")


def join_path(base_path: str, path: str) -> str:
    """Join a caller path onto a repository base path."""
    if not base_path:
        return strip_slashes(path)
    rel = strip_slashes(path)
    return f"{base_path}/{rel}" if rel else base_path


def remove_base_path(full_path: str, base_path: str) -> str:
    """Strip `base_path` from a repository path, giving the caller-visible path."""
    if base_path and is_within(full_path, base_path):
        return full_path[len(base_path):].lstrip("/")
    return full_path
