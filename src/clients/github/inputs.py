from __future__ import annotations

import re
from dataclasses import dataclass

from core.errors import InvalidArgumentError
from core.paths import normalize_posix_relpath, split_posix


_NAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")

MOUNT_ROOT = "github"


@dataclass(frozen=True)
class RepoMountSpec:
    """A configured `owner/repo[/subpath]` repository mount."""

    owner: str
    repo: str
    base_path: str = ""

    @property
    def mount_prefix(self) -> str:
        prefix = f"{MOUNT_ROOT}/{self.owner}/{self.repo}"
        return f"{prefix}/{self.base_path}" if self.base_path else prefix


def parse_mount_spec(spec: str) -> RepoMountSpec:
    parts = split_posix(spec)
    if len(parts) < 2:
        raise InvalidArgumentError(
            f"Invalid GitHub repository format: {spec!r}; expected owner/repo or owner/repo/subpath"
        )
    owner, repo = parts[0], parts[1]
    if not _NAME_RE.match(owner) or not _NAME_RE.match(repo):
        raise InvalidArgumentError(f"Invalid GitHub owner or repository name in {spec!r}")
    return RepoMountSpec(owner=owner, repo=repo, base_path="/".join(parts[2:]))


def normalize_path(path: str) -> str:
    # Keep GitHub paths stable and OS-independent:
    # - Convert "\" to "/"
    # - Drop leading "/" and repeated "./"
    # - Require a non-empty relative path
    path_clean = normalize_posix_relpath(path)
    if not path_clean:
        raise InvalidArgumentError("path must be non-empty")
    return path_clean
