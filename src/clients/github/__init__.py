from .client import CodeSearchHit, GitHubClient, GitHubDirEntry, GitHubFile
from .inputs import RepoMountSpec, parse_mount_spec

__all__ = [
    "CodeSearchHit",
    "GitHubClient",
    "GitHubDirEntry",
    "GitHubFile",
    "RepoMountSpec",
    "parse_mount_spec",
]
