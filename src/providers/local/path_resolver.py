"""Root-confined resolution of caller paths.

A relative path is tried against each configured root in order; a root
only accepts it if the resolved location stays inside that root.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from core.errors import AccessDeniedError, NotFoundError


class PathResolver:
    def __init__(self, root_paths: Sequence[Path | str]) -> None:
        if not root_paths:
            raise ValueError("At least one root path is required")
        self._roots: List[Path] = [Path(r).resolve() for r in root_paths]

    @property
    def roots(self) -> List[Path]:
        return list(self._roots)

    def _contain(self, root: Path, rel_path: str) -> Optional[Path]:
        # Absolute inputs replace the root when joined, then fail containment.
        p = (root / (rel_path or "")).resolve()
        try:
            p.relative_to(root)
        except ValueError:
            return None
        return p

    def candidates(self, rel_path: str) -> Iterator[Tuple[Path, Path]]:
        """Yield (absolute_path, root) for every root that contains `rel_path`."""
        found = False
        for root in self._roots:
            p = self._contain(root, rel_path)
            if p is not None:
                found = True
                yield p, root
        if not found:
            raise AccessDeniedError(
                f"Access denied: path {rel_path!r} is outside all allowed root directories"
            )

    def resolve(self, rel_path: str) -> Tuple[Path, Path]:
        """Return (absolute_path, root) for the first root containing `rel_path`."""
        # candidates() raises AccessDeniedError before it would run dry.
        return next(self.candidates(rel_path))

    def resolve_file(self, rel_path: str) -> Tuple[Path, Path]:
        """Like resolve(), but picks the first root holding an existing regular file."""
        for p, root in self.candidates(rel_path):
            if p.is_file():
                return p, root
        raise NotFoundError(f"File not found: {rel_path}")
