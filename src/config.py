"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and
`load_config`, which combines them with command-line note roots into an
immutable AppConfig (note roots, GitHub token and repositories, HTTP
settings, log level).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_list(name: str) -> List[str]:
    raw = os.environ.get(name) or ""
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class AppConfig:
    notes_roots: Tuple[str, ...]
    github_token: Optional[str] = None
    github_repos: Tuple[str, ...] = field(default_factory=tuple)
    http_verify: bool = True
    github_timeout: float = 20.0
    log_level: str = "INFO"


def load_config(
    argv: Optional[Sequence[str]] = None,
    *,
    env_file: Optional[Path] = None,
) -> AppConfig:
    """Build the configuration.

    Variables from `env_file` (default: .env in the working directory) fill
    in whatever the process environment does not already set. Note roots
    come from positional arguments, else comma-separated NOTES_ROOT, else
    the current working directory.
    """
    load_dotenv(env_file or Path.cwd() / ".env")

    cli_roots = [a for a in (argv or []) if a.strip()]
    roots = cli_roots or _env_list("NOTES_ROOT") or [str(Path.cwd())]

    token = (os.environ.get("GITHUB_TOKEN") or "").strip() or None

    return AppConfig(
        notes_roots=tuple(roots),
        github_token=token,
        github_repos=tuple(_env_list("GITHUB_REPOS")),
        http_verify=_env_bool("HTTP_VERIFY", True),
        github_timeout=_env_float("GITHUB_TIMEOUT", 20.0),
        log_level=(os.environ.get("LOG_LEVEL") or "INFO").strip().upper(),
    )
