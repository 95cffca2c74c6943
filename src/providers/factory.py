"""Factory wiring the configured sources into one AggregatorProvider.

Exposes build_provider which mounts a GitHubProvider per configured
repository on top of a LocalFileSystemProvider for the note roots.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from clients.github import GitHubClient, parse_mount_spec
from config import AppConfig
from core.errors import InvalidArgumentError
from providers.aggregator import AggregatorProvider
from providers.github_provider import GitHubProvider
from providers.local_provider import LocalFileSystemProvider

logger = logging.getLogger(__name__)


def build_provider(
    config: AppConfig,
    *,
    github_client: Optional[GitHubClient] = None,
) -> AggregatorProvider:
    """
    Build the unified provider for `config`.

    - Local roots always form the root namespace.
    - Each valid `owner/repo[/subpath]` entry is mounted at
      `github/owner/repo[/subpath]`; invalid entries are logged and skipped.
    - Repositories without a token are a configuration error.
    """
    aggregator = AggregatorProvider(LocalFileSystemProvider(config.notes_roots))

    if not config.github_repos:
        return aggregator

    if not config.github_token:
        raise InvalidArgumentError("GITHUB_REPOS is configured but GITHUB_TOKEN is missing")

    client = github_client or GitHubClient(
        token=config.github_token,
        timeout=config.github_timeout,
        verify=config.http_verify,
    )

    for raw in config.github_repos:
        try:
            spec = parse_mount_spec(raw)
        except InvalidArgumentError as e:
            logger.warning("%s", e)
            continue

        provider = GitHubProvider(
            client=client,
            owner=spec.owner,
            repo=spec.repo,
            base_path=spec.base_path,
        )
        aggregator.mount(spec.mount_prefix, provider)
        logger.info("Mounted GitHub repository %s at %s", provider.label, spec.mount_prefix)

    logger.warning("GitHub code search is limited to 30 requests per minute; throttling is active")
    return aggregator


def mounted_resources(config: AppConfig) -> List[str]:
    """Absolute local roots followed by the mount prefix of each valid repository."""
    out = [str(Path(r).resolve()) for r in config.notes_roots]
    for raw in config.github_repos:
        try:
            out.append(parse_mount_spec(raw).mount_prefix)
        except InvalidArgumentError:
            continue
    return out
