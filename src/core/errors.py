from __future__ import annotations


class SynapseError(Exception):
    """Base error for the content provider layer."""


class InvalidArgumentError(SynapseError):
    """Raised when caller input (paths, pagination options, queries) is invalid."""


class AccessDeniedError(SynapseError):
    """Raised when a path escapes every configured root."""


class NotFoundError(SynapseError):
    """Raised when no root or remote repository contains the requested path."""


class SizeExceededError(SynapseError):
    """Raised when a file or a sliced response is over its size ceiling."""


class UpstreamServiceError(SynapseError):
    """Raised when the remote repository API fails (transport, auth, rate limit)."""


class ContentIOError(SynapseError):
    """Raised when reading a local file fails mid-stream."""
