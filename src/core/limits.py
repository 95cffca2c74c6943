"""Size and pagination limits shared by every provider.

Byte values are measured on UTF-8 encoded text.
"""

from __future__ import annotations

# Largest payload a single tool response may carry over the stdio transport
MAX_MCP_RESPONSE_SIZE = 4 * 1024 * 1024

# GitHub contents API refuses files above this size
MAX_GITHUB_FILE_SIZE = 100 * 1024 * 1024

# Lines returned when the caller gives no range at all
DEFAULT_MAX_LINES = 100

# Upper bound on lines requested (and collected) in one read
MAX_REQUESTED_LINES = 300

# Smallest max_response_size a caller may ask for
MIN_RESPONSE_SIZE = 1024

# Below this file size line counts are computed eagerly
STREAMING_THRESHOLD = 1024 * 1024

GITHUB_CACHE_TTL_SECONDS = 3 * 60.0

# GitHub code search: 30 requests per rolling minute
SEARCH_RATE_LIMIT = 30
SEARCH_RATE_WINDOW_SECONDS = 60.0
SEARCH_RATE_BUFFER_SECONDS = 0.5

NOTE_EXTENSION = ".md"

MAX_MATCHES_PER_FILE = 5

# Line number reported when a match position could not be computed
UNKNOWN_LINE = -1
