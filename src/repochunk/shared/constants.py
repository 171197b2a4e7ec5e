"""Centralized defaults for repochunk. Overridable via configuration."""

from __future__ import annotations

# =============================================================================
# TOKEN BUDGETS
# =============================================================================

DEFAULT_MAX_TOKENS = 1_000
DEFAULT_MODEL = "text-embedding-3-large"
DEFAULT_ENCODING = "cl100k_base"

# =============================================================================
# BATCH PROCESSING
# =============================================================================

DEFAULT_CONCURRENCY = 4
DEFAULT_CONTINUE_ON_ERROR = True
MAX_REPORTED_ERRORS = 3

# =============================================================================
# DISCOVERY
# =============================================================================

DEFAULT_EXCLUDED_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        ".svn",
        ".hg",
        "dist",
        "build",
        "coverage",
        ".nyc_output",
        "tmp",
        "temp",
        "__pycache__",
        ".venv",
    }
)
