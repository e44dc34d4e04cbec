"""Validation and runtime guardrails."""

from __future__ import annotations

import re
from pathlib import Path

from .errors import ConfigError

MAX_PAGE_SIZE = 250
UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def load_lines_from_file(path: str) -> list[str]:
    """Load non-empty lines from a UTF-8 text file."""
    content = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in re.split(r"\r?\n", content) if line.strip()]


def safe_filename_part(value: str) -> str:
    """Replace characters that cannot appear in a file name."""
    cleaned = UNSAFE_FILENAME_CHARS.sub("_", value.strip())
    if cleaned in {"", ".", ".."}:
        return "_"
    return cleaned


def validate_page_size(size: int) -> None:
    """Reject page sizes the registry cannot serve."""
    if size < 1:
        raise ConfigError("--page-size must be >= 1.")
    if size > MAX_PAGE_SIZE:
        raise ConfigError(
            f"--page-size must be <= {MAX_PAGE_SIZE}; the registry can't handle more than this."
        )


def validate_runtime_constraints(
    *,
    queries: tuple[str, ...],
    page_size: int,
    page_count: int,
    retries: int,
    success_delay: float,
    failure_delay: float,
    request_timeout: float,
) -> None:
    """Validate CLI/runtime configuration and raise ConfigError on invalid values."""
    if not queries:
        raise ConfigError("Provide at least one query via --queries or --queries-file.")
    validate_page_size(page_size)
    if page_count < 1:
        raise ConfigError("--pages must be >= 1.")
    if retries < 0:
        raise ConfigError("--retries must be >= 0.")
    if success_delay < 0 or failure_delay < 0:
        raise ConfigError("--success-delay and --failure-delay must be >= 0.")
    if request_timeout <= 0:
        raise ConfigError("Request timeout must be > 0.")
