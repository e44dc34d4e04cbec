"""Logging helpers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from tqdm.contrib.logging import logging_redirect_tqdm

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Configure root console logging once for CLI usage."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)


def get_logger() -> logging.Logger:
    return logging.getLogger("registry_contacts")


@contextmanager
def progress_safe_logging(enabled: bool) -> Iterator[None]:
    """Send console log records through tqdm so they do not break a live progress bar."""
    if not enabled:
        yield
        return
    with logging_redirect_tqdm():
        yield
