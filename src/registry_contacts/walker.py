"""Sequential page walking for one query."""

from __future__ import annotations

import logging

from tqdm import tqdm

from .logging_utils import progress_safe_logging
from .models import Package, PageFetcher


def walk_pages(
    query: str,
    *,
    fetch_page: PageFetcher,
    page_count: int,
    show_progress: bool,
    logger: logging.Logger,
) -> list[Package]:
    """Fetch pages ``0..page_count-1`` for a query and return all packages in order.

    Errors from ``fetch_page`` propagate and abort the remaining pages.
    """
    packages: list[Package] = []
    with progress_safe_logging(show_progress):
        progress = (
            tqdm(total=page_count, desc=f"{query} pages", unit="page") if show_progress else None
        )
        try:
            for page in range(page_count):
                packages.extend(fetch_page(page, query))
                if progress is not None:
                    progress.update(1)
                else:
                    logger.info("Completed %d of %d requests for %r.", page + 1, page_count, query)
        finally:
            if progress is not None:
                progress.close()
    return packages
