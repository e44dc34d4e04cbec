"""Bounded retry with fixed delays around a page fetcher."""

from __future__ import annotations

import logging
import time

from .errors import FetchError, RetriesExhausted
from .models import Package, PageFetcher, SleepFn


def fetch_with_retry(
    fetch_page: PageFetcher,
    page: int,
    query: str,
    *,
    retries: int,
    success_delay: float,
    failure_delay: float,
    sleep_fn: SleepFn = time.sleep,
    logger: logging.Logger,
) -> list[Package]:
    """Fetch a page, retrying up to ``retries`` more times on FetchError.

    Every failure is logged and followed by ``failure_delay`` seconds of sleep
    before the next attempt. A successful fetch is followed by
    ``success_delay`` seconds of sleep to throttle the request rate. When all
    ``retries + 1`` attempts fail, RetriesExhausted is raised from the last error.
    """
    attempts = retries + 1
    last_error: FetchError | None = None
    for attempt in range(1, attempts + 1):
        try:
            packages = fetch_page(page, query)
        except FetchError as exc:
            last_error = exc
            logger.warning(
                "Attempt %d/%d for page %d of %r failed: %s", attempt, attempts, page, query, exc
            )
            if attempt < attempts:
                sleep_fn(failure_delay)
            continue
        sleep_fn(success_delay)
        return packages
    raise RetriesExhausted(page=page, query=query, attempts=attempts) from last_error


class RetryingFetcher:
    """PageFetcher decorator applying fetch_with_retry to every call."""

    def __init__(
        self,
        fetch_page: PageFetcher,
        *,
        retries: int,
        success_delay: float,
        failure_delay: float,
        sleep_fn: SleepFn = time.sleep,
        logger: logging.Logger,
    ) -> None:
        self._fetch_page = fetch_page
        self._retries = retries
        self._success_delay = success_delay
        self._failure_delay = failure_delay
        self._sleep_fn = sleep_fn
        self._logger = logger

    def __call__(self, page: int, query: str) -> list[Package]:
        return fetch_with_retry(
            self._fetch_page,
            page,
            query,
            retries=self._retries,
            success_delay=self._success_delay,
            failure_delay=self._failure_delay,
            sleep_fn=self._sleep_fn,
            logger=self._logger,
        )
