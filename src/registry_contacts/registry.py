"""HTTP fetcher for the registry search endpoint."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

from pydantic import ValidationError
from requests import Session
from requests.exceptions import RequestException

from .errors import MalformedResponse, NetworkError, ParseError
from .models import Package, SearchObject, SearchResponse
from .validation import MAX_PAGE_SIZE, validate_page_size

# Rank by popularity only so the first pages hold the most used packages.
RANKING_WEIGHTS = {"popularity": "1.0", "quality": "0.0", "maintenance": "0.0"}


def make_session(user_agent: str) -> Session:
    """Create a requests session identifying this client."""
    session = Session()
    session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})
    return session


def build_search_url(page: int, query: str, *, base_url: str, size: int = MAX_PAGE_SIZE) -> str:
    """Build the search URL for a zero-based page of ``size`` results."""
    validate_page_size(size)
    params: dict[str, str | int] = {"size": size}
    params.update(RANKING_WEIGHTS)
    params["text"] = query
    params["from"] = page * size
    return f"{base_url}?{urlencode(params)}"


def parse_search_response(payload: Any, *, logger: logging.Logger) -> list[Package]:
    """Validate a decoded search body and return its packages in order.

    A missing or non-list ``objects`` raises MalformedResponse. Single hits
    whose package cannot be read are logged and skipped.
    """
    try:
        response = SearchResponse.model_validate(payload)
    except ValidationError as exc:
        count = exc.error_count()
        raise MalformedResponse(f"Unexpected search response: {count} error(s)") from exc

    packages: list[Package] = []
    for index, entry in enumerate(response.objects):
        try:
            packages.append(SearchObject.model_validate(entry).package)
        except ValidationError as exc:
            logger.warning("Skipping unreadable search result %d: %s", index, exc)
    return packages


class RegistryFetcher:
    """Fetches one page of registry search results per call."""

    def __init__(
        self,
        *,
        session: Session,
        base_url: str,
        page_size: int,
        timeout: float,
        logger: logging.Logger,
    ) -> None:
        validate_page_size(page_size)
        self._session = session
        self._base_url = base_url
        self._page_size = page_size
        self._timeout = timeout
        self._logger = logger

    def __call__(self, page: int, query: str) -> list[Package]:
        return self.fetch_page(page, query)

    def fetch_page(self, page: int, query: str) -> list[Package]:
        url = build_search_url(page, query, base_url=self._base_url, size=self._page_size)
        self._logger.debug("GET %s", url)
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except RequestException as exc:
            raise NetworkError(f"Request for page {page} of {query!r} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError(f"Page {page} of {query!r} is not valid JSON: {exc}") from exc
        return parse_search_response(payload, logger=self._logger)
