"""Core orchestration pipeline."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .config import RunConfig
from .dedupe import RunState
from .errors import RetriesExhausted
from .extraction import flatten_emails
from .io_text import (
    output_path_for,
    unique_output_path,
    write_email_list,
    write_raw_packages,
    write_text,
)
from .models import PageFetcher, SleepFn
from .registry import RegistryFetcher, make_session
from .report import render_packages_markdown
from .retry import RetryingFetcher
from .validation import load_lines_from_file
from .walker import walk_pages

WriteFn = Callable[[Path, Sequence[str]], None]


@dataclass(frozen=True)
class QueryResult:
    """New emails selected for one query."""

    query: str
    emails: tuple[str, ...]
    packages_fetched: int


@dataclass
class RunSummary:
    queries: int = 0
    emails_written: int = 0
    unique_packages: int = 0
    written_files: list[str] = field(default_factory=list)
    skipped_queries: list[str] = field(default_factory=list)
    failed_writes: list[str] = field(default_factory=list)


def process_query(
    query: str,
    *,
    fetch_page: PageFetcher,
    state: RunState,
    config: RunConfig,
    logger: logging.Logger,
) -> QueryResult:
    """Fetch all pages of a query and claim its new emails in ``state``."""
    logger.info("Searching: %s", query)
    packages = walk_pages(
        query,
        fetch_page=fetch_page,
        page_count=config.page_count,
        show_progress=config.show_progress,
        logger=logger,
    )
    state.record_packages(packages)
    emails = state.select(flatten_emails(packages))
    state.claim(emails)
    logger.info(" --> %d packages, %d new emails", len(packages), len(emails))
    return QueryResult(query=query, emails=tuple(emails), packages_fetched=len(packages))


def collect_contacts(
    config: RunConfig,
    *,
    fetch_page: PageFetcher,
    state: RunState,
    write_fn: WriteFn = write_email_list,
    logger: logging.Logger,
) -> RunSummary:
    """Process every query in order and write one email file per query."""
    summary = RunSummary(queries=len(config.queries))
    for query in config.queries:
        try:
            result = process_query(
                query, fetch_page=fetch_page, state=state, config=config, logger=logger
            )
        except RetriesExhausted as exc:
            if config.fail_fast:
                raise
            logger.error("Skipping query %r: %s (cause: %s)", query, exc, exc.__cause__)
            summary.skipped_queries.append(query)
            continue

        path = unique_output_path(query, config.output_dir, state.output_paths)
        state.output_paths.add(path)
        if path != output_path_for(query, config.output_dir):
            logger.warning("Output name for %r already used in this run; writing %s", query, path)
        try:
            write_fn(path, result.emails)
        except OSError as exc:
            logger.error("Could not write %s: %s", path, exc)
            summary.failed_writes.append(str(path))
            continue
        state.emails_written += len(result.emails)
        summary.written_files.append(str(path))

    summary.emails_written = state.emails_written
    summary.unique_packages = state.unique_packages
    return summary


def run_pipeline(
    config: RunConfig, *, logger: logging.Logger, sleep_fn: SleepFn = time.sleep
) -> RunSummary:
    """Build concrete dependencies, execute the pipeline, and write all outputs."""
    sent = frozenset(load_lines_from_file(config.sent_emails_file))
    logger.info("%d emails already sent", len(sent))
    state = RunState(sent=sent)

    with make_session(config.user_agent) as session:
        fetch_page = RetryingFetcher(
            RegistryFetcher(
                session=session,
                base_url=config.registry_url,
                page_size=config.page_size,
                timeout=config.request_timeout,
                logger=logger,
            ),
            retries=config.retries,
            success_delay=config.success_delay,
            failure_delay=config.failure_delay,
            sleep_fn=sleep_fn,
            logger=logger,
        )
        summary = collect_contacts(config, fetch_page=fetch_page, state=state, logger=logger)

    if config.raw_output:
        digest = write_raw_packages(config.raw_output, state.packages)
        logger.info(
            "Wrote %d packages to %s (sha256 %s)", len(state.packages), config.raw_output, digest
        )
    if config.markdown_output:
        write_text(config.markdown_output, render_packages_markdown(state.packages))
        logger.info("Wrote package listing to %s", config.markdown_output)

    logger.info(
        "Wrote %d new emails for %d queries from %d unique packages.",
        summary.emails_written,
        summary.queries,
        summary.unique_packages,
    )
    return summary
