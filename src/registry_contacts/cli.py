"""CLI entrypoint for registry-contacts."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence

from .config import (
    DEFAULT_FAILURE_DELAY,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PAGE_COUNT,
    DEFAULT_PAGE_SIZE,
    DEFAULT_REGISTRY_URL,
    DEFAULT_RETRIES,
    DEFAULT_SENT_EMAILS_FILE,
    DEFAULT_SUCCESS_DELAY,
    RunConfig,
)
from .errors import ConfigError, RetriesExhausted
from .logging_utils import configure_logging, get_logger
from .pipeline import run_pipeline
from .validation import load_lines_from_file


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Registry Contacts - collect not-yet-contacted package maintainer emails."
    )
    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument("--queries", nargs="+", help="Search queries.")
    source_group.add_argument(
        "--queries-file", help="Path to query file (one query per line)."
    )
    parser.add_argument(
        "--sent-emails-file",
        default=DEFAULT_SENT_EMAILS_FILE,
        help="Path to already-contacted emails (one per line).",
    )
    parser.add_argument(
        "--output-dir",
        default=DEFAULT_OUTPUT_DIR,
        help="Directory for <query>_new_emails.txt files.",
    )
    parser.add_argument(
        "--registry-url",
        help="Search endpoint (or set REGISTRY_SEARCH_URL env var).",
    )
    parser.add_argument(
        "--page-size", type=int, default=DEFAULT_PAGE_SIZE, help="Results per page (max 250)."
    )
    parser.add_argument(
        "--pages", type=int, default=DEFAULT_PAGE_COUNT, help="Pages to fetch per query."
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=DEFAULT_RETRIES,
        help="Extra attempts per page after the first failure.",
    )
    parser.add_argument(
        "--success-delay",
        type=float,
        default=DEFAULT_SUCCESS_DELAY,
        help="Seconds to wait after each successful page.",
    )
    parser.add_argument(
        "--failure-delay",
        type=float,
        default=DEFAULT_FAILURE_DELAY,
        help="Seconds to wait after a failed page before retrying.",
    )
    parser.add_argument("--raw-output", help="Write all fetched packages as JSON to this path.")
    parser.add_argument(
        "--markdown-output", help="Write a Markdown listing of fetched packages to this path."
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Abort the whole run when a page keeps failing instead of skipping the query.",
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable tqdm progress bars.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI input."""
    return build_parser().parse_args(argv)


def _materialize_queries(args: argparse.Namespace) -> tuple[str, ...]:
    raw = args.queries if args.queries else load_lines_from_file(args.queries_file)
    queries = (query.strip() for query in raw)
    return tuple(dict.fromkeys(query for query in queries if query))


def namespace_to_config(args: argparse.Namespace) -> RunConfig:
    """Convert CLI args to validated RunConfig."""
    registry_url = args.registry_url or os.getenv("REGISTRY_SEARCH_URL") or DEFAULT_REGISTRY_URL
    return RunConfig(
        queries=_materialize_queries(args),
        sent_emails_file=args.sent_emails_file,
        output_dir=args.output_dir,
        registry_url=registry_url,
        page_size=args.page_size,
        page_count=args.pages,
        retries=args.retries,
        success_delay=args.success_delay,
        failure_delay=args.failure_delay,
        fail_fast=args.fail_fast,
        raw_output=args.raw_output,
        markdown_output=args.markdown_output,
        show_progress=not args.no_progress and sys.stderr.isatty(),
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    configure_logging(args.verbose)
    logger = get_logger()
    try:
        config = namespace_to_config(args)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    except OSError as exc:
        logger.error("Cannot read queries: %s", exc)
        return 2

    try:
        run_pipeline(config, logger=logger)
    except FileNotFoundError as exc:
        logger.error("Missing input file: %s", exc)
        return 2
    except RetriesExhausted as exc:
        logger.error("Aborting run: %s", exc)
        return 1
    except OSError as exc:
        logger.error("I/O failure: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
