"""Runtime configuration model."""

from __future__ import annotations

from dataclasses import dataclass

from .validation import MAX_PAGE_SIZE, validate_runtime_constraints

DEFAULT_REGISTRY_URL = "https://registry.npmjs.com/-/v1/search"
DEFAULT_USER_AGENT = "RegistryContacts/1.0 (+https://registry.npmjs.com)"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_PAGE_SIZE = MAX_PAGE_SIZE
DEFAULT_PAGE_COUNT = 40
DEFAULT_RETRIES = 2
DEFAULT_SUCCESS_DELAY = 0.8
DEFAULT_FAILURE_DELAY = 5.0
DEFAULT_SENT_EMAILS_FILE = "data/sent_emails.txt"
DEFAULT_OUTPUT_DIR = "data"


@dataclass(frozen=True)
class RunConfig:
    """Validated configuration used by the collection pipeline."""

    queries: tuple[str, ...]
    sent_emails_file: str = DEFAULT_SENT_EMAILS_FILE
    output_dir: str = DEFAULT_OUTPUT_DIR
    registry_url: str = DEFAULT_REGISTRY_URL
    page_size: int = DEFAULT_PAGE_SIZE
    page_count: int = DEFAULT_PAGE_COUNT
    retries: int = DEFAULT_RETRIES
    success_delay: float = DEFAULT_SUCCESS_DELAY
    failure_delay: float = DEFAULT_FAILURE_DELAY
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    fail_fast: bool = False
    raw_output: str | None = None
    markdown_output: str | None = None
    show_progress: bool = True

    def __post_init__(self) -> None:
        validate_runtime_constraints(
            queries=self.queries,
            page_size=self.page_size,
            page_count=self.page_count,
            retries=self.retries,
            success_delay=self.success_delay,
            failure_delay=self.failure_delay,
            request_timeout=self.request_timeout,
        )
