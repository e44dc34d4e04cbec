"""Custom exceptions for the registry contact collector."""


class RegistryContactsError(Exception):
    """Base exception for this project."""


class ConfigError(RegistryContactsError):
    """Raised when runtime configuration is invalid."""


class FetchError(RegistryContactsError):
    """Raised when fetching one search page fails; the retry wrapper retries these."""


class NetworkError(FetchError):
    """Raised on transport failures and non-success HTTP statuses."""


class ParseError(FetchError):
    """Raised when the response body is not valid JSON."""


class MalformedResponse(FetchError):
    """Raised when the JSON body does not match the search response schema."""


class RetriesExhausted(RegistryContactsError):
    """Raised when every attempt to fetch a page has failed."""

    def __init__(self, *, page: int, query: str, attempts: int) -> None:
        super().__init__(f"Giving up on page {page} of {query!r} after {attempts} attempts.")
        self.page = page
        self.query = query
        self.attempts = attempts
