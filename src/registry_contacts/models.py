"""Registry response schema, package records and component protocols."""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _text_or_none(value: Any) -> Any:
    return value if isinstance(value, str) else None


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Person(_Record):
    """A publisher or maintainer entry."""

    username: str | None = None
    email: str | None = None

    @field_validator("username", "email", mode="before")
    @classmethod
    def _text_fields(cls, value: Any) -> Any:
        return _text_or_none(value)


class Links(_Record):
    npm: str | None = None
    homepage: str | None = None
    repository: str | None = None
    bugs: str | None = None

    @field_validator("npm", "homepage", "repository", "bugs", mode="before")
    @classmethod
    def _text_fields(cls, value: Any) -> Any:
        return _text_or_none(value)


class Package(_Record):
    """Package metadata as returned inside one search result.

    ``raw`` holds the record exactly as the registry sent it; it is what the
    raw JSON dump writes. Only ``name`` is required, every other field falls
    back to its default when the registry sends something unexpected.
    """

    name: str
    version: str = ""
    description: str | None = None
    keywords: tuple[str, ...] = ()
    date: str | None = None
    links: Links = Field(default_factory=Links)
    publisher: Person | None = None
    maintainers: tuple[Person, ...] = ()
    raw: dict[str, Any] = Field(default_factory=dict, exclude=True, repr=False)

    @model_validator(mode="before")
    @classmethod
    def _keep_raw(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {**data, "raw": {key: value for key, value in data.items() if key != "raw"}}
        return data

    @field_validator("version", mode="before")
    @classmethod
    def _version_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return ""

    @field_validator("description", "date", mode="before")
    @classmethod
    def _text_fields(cls, value: Any) -> Any:
        return _text_or_none(value)

    @field_validator("keywords", mode="before")
    @classmethod
    def _keywords_as_strings(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return ()
        return tuple(item for item in value if isinstance(item, str))

    @field_validator("links", mode="before")
    @classmethod
    def _links_object(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @field_validator("publisher", mode="before")
    @classmethod
    def _publisher_object(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    @field_validator("maintainers", mode="before")
    @classmethod
    def _maintainers_list(cls, value: Any) -> Any:
        # Anything other than a list of objects counts as "no maintainers".
        if not isinstance(value, list):
            return ()
        return tuple(item for item in value if isinstance(item, dict))


class SearchObject(_Record):
    """One search hit; validated per entry so a bad hit does not sink its page."""

    package: Package
    score: Any = None
    search_score: Any = Field(default=None, alias="searchScore")


class SearchResponse(_Record):
    """Envelope of one registry search page."""

    objects: list[dict[str, Any]]
    total: Any = None
    time: Any = None


class PageFetcher(Protocol):
    """Contract for anything that returns one page of search results."""

    def __call__(self, page: int, query: str) -> list[Package]:
        """Return the packages on a zero-based result page."""


class SleepFn(Protocol):
    def __call__(self, seconds: float) -> None: ...
