import logging
from collections.abc import Sequence
from pathlib import Path

import pytest

from registry_contacts.config import RunConfig
from registry_contacts.dedupe import RunState
from registry_contacts.errors import RetriesExhausted
from registry_contacts.models import Package
from registry_contacts.pipeline import collect_contacts, process_query, run_pipeline


def _package(name: str, *emails: str) -> Package:
    return Package.model_validate(
        {"name": name, "maintainers": [{"username": name, "email": email} for email in emails]}
    )


class DummyFetcher:
    def __init__(self, results: dict[str, list[Package]], failing: Sequence[str] = ()) -> None:
        self.results = results
        self.failing = set(failing)
        self.calls: list[tuple[int, str]] = []

    def __call__(self, page: int, query: str) -> list[Package]:
        self.calls.append((page, query))
        if query in self.failing:
            raise RetriesExhausted(page=page, query=query, attempts=3)
        return self.results.get(query, []) if page == 0 else []


def _config(tmp_path: Path, *queries: str, **overrides: object) -> RunConfig:
    return RunConfig(
        queries=tuple(queries),
        output_dir=str(tmp_path),
        page_count=2,
        show_progress=False,
        **overrides,  # type: ignore[arg-type]
    )


def _read(tmp_path: Path, query: str) -> str:
    return (tmp_path / f"{query}_new_emails.txt").read_text(encoding="utf-8")


def test_sent_emails_and_duplicates_are_excluded(tmp_path: Path) -> None:
    fetcher = DummyFetcher(
        {"foo": [_package("p1", "a@x.com", "b@x.com"), _package("p2", "b@x.com")]}
    )
    state = RunState(sent=frozenset({"a@x.com"}))
    summary = collect_contacts(
        _config(tmp_path, "foo"), fetch_page=fetcher, state=state, logger=logging.getLogger("test")
    )
    assert _read(tmp_path, "foo") == "b@x.com"
    assert summary.emails_written == 1
    assert fetcher.calls == [(0, "foo"), (1, "foo")]


def test_email_is_written_for_first_query_only(tmp_path: Path) -> None:
    fetcher = DummyFetcher(
        {
            "foo": [_package("p1", "c@x.com", "f@x.com")],
            "bar": [_package("p2", "c@x.com", "g@x.com"), _package("p1", "f@x.com")],
        }
    )
    state = RunState(sent=frozenset())
    summary = collect_contacts(
        _config(tmp_path, "foo", "bar"),
        fetch_page=fetcher,
        state=state,
        logger=logging.getLogger("test"),
    )
    assert _read(tmp_path, "foo") == "c@x.com\nf@x.com"
    assert _read(tmp_path, "bar") == "g@x.com"
    assert summary.queries == 2
    assert summary.emails_written == 3
    assert summary.unique_packages == 2


def test_failing_query_is_skipped_by_default(tmp_path: Path) -> None:
    fetcher = DummyFetcher({"good": [_package("p1", "a@x.com")]}, failing=["bad"])
    summary = collect_contacts(
        _config(tmp_path, "bad", "good"),
        fetch_page=fetcher,
        state=RunState(sent=frozenset()),
        logger=logging.getLogger("test"),
    )
    assert summary.skipped_queries == ["bad"]
    assert not (tmp_path / "bad_new_emails.txt").exists()
    assert _read(tmp_path, "good") == "a@x.com"


def test_fail_fast_aborts_the_run(tmp_path: Path) -> None:
    fetcher = DummyFetcher({"good": [_package("p1", "a@x.com")]}, failing=["bad"])
    with pytest.raises(RetriesExhausted):
        collect_contacts(
            _config(tmp_path, "bad", "good", fail_fast=True),
            fetch_page=fetcher,
            state=RunState(sent=frozenset()),
            logger=logging.getLogger("test"),
        )
    assert (0, "good") not in fetcher.calls


def test_write_failure_does_not_block_later_queries(tmp_path: Path) -> None:
    written: dict[str, list[str]] = {}

    def flaky_write(path: Path, emails: Sequence[str]) -> None:
        if path.name.startswith("foo"):
            raise PermissionError("read-only")
        written[path.name] = list(emails)

    fetcher = DummyFetcher(
        {"foo": [_package("p1", "a@x.com")], "bar": [_package("p2", "b@x.com")]}
    )
    summary = collect_contacts(
        _config(tmp_path, "foo", "bar"),
        fetch_page=fetcher,
        state=RunState(sent=frozenset()),
        write_fn=flaky_write,
        logger=logging.getLogger("test"),
    )
    assert written == {"bar_new_emails.txt": ["b@x.com"]}
    assert summary.failed_writes == [str(tmp_path / "foo_new_emails.txt")]
    assert summary.emails_written == 1


def test_process_query_claims_emails(tmp_path: Path) -> None:
    state = RunState(sent=frozenset())
    result = process_query(
        "foo",
        fetch_page=DummyFetcher({"foo": [_package("p1", "a@x.com", "a@x.com")]}),
        state=state,
        config=_config(tmp_path, "foo"),
        logger=logging.getLogger("test"),
    )
    assert result.emails == ("a@x.com",)
    assert result.packages_fetched == 1
    assert state.new_emails == {"a@x.com"}


def test_run_pipeline_writes_all_outputs(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    sent_file = tmp_path / "sent_emails.txt"
    sent_file.write_text("old@x.com\r\nolder@x.com\n", encoding="utf-8")

    class FakeRegistryFetcher:
        def __init__(self, **kwargs: object) -> None:
            assert kwargs["page_size"] == 250

        def __call__(self, page: int, query: str) -> list[Package]:
            return [_package(f"{query}-{page}", "old@x.com", f"{query}@x.com")]

    monkeypatch.setattr("registry_contacts.pipeline.RegistryFetcher", FakeRegistryFetcher)
    sleeps: list[float] = []
    config = _config(
        tmp_path,
        "foo",
        sent_emails_file=str(sent_file),
        raw_output=str(tmp_path / "raw.json"),
        markdown_output=str(tmp_path / "PACKAGES.md"),
    )
    summary = run_pipeline(config, logger=logging.getLogger("test"), sleep_fn=sleeps.append)

    assert _read(tmp_path, "foo") == "foo@x.com"
    assert summary.unique_packages == 2
    assert sleeps == [0.8, 0.8]
    assert (tmp_path / "raw.json.hash").exists()
    assert "1. [foo-0]" in (tmp_path / "PACKAGES.md").read_text(encoding="utf-8")


def test_run_pipeline_requires_sent_emails_file(tmp_path: Path) -> None:
    config = _config(tmp_path, "foo", sent_emails_file=str(tmp_path / "missing.txt"))
    with pytest.raises(FileNotFoundError):
        run_pipeline(config, logger=logging.getLogger("test"))


def test_queries_with_the_same_file_name_do_not_overwrite_each_other(tmp_path: Path) -> None:
    fetcher = DummyFetcher(
        {"a/b": [_package("p1", "first@x.com")], "a_b": [_package("p2", "second@x.com")]}
    )
    summary = collect_contacts(
        _config(tmp_path, "a/b", "a_b"),
        fetch_page=fetcher,
        state=RunState(sent=frozenset()),
        logger=logging.getLogger("test"),
    )
    assert len(set(summary.written_files)) == 2
    contents = sorted(Path(path).read_text(encoding="utf-8") for path in summary.written_files)
    assert contents == ["first@x.com", "second@x.com"]
    assert _read(tmp_path, "a_b") == "first@x.com"
    assert summary.emails_written == 2
