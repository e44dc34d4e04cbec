"""Email deduplication against sent and already-emitted addresses."""

from __future__ import annotations

from collections.abc import Iterable, Set
from dataclasses import dataclass, field
from pathlib import Path

from .models import Package


def dedupe_emails(
    candidates: Iterable[str], *, sent: Set[str], already_new: Set[str]
) -> list[str]:
    """Keep first occurrences that are neither sent nor emitted earlier in the run."""
    output: list[str] = []
    seen: set[str] = set()
    for email in candidates:
        if email in seen:
            continue
        seen.add(email)
        if email in sent or email in already_new:
            continue
        output.append(email)
    return output


@dataclass
class RunState:
    """Cross-query state for one run, threaded through the query loop."""

    sent: frozenset[str]
    new_emails: set[str] = field(default_factory=set)
    package_names: set[str] = field(default_factory=set)
    packages: list[Package] = field(default_factory=list)
    output_paths: set[Path] = field(default_factory=set)
    emails_written: int = 0

    def select(self, candidates: Iterable[str]) -> list[str]:
        """Dedupe candidates for one query without mutating the state."""
        return dedupe_emails(candidates, sent=self.sent, already_new=self.new_emails)

    def claim(self, emails: Iterable[str]) -> None:
        """Mark emails as emitted so later queries skip them."""
        self.new_emails.update(emails)

    def record_packages(self, packages: Iterable[Package]) -> None:
        for package in packages:
            self.packages.append(package)
            self.package_names.add(package.name)

    @property
    def unique_packages(self) -> int:
        return len(self.package_names)
