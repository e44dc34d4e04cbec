"""Pure email extraction from package records."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Package


def extract_emails(package: Package) -> list[str]:
    """Return the publisher email, then maintainer emails in listed order."""
    emails: list[str] = []
    if package.publisher is not None and package.publisher.email:
        emails.append(package.publisher.email)
    emails.extend(person.email for person in package.maintainers if person.email)
    return emails


def flatten_emails(packages: Iterable[Package]) -> list[str]:
    """Concatenate extracted emails in package arrival order."""
    return [email for package in packages for email in extract_emails(package)]
