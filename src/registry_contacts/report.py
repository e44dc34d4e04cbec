"""Markdown listing of fetched packages."""

from __future__ import annotations

import html
from collections.abc import Sequence

from .models import Package


def _optional_link(url: str | None, label: str) -> str:
    if not url:
        return ""
    return f" ([{label}]({url}))"


def render_package_entry(index: int, package: Package) -> str:
    """Render one numbered list entry with description and version lines."""
    npm_link = package.links.npm or ""
    description = html.escape(package.description or "")
    version_line = (
        f"v{package.version}"
        f"{_optional_link(package.links.homepage, 'homepage')}"
        f"{_optional_link(package.links.repository, 'repository')}"
    )
    return f"{index}. [{package.name}]({npm_link})\n    - {description}\n    - {version_line}"


def render_packages_markdown(packages: Sequence[Package]) -> str:
    """Render an ordered Markdown list of packages in fetch order."""
    entries = "\n".join(
        render_package_entry(index, package) for index, package in enumerate(packages, start=1)
    )
    return f"# Packages\n\nOrdered list of {len(packages)} packages:\n\n{entries}\n"
