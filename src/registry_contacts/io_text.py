"""Plain-text and JSON output helpers."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Sequence, Set
from pathlib import Path

from .models import Package
from .validation import safe_filename_part

EMAIL_FILE_SUFFIX = "_new_emails.txt"


def output_path_for(query: str, output_dir: str) -> Path:
    """Return the per-query output file path."""
    return Path(output_dir) / f"{safe_filename_part(query)}{EMAIL_FILE_SUFFIX}"


def unique_output_path(query: str, output_dir: str, taken: Set[Path]) -> Path:
    """Return the output path for a query, suffixed with a short query hash if already taken."""
    path = output_path_for(query, output_dir)
    if path not in taken:
        return path
    digest = hashlib.sha256(query.encode("utf-8")).hexdigest()[:8]
    return Path(output_dir) / f"{safe_filename_part(query)}-{digest}{EMAIL_FILE_SUFFIX}"


def write_email_list(path: Path, emails: Sequence[str]) -> None:
    """Write emails one per line, without a trailing newline."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(emails), encoding="utf-8")


def write_raw_packages(path: str, packages: Sequence[Package]) -> str:
    """Dump packages as JSON and store the SHA-256 of the dump in ``<path>.hash``."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps([package.raw for package in packages], ensure_ascii=False).encode("utf-8")
    digest = hashlib.sha256(payload).hexdigest()
    output_path.write_bytes(payload)
    output_path.with_name(output_path.name + ".hash").write_text(digest, encoding="utf-8")
    return digest


def write_text(path: str, content: str) -> None:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
