"""Security helpers for extraction paths and credential logging."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit

from .errors import PathTraversalException


def safe_output_path(base_dir: Path, relative_path: str) -> Path:
    target = (base_dir / relative_path).resolve()
    root = base_dir.resolve()
    if target == root:
        return target
    if root not in target.parents:
        raise PathTraversalException(f"path traversal blocked for extracted path: {relative_path}")
    return target


def redact_token(value: str) -> str:
    if not value:
        return value
    if len(value) <= 6:
        return "***"
    return f"{value[:3]}***{value[-2:]}"


def redact_url(url: str) -> str:
    parsed = urlsplit(url)
    if parsed.password:
        safe_netloc = parsed.netloc.replace(parsed.password, "***")
        return url.replace(parsed.netloc, safe_netloc)
    return url


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        lower = key.lower()
        if lower in {"authorization", "private-token"}:
            scheme, _, secret = value.partition(" ")
            redacted[key] = f"{scheme} {redact_token(secret)}" if secret else redact_token(value)
            continue
        redacted[key] = value
    return redacted
