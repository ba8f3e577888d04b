"""Archive extraction for fetched source bundles."""

from __future__ import annotations

from pathlib import Path

from ..errors import OperationException
from .tar import TarHeader, extract_tar, header_checksum
from .zip import extract_zip

ZIP_MAGIC = b"PK\x03\x04"


def extract_archive(archive_path: Path | str, destination: Path | str) -> None:
    archive = Path(archive_path)
    try:
        with archive.open("rb") as handle:
            magic = handle.read(4)
    except OSError as exc:
        raise OperationException(f"unable to read archive {archive}: {exc}") from exc
    if magic == ZIP_MAGIC or archive.suffix.lower() == ".zip":
        extract_zip(archive, destination)
        return
    extract_tar(archive, destination)


__all__ = [
    "TarHeader",
    "extract_archive",
    "extract_tar",
    "extract_zip",
    "header_checksum",
]
