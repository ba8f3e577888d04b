"""Streaming tar extraction with transparent gzip/bzip2 decompression."""

from __future__ import annotations

import bz2
import gzip
import logging
from pathlib import Path
from typing import BinaryIO

from ..errors import OperationException
from ..security import safe_output_path

logger = logging.getLogger(__name__)

BLOCK_SIZE = 512
CHUNK_SIZE = 8192
GZIP_MAGIC = b"\x1f\x8b"
BZIP2_MAGIC = b"BZh"

_DIRECTORY_TYPES = {"5"}
_FILE_TYPES = {"0", ""}


class TarHeader:
    """Decoded view over one 512-byte tar header block."""

    def __init__(self, block: bytes) -> None:
        self.block = block
        name = _field_text(block[0:100])
        prefix = _field_text(block[345:500])
        self.name = f"{prefix}/{name}" if prefix else name
        self.mode = _octal(block[100:108])
        self.uid = _octal(block[108:116])
        self.gid = _octal(block[116:124])
        self.size = _octal(block[124:136])
        self.mtime = _octal(block[136:148])
        self.checksum = _octal(block[148:156])
        self.type = _field_text(block[156:157])
        self.link_name = _field_text(block[157:257])

    def computed_checksum(self) -> int:
        return header_checksum(self.block)

    def is_valid(self) -> bool:
        # A stored checksum of zero is accepted without verification.
        if self.checksum == 0:
            return True
        return self.checksum == self.computed_checksum()

    @property
    def padded_size(self) -> int:
        return self.size + padding_for(self.size)


def header_checksum(block: bytes) -> int:
    return sum(block[:148]) + 8 * ord(" ") + sum(block[156:BLOCK_SIZE])


def padding_for(size: int) -> int:
    return (BLOCK_SIZE - size % BLOCK_SIZE) % BLOCK_SIZE


def is_end_of_archive(block: bytes) -> bool:
    return len(block) < BLOCK_SIZE or not block.strip(b" \t\r\n\x0b\x00")


def _field_text(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("utf-8", errors="replace").strip()


def _octal(raw: bytes) -> int:
    text = raw.replace(b"\x00", b" ").strip().decode("ascii", errors="ignore")
    if not text:
        return 0
    try:
        return int(text, 8)
    except ValueError:
        return 0


def open_tar_stream(archive_path: Path) -> BinaryIO:
    try:
        with archive_path.open("rb") as handle:
            magic = handle.read(3)
    except OSError as exc:
        raise OperationException(f"unable to read archive {archive_path}: {exc}") from exc

    try:
        if magic[:2] == GZIP_MAGIC:
            return gzip.open(archive_path, "rb")
        if magic == BZIP2_MAGIC:
            return bz2.open(archive_path, "rb")
        return archive_path.open("rb")
    except OSError as exc:
        raise OperationException(f"unable to open archive {archive_path}: {exc}") from exc


def extract_tar(archive_path: Path | str, destination: Path | str) -> None:
    archive = Path(archive_path)
    target_root = Path(destination)
    if not archive.is_file():
        raise OperationException(f"archive not found: {archive}")
    try:
        target_root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OperationException(f"unable to create destination {target_root}: {exc}") from exc

    logger.debug("extracting tar archive=%s destination=%s", archive, target_root)
    stream = open_tar_stream(archive)
    try:
        _extract_entries(stream, target_root)
    except (OSError, EOFError) as exc:
        raise OperationException(f"failed to read tar archive {archive}: {exc}") from exc
    finally:
        stream.close()


def _extract_entries(stream: BinaryIO, target_root: Path) -> None:
    while True:
        block = stream.read(BLOCK_SIZE)
        if is_end_of_archive(block):
            return
        header = TarHeader(block)

        if not header.is_valid():
            logger.warning(
                "skipping tar entry with invalid checksum name=%s stored=%s computed=%s",
                header.name,
                header.checksum,
                header.computed_checksum(),
            )
            _discard(stream, header.padded_size)
            continue
        # absolute member names extract under the destination
        name = header.name.lstrip("/")
        if not name:
            logger.warning("skipping tar entry with empty name")
            _discard(stream, header.padded_size)
            continue

        if header.type in _DIRECTORY_TYPES:
            directory = safe_output_path(target_root, name)
            directory.mkdir(parents=True, exist_ok=True)
            _discard(stream, header.padded_size)
            continue

        if header.type in _FILE_TYPES:
            _write_file(stream, target_root, name, header)
            continue

        logger.debug("skipping tar entry name=%s type=%s", header.name, header.type)
        _discard(stream, header.padded_size)


def _write_file(stream: BinaryIO, target_root: Path, name: str, header: TarHeader) -> None:
    target = safe_output_path(target_root, name)
    target.parent.mkdir(parents=True, exist_ok=True)
    remaining = header.size
    with target.open("wb") as handle:
        while remaining > 0:
            chunk = stream.read(min(CHUNK_SIZE, remaining))
            if not chunk:
                raise OperationException(f"unexpected end of archive while extracting {name}")
            handle.write(chunk)
            remaining -= len(chunk)
    if header.mode:
        try:
            target.chmod(header.mode & 0o7777)
        except OSError as exc:
            logger.debug("unable to apply mode %o to %s: %s", header.mode, target, exc)
    _discard(stream, padding_for(header.size))


def _discard(stream: BinaryIO, size: int) -> None:
    remaining = size
    while remaining > 0:
        chunk = stream.read(min(CHUNK_SIZE, remaining))
        if not chunk:
            return
        remaining -= len(chunk)
