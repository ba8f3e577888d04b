"""Self-describing ASCII prefix written ahead of every package payload.

Layout, fixed positions::

    NCC_PACKAGE | 1.0 | <encoder> | <encrypted> | <compressed> | <type>
       0..10     11-13    14           15             16          17-18

``type`` is ``42`` for installable and executable packages, ``41`` for
executable-only packages and ``40`` otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..errors import PackageParsingException

PACKAGE_MAGIC = "NCC_PACKAGE"
PACKAGE_STRUCTURE_VERSION = "1.0"
MAGIC_BYTES_LENGTH = len(PACKAGE_MAGIC) + len(PACKAGE_STRUCTURE_VERSION) + 5

TYPE_INSTALLABLE_EXECUTABLE = "42"
TYPE_EXECUTABLE = "41"
TYPE_INSTALLABLE = "40"


class EncoderType(str, Enum):
    JSON = "1"
    COMPACT = "3"


@dataclass
class MagicBytes:
    structure_version: str = PACKAGE_STRUCTURE_VERSION
    encoder: EncoderType = EncoderType.COMPACT
    compressed: bool = False
    encrypted: bool = False
    installable: bool = False
    executable: bool = False

    @property
    def type_suffix(self) -> str:
        if self.installable and self.executable:
            return TYPE_INSTALLABLE_EXECUTABLE
        if self.executable:
            return TYPE_EXECUTABLE
        return TYPE_INSTALLABLE

    def to_string(self) -> str:
        return (
            f"{PACKAGE_MAGIC}{self.structure_version}{self.encoder.value}"
            f"{int(self.encrypted)}{int(self.compressed)}{self.type_suffix}"
        )

    def __str__(self) -> str:
        return self.to_string()

    def to_bytes(self) -> bytes:
        return self.to_string().encode("ascii")

    @classmethod
    def parse(cls, data: bytes | str) -> "MagicBytes":
        if isinstance(data, bytes):
            try:
                text = data[:MAGIC_BYTES_LENGTH].decode("ascii")
            except UnicodeDecodeError as exc:
                raise PackageParsingException("package header is not valid ASCII") from exc
        else:
            text = data[:MAGIC_BYTES_LENGTH]

        if len(text) < MAGIC_BYTES_LENGTH or text[: len(PACKAGE_MAGIC)].upper() != PACKAGE_MAGIC:
            raise PackageParsingException("missing NCC_PACKAGE header, the file is not a valid package")

        offset = len(PACKAGE_MAGIC)
        structure_version = text[offset : offset + 3]
        if structure_version != PACKAGE_STRUCTURE_VERSION:
            raise PackageParsingException(f"unsupported package structure version {structure_version!r}")

        try:
            encoder = EncoderType(text[offset + 3])
        except ValueError as exc:
            raise PackageParsingException(f"unknown package encoder {text[offset + 3]!r}") from exc

        encrypted = _flag(text[offset + 4], "encrypted")
        compressed = _flag(text[offset + 5], "compressed")
        package_type = text[offset + 6 : offset + 8]
        if package_type == TYPE_INSTALLABLE_EXECUTABLE:
            installable, executable = True, True
        elif package_type == TYPE_EXECUTABLE:
            installable, executable = False, True
        elif package_type == TYPE_INSTALLABLE:
            installable, executable = True, False
        else:
            raise PackageParsingException(f"unknown package type {package_type!r}")

        return cls(
            structure_version=structure_version,
            encoder=encoder,
            compressed=compressed,
            encrypted=encrypted,
            installable=installable,
            executable=executable,
        )


def _flag(value: str, name: str) -> bool:
    if value not in {"0", "1"}:
        raise PackageParsingException(f"invalid {name} flag {value!r} in package header")
    return value == "1"
