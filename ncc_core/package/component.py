from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from ..bytecode import key, lookup


class ComponentDataType(str, Enum):
    AST = "ast"
    PLAIN = "plain"
    BINARY = "binary"
    BASE64_ENCODED = "b64enc"


def sha1_hex(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


def _as_bytes(value: Any) -> bytes | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


@dataclass
class Component:
    name: str
    data: bytes | None = None
    data_type: ComponentDataType = ComponentDataType.PLAIN
    flags: list[str] = field(default_factory=list)
    checksum: str | None = None

    def update_checksum(self) -> None:
        self.checksum = sha1_hex(self.data) if self.data is not None else None

    def validate_checksum(self) -> bool:
        """Components without a stored checksum are accepted as-is."""
        if self.data is None:
            return False
        if self.checksum is None:
            return True
        return sha1_hex(self.data) == self.checksum

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key("name", bytecode): self.name,
            key("flags", bytecode): list(self.flags),
            key("data_type", bytecode): self.data_type.value,
            key("checksum", bytecode): self.checksum,
            key("data", bytecode): self.data,
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "Component":
        return cls(
            name=str(lookup(data, "name") or ""),
            data=_as_bytes(lookup(data, "data")),
            data_type=ComponentDataType(lookup(data, "data_type") or ComponentDataType.PLAIN.value),
            flags=[str(flag) for flag in lookup(data, "flags") or []],
            checksum=lookup(data, "checksum"),
        )
