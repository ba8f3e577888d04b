from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..bytecode import key, lookup
from .component import _as_bytes, sha1_hex


@dataclass
class Resource:
    name: str
    data: bytes | None = None
    checksum: str | None = None

    def update_checksum(self) -> None:
        self.checksum = sha1_hex(self.data) if self.data is not None else None

    def validate_checksum(self) -> bool:
        if self.checksum is None or self.data is None:
            return False
        return sha1_hex(self.data) == self.checksum

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key("name", bytecode): self.name,
            key("checksum", bytecode): self.checksum,
            key("data", bytecode): self.data,
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "Resource":
        return cls(
            name=str(lookup(data, "name") or ""),
            data=_as_bytes(lookup(data, "data")),
            checksum=lookup(data, "checksum"),
        )
