"""Compact integer keys for persisted maps.

A bytecode key is the unsigned CRC-32 of the plain key name. Readers accept
either form so documents written in both shapes load the same way.
"""

from __future__ import annotations

import zlib
from typing import Any, Mapping


def bytecode_key(name: str) -> int:
    return zlib.crc32(name.encode("utf-8")) & 0xFFFFFFFF


def key(name: str, bytecode: bool) -> str | int:
    return bytecode_key(name) if bytecode else name


def lookup(data: Mapping[Any, Any], name: str, default: Any = None) -> Any:
    if name in data:
        return data[name]
    return data.get(bytecode_key(name), default)
