"""Package identity, dependency references and remote package locators."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from ..bytecode import key, lookup
from ..errors import InvalidArgumentException
from ..versions import LATEST

_NAME_PART = r"[a-z](?:[a-z0-9._-]*[a-z0-9])?"
_PACKAGE_SOURCE_RE = re.compile(
    rf"^(?P<organization>{_NAME_PART})/(?P<name>{_NAME_PART})(?:=(?P<version>[^@\s]+))?@(?P<repository>{_NAME_PART})$",
    re.IGNORECASE,
)

_ASSEMBLY_FIELDS = (
    "name",
    "package",
    "description",
    "company",
    "product",
    "copyright",
    "trademark",
    "version",
    "uuid",
)


@dataclass
class Assembly:
    name: str
    package: str
    version: str
    description: str | None = None
    company: str | None = None
    product: str | None = None
    copyright: str | None = None
    trademark: str | None = None
    uuid: str | None = None

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key(name, bytecode): getattr(self, name)
            for name in _ASSEMBLY_FIELDS
            if getattr(self, name) is not None
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "Assembly":
        values = {name: lookup(data, name) for name in _ASSEMBLY_FIELDS}
        for required in ("name", "package", "version"):
            if not values[required]:
                raise InvalidArgumentException(f"assembly is missing required field '{required}'")
        return cls(**values)


@dataclass(frozen=True)
class PackageSource:
    """Remote locator of the form ``organization/name[=version]@repository``."""

    organization: str
    name: str
    repository: str
    version: str = LATEST

    @classmethod
    def parse(cls, value: str) -> "PackageSource":
        match = _PACKAGE_SOURCE_RE.match(str(value or "").strip())
        if match is None:
            raise InvalidArgumentException(f"invalid package source: {value!r}")
        return cls(
            organization=match.group("organization").lower(),
            name=match.group("name").lower(),
            repository=match.group("repository").lower(),
            version=match.group("version") or LATEST,
        )

    def __str__(self) -> str:
        if self.version == LATEST:
            return f"{self.organization}/{self.name}@{self.repository}"
        return f"{self.organization}/{self.name}={self.version}@{self.repository}"


@dataclass
class DependencyReference:
    name: str
    version: str = LATEST
    source: str | None = None

    def package_source(self) -> PackageSource | None:
        if not self.source:
            return None
        return PackageSource.parse(self.source)

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        results: dict[Any, Any] = {
            key("name", bytecode): self.name,
            key("version", bytecode): self.version,
        }
        if self.source:
            results[key("source", bytecode)] = self.source
        return results

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "DependencyReference":
        return cls(
            name=str(lookup(data, "name") or ""),
            version=str(lookup(data, "version") or LATEST),
            source=lookup(data, "source"),
        )
