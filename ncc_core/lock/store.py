"""The installed-state database of packages and versions."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ..bytecode import key, lookup
from ..errors import VersionNotFoundException
from ..package import Package
from .entries import PackageEntry, VersionEntry

PACKAGE_LOCK_VERSION = "1.0.0"


@dataclass
class PackageLock:
    package_lock_version: str = PACKAGE_LOCK_VERSION
    last_updated_timestamp: int = field(default_factory=lambda: int(time.time()))
    packages: dict[str, PackageEntry] = field(default_factory=dict)

    def _touch(self) -> None:
        self.last_updated_timestamp = int(time.time())

    def add_package(self, package: Package, install_path: Path | str, overwrite: bool = False) -> bool:
        name = package.assembly.package
        entry = self.packages.get(name)
        if entry is None:
            entry = PackageEntry(name=name)
            self.packages[name] = entry
        added = entry.add_version(package, install_path, overwrite=overwrite)
        if added:
            self._touch()
        return added

    def remove_package_version(self, name: str, version: str) -> bool:
        entry = self.packages.get(name)
        if entry is None:
            return False
        removed = entry.remove_version(version)
        if entry.latest_version is None:
            del self.packages[name]
        if removed:
            self._touch()
        return removed

    def remove_package(self, name: str) -> bool:
        if name not in self.packages:
            return False
        del self.packages[name]
        self._touch()
        return True

    def get_package(self, name: str) -> PackageEntry | None:
        return self.packages.get(name)

    def get_version(self, name: str, version: str, strict: bool = False) -> VersionEntry | None:
        entry = self.packages.get(name)
        if entry is None:
            if strict:
                raise VersionNotFoundException(f"package {name} is not installed")
            return None
        return entry.get_version(version, strict=strict)

    def package_exists(self, name: str, version: str | None = None) -> bool:
        entry = self.packages.get(name)
        if entry is None:
            return False
        if version is None:
            return True
        return entry.get_version(version) is not None

    def get_packages(self) -> dict[str, list[str]]:
        return {name: entry.get_versions() for name, entry in self.packages.items()}

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key("package_lock_version", bytecode): self.package_lock_version,
            key("last_updated_timestamp", bytecode): self.last_updated_timestamp,
            key("packages", bytecode): {name: entry.to_dict(bytecode) for name, entry in self.packages.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "PackageLock":
        packages_raw = lookup(data, "packages") or {}
        return cls(
            package_lock_version=str(lookup(data, "package_lock_version") or PACKAGE_LOCK_VERSION),
            last_updated_timestamp=int(lookup(data, "last_updated_timestamp") or 0),
            packages={str(name): PackageEntry.from_dict(entry) for name, entry in packages_raw.items()},
        )
