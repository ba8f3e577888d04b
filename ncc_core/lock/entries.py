"""Package lock entries: one package, its installed versions and their dependencies."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ..bytecode import key, lookup
from ..errors import VersionNotFoundException
from ..package import CompilerExtension, ExecutionUnit, Package
from ..paths import InstallationPaths
from ..versions import LATEST, compare_versions

logger = logging.getLogger(__name__)


@dataclass
class DependencyEntry:
    package_name: str
    version: str

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key("package_name", bytecode): self.package_name,
            key("version", bytecode): self.version,
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "DependencyEntry":
        return cls(
            package_name=str(lookup(data, "package_name") or ""),
            version=str(lookup(data, "version") or LATEST),
        )


@dataclass
class VersionEntry:
    version: str
    location: str
    compiler: CompilerExtension | None = None
    dependencies: list[DependencyEntry] = field(default_factory=list)
    execution_units: list[ExecutionUnit] = field(default_factory=list)
    main_execution_policy: str | None = None

    def install_paths(self) -> InstallationPaths:
        return InstallationPaths(Path(self.location))

    def get_execution_unit(self, name: str) -> ExecutionUnit | None:
        return next((unit for unit in self.execution_units if unit.name == name), None)

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key("version", bytecode): self.version,
            key("compiler", bytecode): self.compiler.to_dict(bytecode) if self.compiler else None,
            key("dependencies", bytecode): [item.to_dict(bytecode) for item in self.dependencies],
            key("execution_units", bytecode): [item.to_dict(bytecode) for item in self.execution_units],
            key("main_execution_policy", bytecode): self.main_execution_policy,
            key("location", bytecode): self.location,
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "VersionEntry":
        compiler = lookup(data, "compiler")
        return cls(
            version=str(lookup(data, "version") or ""),
            location=str(lookup(data, "location") or ""),
            compiler=CompilerExtension.from_dict(compiler) if isinstance(compiler, Mapping) else None,
            dependencies=[DependencyEntry.from_dict(item) for item in lookup(data, "dependencies") or []],
            execution_units=[ExecutionUnit.from_dict(item) for item in lookup(data, "execution_units") or []],
            main_execution_policy=lookup(data, "main_execution_policy"),
        )


@dataclass
class PackageEntry:
    name: str
    latest_version: str | None = None
    versions: list[VersionEntry] = field(default_factory=list)

    def get_version(self, version: str, strict: bool = False) -> VersionEntry | None:
        if version == LATEST and self.latest_version is not None:
            version = self.latest_version
        for entry in self.versions:
            if entry.version == version:
                return entry
        if strict:
            raise VersionNotFoundException(f"version {version} of {self.name} is not installed")
        return None

    def add_version(self, package: Package, install_path: Path | str, overwrite: bool = False) -> bool:
        version = package.assembly.version
        if self.get_version(version) is not None:
            if not overwrite:
                return False
            self.remove_version(version)

        self.versions.append(
            VersionEntry(
                version=version,
                location=str(install_path),
                compiler=package.metadata.compiler_extension,
                dependencies=[
                    DependencyEntry(package_name=dependency.name, version=dependency.version)
                    for dependency in package.dependencies
                ],
                # only the location of each unit is kept; payloads stay in the installed package
                execution_units=[unit.without_data() for unit in package.execution_units],
                main_execution_policy=package.metadata.main_execution_policy,
            )
        )
        self._update_latest_version()
        logger.debug("registered %s=%s at %s", self.name, version, install_path)
        return True

    def remove_version(self, version: str) -> bool:
        for index, entry in enumerate(self.versions):
            if entry.version == version:
                del self.versions[index]
                self._update_latest_version()
                return True
        return False

    def get_versions(self) -> list[str]:
        return [entry.version for entry in self.versions]

    def _update_latest_version(self) -> None:
        # ties keep the first version seen
        latest: str | None = None
        for entry in self.versions:
            if latest is None or compare_versions(entry.version, latest) > 0:
                latest = entry.version
        self.latest_version = latest

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key("name", bytecode): self.name,
            key("latest_version", bytecode): self.latest_version,
            key("versions", bytecode): [entry.to_dict(bytecode) for entry in self.versions],
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "PackageEntry":
        return cls(
            name=str(lookup(data, "name") or ""),
            latest_version=lookup(data, "latest_version"),
            versions=[VersionEntry.from_dict(item) for item in lookup(data, "versions") or []],
        )
