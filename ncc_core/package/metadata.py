"""Package header metadata: compiler provenance, hooks and update source."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..bytecode import key, lookup

_HOOK_NAMES = (
    "pre_install",
    "post_install",
    "pre_uninstall",
    "post_uninstall",
    "pre_update",
    "post_update",
)


@dataclass
class CompilerExtension:
    extension: str
    minimum_version: str | None = None
    maximum_version: str | None = None

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key("extension", bytecode): self.extension,
            key("minimum_version", bytecode): self.minimum_version,
            key("maximum_version", bytecode): self.maximum_version,
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "CompilerExtension":
        return cls(
            extension=str(lookup(data, "extension") or ""),
            minimum_version=lookup(data, "minimum_version"),
            maximum_version=lookup(data, "maximum_version"),
        )


@dataclass
class UpdateSourceRepository:
    name: str
    type: str
    host: str
    ssl: bool = True

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key("name", bytecode): self.name,
            key("type", bytecode): self.type,
            key("host", bytecode): self.host,
            key("ssl", bytecode): self.ssl,
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "UpdateSourceRepository":
        return cls(
            name=str(lookup(data, "name") or ""),
            type=str(lookup(data, "type") or ""),
            host=str(lookup(data, "host") or ""),
            ssl=bool(lookup(data, "ssl", True)),
        )


@dataclass
class UpdateSource:
    source: str
    repository: UpdateSourceRepository | None = None

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key("source", bytecode): self.source,
            key("repository", bytecode): self.repository.to_dict(bytecode) if self.repository else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "UpdateSource":
        repository = lookup(data, "repository")
        return cls(
            source=str(lookup(data, "source") or ""),
            repository=UpdateSourceRepository.from_dict(repository) if isinstance(repository, Mapping) else None,
        )


@dataclass
class InstallerHooks:
    """Execution policy names run around install, uninstall and update."""

    pre_install: list[str] = field(default_factory=list)
    post_install: list[str] = field(default_factory=list)
    pre_uninstall: list[str] = field(default_factory=list)
    post_uninstall: list[str] = field(default_factory=list)
    pre_update: list[str] = field(default_factory=list)
    post_update: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in _HOOK_NAMES)

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any] | None:
        if self.is_empty():
            return None
        return {key(name, bytecode): list(getattr(self, name)) for name in _HOOK_NAMES}

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any] | None) -> "InstallerHooks":
        if not data:
            return cls()
        return cls(**{name: [str(item) for item in lookup(data, name) or []] for name in _HOOK_NAMES})


@dataclass
class Metadata:
    compiler_extension: CompilerExtension | None = None
    runtime_constants: dict[str, str] = field(default_factory=dict)
    compiler_version: str | None = None
    options: dict[str, Any] = field(default_factory=dict)
    update_source: UpdateSource | None = None
    installer: InstallerHooks = field(default_factory=InstallerHooks)
    main_execution_policy: str | None = None

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key("compiler_extension", bytecode): (
                self.compiler_extension.to_dict(bytecode) if self.compiler_extension else None
            ),
            key("runtime_constants", bytecode): dict(self.runtime_constants),
            key("compiler_version", bytecode): self.compiler_version,
            key("options", bytecode): dict(self.options),
            key("update_source", bytecode): self.update_source.to_dict(bytecode) if self.update_source else None,
            key("installer", bytecode): self.installer.to_dict(bytecode),
            key("main_execution_policy", bytecode): self.main_execution_policy,
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "Metadata":
        compiler_extension = lookup(data, "compiler_extension")
        update_source = lookup(data, "update_source")
        installer = lookup(data, "installer")
        return cls(
            compiler_extension=(
                CompilerExtension.from_dict(compiler_extension) if isinstance(compiler_extension, Mapping) else None
            ),
            runtime_constants={str(k): v for k, v in (lookup(data, "runtime_constants") or {}).items()},
            compiler_version=lookup(data, "compiler_version"),
            options=dict(lookup(data, "options") or {}),
            update_source=UpdateSource.from_dict(update_source) if isinstance(update_source, Mapping) else None,
            installer=InstallerHooks.from_dict(installer if isinstance(installer, Mapping) else None),
            main_execution_policy=lookup(data, "main_execution_policy"),
        )
