"""YAML-backed database of configured remote repositories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from ..errors import InvalidArgumentException, OperationException
from .types import RepositoryConfiguration, RepositoryType

logger = logging.getLogger(__name__)

DATABASE_FILENAME = "repositories.yml"

DEFAULT_REPOSITORIES = (
    RepositoryConfiguration(name="github", type=RepositoryType.GITHUB, host="api.github.com"),
    RepositoryConfiguration(name="gitlab", type=RepositoryType.GITLAB, host="gitlab.com"),
    RepositoryConfiguration(name="packagist", type=RepositoryType.PACKAGIST, host="packagist.org"),
)


class RepositoryManager:
    def __init__(self, database_path: Path | str) -> None:
        self.database_path = Path(database_path)
        self._repositories = self._load()

    @classmethod
    def for_data_path(cls, data_path: Path | str) -> "RepositoryManager":
        return cls(Path(data_path) / DATABASE_FILENAME)

    @classmethod
    def initialize(
        cls,
        database_path: Path | str,
        defaults: Iterable[RepositoryConfiguration | Mapping[str, Any]] = DEFAULT_REPOSITORIES,
    ) -> "RepositoryManager":
        manager = cls(database_path)
        if manager.database_path.exists():
            logger.debug("repository database %s already exists, skipping initialization", manager.database_path)
            return manager
        for item in defaults:
            repository = item if isinstance(item, RepositoryConfiguration) else RepositoryConfiguration.from_dict(item)
            manager.add_repository(repository, update=False)
        manager.update_database()
        return manager

    def _load(self) -> dict[str, RepositoryConfiguration]:
        if not self.database_path.exists():
            return {}
        try:
            raw = yaml.safe_load(self.database_path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise OperationException(f"unable to load repositories from {self.database_path}: {exc}") from exc
        entries = raw.get("repositories") if isinstance(raw, Mapping) else None
        repositories: dict[str, RepositoryConfiguration] = {}
        for entry in entries or []:
            if not isinstance(entry, Mapping):
                continue
            repository = RepositoryConfiguration.from_dict(entry)
            repositories[repository.name] = repository
        return repositories

    def update_database(self) -> None:
        logger.debug("writing %s repositories to %s", len(self._repositories), self.database_path)
        payload = {"repositories": [repository.to_dict() for repository in self.get_repositories()]}
        try:
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
            self.database_path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
        except OSError as exc:
            raise OperationException(f"unable to write repository database {self.database_path}: {exc}") from exc

    def get_repositories(self) -> list[RepositoryConfiguration]:
        return sorted(self._repositories.values(), key=lambda repository: repository.name)

    def repository_exists(self, name: str) -> bool:
        return name.strip().lower() in self._repositories

    def add_repository(self, repository: RepositoryConfiguration, update: bool = True) -> None:
        if repository.name in self._repositories:
            raise InvalidArgumentException(f"the remote source '{repository.name}' already exists")
        logger.debug("adding repository %s as %s (type: %s)", repository.host, repository.name, repository.type.value)
        self._repositories[repository.name] = repository
        if update:
            self.update_database()

    def get_repository(self, name: str) -> RepositoryConfiguration:
        try:
            return self._repositories[name.strip().lower()]
        except KeyError as exc:
            raise InvalidArgumentException(f"the remote source '{name}' does not exist") from exc

    def remove_repository(self, name: str, update: bool = True) -> None:
        key = name.strip().lower()
        if key not in self._repositories:
            raise InvalidArgumentException(f"the remote source '{name}' does not exist")
        logger.debug("removing repository %s", key)
        del self._repositories[key]
        if update:
            self.update_database()
