from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from ncc_core.errors import InvalidArgumentException
from ncc_core.repositories import DEFAULT_REPOSITORIES, RepositoryConfiguration, RepositoryManager, RepositoryType


def test_initialize_writes_default_repositories(tmp_path: Path) -> None:
    manager = RepositoryManager.initialize(tmp_path / "repositories.yml")

    assert [repository.name for repository in manager.get_repositories()] == ["github", "gitlab", "packagist"]
    payload = yaml.safe_load((tmp_path / "repositories.yml").read_text(encoding="utf-8"))
    assert payload["repositories"][0] == {"name": "github", "type": "github", "host": "api.github.com", "ssl": True}


def test_initialize_keeps_existing_database(tmp_path: Path) -> None:
    database = tmp_path / "repositories.yml"
    manager = RepositoryManager(database)
    manager.add_repository(RepositoryConfiguration(name="n64", type="gitea", host="git.n64.cc"))

    reopened = RepositoryManager.initialize(database)

    assert [repository.name for repository in reopened.get_repositories()] == ["n64"]


def test_repository_database_round_trip(tmp_path: Path) -> None:
    manager = RepositoryManager.for_data_path(tmp_path)
    manager.add_repository(RepositoryConfiguration(name="Local", type="gitea", host="localhost:3000", ssl=False))

    reopened = RepositoryManager.for_data_path(tmp_path)
    repository = reopened.get_repository("LOCAL")

    assert reopened.repository_exists("local")
    assert repository.type is RepositoryType.GITEA
    assert repository.base_url == "http://localhost:3000"


def test_duplicate_and_missing_repositories(tmp_path: Path) -> None:
    manager = RepositoryManager.initialize(tmp_path / "repositories.yml", defaults=DEFAULT_REPOSITORIES[:1])

    with pytest.raises(InvalidArgumentException):
        manager.add_repository(RepositoryConfiguration(name="GITHUB", type="github", host="example.com"))
    with pytest.raises(InvalidArgumentException):
        manager.get_repository("bitbucket")
    with pytest.raises(InvalidArgumentException):
        manager.remove_repository("bitbucket")


def test_remove_repository_persists(tmp_path: Path) -> None:
    database = tmp_path / "repositories.yml"
    manager = RepositoryManager.initialize(database)

    manager.remove_repository("gitlab")

    assert not RepositoryManager(database).repository_exists("gitlab")
    assert RepositoryManager(database).repository_exists("github")


def test_initialize_accepts_mapping_defaults(tmp_path: Path) -> None:
    manager = RepositoryManager.initialize(
        tmp_path / "repositories.yml",
        defaults=[{"name": "corp", "type": "gitlab", "host": "git.corp.example/"}],
    )

    assert manager.get_repository("corp").host == "git.corp.example"
