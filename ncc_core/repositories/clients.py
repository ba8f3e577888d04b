from __future__ import annotations

from typing import Any, Mapping, Protocol

from ..versions import LATEST
from .auth import Credential
from .backends import GITEA, GITHUB, GITLAB
from .hosted import HostedRepository
from .packagist import PackagistRepository
from .transport import RepositoryTransport
from .types import RepositoryConfiguration, RepositoryResult, RepositoryType


class RepositoryClient(Protocol):
    def fetch_source_archive(
        self,
        repository: RepositoryConfiguration,
        vendor: str,
        project: str,
        version: str = LATEST,
        authentication: Credential | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> RepositoryResult: ...

    def fetch_package(
        self,
        repository: RepositoryConfiguration,
        vendor: str,
        project: str,
        version: str = LATEST,
        authentication: Credential | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> RepositoryResult: ...


_HOSTED_POLICIES = {
    RepositoryType.GITHUB: GITHUB,
    RepositoryType.GITLAB: GITLAB,
    RepositoryType.GITEA: GITEA,
}


def client_for(
    repository: RepositoryConfiguration,
    transport: RepositoryTransport | None = None,
) -> RepositoryClient:
    transport = transport or RepositoryTransport()
    if repository.type is RepositoryType.PACKAGIST:
        return PackagistRepository(transport)
    return HostedRepository(_HOSTED_POLICIES[repository.type], transport)
