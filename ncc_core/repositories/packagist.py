"""Adapter for Packagist-style Composer registries."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping
from urllib.parse import quote

from ..errors import InvalidArgumentException, NetworkException, NotSupportedException
from ..versions import LATEST, satisfies, sort_versions
from .auth import Credential
from .transport import RepositoryTransport
from .types import RepositoryConfiguration, RepositoryResult, RepositoryResultType

logger = logging.getLogger(__name__)

PRERELEASE_RE = re.compile(r"-alpha|-beta|-rc|dev", re.IGNORECASE)
DEV_MARKER = "-dev"


class PackagistRepository:
    headers = {"Accept": "application/json"}

    def __init__(self, transport: RepositoryTransport) -> None:
        self.transport = transport

    def fetch_source_archive(
        self,
        repository: RepositoryConfiguration,
        vendor: str,
        project: str,
        version: str = LATEST,
        authentication: Credential | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> RepositoryResult:
        if version == LATEST:
            version = self.get_latest_version(repository, vendor, project)
        version = self.resolve_version(repository, vendor, project, version)
        logger.debug("fetching archive %s/%s version %s", vendor, project, version)

        entry = self._versions(repository, vendor, project).get(version)
        dist = entry.get("dist") if isinstance(entry, Mapping) else None
        if not isinstance(dist, Mapping) or not dist.get("url"):
            raise NetworkException(f"version {version} of {vendor}/{project} does not have a dist URL")
        return RepositoryResult(url=str(dist["url"]), type=RepositoryResultType.SOURCE_ARCHIVE, version=version)

    def fetch_package(
        self,
        repository: RepositoryConfiguration,
        vendor: str,
        project: str,
        version: str = LATEST,
        authentication: Credential | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> RepositoryResult:
        raise NotSupportedException("fetching ncc packages from Packagist is not supported")

    def get_versions(self, repository: RepositoryConfiguration, vendor: str, project: str) -> list[str]:
        return list(self._versions(repository, vendor, project).keys())

    def get_latest_version(self, repository: RepositoryConfiguration, vendor: str, project: str) -> str:
        stable = [item for item in self.get_versions(repository, vendor, project) if not PRERELEASE_RE.search(item)]
        ordered = sort_versions(stable, descending=True)
        if not ordered:
            raise NetworkException(f"failed to resolve latest version for {vendor}/{project}")
        return ordered[0]

    def resolve_version(
        self,
        repository: RepositoryConfiguration,
        vendor: str,
        project: str,
        version: str,
    ) -> str:
        wants_dev = DEV_MARKER in version.lower()
        for candidate in sort_versions(self.get_versions(repository, vendor, project), descending=True):
            if not wants_dev and DEV_MARKER in candidate.lower():
                continue
            if satisfies(candidate, version):
                return candidate
        raise InvalidArgumentException(f"version {version} for {vendor}/{project} does not exist")

    def _versions(self, repository: RepositoryConfiguration, vendor: str, project: str) -> Mapping[str, Any]:
        url = f"{repository.base_url}/packages/{quote(vendor, safe='')}/{quote(project, safe='')}.json"
        headers = {**self.headers, "User-Agent": self.transport.user_agent}
        payload = self.transport.get_json(url, headers=headers, label=f"{vendor}/{project}")
        package = payload.get("package") if isinstance(payload, Mapping) else None
        versions = package.get("versions") if isinstance(package, Mapping) else None
        if not isinstance(versions, Mapping):
            raise NetworkException(f'invalid response from {vendor}/{project}, missing "package.versions" key')
        return versions
