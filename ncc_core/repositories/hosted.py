"""Generic adapter for git hosting APIs (GitHub, GitLab, Gitea).

The control flow is shared; everything that differs between hosts (endpoint
shapes, headers, token header, payload field names, asset lookup) lives in a
:class:`BackendPolicy`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

from ..errors import NccError, NetworkException
from ..versions import LATEST
from .auth import Credential, apply_credential
from .transport import RepositoryTransport
from .types import RepositoryConfiguration, RepositoryResult, RepositoryResultType

logger = logging.getLogger(__name__)

PREFER_STATIC = "prefer_static"
PACKAGE_ASSET_RE = re.compile(r"\.ncc$")
STATIC_PACKAGE_ASSET_RE = re.compile(r"(_static|-static)\.ncc$")


class TagArchiveMode(str, Enum):
    DIRECT = "direct"
    REDIRECT = "redirect"
    DOCUMENT = "document"


EndpointBuilder = Callable[[str, str, str], str]
ItemEndpointBuilder = Callable[[str, str, str, str], str]


@dataclass(frozen=True)
class BackendPolicy:
    name: str
    token_header: str
    token_prefix: str
    tags_url: EndpointBuilder
    tag_names: Callable[[Any], list[str]]
    tag_archive_url: ItemEndpointBuilder
    tag_archive_mode: TagArchiveMode
    releases_url: EndpointBuilder
    release_names: Callable[[Any], list[str]]
    release_url: ItemEndpointBuilder
    release_archive: Callable[[Any], str | None]
    release_assets: Callable[[Any], Sequence[Mapping[str, Any]] | None]
    asset_url: Callable[[Mapping[str, Any]], str | None]
    headers: Mapping[str, str] = field(default_factory=dict)


def zip_or_tar_url(payload: Any) -> str | None:
    if not isinstance(payload, Mapping):
        return None
    return payload.get("zipball_url") or payload.get("tarball_url") or None


def select_package_asset(
    assets: Sequence[Mapping[str, Any]],
    prefer_static: bool = False,
) -> Mapping[str, Any] | None:
    """Pick the package asset from a release; later matches win."""
    preferred: Mapping[str, Any] | None = None
    fallback: Mapping[str, Any] | None = None
    for asset in assets:
        if not isinstance(asset, Mapping):
            continue
        name = str(asset.get("name") or "")
        if prefer_static and STATIC_PACKAGE_ASSET_RE.search(name):
            preferred = asset
        elif PACKAGE_ASSET_RE.search(name):
            fallback = asset
    return preferred or fallback


class HostedRepository:
    def __init__(self, policy: BackendPolicy, transport: RepositoryTransport) -> None:
        self.policy = policy
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
        try:
            return self.get_release_archive(repository, vendor, project, version, authentication)
        except NccError as exc:
            logger.debug(
                "release archive unavailable for %s/%s=%s, falling back to tag archive: %s",
                vendor,
                project,
                version,
                exc,
            )
        return self.get_tag_archive(repository, vendor, project, version, authentication)

    def fetch_package(
        self,
        repository: RepositoryConfiguration,
        vendor: str,
        project: str,
        version: str = LATEST,
        authentication: Credential | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> RepositoryResult:
        return self.get_release_package(repository, vendor, project, version, authentication, options)

    def get_tags(
        self,
        repository: RepositoryConfiguration,
        group: str,
        project: str,
        authentication: Credential | None = None,
    ) -> list[str]:
        url = self.policy.tags_url(repository.base_url, group, project)
        return self.policy.tag_names(self._get_json(url, group, project, authentication))

    def get_latest_tag(
        self,
        repository: RepositoryConfiguration,
        group: str,
        project: str,
        authentication: Credential | None = None,
    ) -> str:
        tags = self.get_tags(repository, group, project, authentication)
        if not tags:
            raise NetworkException(f"no tags found for {group}/{project}")
        return tags[0]

    def get_releases(
        self,
        repository: RepositoryConfiguration,
        group: str,
        project: str,
        authentication: Credential | None = None,
    ) -> list[str]:
        url = self.policy.releases_url(repository.base_url, group, project)
        return self.policy.release_names(self._get_json(url, group, project, authentication))

    def get_latest_release(
        self,
        repository: RepositoryConfiguration,
        group: str,
        project: str,
        authentication: Credential | None = None,
    ) -> str:
        releases = self.get_releases(repository, group, project, authentication)
        if not releases:
            raise NetworkException(f"no releases found for {group}/{project}")
        return releases[0]

    def get_tag_archive(
        self,
        repository: RepositoryConfiguration,
        group: str,
        project: str,
        tag: str,
        authentication: Credential | None = None,
    ) -> RepositoryResult:
        if tag == LATEST:
            tag = self.get_latest_tag(repository, group, project, authentication)
        url = self.policy.tag_archive_url(repository.base_url, group, project, tag)
        logger.debug("resolving tag archive for %s/%s=%s from %s", group, project, tag, url)

        mode = self.policy.tag_archive_mode
        if mode is TagArchiveMode.DIRECT:
            archive_url: str | None = url
        elif mode is TagArchiveMode.REDIRECT:
            headers = {"User-Agent": self.transport.user_agent}
            auth = apply_credential(
                authentication,
                headers,
                token_header=self.policy.token_header,
                token_prefix=self.policy.token_prefix,
            )
            archive_url = self.transport.resolve_redirect(
                url, headers=headers, auth=auth, label=f"{group}/{project}"
            )
        else:
            archive_url = zip_or_tar_url(self._get_json(url, group, project, authentication))

        if not archive_url:
            raise NetworkException(f"failed to get tag archive url for {group}/{project}={tag}")
        return RepositoryResult(url=archive_url, type=RepositoryResultType.SOURCE_ARCHIVE, version=tag)

    def get_release_archive(
        self,
        repository: RepositoryConfiguration,
        group: str,
        project: str,
        release: str,
        authentication: Credential | None = None,
    ) -> RepositoryResult:
        if release == LATEST:
            release = self.get_latest_release(repository, group, project, authentication)
        url = self.policy.release_url(repository.base_url, group, project, release)
        archive_url = self.policy.release_archive(self._get_json(url, group, project, authentication))
        if not archive_url:
            raise NetworkException(f"failed to get release archive url for {group}/{project}={release}")
        return RepositoryResult(url=archive_url, type=RepositoryResultType.SOURCE_ARCHIVE, version=release)

    def get_release_package(
        self,
        repository: RepositoryConfiguration,
        group: str,
        project: str,
        release: str,
        authentication: Credential | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> RepositoryResult:
        if release == LATEST:
            release = self.get_latest_release(repository, group, project, authentication)
        url = self.policy.release_url(repository.base_url, group, project, release)
        assets = self.policy.release_assets(self._get_json(url, group, project, authentication))
        if assets is None:
            raise NetworkException(f"failed to get release package for {group}/{project}={release}: no assets found")

        prefer_static = bool((options or {}).get(PREFER_STATIC, self.transport.config.prefer_static))
        asset = select_package_asset(assets, prefer_static)
        if asset is None:
            raise NetworkException(f"no ncc package found for {group}/{project}={release}")
        asset_url = self.policy.asset_url(asset)
        if not asset_url:
            raise NetworkException(f"no download url found for {group}/{project}={release}")
        return RepositoryResult(url=asset_url, type=RepositoryResultType.NCC_PACKAGE, version=release)

    def _get_json(
        self,
        url: str,
        group: str,
        project: str,
        authentication: Credential | None,
    ) -> Any:
        headers = {**self.policy.headers, "User-Agent": self.transport.user_agent}
        auth = apply_credential(
            authentication,
            headers,
            token_header=self.policy.token_header,
            token_prefix=self.policy.token_prefix,
        )
        return self.transport.get_json(url, headers=headers, auth=auth, label=f"{group}/{project}")
