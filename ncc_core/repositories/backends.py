"""Endpoint shapes and payload conventions of the supported git hosts."""

from __future__ import annotations

from typing import Any, Mapping, Sequence
from urllib.parse import quote

from ..errors import NetworkException
from .hosted import BackendPolicy, TagArchiveMode, zip_or_tar_url


def _encode(value: str) -> str:
    return quote(value, safe="")


def _names(payload: Any, field_name: str) -> list[str]:
    if not isinstance(payload, list):
        return []
    return [str(item[field_name]) for item in payload if isinstance(item, Mapping) and item.get(field_name)]


def _assets(payload: Any) -> Sequence[Mapping[str, Any]] | None:
    if not isinstance(payload, Mapping) or not isinstance(payload.get("assets"), list):
        return None
    return payload["assets"]


def _browser_download_url(asset: Mapping[str, Any]) -> str | None:
    return asset.get("browser_download_url")


# GitHub

def _github_repo(base: str, group: str, project: str) -> str:
    return f"{base}/repos/{group}/{project}"


GITHUB = BackendPolicy(
    name="github",
    headers={
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    },
    token_header="Authorization",
    token_prefix="Bearer ",
    tags_url=lambda base, group, project: f"{_github_repo(base, group, project)}/tags",
    tag_names=lambda payload: _names(payload, "name"),
    tag_archive_url=lambda base, group, project, tag: (
        f"{_github_repo(base, group, project)}/zipball/refs/tags/{tag}"
    ),
    tag_archive_mode=TagArchiveMode.REDIRECT,
    releases_url=lambda base, group, project: f"{_github_repo(base, group, project)}/releases",
    release_names=lambda payload: _names(payload, "tag_name"),
    release_url=lambda base, group, project, release: (
        f"{_github_repo(base, group, project)}/releases/tags/{release}"
    ),
    release_archive=zip_or_tar_url,
    release_assets=_assets,
    asset_url=_browser_download_url,
)


# Gitea

def _gitea_repo(base: str, group: str, project: str) -> str:
    return f"{base}/api/v1/repos/{_encode(group)}/{_encode(project)}"


GITEA = BackendPolicy(
    name="gitea",
    headers={"Accept": "application/json"},
    token_header="Authorization",
    token_prefix="token ",
    tags_url=lambda base, group, project: f"{_gitea_repo(base, group, project)}/tags",
    tag_names=lambda payload: _names(payload, "name"),
    tag_archive_url=lambda base, group, project, tag: f"{_gitea_repo(base, group, project)}/tags/{_encode(tag)}",
    tag_archive_mode=TagArchiveMode.DOCUMENT,
    releases_url=lambda base, group, project: f"{_gitea_repo(base, group, project)}/releases",
    release_names=lambda payload: _names(payload, "tag_name"),
    release_url=lambda base, group, project, release: (
        f"{_gitea_repo(base, group, project)}/releases/tags/{_encode(release)}"
    ),
    release_archive=zip_or_tar_url,
    release_assets=_assets,
    asset_url=_browser_download_url,
)


# GitLab

def gitlab_project_path(project: str) -> str:
    """GitLab nests projects in subgroups with dots: ``libs.config`` -> ``libs%2Fconfig``."""
    return _encode(project.replace(".", "/"))


def _gitlab_project(base: str, group: str, project: str) -> str:
    return f"{base}/api/v4/projects/{group}%2F{gitlab_project_path(project)}"


def _gitlab_tag_names(payload: Any) -> list[str]:
    if not isinstance(payload, list):
        return []
    names: list[str] = []
    for tag in payload:
        release = tag.get("release") if isinstance(tag, Mapping) else None
        if isinstance(release, Mapping) and release.get("tag_name"):
            names.append(str(release["tag_name"]))
    return names


def _gitlab_release_archive(payload: Any) -> str | None:
    assets = payload.get("assets") if isinstance(payload, Mapping) else None
    sources = assets.get("sources") if isinstance(assets, Mapping) else None
    if not isinstance(sources, list):
        raise NetworkException("no source assets found in release")
    urls: dict[str, str] = {}
    formats: list[str] = []
    for source in sources:
        if not isinstance(source, Mapping) or not source.get("format") or not source.get("url"):
            continue
        source_format = str(source["format"])
        formats.append(source_format)
        urls.setdefault(source_format, str(source["url"]))
    if "zip" in urls:
        return urls["zip"]
    if "tar" in urls:
        return urls["tar"]
    if formats:
        raise NetworkException(f"unknown source asset format {formats[0]!r}")
    return None


def _gitlab_assets(payload: Any) -> Sequence[Mapping[str, Any]] | None:
    assets = payload.get("assets") if isinstance(payload, Mapping) else None
    links = assets.get("links") if isinstance(assets, Mapping) else None
    return links if isinstance(links, list) else None


def _gitlab_asset_url(asset: Mapping[str, Any]) -> str | None:
    return asset.get("direct_asset_url") or asset.get("url")


GITLAB = BackendPolicy(
    name="gitlab",
    headers={"Content-Type": "application/json", "Accept": "application/json"},
    token_header="Private-Token",
    token_prefix="",
    tags_url=lambda base, group, project: (
        f"{_gitlab_project(base, group, project)}/repository/tags?order_by=updated&sort=desc"
    ),
    tag_names=_gitlab_tag_names,
    tag_archive_url=lambda base, group, project, tag: (
        f"{_gitlab_project(base, group, project)}/repository/archive.zip?sha={_encode(tag)}"
    ),
    tag_archive_mode=TagArchiveMode.DIRECT,
    releases_url=lambda base, group, project: (
        f"{_gitlab_project(base, group, project)}/releases?order_by=released_at&sort=desc"
    ),
    release_names=lambda payload: _names(payload, "tag_name"),
    release_url=lambda base, group, project, release: (
        f"{_gitlab_project(base, group, project)}/releases/{_encode(release)}"
    ),
    release_archive=_gitlab_release_archive,
    release_assets=_gitlab_assets,
    asset_url=_gitlab_asset_url,
)
