from __future__ import annotations

from typing import Any

import pytest
import requests
from requests.auth import HTTPBasicAuth

import ncc_core.repositories.transport as transport_mod
from ncc_core.config import NccConfig
from ncc_core.errors import (
    AuthenticationException,
    InvalidArgumentException,
    NetworkException,
    NotSupportedException,
    ResponseParsingException,
)
from ncc_core.repositories import (
    GITEA,
    GITHUB,
    GITLAB,
    PREFER_STATIC,
    AccessToken,
    AuthenticationType,
    HostedRepository,
    PackagistRepository,
    RepositoryConfiguration,
    RepositoryResultType,
    RepositoryTransport,
    RepositoryType,
    ResponseCache,
    UsernamePassword,
    client_for,
    credential_from_dict,
    gitlab_project_path,
    select_package_asset,
)


class _FakeResponse:
    def __init__(self, payload: Any = None, *, status_code: int = 200, text: str | None = None, url: str = "") -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else ""
        self.url = url

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeHttp:
    def __init__(self, routes: dict[str, _FakeResponse]) -> None:
        self.routes = routes
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append({"method": "GET", "url": url, **kwargs})
        if url not in self.routes:
            return _FakeResponse(status_code=404, text="missing")
        return self.routes[url]

    def head(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append({"method": "HEAD", "url": url, **kwargs})
        if url not in self.routes:
            return _FakeResponse(status_code=404, text="missing")
        return self.routes[url]


def _install(monkeypatch: pytest.MonkeyPatch, routes: dict[str, _FakeResponse]) -> _FakeHttp:
    fake = _FakeHttp(routes)
    monkeypatch.setattr(transport_mod.requests, "get", fake.get)
    monkeypatch.setattr(transport_mod.requests, "head", fake.head)
    return fake


GITHUB_REPO = RepositoryConfiguration(name="GitHub", type=RepositoryType.GITHUB, host="api.github.com")
GITLAB_REPO = RepositoryConfiguration(name="gitlab", type="gitlab", host="gitlab.com")
GITEA_REPO = RepositoryConfiguration(name="n64", type=RepositoryType.GITEA, host="git.n64.cc")
PACKAGIST_REPO = RepositoryConfiguration(name="packagist", type=RepositoryType.PACKAGIST, host="packagist.org")


def test_transport_retries_exactly_three_times(monkeypatch: pytest.MonkeyPatch) -> None:
    attempts: list[str] = []

    def _failing_get(url: str, **kwargs: Any) -> _FakeResponse:
        del kwargs
        attempts.append(url)
        raise requests.exceptions.ConnectionError("connection refused")

    monkeypatch.setattr(transport_mod.requests, "get", _failing_get)
    transport = RepositoryTransport(NccConfig(max_attempts=3))

    with pytest.raises(NetworkException):
        transport.get_json("https://api.github.com/repos/a/b/tags", headers={}, label="a/b")

    assert len(attempts) == 3


def test_transport_recovers_after_transient_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    outcomes: list[Any] = [requests.exceptions.Timeout("slow"), _FakeResponse([{"name": "v1"}])]

    def _flaky_get(url: str, **kwargs: Any) -> _FakeResponse:
        del url, kwargs
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(transport_mod.requests, "get", _flaky_get)

    assert RepositoryTransport().get_json("https://x/tags", headers={}, label="a/b") == [{"name": "v1"}]


@pytest.mark.parametrize(
    "status,error",
    [(401, AuthenticationException), (403, AuthenticationException), (404, NetworkException), (500, NetworkException)],
)
def test_status_codes_map_to_typed_errors(monkeypatch: pytest.MonkeyPatch, status: int, error: type) -> None:
    url = "https://api.github.com/repos/a/b/tags"
    fake = _install(monkeypatch, {url: _FakeResponse(status_code=status, text="upstream says no")})

    with pytest.raises(error) as excinfo:
        RepositoryTransport().get_json(url, headers={}, label="a/b")

    assert len(fake.calls) == 1
    if status == 500:
        assert "upstream says no" in str(excinfo.value)


def test_malformed_json_raises_parse_error(monkeypatch: pytest.MonkeyPatch) -> None:
    url = "https://api.github.com/repos/a/b/tags"
    _install(monkeypatch, {url: _FakeResponse(ValueError("Expecting value"))})

    with pytest.raises(ResponseParsingException):
        RepositoryTransport().get_json(url, headers={}, label="a/b")


def test_responses_are_memoized_per_endpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    url = "https://api.github.com/repos/a/b/tags"
    fake = _install(monkeypatch, {url: _FakeResponse([{"name": "v2.0.0"}])})
    repository = HostedRepository(GITHUB, RepositoryTransport())

    repository.get_tags(GITHUB_REPO, "a", "b")
    repository.get_tags(GITHUB_REPO, "a", "b")

    assert len(fake.calls) == 1
    assert repository.transport.cache.lookup(url) == (True, [{"name": "v2.0.0"}])


def test_github_latest_tag_trusts_server_order(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(
        monkeypatch,
        {"https://api.github.com/repos/acme/tool/tags": _FakeResponse([{"name": "v2.0.0"}, {"name": "v1.0.0"}])},
    )
    repository = HostedRepository(GITHUB, RepositoryTransport())

    assert repository.get_latest_tag(GITHUB_REPO, "acme", "tool") == "v2.0.0"


def test_github_empty_tag_list_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, {"https://api.github.com/repos/acme/tool/tags": _FakeResponse([])})

    with pytest.raises(NetworkException):
        HostedRepository(GITHUB, RepositoryTransport()).get_latest_tag(GITHUB_REPO, "acme", "tool")


def test_github_source_archive_prefers_release(monkeypatch: pytest.MonkeyPatch) -> None:
    base = "https://api.github.com/repos/acme/tool"
    fake = _install(
        monkeypatch,
        {
            f"{base}/releases": _FakeResponse([{"tag_name": "v2.0.0"}, {"tag_name": "v1.0.0"}]),
            f"{base}/releases/tags/v2.0.0": _FakeResponse(
                {"zipball_url": f"{base}/zipball/v2.0.0", "tarball_url": f"{base}/tarball/v2.0.0"}
            ),
        },
    )

    result = GITHUB_REPO.fetch_source_archive("acme", "tool", transport=RepositoryTransport())

    assert result.url == f"{base}/zipball/v2.0.0"
    assert result.type is RepositoryResultType.SOURCE_ARCHIVE
    assert result.version == "v2.0.0"
    assert fake.calls[0]["headers"]["Accept"] == "application/vnd.github+json"
    assert fake.calls[0]["headers"]["X-GitHub-Api-Version"] == "2022-11-28"
    assert fake.calls[0]["headers"]["User-Agent"] == "ncc"


def test_github_source_archive_falls_back_to_tag_redirect(monkeypatch: pytest.MonkeyPatch) -> None:
    base = "https://api.github.com/repos/acme/tool"
    fake = _install(
        monkeypatch,
        {
            f"{base}/zipball/refs/tags/v1.0.0": _FakeResponse(
                url="https://codeload.github.com/acme/tool/legacy.zip/refs/tags/v1.0.0"
            ),
        },
    )

    result = GITHUB_REPO.fetch_source_archive("acme", "tool", "v1.0.0", transport=RepositoryTransport())

    assert result.url == "https://codeload.github.com/acme/tool/legacy.zip/refs/tags/v1.0.0"
    assert result.version == "v1.0.0"
    assert [call["method"] for call in fake.calls] == ["GET", "HEAD"]
    assert fake.calls[1]["allow_redirects"] is True


def test_github_package_asset_selection(monkeypatch: pytest.MonkeyPatch) -> None:
    base = "https://api.github.com/repos/acme/tool"
    assets = [
        {"name": "tool.ncc", "browser_download_url": "https://dl/tool.ncc"},
        {"name": "tool_static.ncc", "browser_download_url": "https://dl/tool_static.ncc"},
        {"name": "checksums.txt", "browser_download_url": "https://dl/checksums.txt"},
    ]
    _install(monkeypatch, {f"{base}/releases/tags/v1.0.0": _FakeResponse({"assets": assets})})
    repository = HostedRepository(GITHUB, RepositoryTransport())

    plain = repository.fetch_package(GITHUB_REPO, "acme", "tool", "v1.0.0")
    static = repository.fetch_package(GITHUB_REPO, "acme", "tool", "v1.0.0", options={PREFER_STATIC: True})

    assert plain.url == "https://dl/tool_static.ncc"
    assert plain.type is RepositoryResultType.NCC_PACKAGE
    assert static.url == "https://dl/tool_static.ncc"


def test_select_package_asset() -> None:
    assets = [
        {"name": "tool-static.ncc"},
        {"name": "tool.ncc"},
        {"name": "tool.zip"},
    ]
    assert select_package_asset(assets)["name"] == "tool.ncc"
    assert select_package_asset(assets, prefer_static=True)["name"] == "tool-static.ncc"
    assert select_package_asset([{"name": "tool.zip"}]) is None


def test_github_package_without_ncc_asset_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    base = "https://api.github.com/repos/acme/tool"
    _install(monkeypatch, {f"{base}/releases/tags/v1.0.0": _FakeResponse({"assets": [{"name": "tool.zip"}]})})

    with pytest.raises(NetworkException):
        HostedRepository(GITHUB, RepositoryTransport()).fetch_package(GITHUB_REPO, "acme", "tool", "v1.0.0")


def test_gitlab_project_dot_encoding() -> None:
    assert gitlab_project_path("libs.config") == "libs%2Fconfig"
    assert GITLAB.tags_url("https://gitlab.com", "nosial", "libs.config") == (
        "https://gitlab.com/api/v4/projects/nosial%2Flibs%2Fconfig/repository/tags?order_by=updated&sort=desc"
    )


def test_gitlab_release_archive_and_assets(monkeypatch: pytest.MonkeyPatch) -> None:
    base = "https://gitlab.com/api/v4/projects/nosial%2Flibs%2Fconfig"
    _install(
        monkeypatch,
        {
            f"{base}/releases?order_by=released_at&sort=desc": _FakeResponse([{"tag_name": "1.1.0"}]),
            f"{base}/releases/1.1.0": _FakeResponse(
                {
                    "assets": {
                        "sources": [
                            {"format": "tar.gz", "url": "https://gitlab.com/a.tar.gz"},
                            {"format": "zip", "url": "https://gitlab.com/a.zip"},
                        ],
                        "links": [{"name": "config.ncc", "direct_asset_url": "https://gitlab.com/config.ncc"}],
                    }
                }
            ),
        },
    )
    repository = HostedRepository(GITLAB, RepositoryTransport())

    archive = repository.fetch_source_archive(GITLAB_REPO, "nosial", "libs.config")
    package = repository.fetch_package(GITLAB_REPO, "nosial", "libs.config")

    assert archive.url == "https://gitlab.com/a.zip"
    assert archive.version == "1.1.0"
    assert package.url == "https://gitlab.com/config.ncc"


def test_gitlab_tag_archive_fallback_uses_release_tag_names(monkeypatch: pytest.MonkeyPatch) -> None:
    base = "https://gitlab.com/api/v4/projects/nosial%2Flibs%2Fconfig"
    _install(
        monkeypatch,
        {
            f"{base}/repository/tags?order_by=updated&sort=desc": _FakeResponse(
                [{"name": "draft"}, {"name": "1.0.0", "release": {"tag_name": "1.0.0"}}]
            ),
        },
    )

    result = HostedRepository(GITLAB, RepositoryTransport()).fetch_source_archive(GITLAB_REPO, "nosial", "libs.config")

    assert result.url == f"{base}/repository/archive.zip?sha=1.0.0"
    assert result.version == "1.0.0"


def test_gitea_tag_archive_document(monkeypatch: pytest.MonkeyPatch) -> None:
    base = "https://git.n64.cc/api/v1/repos/nosial/ncc"
    _install(
        monkeypatch,
        {
            f"{base}/tags/2.0.0": _FakeResponse({"tarball_url": "https://git.n64.cc/ncc-2.0.0.tar.gz"}),
        },
    )

    result = HostedRepository(GITEA, RepositoryTransport()).fetch_source_archive(GITEA_REPO, "nosial", "ncc", "2.0.0")

    assert result.url == "https://git.n64.cc/ncc-2.0.0.tar.gz"


@pytest.mark.parametrize(
    "policy,repository,header,value",
    [
        (GITHUB, GITHUB_REPO, "Authorization", "Bearer secret-token"),
        (GITEA, GITEA_REPO, "Authorization", "token secret-token"),
        (GITLAB, GITLAB_REPO, "Private-Token", "secret-token"),
    ],
)
def test_access_token_injection(
    monkeypatch: pytest.MonkeyPatch,
    policy: Any,
    repository: RepositoryConfiguration,
    header: str,
    value: str,
) -> None:
    url = policy.tags_url(repository.base_url, "acme", "tool")
    fake = _install(monkeypatch, {url: _FakeResponse([])})

    HostedRepository(policy, RepositoryTransport()).get_tags(repository, "acme", "tool", AccessToken("secret-token"))

    assert fake.calls[0]["headers"][header] == value
    assert fake.calls[0]["auth"] is None


def test_username_password_uses_basic_auth(monkeypatch: pytest.MonkeyPatch) -> None:
    url = GITHUB.tags_url(GITHUB_REPO.base_url, "acme", "tool")
    fake = _install(monkeypatch, {url: _FakeResponse([])})

    HostedRepository(GITHUB, RepositoryTransport()).get_tags(
        GITHUB_REPO, "acme", "tool", UsernamePassword("alice", "hunter2")
    )

    auth = fake.calls[0]["auth"]
    assert isinstance(auth, HTTPBasicAuth)
    assert (auth.username, auth.password) == ("alice", "hunter2")
    assert "Authorization" not in fake.calls[0]["headers"]


def test_mismatched_credential_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, {})
    credential = AccessToken("secret", authentication_type=AuthenticationType.USERNAME_PASSWORD)

    with pytest.raises(AuthenticationException):
        HostedRepository(GITHUB, RepositoryTransport()).get_tags(GITHUB_REPO, "acme", "tool", credential)


def test_credential_from_dict() -> None:
    assert credential_from_dict({"type": "access_token", "token": "t"}) == AccessToken("t")
    assert credential_from_dict({"type": "username_password", "username": "u", "password": "p"}) == (
        UsernamePassword("u", "p")
    )
    assert "secret" not in repr(AccessToken("secret"))
    with pytest.raises(InvalidArgumentException):
        credential_from_dict({"type": "oauth"})


def _packagist_routes(versions: list[str]) -> dict[str, _FakeResponse]:
    return {
        "https://packagist.org/packages/acme/tool.json": _FakeResponse(
            {
                "package": {
                    "versions": {
                        version: {"dist": {"url": f"https://codeload/acme/tool/{version}.zip"}}
                        for version in versions
                    }
                }
            }
        )
    }


def test_packagist_latest_excludes_prereleases(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, _packagist_routes(["1.0.0", "1.1.0-beta", "1.2.0", "2.0.0-rc1"]))
    repository = PackagistRepository(RepositoryTransport())

    assert repository.get_latest_version(PACKAGIST_REPO, "acme", "tool") == "1.2.0"

    result = repository.fetch_source_archive(PACKAGIST_REPO, "acme", "tool")
    assert result.version == "1.2.0"
    assert result.url == "https://codeload/acme/tool/1.2.0.zip"
    assert result.type is RepositoryResultType.SOURCE_ARCHIVE


def test_packagist_resolves_constraints(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, _packagist_routes(["v1.0.0", "v1.4.2", "v2.0.0", "2.1.x-dev", "dev-main"]))
    repository = PackagistRepository(RepositoryTransport())

    assert repository.resolve_version(PACKAGIST_REPO, "acme", "tool", "^1.0") == "v1.4.2"
    assert repository.resolve_version(PACKAGIST_REPO, "acme", "tool", ">=1.0") == "v2.0.0"
    assert repository.resolve_version(PACKAGIST_REPO, "acme", "tool", "dev-main") == "dev-main"
    with pytest.raises(InvalidArgumentException):
        repository.resolve_version(PACKAGIST_REPO, "acme", "tool", "^3.0")


def test_packagist_does_not_serve_packages(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _install(monkeypatch, {})

    with pytest.raises(NotSupportedException):
        PACKAGIST_REPO.fetch_package("acme", "tool", transport=RepositoryTransport())
    assert fake.calls == []


def test_configuration_normalizes_and_dispatches() -> None:
    assert GITHUB_REPO.name == "github"
    assert GITLAB_REPO.type is RepositoryType.GITLAB
    assert RepositoryConfiguration(name="local", type="gitea", host="localhost:3000", ssl=False).base_url == (
        "http://localhost:3000"
    )
    assert isinstance(client_for(PACKAGIST_REPO), PackagistRepository)
    assert client_for(GITEA_REPO).policy is GITEA
    with pytest.raises(InvalidArgumentException):
        RepositoryConfiguration(name="x", type="svn", host="example.com")


def test_prefer_static_defaults_from_config(monkeypatch: pytest.MonkeyPatch) -> None:
    base = "https://api.github.com/repos/acme/tool"
    assets = [
        {"name": "tool-static.ncc", "browser_download_url": "https://dl/tool-static.ncc"},
        {"name": "tool.ncc", "browser_download_url": "https://dl/tool.ncc"},
    ]
    _install(monkeypatch, {f"{base}/releases/tags/v1.0.0": _FakeResponse({"assets": assets})})
    repository = HostedRepository(GITHUB, RepositoryTransport(NccConfig(prefer_static=True)))

    assert repository.fetch_package(GITHUB_REPO, "acme", "tool", "v1.0.0").url == "https://dl/tool-static.ncc"
    assert (
        repository.fetch_package(GITHUB_REPO, "acme", "tool", "v1.0.0", options={PREFER_STATIC: False}).url
        == "https://dl/tool.ncc"
    )


def test_response_cache_distinguishes_cached_none() -> None:
    cache = ResponseCache()
    cache.set("https://x/a", None)

    assert cache.lookup("https://x/a") == (True, None)
    assert cache.lookup("https://x/b") == (False, None)
