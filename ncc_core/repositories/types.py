"""Repository configuration and the normalized adapter result."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping

from ..errors import InvalidArgumentException
from ..versions import LATEST

if TYPE_CHECKING:
    from .auth import Credential
    from .transport import RepositoryTransport


class RepositoryType(str, Enum):
    GITHUB = "github"
    GITLAB = "gitlab"
    GITEA = "gitea"
    PACKAGIST = "packagist"


class RepositoryResultType(str, Enum):
    SOURCE_ARCHIVE = "source"
    NCC_PACKAGE = "package"


@dataclass(frozen=True)
class RepositoryResult:
    url: str
    type: RepositoryResultType
    version: str


@dataclass(frozen=True)
class RepositoryConfiguration:
    name: str
    type: RepositoryType
    host: str
    ssl: bool = True

    def __post_init__(self) -> None:
        name = str(self.name or "").strip().lower()
        if not name:
            raise InvalidArgumentException("repository name cannot be empty")
        host = str(self.host or "").strip().rstrip("/")
        if not host:
            raise InvalidArgumentException(f"repository '{name}' has no host")
        try:
            repository_type = RepositoryType(str(getattr(self.type, "value", self.type)).lower())
        except ValueError as exc:
            raise InvalidArgumentException(f"unknown repository type: {self.type!r}") from exc
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "host", host)
        object.__setattr__(self, "type", repository_type)

    @property
    def scheme(self) -> str:
        return "https" if self.ssl else "http"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}"

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.type.value, "host": self.host, "ssl": self.ssl}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RepositoryConfiguration":
        return cls(
            name=str(data.get("name") or ""),
            type=data.get("type") or "",
            host=str(data.get("host") or ""),
            ssl=bool(data.get("ssl", True)),
        )

    def fetch_source_archive(
        self,
        vendor: str,
        project: str,
        version: str = LATEST,
        authentication: Credential | None = None,
        options: Mapping[str, Any] | None = None,
        *,
        transport: RepositoryTransport | None = None,
    ) -> RepositoryResult:
        from .clients import client_for

        return client_for(self, transport).fetch_source_archive(
            self, vendor, project, version, authentication, options
        )

    def fetch_package(
        self,
        vendor: str,
        project: str,
        version: str = LATEST,
        authentication: Credential | None = None,
        options: Mapping[str, Any] | None = None,
        *,
        transport: RepositoryTransport | None = None,
    ) -> RepositoryResult:
        from .clients import client_for

        return client_for(self, transport).fetch_package(self, vendor, project, version, authentication, options)
