"""Remote repository adapters and their shared transport."""

from .auth import (
    AccessToken,
    AuthenticationType,
    Credential,
    UsernamePassword,
    apply_credential,
    credential_from_dict,
)
from .backends import GITEA, GITHUB, GITLAB, gitlab_project_path
from .cache import ResponseCache
from .clients import RepositoryClient, client_for
from .hosted import PREFER_STATIC, BackendPolicy, HostedRepository, TagArchiveMode, select_package_asset
from .manager import DEFAULT_REPOSITORIES, RepositoryManager
from .packagist import PackagistRepository
from .transport import RepositoryTransport
from .types import RepositoryConfiguration, RepositoryResult, RepositoryResultType, RepositoryType

__all__ = [
    "AccessToken",
    "AuthenticationType",
    "BackendPolicy",
    "Credential",
    "DEFAULT_REPOSITORIES",
    "GITEA",
    "GITHUB",
    "GITLAB",
    "HostedRepository",
    "PREFER_STATIC",
    "PackagistRepository",
    "RepositoryClient",
    "RepositoryConfiguration",
    "RepositoryManager",
    "RepositoryResult",
    "RepositoryResultType",
    "RepositoryTransport",
    "RepositoryType",
    "ResponseCache",
    "TagArchiveMode",
    "UsernamePassword",
    "apply_credential",
    "client_for",
    "credential_from_dict",
    "gitlab_project_path",
    "select_package_asset",
]
