"""Core of the ncc package manager: archives, package containers, lock and repositories."""

from .config import NccConfig, load_config
from .errors import (
    AuthenticationException,
    ComponentChecksumException,
    ComponentDecodeException,
    InvalidArgumentException,
    NccError,
    NetworkException,
    NotSupportedException,
    OperationException,
    PackageLockException,
    PackageParsingException,
    PathTraversalException,
    ResourceChecksumException,
    ResponseParsingException,
    VersionNotFoundException,
)
from .paths import InstallationPaths

__all__ = [
    "AuthenticationException",
    "ComponentChecksumException",
    "ComponentDecodeException",
    "InstallationPaths",
    "InvalidArgumentException",
    "NccConfig",
    "NccError",
    "NetworkException",
    "NotSupportedException",
    "OperationException",
    "PackageLockException",
    "PackageParsingException",
    "PathTraversalException",
    "ResourceChecksumException",
    "ResponseParsingException",
    "VersionNotFoundException",
    "load_config",
]
