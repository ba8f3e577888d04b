"""Installed package lock store."""

from .entries import DependencyEntry, PackageEntry, VersionEntry
from .manager import LOCK_FILENAME, PackageLockManager
from .store import PACKAGE_LOCK_VERSION, PackageLock

__all__ = [
    "DependencyEntry",
    "LOCK_FILENAME",
    "PACKAGE_LOCK_VERSION",
    "PackageEntry",
    "PackageLock",
    "PackageLockManager",
    "VersionEntry",
]
