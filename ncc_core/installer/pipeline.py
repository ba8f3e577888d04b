"""Fixed-order installation of a decoded package into an install path.

Stages run as pre-install, components, resources, post-install and lock
registration. Any failure aborts the remaining stages and files already
written stay on disk.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..errors import OperationException, VersionNotFoundException
from ..lock import PackageLockManager, VersionEntry
from ..package import Package
from ..paths import InstallationPaths
from ..security import safe_output_path
from .interface import DefaultInstaller, Installer

logger = logging.getLogger(__name__)

SHADOW_PACKAGE_NAME = "pkg"


def install_package(
    package: Package,
    install_path: Path | str,
    *,
    installer: Installer | None = None,
    lock_manager: PackageLockManager | None = None,
    overwrite: bool = False,
) -> InstallationPaths:
    installer = installer or DefaultInstaller()
    paths = InstallationPaths(Path(install_path))
    if lock_manager is not None:
        _release_existing(package, lock_manager, overwrite)
    logger.debug(
        "installing %s=%s into %s",
        package.assembly.package,
        package.assembly.version,
        paths.install_path,
    )
    try:
        paths.create()
    except OSError as exc:
        raise OperationException(f"unable to create installation paths under {paths.install_path}: {exc}") from exc

    installer.pre_install(paths)
    # the installed copy keeps execution unit payloads that the lock drops
    package.save(paths.data_path / SHADOW_PACKAGE_NAME)
    for component in package.components:
        data = installer.process_component(component)
        if data is not None:
            _write_entry(paths.source_path, component.name, data)
    for resource in package.resources:
        data = installer.process_resource(resource)
        if data is not None:
            _write_entry(paths.source_path, resource.name, data)
    installer.post_install(paths)

    if lock_manager is not None:
        lock_manager.lock.add_package(package, paths.install_path, overwrite=overwrite)
        lock_manager.save()
    return paths


def load_installed_package(entry: VersionEntry) -> Package:
    return Package.load(entry.install_paths().data_path / SHADOW_PACKAGE_NAME)


def uninstall_package(name: str, version: str, lock_manager: PackageLockManager) -> None:
    entry = lock_manager.lock.get_version(name, version)
    if entry is None:
        raise VersionNotFoundException(f"version {version} of {name} is not installed")
    logger.debug("uninstalling %s=%s from %s", name, entry.version, entry.location)
    _remove_installation(Path(entry.location))
    lock_manager.lock.remove_package_version(name, entry.version)
    lock_manager.save()


def _write_entry(source_path: Path, name: str, data: bytes) -> None:
    target = safe_output_path(source_path, name)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        raise OperationException(f"unable to write {target}: {exc}") from exc


def _release_existing(package: Package, lock_manager: PackageLockManager, overwrite: bool) -> None:
    name = package.assembly.package
    entry = lock_manager.lock.get_version(name, package.assembly.version)
    if entry is None:
        return
    if not overwrite:
        raise OperationException(
            f"{name}={entry.version} is already installed at {entry.location}, pass overwrite=True to reinstall"
        )
    logger.debug("removing previous installation of %s=%s from %s", name, entry.version, entry.location)
    _remove_installation(Path(entry.location))


def _remove_installation(install_path: Path) -> None:
    if not install_path.exists():
        return
    try:
        shutil.rmtree(install_path)
    except OSError as exc:
        raise OperationException(f"unable to remove {install_path}: {exc}") from exc
