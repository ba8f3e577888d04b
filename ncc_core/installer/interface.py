"""Installer seam: turns package entries into bytes written on disk."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Protocol

from ..errors import ComponentChecksumException, ComponentDecodeException, ResourceChecksumException
from ..package import Component, ComponentDataType, Resource
from ..paths import InstallationPaths

logger = logging.getLogger(__name__)


class Installer(Protocol):
    def pre_install(self, paths: InstallationPaths) -> None: ...

    def process_component(self, component: Component) -> bytes | None: ...

    def process_resource(self, resource: Resource) -> bytes | None: ...

    def post_install(self, paths: InstallationPaths) -> None: ...


class DefaultInstaller:
    """Writes components and resources as-is; hooks are no-ops."""

    def pre_install(self, paths: InstallationPaths) -> None:
        logger.debug("pre-install for %s", paths.install_path)

    def process_component(self, component: Component) -> bytes | None:
        if component.data is None:
            return None
        if not component.validate_checksum():
            raise ComponentChecksumException(
                f"checksum validation failed for component {component.name}, the package may be corrupted"
            )
        if component.data_type in {ComponentDataType.PLAIN, ComponentDataType.BINARY}:
            return component.data
        if component.data_type is ComponentDataType.BASE64_ENCODED:
            try:
                return base64.b64decode(component.data, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise ComponentDecodeException(f"cannot decode component {component.name}: {exc}") from exc
        raise ComponentDecodeException(
            f"cannot decode component {component.name}: unsupported data type {component.data_type.value!r}"
        )

    def process_resource(self, resource: Resource) -> bytes | None:
        if not resource.validate_checksum():
            raise ResourceChecksumException(
                f"checksum validation failed for resource {resource.name}, the package may be corrupted"
            )
        return resource.data

    def post_install(self, paths: InstallationPaths) -> None:
        logger.debug("post-install for %s", paths.install_path)
