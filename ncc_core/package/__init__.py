"""Package container model and codec."""

from .assembly import Assembly, DependencyReference, PackageSource
from .component import Component, ComponentDataType, sha1_hex
from .container import Package
from .execution import ExecuteOptions, ExecutionPolicy, ExecutionUnit
from .magic_bytes import (
    MAGIC_BYTES_LENGTH,
    PACKAGE_MAGIC,
    PACKAGE_STRUCTURE_VERSION,
    EncoderType,
    MagicBytes,
)
from .metadata import CompilerExtension, InstallerHooks, Metadata, UpdateSource, UpdateSourceRepository
from .resource import Resource

__all__ = [
    "Assembly",
    "CompilerExtension",
    "Component",
    "ComponentDataType",
    "DependencyReference",
    "EncoderType",
    "ExecuteOptions",
    "ExecutionPolicy",
    "ExecutionUnit",
    "InstallerHooks",
    "MAGIC_BYTES_LENGTH",
    "MagicBytes",
    "Metadata",
    "PACKAGE_MAGIC",
    "PACKAGE_STRUCTURE_VERSION",
    "Package",
    "PackageSource",
    "Resource",
    "UpdateSource",
    "UpdateSourceRepository",
    "sha1_hex",
]
