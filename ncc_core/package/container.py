"""In-memory package container and its binary encode/decode routines."""

from __future__ import annotations

import base64
import gzip
import json
import logging
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import msgpack

from ..bytecode import key, lookup
from ..errors import (
    ComponentChecksumException,
    InvalidArgumentException,
    NotSupportedException,
    OperationException,
    PackageParsingException,
    ResourceChecksumException,
)
from .assembly import Assembly, DependencyReference
from .component import Component
from .execution import ExecutionUnit
from .magic_bytes import MAGIC_BYTES_LENGTH, EncoderType, MagicBytes
from .metadata import Metadata
from .resource import Resource

logger = logging.getLogger(__name__)

_JSON_BYTES_KEY = "__bytes__"


@dataclass
class Package:
    assembly: Assembly
    metadata: Metadata = field(default_factory=Metadata)
    magic_bytes: MagicBytes = field(default_factory=MagicBytes)
    dependencies: list[DependencyReference] = field(default_factory=list)
    components: list[Component] = field(default_factory=list)
    resources: list[Resource] = field(default_factory=list)
    execution_units: list[ExecutionUnit] = field(default_factory=list)

    def get_component(self, name: str) -> Component | None:
        return next((item for item in self.components if item.name == name), None)

    def get_resource(self, name: str) -> Resource | None:
        return next((item for item in self.resources if item.name == name), None)

    def get_execution_unit(self, name: str) -> ExecutionUnit | None:
        return next((item for item in self.execution_units if item.name == name), None)

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key("assembly", bytecode): self.assembly.to_dict(bytecode),
            key("header", bytecode): self.metadata.to_dict(bytecode),
            key("dependencies", bytecode): [item.to_dict(bytecode) for item in self.dependencies],
            key("execution_units", bytecode): [item.to_dict(bytecode) for item in self.execution_units],
            key("resources", bytecode): [item.to_dict(bytecode) for item in self.resources],
            key("components", bytecode): [item.to_dict(bytecode) for item in self.components],
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "Package":
        assembly = lookup(data, "assembly")
        if not isinstance(assembly, Mapping):
            raise PackageParsingException("package payload has no assembly section")
        header = lookup(data, "header")
        try:
            return cls(
                assembly=Assembly.from_dict(assembly),
                metadata=Metadata.from_dict(header) if isinstance(header, Mapping) else Metadata(),
                dependencies=[DependencyReference.from_dict(item) for item in lookup(data, "dependencies") or []],
                components=[Component.from_dict(item) for item in lookup(data, "components") or []],
                resources=[Resource.from_dict(item) for item in lookup(data, "resources") or []],
                execution_units=[ExecutionUnit.from_dict(item) for item in lookup(data, "execution_units") or []],
            )
        except (InvalidArgumentException, TypeError, ValueError) as exc:
            raise PackageParsingException(f"invalid package payload: {exc}") from exc

    def encode(self) -> bytes:
        magic = self.magic_bytes
        if magic.encrypted:
            raise NotSupportedException("encrypted packages are not supported")
        body = _encode_payload(self.to_dict(bytecode=magic.encoder is EncoderType.COMPACT), magic.encoder)
        if magic.compressed:
            body = gzip.compress(body, compresslevel=9)
        return magic.to_bytes() + body

    @classmethod
    def decode(cls, data: bytes, *, validate: bool = True) -> "Package":
        magic = MagicBytes.parse(data)
        body = data[MAGIC_BYTES_LENGTH:]
        logger.debug(
            "decoding package encoder=%s compressed=%s encrypted=%s size=%s",
            magic.encoder.value,
            magic.compressed,
            magic.encrypted,
            len(body),
        )
        if magic.encrypted:
            raise NotSupportedException("encrypted packages are not supported")
        if magic.compressed:
            try:
                body = gzip.decompress(body)
            except (OSError, EOFError, zlib.error) as exc:
                raise PackageParsingException("unable to decompress package payload") from exc

        payload = _decode_payload(body, magic.encoder)
        if not isinstance(payload, Mapping):
            raise PackageParsingException("package payload is not a map")
        package = cls.from_dict(payload)
        package.magic_bytes = magic
        if validate:
            package.validate()
        return package

    def validate(self) -> None:
        for component in self.components:
            if component.data is not None and not component.validate_checksum():
                raise ComponentChecksumException(
                    f"checksum validation failed for component {component.name}, the package may be corrupted"
                )
        for resource in self.resources:
            if not resource.validate_checksum():
                raise ResourceChecksumException(
                    f"checksum validation failed for resource {resource.name}, the package may be corrupted"
                )

    def save(self, path: Path | str) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.encode())
        logger.debug("saved package %s=%s to %s", self.assembly.package, self.assembly.version, target)
        return target

    @classmethod
    def load(cls, path: Path | str, *, validate: bool = True) -> "Package":
        source = Path(path)
        try:
            data = source.read_bytes()
        except OSError as exc:
            raise OperationException(f"unable to read package file {source}: {exc}") from exc
        return cls.decode(data, validate=validate)


def _encode_payload(payload: dict[Any, Any], encoder: EncoderType) -> bytes:
    if encoder is EncoderType.COMPACT:
        return msgpack.packb(payload, use_bin_type=True)
    if encoder is EncoderType.JSON:
        return json.dumps(payload, default=_json_default, ensure_ascii=False).encode("utf-8")
    raise NotSupportedException(f"unsupported package encoder {encoder!r}")


def _decode_payload(body: bytes, encoder: EncoderType) -> Any:
    if encoder is EncoderType.COMPACT:
        try:
            return msgpack.unpackb(body, raw=False, strict_map_key=False)
        except (ValueError, msgpack.UnpackException) as exc:
            raise PackageParsingException("unable to decode package payload") from exc
    if encoder is EncoderType.JSON:
        try:
            return json.loads(body.decode("utf-8"), object_hook=_json_object_hook)
        except ValueError as exc:
            raise PackageParsingException("unable to decode package payload") from exc
    raise NotSupportedException(f"unsupported package encoder {encoder!r}")


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return {_JSON_BYTES_KEY: base64.b64encode(bytes(value)).decode("ascii")}
    raise TypeError(f"object of type {type(value).__name__} is not JSON serializable")


def _json_object_hook(value: dict[str, Any]) -> Any:
    if len(value) == 1 and _JSON_BYTES_KEY in value:
        return base64.b64decode(value[_JSON_BYTES_KEY])
    return value
