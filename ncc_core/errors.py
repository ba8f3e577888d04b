"""Typed exceptions raised by the ncc core."""

from __future__ import annotations


class NccError(RuntimeError):
    """Base error for ncc operations."""


class NetworkException(NccError):
    pass


class AuthenticationException(NccError):
    pass


class OperationException(NccError):
    pass


class PathTraversalException(OperationException):
    pass


class ComponentChecksumException(NccError):
    pass


class ComponentDecodeException(NccError):
    pass


class ResourceChecksumException(NccError):
    pass


class VersionNotFoundException(NccError):
    pass


class InvalidArgumentException(NccError, ValueError):
    pass


class NotSupportedException(NccError):
    pass


class PackageParsingException(NccError):
    pass


class PackageLockException(NccError):
    pass


class ResponseParsingException(NccError):
    pass
