"""Credentials injected into repository requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

from requests.auth import HTTPBasicAuth

from ..errors import AuthenticationException, InvalidArgumentException


class AuthenticationType(str, Enum):
    ACCESS_TOKEN = "access_token"
    USERNAME_PASSWORD = "username_password"


@dataclass(frozen=True)
class AccessToken:
    token: str = field(repr=False)
    authentication_type: AuthenticationType = AuthenticationType.ACCESS_TOKEN

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.authentication_type.value, "token": self.token}


@dataclass(frozen=True)
class UsernamePassword:
    username: str
    password: str = field(repr=False)
    authentication_type: AuthenticationType = AuthenticationType.USERNAME_PASSWORD

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.authentication_type.value, "username": self.username, "password": self.password}


Credential = Union[AccessToken, UsernamePassword]


def credential_from_dict(data: Mapping[str, Any]) -> Credential:
    raw_type = str(data.get("type") or "").strip().lower()
    if raw_type == AuthenticationType.ACCESS_TOKEN.value:
        return AccessToken(token=str(data.get("token") or ""))
    if raw_type == AuthenticationType.USERNAME_PASSWORD.value:
        return UsernamePassword(
            username=str(data.get("username") or ""),
            password=str(data.get("password") or ""),
        )
    raise InvalidArgumentException(f"unknown authentication type: {raw_type!r}")


def apply_credential(
    credential: Credential | None,
    headers: dict[str, str],
    *,
    token_header: str,
    token_prefix: str,
) -> HTTPBasicAuth | None:
    """Add ``credential`` to ``headers`` or return a basic-auth handler for it."""
    if credential is None:
        return None
    authentication_type = getattr(credential, "authentication_type", None)
    if authentication_type == AuthenticationType.ACCESS_TOKEN and isinstance(credential, AccessToken):
        headers[token_header] = f"{token_prefix}{credential.token}"
        return None
    if authentication_type == AuthenticationType.USERNAME_PASSWORD and isinstance(credential, UsernamePassword):
        return HTTPBasicAuth(credential.username, credential.password)
    raise AuthenticationException(
        f"credential {type(credential).__name__} does not match authentication type {authentication_type!r}"
    )
