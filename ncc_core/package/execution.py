"""Execution policies and the packaged units bound to them."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from ..bytecode import key, lookup
from .component import _as_bytes

DEFAULT_WORKING_DIRECTORY = "%CWD%"


@dataclass
class ExecuteOptions:
    target: str | None = None
    working_directory: str = DEFAULT_WORKING_DIRECTORY
    options: list[str] = field(default_factory=list)
    environment: dict[str, str] = field(default_factory=dict)
    silent: bool = False
    tty: bool = False
    timeout: int | None = None

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        results: dict[Any, Any] = {}
        if self.target is not None:
            results[key("target", bytecode)] = self.target
        results[key("working_directory", bytecode)] = self.working_directory
        if self.options:
            results[key("options", bytecode)] = list(self.options)
        if self.environment:
            results[key("environment_variables", bytecode)] = dict(self.environment)
        results[key("silent", bytecode)] = self.silent
        results[key("tty", bytecode)] = self.tty
        if self.timeout is not None:
            results[key("timeout", bytecode)] = int(self.timeout)
        return results

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "ExecuteOptions":
        timeout = lookup(data, "timeout")
        return cls(
            target=lookup(data, "target"),
            working_directory=lookup(data, "working_directory") or DEFAULT_WORKING_DIRECTORY,
            options=[str(item) for item in lookup(data, "options") or []],
            environment={str(k): str(v) for k, v in (lookup(data, "environment_variables") or {}).items()},
            silent=bool(lookup(data, "silent", False)),
            tty=bool(lookup(data, "tty", False)),
            timeout=int(timeout) if timeout is not None else None,
        )


@dataclass
class ExecutionPolicy:
    name: str
    runner: str
    message: str | None = None
    execute: ExecuteOptions = field(default_factory=ExecuteOptions)

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        results: dict[Any, Any] = {
            key("name", bytecode): self.name,
            key("runner", bytecode): self.runner,
        }
        if self.message:
            results[key("message", bytecode)] = self.message
        results[key("execute", bytecode)] = self.execute.to_dict(bytecode)
        return results

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "ExecutionPolicy":
        execute = lookup(data, "execute")
        return cls(
            name=str(lookup(data, "name") or ""),
            runner=str(lookup(data, "runner") or ""),
            message=lookup(data, "message"),
            execute=ExecuteOptions.from_dict(execute) if isinstance(execute, Mapping) else ExecuteOptions(),
        )


@dataclass
class ExecutionUnit:
    execution_policy: ExecutionPolicy
    data: bytes | None = None

    @property
    def id(self) -> str:
        return hashlib.sha1(self.execution_policy.name.encode("utf-8")).hexdigest()

    @property
    def name(self) -> str:
        return self.execution_policy.name

    def without_data(self) -> "ExecutionUnit":
        return replace(self, data=None)

    def to_dict(self, bytecode: bool = False) -> dict[Any, Any]:
        return {
            key("execution_policy", bytecode): self.execution_policy.to_dict(bytecode),
            key("data", bytecode): self.data,
        }

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any]) -> "ExecutionUnit":
        return cls(
            execution_policy=ExecutionPolicy.from_dict(lookup(data, "execution_policy") or {}),
            data=_as_bytes(lookup(data, "data")),
        )
