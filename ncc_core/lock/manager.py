"""Load and save the package lock file."""

from __future__ import annotations

import logging
from pathlib import Path

import msgpack

from ..errors import PackageLockException
from .store import PackageLock

logger = logging.getLogger(__name__)

LOCK_FILENAME = "package.lck"


class PackageLockManager:
    def __init__(self, lock_path: Path | str) -> None:
        self.lock_path = Path(lock_path)
        self._lock: PackageLock | None = None

    @classmethod
    def for_data_path(cls, data_path: Path | str) -> "PackageLockManager":
        return cls(Path(data_path) / LOCK_FILENAME)

    @property
    def lock(self) -> PackageLock:
        if self._lock is None:
            return self.load()
        return self._lock

    def load(self) -> PackageLock:
        logger.debug("loading package lock from %s", self.lock_path)
        if not self.lock_path.is_file():
            logger.debug("package lock does not exist, starting with an empty lock")
            self._lock = PackageLock()
            return self._lock
        try:
            data = self.lock_path.read_bytes()
        except OSError as exc:
            raise PackageLockException(f"cannot read package lock {self.lock_path}: {exc}") from exc
        if not data:
            self._lock = PackageLock()
            return self._lock
        try:
            payload = msgpack.unpackb(data, raw=False, strict_map_key=False)
        except (ValueError, msgpack.UnpackException) as exc:
            raise PackageLockException(f"the package lock {self.lock_path} cannot be parsed") from exc
        if not isinstance(payload, dict):
            raise PackageLockException(f"the package lock {self.lock_path} cannot be parsed")
        self._lock = PackageLock.from_dict(payload)
        return self._lock

    def save(self) -> Path:
        if self._lock is None:
            logger.debug("package lock is not loaded, nothing to save")
            return self.lock_path
        logger.debug("saving package lock to %s", self.lock_path)
        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
            self.lock_path.write_bytes(msgpack.packb(self._lock.to_dict(bytecode=True), use_bin_type=True))
        except OSError as exc:
            raise PackageLockException(f"cannot save the package lock file {self.lock_path}") from exc
        return self.lock_path
