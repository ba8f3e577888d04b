from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class InstallationPaths:
    """Directory layout under one package version's install location."""

    install_path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "install_path", Path(self.install_path))

    @property
    def data_path(self) -> Path:
        return self.install_path / "ncc"

    @property
    def source_path(self) -> Path:
        return self.install_path / "src"

    @property
    def bin_path(self) -> Path:
        return self.install_path / "bin"

    def create(self) -> None:
        for path in (self.install_path, self.data_path, self.source_path, self.bin_path):
            path.mkdir(parents=True, exist_ok=True)
