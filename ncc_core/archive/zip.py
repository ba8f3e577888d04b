"""Zip extraction backed by :mod:`zipfile`."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from ..errors import OperationException
from ..security import safe_output_path

logger = logging.getLogger(__name__)


def extract_zip(archive_path: Path | str, destination: Path | str) -> None:
    archive = Path(archive_path)
    target_root = Path(destination)
    if not archive.is_file():
        raise OperationException(f"archive not found: {archive}")
    try:
        target_root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OperationException(f"unable to create destination {target_root}: {exc}") from exc

    logger.debug("extracting zip archive=%s destination=%s", archive, target_root)
    try:
        with zipfile.ZipFile(archive) as bundle:
            for member in bundle.infolist():
                safe_output_path(target_root, member.filename)
            bundle.extractall(target_root)
    except zipfile.BadZipFile as exc:
        raise OperationException(f"unable to open zip archive {archive}: {exc}") from exc
    except OSError as exc:
        raise OperationException(f"failed to extract zip archive {archive}: {exc}") from exc
