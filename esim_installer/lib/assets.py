from __future__ import annotations

import logging
import os
import stat
import tarfile
import zipfile
from pathlib import Path

from ..errors import PreconditionMissing

logger = logging.getLogger(__name__)


def require_file(path: Path, what: str) -> Path:
    if not path.is_file():
        raise PreconditionMissing(f"{what} not found at {path}")
    return path


def _extract_zip(archive: Path, dest: Path) -> None:
    with zipfile.ZipFile(archive) as zf:
        for info in zf.infolist():
            target = zf.extract(info, dest)
            # Unix permission bits live in the high word of external_attr.
            mode = stat.S_IMODE(info.external_attr >> 16)
            if mode and not info.is_dir():
                os.chmod(target, mode)


def extract_archive(archive: Path, dest: Path) -> None:
    """Extract a .tar.* or .zip archive into ``dest``, overwriting files.

    Member permission bits are kept for both formats.
    """

    dest.mkdir(parents=True, exist_ok=True)
    logger.info("Extracting %s -> %s", archive, dest)
    if zipfile.is_zipfile(archive):
        _extract_zip(archive, dest)
        return
    with tarfile.open(archive) as tf:
        if hasattr(tarfile, "data_filter"):
            tf.extractall(dest, filter="data")
        else:
            tf.extractall(dest)
