"""
Archive file writer utilities.
"""
import os
from pathlib import Path
from typing import List

from vpacker.archive.encoder import encode
from vpacker.exceptions import AlreadyExistsError, WriteError
from vpacker.utils.logging import get_logger

logger = get_logger("writer")


def archive_filenames(unit_name: str, count: int, extension: str = "vp") -> List[str]:
    """``<unit>.vp`` for a single archive, ``<unit>-01.vp``... otherwise."""
    if count == 1:
        return [f"{unit_name}.{extension}"]
    return [f"{unit_name}-{n:02d}.{extension}" for n in range(1, count + 1)]


def ensure_absent(paths):
    for path in paths:
        if os.path.lexists(path):
            raise AlreadyExistsError(path)


def write_archive(path: str, group, fs, **encode_kwargs) -> int:
    """Encode *group* into a new file at *path*.

    The file is created exclusively; if encoding fails the partial file is
    removed before the error propagates.
    """
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        out = open(p, "xb")
    except FileExistsError as e:
        raise AlreadyExistsError(path) from e
    except OSError as e:
        raise WriteError(f"cannot create {path}: {e}") from e

    try:
        with out:
            written = encode(group, fs, out, **encode_kwargs)
    except BaseException:
        logger.debug(f"Removing partial archive {path}")
        try:
            p.unlink()
        except OSError as e:
            logger.warning(f"Could not remove partial archive {path}: {e}")
        raise
    return written
