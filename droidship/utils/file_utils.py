"""File utility functions for droidship."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from ..core.logger import log

PathLike = Union[str, os.PathLike]


def ensure_directory(directory_path: PathLike) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        directory_path: Path to the directory.

    Returns:
        Absolute path to the directory.
    """
    path = Path(directory_path).resolve()
    path.mkdir(parents=True, exist_ok=True)
    return path


def replace_extension(artifact: PathLike, extension: str, directory: PathLike) -> Path:
    """Place ``artifact``'s stem with a new extension inside ``directory``.

    >>> replace_extension("out/app-release.aab", ".apks", "/tmp/build")
    PosixPath('/tmp/build/app-release.apks')
    """
    if not extension.startswith("."):
        extension = "." + extension
    return Path(directory) / (Path(artifact).stem + extension)


def remove_stale_file(path: PathLike) -> bool:
    """Delete ``path`` if it exists.

    Returns:
        True if a file was removed, False if there was nothing to remove.
    """
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    log.debug(f"Removed stale file {path}")
    return True
