"""Collapse the single wrapper folder many hack archives ship with.

``<install>/Some Hack v1.2/{hack.bps,readme.txt}`` becomes
``<install>/{hack.bps,readme.txt}`` so patch discovery is a flat listing.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

from ..exceptions import FlattenError

logger = logging.getLogger(__name__)

TEMP_SUFFIX = "_tmp"


def temp_directory_for(directory: Path) -> Path:
    return directory.with_name(directory.name + TEMP_SUFFIX)


def flatten_directory(directory: Union[str, Path]) -> bool:
    """Move the contents of a lone sub directory up one level.

    Returns ``True`` when the directory was flattened and ``False`` when it
    was left alone (empty, several entries, or a single file).

    The move is rename-out, remove, rename-in. A failed remove renames the
    sub directory back; a failed final rename leaves the contents in the
    temp directory, whose path is reported in the error details.
    """
    directory = Path(directory)

    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as exc:
        raise FlattenError("Failed to read directory", directory=str(directory), step="read") from exc

    if len(entries) != 1:
        return False

    entry = entries[0]
    try:
        is_dir = entry.is_dir()
    except OSError as exc:
        raise FlattenError("Failed to read entry metadata", directory=str(directory), step="metadata") from exc
    if not is_dir:
        return False

    wrapper = Path(entry.path)
    temp_dir = temp_directory_for(directory)

    try:
        os.rename(wrapper, temp_dir)
    except OSError as exc:
        raise FlattenError(
            "Failed to move single sub directory to temp directory",
            directory=str(directory), step="rename_out",
        ) from exc

    try:
        os.rmdir(directory)
    except OSError as exc:
        try:
            os.rename(temp_dir, wrapper)
        except OSError:
            logger.critical("Could not restore %s; contents left in %s", wrapper, temp_dir)
        raise FlattenError(
            "Failed to remove directory",
            directory=str(directory), step="remove",
            details={'temp_directory': str(temp_dir)},
        ) from exc

    try:
        os.rename(temp_dir, directory)
    except OSError as exc:
        logger.critical("Hack contents left in %s", temp_dir)
        raise FlattenError(
            "Failed to move temp directory to directory",
            directory=str(directory), step="rename_in",
            details={'temp_directory': str(temp_dir)},
        ) from exc

    logger.info("Flattened wrapper folder %r into %s", wrapper.name, directory)
    return True
