"""Installed hacks of a game: listing, filtering and removal.

A hack is any sub directory of the game directory holding at least one
``.sfc`` file.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from ..core.paths import expand_home
from ..core.validation import validate_directory_path
from ..exceptions import LibraryError
from ..patching.patcher import OUTPUT_SUFFIX
from ..utils.result import is_err

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstalledHack:
    directory: Path
    name: str
    sfc_name: str
    sfc_path: Path
    is_first_sfc: bool


def _sfc_files(directory: Path) -> List[Path]:
    return sorted(
        (child for child in directory.iterdir() if child.name.endswith(OUTPUT_SUFFIX)),
        key=lambda p: p.name,
    )


def list_hacks(game_directory: Union[str, Path]) -> List[InstalledHack]:
    """One entry per ``.sfc``, grouped by hack and sorted by hack name.

    Raises:
        ValidationError: if ``game_directory`` is not an existing directory
        LibraryError: if the directory cannot be listed
    """
    result = validate_directory_path(str(game_directory))
    if is_err(result):
        raise result.error

    root = Path(expand_home(str(game_directory)))
    hacks: List[InstalledHack] = []
    try:
        for entry in sorted(root.iterdir(), key=lambda p: p.name):
            if not entry.is_dir():
                continue
            for index, sfc in enumerate(_sfc_files(entry)):
                hacks.append(InstalledHack(
                    directory=entry,
                    name=entry.name,
                    sfc_name=sfc.name,
                    sfc_path=sfc,
                    is_first_sfc=index == 0,
                ))
    except OSError as exc:
        raise LibraryError(f"Failed to list hacks: {exc}", file_path=str(root), operation="list") from exc
    return hacks


def filter_hacks(hacks: List[InstalledHack], text: str) -> List[InstalledHack]:
    needle = text.lower()
    return [hack for hack in hacks if needle in hack.name.lower()]


def delete_hack(hack: InstalledHack) -> bool:
    """Delete the hack's ``.sfc``; drop the whole folder once none is left.

    Returns ``True`` when the hack directory itself was removed.
    """
    try:
        hack.sfc_path.unlink()
        logger.info("Deleted %s", hack.sfc_path)
        if _sfc_files(hack.directory):
            return False
        shutil.rmtree(hack.directory)
    except OSError as exc:
        raise LibraryError(f"Failed to delete hack: {exc}", file_path=str(hack.sfc_path), operation="delete") from exc

    logger.info("Removed hack directory %s", hack.directory)
    return True
