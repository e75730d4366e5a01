"""Open installed hacks and folders, with the OS handler or an emulator."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from typing import Any, Callable, List, Optional

from ..config.models import Settings
from ..core.paths import expand_home
from ..exceptions import LibraryError
from ..utils.result import Err, OK_NONE, Ok, Result

logger = logging.getLogger(__name__)

FILE_PLACEHOLDER = "%1"


def open_path(path: str) -> None:
    """Hand ``path`` to the OS default handler. Raises ``OSError`` on failure."""
    if os.name == "nt":
        os.startfile(path)  # type: ignore[attr-defined]
    elif sys.platform == "darwin":
        subprocess.Popen(["open", path])
    else:
        subprocess.Popen(["xdg-open", path])


def open_with_default_app(path: str, opener: Optional[Callable[[str], Any]] = None) -> Result[None]:
    opener = opener or open_path
    try:
        opener(expand_home(path))
    except OSError as exc:
        logger.warning("Failed to open %s: %s", path, exc)
        return Err(LibraryError("Failed to open path", file_path=path, operation="open"))
    return OK_NONE


def build_emulator_command(file_path: str, emulator_path: str, emulator_args: str) -> List[str]:
    """Split ``emulator_args`` shell-style and substitute ``%1`` with the ROM.

    Raises:
        ValueError: unbalanced quotes in ``emulator_args``
    """
    args = shlex.split(emulator_args)
    return [expand_home(emulator_path)] + [file_path if arg == FILE_PLACEHOLDER else arg for arg in args]


def open_with_selected_app(
    file_path: str,
    emulator_path: str,
    emulator_args: str,
    spawn: Optional[Callable[[List[str]], Any]] = None,
) -> Result[Any]:
    """Start the emulator on ``file_path``; the process handle is returned."""
    spawn = spawn or subprocess.Popen
    try:
        command = build_emulator_command(file_path, emulator_path, emulator_args)
    except ValueError:
        return Err(LibraryError("Failed to parse emulator arguments", operation="play"))

    try:
        process = spawn(command)
    except OSError as exc:
        logger.warning("Failed to start emulator %s: %s", emulator_path, exc)
        return Err(LibraryError(str(exc), file_path=file_path, operation="play"))
    return Ok(process)


def play_hack(sfc_path: str, settings: Settings, spawn: Optional[Callable[[List[str]], Any]] = None) -> Result[Any]:
    if settings.emulator_path:
        return open_with_selected_app(sfc_path, settings.emulator_path, settings.emulator_args, spawn=spawn)
    return open_with_default_app(sfc_path)
