"""BPS/IPS patch application through the bundled external patcher.

The patcher is Flips (``flips.exe``) on Windows and MultiPatch
(``multipatch``) on macOS. Each patch file found in the install directory is
applied against the user's original ROM, writing ``<stem>.sfc`` next to it.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..core.paths import expand_home, resolve_resource
from ..exceptions import PatcherNotFoundError, PatchLaunchError

logger = logging.getLogger(__name__)

RESOURCES_SUBDIR = "resources"
OUTPUT_SUFFIX = ".sfc"


class PatchFormat(Enum):
    """Supported patch formats."""

    BPS = "bps"  # Beat Patching System
    IPS = "ips"  # International Patching System


# Case-sensitive: "HACK.BPS" is not picked up
PATCH_SUFFIXES: Dict[str, PatchFormat] = {
    ".bps": PatchFormat.BPS,
    ".ips": PatchFormat.IPS,
}


class PatcherPlatform(Enum):
    """Platforms with a bundled patcher executable."""

    WINDOWS = "windows"
    MACOS = "macos"
    UNSUPPORTED = "unsupported"


PATCHER_EXECUTABLES: Dict[PatcherPlatform, str] = {
    PatcherPlatform.WINDOWS: "flips.exe",
    PatcherPlatform.MACOS: "multipatch",
}


@dataclass(frozen=True)
class PatchJob:
    """One patch file and the ROM it produces."""

    patch_path: Path
    output_path: Path
    format: PatchFormat


@dataclass
class PatchLaunch:
    """A started patcher process."""

    job: PatchJob
    command: List[str]
    process: Any

    @property
    def pid(self) -> Optional[int]:
        return getattr(self.process, "pid", None)


@dataclass(frozen=True)
class PatchOutcome:
    """Exit status of a patcher process, collected on request."""

    job: PatchJob
    success: bool
    return_code: Optional[int] = None
    error: Optional[str] = None


Spawn = Callable[[List[str]], Any]


def detect_platform(sys_platform: Optional[str] = None) -> PatcherPlatform:
    name = sys_platform if sys_platform is not None else sys.platform
    if name.startswith(("win32", "cygwin")):
        return PatcherPlatform.WINDOWS
    if name.startswith("darwin"):
        return PatcherPlatform.MACOS
    return PatcherPlatform.UNSUPPORTED


def locate_patcher(
    *,
    resources_dir: Optional[str] = None,
    platform: Optional[PatcherPlatform] = None,
    override: Optional[str] = None,
) -> Path:
    """Find the patcher executable.

    A configured ``override`` path wins over the bundled executable, which
    is how unsupported platforms can still install hacks.

    Raises:
        PatcherNotFoundError: unsupported platform or missing executable
    """
    if override:
        patcher = Path(expand_home(override))
    else:
        platform = platform or detect_platform()
        executable = PATCHER_EXECUTABLES.get(platform)
        if executable is None:
            logger.warning("No bundled patcher for platform %s", platform.value)
            raise PatcherNotFoundError("Failed to locate patcher")
        patcher = resolve_resource(Path(RESOURCES_SUBDIR) / executable, resources_dir)

    if not patcher.exists():
        logger.warning("Patcher missing at %s", patcher)
        raise PatcherNotFoundError("Patcher not found", patcher_path=str(patcher))
    return patcher


def find_patch_files(directory: Union[str, Path]) -> List[PatchJob]:
    """List patch files directly inside ``directory`` in listing order."""
    jobs: List[PatchJob] = []
    with os.scandir(directory) as it:
        for entry in it:
            patch_format = PATCH_SUFFIXES.get(os.path.splitext(entry.name)[1])
            if patch_format is None:
                continue
            patch_path = Path(entry.path)
            jobs.append(PatchJob(
                patch_path=patch_path,
                output_path=patch_path.with_suffix(OUTPUT_SUFFIX),
                format=patch_format,
            ))
    return jobs


def build_command(patcher: Union[str, Path], job: PatchJob, base_asset: Union[str, Path]) -> List[str]:
    return [str(patcher), "--apply", str(job.patch_path), str(base_asset), str(job.output_path)]


def spawn_detached(command: List[str]) -> subprocess.Popen:
    return subprocess.Popen(command, stdin=subprocess.DEVNULL)


def apply_patches(
    patcher: Union[str, Path],
    jobs: Sequence[PatchJob],
    base_asset: Union[str, Path],
    spawn: Optional[Spawn] = None,
) -> List[PatchLaunch]:
    """Start one patcher process per job and return without waiting.

    Nothing reaps the children unless :func:`wait_for_patches` is called; a
    long-running host process should call it to avoid zombies.

    Raises:
        PatchLaunchError: if a process cannot be started; processes already
            started keep running
    """
    spawn = spawn or spawn_detached
    launches: List[PatchLaunch] = []
    for job in jobs:
        command = build_command(patcher, job, base_asset)
        try:
            process = spawn(command)
        except OSError as exc:
            logger.warning("Failed to start patcher for %s: %s", job.patch_path.name, exc)
            raise PatchLaunchError(
                f"Failed to launch patcher for {job.patch_path.name}",
                patch_path=str(job.patch_path),
            ) from exc
        launches.append(PatchLaunch(job=job, command=command, process=process))
        logger.info("Applying %s -> %s", job.patch_path.name, job.output_path.name)
    return launches


def wait_for_patches(launches: Sequence[PatchLaunch], timeout: Optional[float] = None) -> List[PatchOutcome]:
    """Wait for every launched patcher and report each exit status."""
    outcomes: List[PatchOutcome] = []
    for launch in launches:
        try:
            code = launch.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            outcomes.append(PatchOutcome(job=launch.job, success=False, error="patcher timed out"))
            continue

        if code != 0:
            error = f"patcher exited with code {code}"
        elif not launch.job.output_path.exists():
            error = "patcher produced no output"
        else:
            error = None
        if error:
            logger.warning("%s: %s", launch.job.patch_path.name, error)
        outcomes.append(PatchOutcome(job=launch.job, success=error is None, return_code=code, error=error))
    return outcomes
