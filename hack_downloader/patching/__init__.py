"""Patch application module.

Applies BPS/IPS patches with the bundled Flips/MultiPatch executable.
"""

from .patcher import (
    PatchFormat,
    PatchJob,
    PatchLaunch,
    PatchOutcome,
    PatcherPlatform,
    apply_patches,
    detect_platform,
    find_patch_files,
    locate_patcher,
    wait_for_patches,
)

__all__ = [
    "PatchFormat",
    "PatchJob",
    "PatchLaunch",
    "PatchOutcome",
    "PatcherPlatform",
    "apply_patches",
    "detect_platform",
    "find_patch_files",
    "locate_patcher",
    "wait_for_patches",
]
