"""Install pipeline: resolve -> fetch/extract -> flatten -> patch.

Each stage raises a :class:`~hack_downloader.exceptions.BaseError` on a
terminal failure; the first one aborts the run and becomes the ``Err`` value
of :func:`install_hack`. Files written by finished stages are kept.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .dependencies import InstallerDependencies, get_default_dependencies
from .models import InstallReport, InstallRequest
from ..config.models import Settings
from ..core.archive import extract_archive, fetch_remote_archive, open_local_archive
from ..core.flatten import flatten_directory
from ..core.paths import expand_home
from ..core.source import ResolvedHack, resolve_hack
from ..core.validation import (
    validate_directory_path,
    validate_file_path,
    validate_hack_name_or_empty,
    validate_url,
)
from ..exceptions import BaseError, ValidationError
from ..patching.patcher import apply_patches, find_patch_files, locate_patcher, wait_for_patches
from ..utils.result import Err, Ok, Result, is_err

logger = logging.getLogger(__name__)


def _check(result: Result[None]) -> None:
    if is_err(result):
        raise result.error


def _ensure_install_directory_free(hack: ResolvedHack) -> None:
    directory = hack.install_directory
    if directory.is_dir() and any(directory.iterdir()):
        raise ValidationError(
            f'A hack named "{hack.effective_name}" is already installed',
            field_name="hack_name",
        )
    if directory.exists() and not directory.is_dir():
        raise ValidationError(
            f'"{hack.effective_name}" already exists and is not a directory',
            field_name="hack_name",
        )


def _acquire(hack: ResolvedHack, request: InstallRequest, settings: Settings,
             deps: InstallerDependencies) -> None:
    if hack.is_remote:
        _check(validate_url(hack.source))
        payload = fetch_remote_archive(
            hack.source,
            request.auth_cookie,
            http_get=deps.http_get,
            timeout=settings.request_timeout,
        )
        extract_archive(payload, hack.install_directory)
        return

    with open_local_archive(hack.source) as handle:
        extract_archive(handle, hack.install_directory)


def _open_folder(deps: InstallerDependencies, directory: Path) -> None:
    try:
        deps.open_path(str(directory))
    except OSError as exc:
        logger.debug("Could not open %s: %s", directory, exc)


def run_pipeline(request: InstallRequest, settings: Settings,
                 deps: InstallerDependencies) -> InstallReport:
    """Run every stage, raising on the first terminal failure."""
    _check(validate_directory_path(request.game_directory))
    _check(validate_file_path(request.game_original_copy))
    _check(validate_hack_name_or_empty(request.hack_name))

    hack = resolve_hack(request.game_directory, request.hack_source, request.hack_name)
    _ensure_install_directory_free(hack)
    logger.info("Installing %r into %s", hack.effective_name, hack.install_directory)

    _acquire(hack, request, settings, deps)
    flatten_directory(hack.install_directory)

    patcher = locate_patcher(resources_dir=settings.resources_dir, override=settings.patcher_path)
    jobs = find_patch_files(hack.install_directory)
    if not jobs:
        logger.warning("No .bps or .ips files found in %s", hack.install_directory)

    base_asset = expand_home(request.game_original_copy)
    report = InstallReport(hack=hack, patcher=patcher)
    report.launches = apply_patches(patcher, jobs, base_asset, spawn=deps.spawn)
    if settings.wait_for_patches:
        report.outcomes = wait_for_patches(report.launches)

    if request.open_after:
        _open_folder(deps, hack.install_directory)

    logger.info("Installed %r (%d patch(es) started)", hack.effective_name, len(report.launches))
    return report


def install_hack(
    request: InstallRequest,
    *,
    settings: Optional[Settings] = None,
    deps: Optional[InstallerDependencies] = None,
) -> Result[InstallReport]:
    """Install a hack. The ``Err`` message is the failure reason for the user."""
    settings = settings or Settings()
    deps = deps or get_default_dependencies()
    try:
        return Ok(run_pipeline(request, settings, deps))
    except BaseError as exc:
        logger.warning("Install failed [%s]: %s", exc.error_code, exc)
        return Err(exc)
