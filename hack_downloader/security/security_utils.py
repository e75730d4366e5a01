#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""Hack Downloader - archive member safety checks.

Hack archives come from arbitrary websites, so every member name is checked
before anything is written to the install directory.
"""

import os
import re
import logging
import stat
from pathlib import Path, PurePosixPath
from typing import List, Union
import zipfile

from ..exceptions import InvalidPathError

logger = logging.getLogger(__name__)


def is_safe_archive_member(member: Union[str, zipfile.ZipInfo]) -> bool:
    """Check for safe archive members (no traversal, no abs paths, no symlinks)."""
    if isinstance(member, zipfile.ZipInfo):
        member_name = member.filename
        mode = stat.S_IFMT(member.external_attr >> 16)
        if mode == stat.S_IFLNK:
            return False
    else:
        member_name = str(member)

    if not member_name:
        return False
    if "\x00" in member_name:
        return False
    if member_name.startswith(('/', '\\')):
        return False
    if re.match(r"^[a-zA-Z]:", member_name):
        return False
    parts = PurePosixPath(member_name.replace("\\", "/")).parts
    return ".." not in parts


def member_destination(dest_root: Path, member: Union[str, zipfile.ZipInfo]) -> Path:
    """Return where ``member`` lands under ``dest_root``.

    Pass the ``ZipInfo`` rather than its name so symlink entries are caught.

    Raises:
        InvalidPathError: if the member is unsafe or resolves outside the root
    """
    member_name = member.filename if isinstance(member, zipfile.ZipInfo) else str(member)
    if not is_safe_archive_member(member):
        raise InvalidPathError(f"Unsafe archive member blocked: {member_name}", path=member_name)

    target = (dest_root / member_name.replace("\\", "/")).resolve()
    try:
        target.relative_to(dest_root)
    except ValueError:
        logger.warning("Zip-slip detected: %s", member_name)
        raise InvalidPathError(f"Zip-slip detected: {member_name}", path=member_name)
    return target


def validate_extension(filename: str, allowed_extensions: List[str]) -> bool:
    """Validate file extension against a whitelist (case-insensitive)."""
    normalized_extensions = [ext if ext.startswith('.') else f'.{ext}' for ext in allowed_extensions]
    _, ext = os.path.splitext(filename.lower())
    return ext in normalized_extensions
