"""Fetch hack archives and extract them into the install directory.

Download failures and extraction failures raise different exceptions so a
caller can tell "could not fetch" from "fetched but unusable".
"""

from __future__ import annotations

import io
import logging
import shutil
import tempfile
import zipfile
import zlib
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional, Union

import py7zr
from py7zr.exceptions import ArchiveError
import requests

from .paths import expand_home
from .validation import validate_file_path
from ..exceptions import DownloadError, ExtractionError, InvalidPathError, ValidationError
from ..security.security_utils import member_destination, validate_extension
from ..utils.result import is_err

logger = logging.getLogger(__name__)

SEVEN_ZIP_SIGNATURE = b"7z\xbc\xaf\x27\x1c"
LOCAL_ARCHIVE_EXTENSIONS = ["zip"]

HttpGet = Callable[..., requests.Response]
ArchivePayload = Union[bytes, BinaryIO]

_EXTRACTION_FAILURES = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    ArchiveError,
    InvalidPathError,
    NotImplementedError,  # unsupported compression method
    RuntimeError,         # encrypted members
    ValueError,
    EOFError,
    zlib.error,
    OSError,
)


def fetch_remote_archive(
    url: str,
    cookie: str,
    *,
    http_get: Optional[HttpGet] = None,
    timeout: Optional[float] = None,
) -> bytes:
    """Download ``url`` into memory with ``cookie`` sent as the Cookie header.

    Raises:
        DownloadError: on transport errors, non-200 responses or body read errors
    """
    http_get = http_get or requests.get
    headers = {"Cookie": cookie}

    try:
        response = http_get(url, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("Failed to download archive: %s", exc)
        raise DownloadError(url=url) from exc

    if response.status_code != 200:
        logger.warning("Failed to download archive: HTTP %s", response.status_code)
        raise DownloadError(url=url, status_code=response.status_code)

    try:
        content = response.content
    except requests.RequestException as exc:
        logger.warning("Failed to read archive body: %s", exc)
        raise DownloadError(url=url, status_code=response.status_code) from exc

    logger.info("Downloaded archive (%d bytes)", len(content))
    return content


def open_local_archive(path: str) -> BinaryIO:
    """Open a local ``.zip`` for buffered reading. The caller closes it."""
    result = validate_file_path(path)
    if is_err(result):
        raise result.error

    expanded = expand_home(path)
    if not validate_extension(expanded, LOCAL_ARCHIVE_EXTENSIONS):
        raise ValidationError("This is not a zip file", field_name="hack_source")

    try:
        handle = open(expanded, "rb")
    except OSError as exc:
        logger.warning("Failed to open %s: %s", expanded, exc)
        raise ExtractionError("Failed to open zip") from exc

    logger.info("Using local archive: %s", expanded)
    return handle


def _extract_zip(stream: BinaryIO, dest_root: Path) -> List[Path]:
    written: List[Path] = []
    with zipfile.ZipFile(stream) as archive:
        # Validate every member before the first write
        targets = [(member, member_destination(dest_root, member))
                   for member in archive.infolist()]
        dest_root.mkdir(parents=True, exist_ok=True)
        for member, target in targets:
            if member.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            # Copy contents only; stored permission bits are not applied
            with archive.open(member) as src, open(target, "wb") as dst:
                shutil.copyfileobj(src, dst)
            written.append(target)
    return written


def _extract_7z(stream: BinaryIO, dest_root: Path) -> List[Path]:
    with py7zr.SevenZipFile(stream, mode="r") as archive:
        for name in archive.getnames():
            member_destination(dest_root, name)
        # py7zr restores stored modes and links, so extract to a staging
        # folder and copy plain file contents across
        with tempfile.TemporaryDirectory(prefix="hack_7z_") as staging:
            archive.extractall(path=staging)
            return _copy_staged_tree(Path(staging), dest_root)


def _copy_staged_tree(staging: Path, dest_root: Path) -> List[Path]:
    entries = sorted(staging.rglob("*"))
    for entry in entries:
        if entry.is_symlink():
            raise InvalidPathError(f"Symlink member blocked: {entry.relative_to(staging)}",
                                   path=str(entry.relative_to(staging)))

    written: List[Path] = []
    dest_root.mkdir(parents=True, exist_ok=True)
    for entry in entries:
        target = dest_root / entry.relative_to(staging)
        if entry.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(entry, target)
        written.append(target)
    return written


def extract_archive(payload: ArchivePayload, destination: Union[str, Path]) -> List[Path]:
    """Extract ``payload`` into ``destination``, creating it if needed.

    The destination is only created once the archive has been opened and all
    member names checked. Returns the extracted file paths.

    Raises:
        ExtractionError: if the payload is corrupt, unsupported or unsafe
    """
    stream = io.BytesIO(payload) if isinstance(payload, (bytes, bytearray)) else payload
    dest_root = Path(destination).resolve()

    try:
        signature = stream.read(len(SEVEN_ZIP_SIGNATURE))
        stream.seek(0)
        if signature == SEVEN_ZIP_SIGNATURE:
            written = _extract_7z(stream, dest_root)
        else:
            written = _extract_zip(stream, dest_root)
    except _EXTRACTION_FAILURES as exc:
        logger.warning("Failed to extract archive into %s: %s", destination, exc)
        raise ExtractionError(destination=str(destination)) from exc

    logger.info("Extracted %d file(s) into %s", len(written), dest_root)
    return written
