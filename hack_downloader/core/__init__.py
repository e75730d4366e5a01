"""Core install stages: path handling, validation, source resolution,
archive fetch/extract and directory flattening."""

from .paths import expand_home, path_exists, resolve_resource
from .validation import (
    validate_name,
    validate_directory_path,
    validate_file_path,
    validate_url,
    validate_hack_download_source,
    validate_hack_name_or_empty,
    sanitize_hack_name,
)
from .source import ResolvedHack, SourceKind, resolve_hack
from .archive import extract_archive, fetch_remote_archive, open_local_archive
from .flatten import flatten_directory

__all__ = [
    "expand_home",
    "path_exists",
    "resolve_resource",
    "validate_name",
    "validate_directory_path",
    "validate_file_path",
    "validate_url",
    "validate_hack_download_source",
    "validate_hack_name_or_empty",
    "sanitize_hack_name",
    "ResolvedHack",
    "SourceKind",
    "resolve_hack",
    "extract_archive",
    "fetch_remote_archive",
    "open_local_archive",
    "flatten_directory",
]
