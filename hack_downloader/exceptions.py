#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Hack Downloader - Consolidated Exception Classes

Every stage of the install pipeline raises one of these. The message of the
exception is the human-readable failure reason handed back to the caller.
"""

from datetime import datetime
from typing import Dict, Any, Optional


class BaseError(Exception):
    """Base class for all project-specific errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code or "ERROR"
        self.details = details or {}
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """Converts the exception to a dictionary for structured logging."""
        return {
            'error_code': self.error_code,
            'message': str(self),
            'details': self.details,
            'timestamp': self.timestamp.isoformat()
        }


# =====================================================================================================
# Input errors
# =====================================================================================================

class ValidationError(BaseError):
    """Raised when a name, path or URL supplied by the user is rejected."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        validation_details = details or {}
        if field_name:
            validation_details['field_name'] = field_name
        super().__init__(message, "VALIDATION_ERROR", validation_details)


class InvalidPathError(BaseError):
    """Raised when an archive member would escape the install directory."""

    def __init__(self, message: str, path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        path_details = details or {}
        if path:
            path_details['path'] = str(path)
        super().__init__(message, "INVALID_PATH", path_details)


class ConfigurationError(BaseError):
    """Raised when the settings file cannot be read or validated."""

    def __init__(self, message: str, file_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        config_details = details or {}
        if file_path:
            config_details['file_path'] = str(file_path)
        super().__init__(message, "CONFIG_ERROR", config_details)


# =====================================================================================================
# Pipeline errors
# =====================================================================================================

class DownloadError(BaseError):
    """Raised when the archive could not be fetched."""

    def __init__(self, message: str = "Failed to download archive",
                 url: Optional[str] = None,
                 status_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        download_details = details or {}
        if url:
            # Query strings may carry tokens
            download_details['url'] = url.split('?', 1)[0]
        if status_code is not None:
            download_details['status_code'] = status_code
        super().__init__(message, "DOWNLOAD_ERROR", download_details)


class ExtractionError(BaseError):
    """Raised when fetched or local archive bytes could not be extracted."""

    def __init__(self, message: str = "Failed to extract archive",
                 destination: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        extract_details = details or {}
        if destination:
            extract_details['destination'] = str(destination)
        super().__init__(message, "EXTRACTION_ERROR", extract_details)


class FlattenError(BaseError):
    """Raised when collapsing the wrapper directory fails part way."""

    def __init__(self, reason: str, directory: Optional[str] = None,
                 step: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        flatten_details = details or {}
        if directory:
            flatten_details['directory'] = str(directory)
        if step:
            flatten_details['step'] = step
        self.reason = reason
        self.step = step
        super().__init__(f"Failed to flatten hack directory: {reason}",
                         "FLATTEN_ERROR", flatten_details)


class PatcherNotFoundError(BaseError):
    """Raised when the external patcher executable cannot be located."""

    def __init__(self, message: str, patcher_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        patcher_details = details or {}
        if patcher_path:
            patcher_details['patcher_path'] = str(patcher_path)
        super().__init__(message, "PATCHER_NOT_FOUND", patcher_details)


class PatchLaunchError(BaseError):
    """Raised when the patcher process could not be started."""

    def __init__(self, message: str, patch_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        launch_details = details or {}
        if patch_path:
            launch_details['patch_path'] = str(patch_path)
        super().__init__(message, "PATCH_LAUNCH_ERROR", launch_details)


# =====================================================================================================
# Library errors
# =====================================================================================================

class LibraryError(BaseError):
    """Raised when an installed hack cannot be removed or opened."""

    def __init__(self, message: str, file_path: Optional[str] = None,
                 operation: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        file_details = details or {}
        if file_path:
            file_details['file_path'] = str(file_path)
        if operation:
            file_details['operation'] = operation
        super().__init__(message, "LIBRARY_ERROR", file_details)
