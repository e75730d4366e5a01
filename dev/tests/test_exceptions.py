from __future__ import annotations

import pytest

from hack_downloader.exceptions import (
    BaseError,
    ConfigurationError,
    DownloadError,
    ExtractionError,
    FlattenError,
    InvalidPathError,
    LibraryError,
    PatcherNotFoundError,
    PatchLaunchError,
    ValidationError,
)
from hack_downloader.utils.result import Err, Ok, capture, error_message, is_err, is_ok, unwrap


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (ValidationError("x"), "VALIDATION_ERROR"),
        (DownloadError(), "DOWNLOAD_ERROR"),
        (ExtractionError(), "EXTRACTION_ERROR"),
        (FlattenError("x"), "FLATTEN_ERROR"),
        (PatcherNotFoundError("x"), "PATCHER_NOT_FOUND"),
        (PatchLaunchError("x"), "PATCH_LAUNCH_ERROR"),
        (ConfigurationError("x"), "CONFIG_ERROR"),
        (InvalidPathError("x"), "INVALID_PATH"),
        (LibraryError("x"), "LIBRARY_ERROR"),
    ],
)
def test_error_codes(error: BaseError, code: str) -> None:
    assert isinstance(error, BaseError)
    assert error.error_code == code
    assert error.to_dict()["error_code"] == code


def test_to_dict_payload() -> None:
    error = DownloadError(url="https://example.com/x.zip?key=secret", status_code=500)

    payload = error.to_dict()

    assert payload["message"] == "Failed to download archive"
    assert payload["details"] == {"url": "https://example.com/x.zip", "status_code": 500}
    assert "timestamp" in payload


def test_flatten_error_message() -> None:
    error = FlattenError("Failed to remove directory", directory="/g/h", step="remove")

    assert str(error) == "Failed to flatten hack directory: Failed to remove directory"
    assert error.details == {"directory": "/g/h", "step": "remove"}


def test_result_helpers() -> None:
    ok = Ok(5)
    err = Err(ValidationError("bad"))

    assert is_ok(ok) and not is_err(ok)
    assert is_err(err) and not is_ok(err)
    assert unwrap(ok) == 5
    assert error_message(ok) is None
    assert error_message(err) == "bad" == err.message
    with pytest.raises(ValidationError):
        unwrap(err)


def test_capture_only_catches_project_errors() -> None:
    def raise_validation():
        raise ValidationError("nope")

    def raise_bug():
        raise KeyError("bug")

    assert unwrap(capture(lambda a, b: a + b, 1, b=2)) == 3
    assert capture(raise_validation).message == "nope"
    with pytest.raises(KeyError):
        capture(raise_bug)
