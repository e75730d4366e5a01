"""Hack Downloader utils package."""

from .result import Err, Ok, Result, capture, error_message, is_err, is_ok, unwrap

__all__ = ["Err", "Ok", "Result", "capture", "error_message", "is_err", "is_ok", "unwrap"]
