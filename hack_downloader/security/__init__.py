#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""Hack Downloader security package: archive member validation."""

from .security_utils import (
    is_safe_archive_member,
    member_destination,
    validate_extension,
)

__all__ = [
    'is_safe_archive_member',
    'member_destination',
    'validate_extension',
]
