"""Input validators for hack names, paths and download sources.

Each validator returns ``Ok(None)`` or ``Err(ValidationError)`` whose message
is shown to the user as is.
"""

from __future__ import annotations

import os
import re
import stat

from .paths import expand_home
from ..exceptions import ValidationError
from ..utils.result import Err, OK_NONE, Result

RESERVED_NAME_CHARACTERS = ('"', '*', '/', ':', '<', '>', '?', '\\', '|')
REMOTE_PREFIXES = ("http://", "https://")


def _fail(message: str, field_name: str) -> Err:
    return Err(ValidationError(message, field_name=field_name))


def validate_name(name: str) -> Result[None]:
    if not name:
        return _fail("No name has been specified", "name")
    for char in name:
        if char in RESERVED_NAME_CHARACTERS:
            return _fail(f'Name cannot contain character "{char}"', "name")
    return OK_NONE


def _validate_existing_path(path: str, kind: str) -> Result[None]:
    field_name = f"{kind}_path"
    expanded = expand_home(path)
    if not expanded:
        return _fail(f"No {kind} has been specified", field_name)
    if not os.path.exists(expanded):
        return _fail(f"{kind.capitalize()} doesn't exist", field_name)
    try:
        mode = os.stat(expanded).st_mode
    except OSError:
        return _fail("This is not a valid path", field_name)

    is_expected = stat.S_ISDIR(mode) if kind == "directory" else stat.S_ISREG(mode)
    if not is_expected:
        return _fail(f"This is not a {kind}", field_name)
    return OK_NONE


def validate_directory_path(path: str) -> Result[None]:
    return _validate_existing_path(path, "directory")


def validate_file_path(path: str) -> Result[None]:
    return _validate_existing_path(path, "file")


def validate_url(url: str) -> Result[None]:
    # Scheme and format errors surface from the HTTP request itself
    if not url:
        return _fail("No URL has been specified", "url")
    return OK_NONE


def is_remote_source(source: str) -> bool:
    return source.startswith(REMOTE_PREFIXES)


def validate_hack_download_source(value: str) -> Result[None]:
    """Accept a non-empty URL or the path of an existing archive."""
    trimmed = value.strip()
    if not trimmed:
        return _fail("Value cannot be empty", "hack_source")
    if is_remote_source(trimmed):
        return validate_url(trimmed)
    return validate_file_path(trimmed)


def validate_hack_name_or_empty(name: str) -> Result[None]:
    """A blank name is fine: it is derived from the source later."""
    if not name.strip():
        return OK_NONE
    return validate_name(name)


_COLON_BEFORE_TEXT = re.compile(r":(?=\S)")


def sanitize_hack_name(name: str) -> str:
    """Turn a hack title into a name that passes :func:`validate_name`.

    ``"Title:Sub"`` becomes ``"Title-Sub"`` and ``"Title: Sub"`` becomes
    ``"Title - Sub"``; the other reserved characters are dropped.
    """
    for char in ('"', '*', '/', '<', '>', '?', '\\', '|'):
        name = name.replace(char, "")
    name = _COLON_BEFORE_TEXT.sub("-", name)
    return name.replace(":", " -")
