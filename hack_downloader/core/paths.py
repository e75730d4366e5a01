"""Path helpers: home shorthand expansion and bundled resource lookup."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional, Union

HOME_MARKER = "~"
_SEPARATORS = ("/", "\\")


def _home_directory() -> Optional[str]:
    home = os.environ.get("HOME")
    if not home and os.name == "nt":
        home = os.environ.get("USERPROFILE")
    return home or None


def expand_home(path: str) -> str:
    """Expand a leading ``~`` into the user's home directory.

    Only ``~`` on its own or followed by a separator is expanded. When the
    home directory cannot be determined the path is returned untouched.
    """
    if path != HOME_MARKER and not path.startswith(tuple(HOME_MARKER + sep for sep in _SEPARATORS)):
        return path

    home = _home_directory()
    if home is None:
        return path

    rest = path[len(HOME_MARKER):].lstrip("/\\")
    if not rest:
        return home
    return os.path.join(home, rest)


def path_exists(path: str) -> bool:
    return os.path.exists(expand_home(path))


def get_program_dir() -> Path:
    """Directory the application runs from (frozen executable or project root)."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[2]


def resolve_resource(relative: Union[str, Path], resources_dir: Optional[str] = None) -> Path:
    """Resolve a file under the bundled ``resources`` root.

    ``resources_dir`` (from settings) replaces the default root, which is the
    ``resources`` folder inside the package, or next to a frozen executable.
    """
    if resources_dir:
        root = Path(expand_home(resources_dir))
    elif getattr(sys, "frozen", False):
        root = get_program_dir() / "resources"
    else:
        root = Path(__file__).resolve().parents[1] / "resources"
    return root / relative
