"""Simple dependency container for the install pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import requests

from .launcher import open_path
from ..patching.patcher import spawn_detached


@dataclass(frozen=True)
class InstallerDependencies:
    http_get: Callable
    spawn: Callable
    open_path: Callable


def get_default_dependencies() -> InstallerDependencies:
    return InstallerDependencies(
        http_get=requests.get,
        spawn=spawn_detached,
        open_path=open_path,
    )
