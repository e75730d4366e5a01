"""Decide where a hack comes from and which folder it is installed into."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

from .paths import expand_home
from .validation import is_remote_source, sanitize_hack_name

logger = logging.getLogger(__name__)

DEFAULT_HACK_NAME = "hack"


class SourceKind(Enum):
    """Where the archive bytes are read from."""

    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class ResolvedHack:
    """Identity of a hack for one install run."""

    source_kind: SourceKind
    source: str
    effective_name: str
    install_directory: Path

    @property
    def is_remote(self) -> bool:
        return self.source_kind is SourceKind.REMOTE


def _stem_or_default(stem: str) -> str:
    # Derived names must be usable as a directory inside the game directory
    name = sanitize_hack_name(stem).strip()
    if not name.strip("."):
        return DEFAULT_HACK_NAME
    return name


def name_from_url(url: str) -> str:
    """``https://host/hacks/super-hack.zip?token=abc`` -> ``super-hack``.

    Reserved characters are cleaned up as in :func:`sanitize_hack_name`.
    """
    without_query = url.split("?", 1)[0]
    last_segment = without_query.rsplit("/", 1)[-1]
    return _stem_or_default(PurePosixPath(last_segment).stem if last_segment else "")


def name_from_local_path(path: str) -> str:
    return _stem_or_default(Path(expand_home(path)).stem)


def source_kind_of(hack_source: str) -> SourceKind:
    return SourceKind.REMOTE if is_remote_source(hack_source) else SourceKind.LOCAL


def resolve_hack(game_directory: str, hack_source: str, hack_name: str = "") -> ResolvedHack:
    """Resolve the source kind, effective name and install directory.

    A non-blank ``hack_name`` is used verbatim; it must already have passed
    name validation. The install directory is not created here.
    """
    kind = source_kind_of(hack_source)

    if hack_name.strip():
        effective_name = hack_name
    elif kind is SourceKind.REMOTE:
        effective_name = name_from_url(hack_source)
    else:
        effective_name = name_from_local_path(hack_source)

    source = hack_source if kind is SourceKind.REMOTE else expand_home(hack_source)
    install_directory = Path(expand_home(game_directory)) / effective_name

    logger.debug("Resolved %s hack %r -> %s", kind.value, effective_name, install_directory)
    return ResolvedHack(
        source_kind=kind,
        source=source,
        effective_name=effective_name,
        install_directory=install_directory,
    )
