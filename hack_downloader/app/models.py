"""Request and report dataclasses for the install operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config.models import Settings
from ..core.source import ResolvedHack
from ..patching.patcher import PatchLaunch, PatchOutcome


@dataclass(frozen=True)
class InstallRequest:
    game_directory: str
    game_original_copy: str
    hack_source: str
    hack_name: str = ""
    auth_cookie: str = ""
    open_after: bool = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        game_directory: str,
        game_original_copy: str,
        hack_source: str,
        hack_name: str = "",
        open_after: Optional[bool] = None,
    ) -> "InstallRequest":
        """Fill the cookie and the open-folder flag from the settings."""
        return cls(
            game_directory=game_directory,
            game_original_copy=game_original_copy,
            hack_source=hack_source,
            hack_name=hack_name,
            auth_cookie=settings.cookie,
            open_after=settings.open_hack_folder_after_download if open_after is None else open_after,
        )


@dataclass
class InstallReport:
    hack: ResolvedHack
    patcher: Path
    launches: List[PatchLaunch] = field(default_factory=list)
    # Only filled when the wait_for_patches setting is on
    outcomes: List[PatchOutcome] = field(default_factory=list)

    @property
    def effective_name(self) -> str:
        return self.hack.effective_name

    @property
    def install_directory(self) -> Path:
        return self.hack.install_directory

    @property
    def failed_patches(self) -> List[PatchOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]
