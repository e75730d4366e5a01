"""Pydantic models for the settings file."""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class _BaseConfigModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class GameConfig(_BaseConfigModel):
    """A game hacks are installed for."""

    directory: str
    original_copy: str


class Settings(_BaseConfigModel):
    """Application settings, shared by every install."""

    cookie: str = ""
    open_hack_folder_after_download: bool = False
    emulator_path: Optional[str] = None
    emulator_args: str = "%1"
    resources_dir: Optional[str] = None
    patcher_path: Optional[str] = None
    wait_for_patches: bool = False
    request_timeout: Optional[float] = Field(default=300.0, gt=0)
    games: Dict[str, GameConfig] = Field(default_factory=dict)

    def game(self, name: str) -> Optional[GameConfig]:
        return self.games.get(name)
