"""Async wrappers for the install operation."""

from __future__ import annotations

import asyncio
from typing import Optional

from .dependencies import InstallerDependencies
from .installer import install_hack
from .models import InstallReport, InstallRequest
from ..config.models import Settings
from ..utils.result import Result


async def async_install_hack(
    request: InstallRequest,
    *,
    settings: Optional[Settings] = None,
    deps: Optional[InstallerDependencies] = None,
) -> Result[InstallReport]:
    # The download and the process launches block; keep them off the loop
    return await asyncio.to_thread(install_hack, request, settings=settings, deps=deps)
