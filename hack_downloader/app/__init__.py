"""Application layer: the install operation and the hack library."""

from .async_api import async_install_hack
from .dependencies import InstallerDependencies, get_default_dependencies
from .installer import install_hack
from .launcher import open_with_default_app, open_with_selected_app, play_hack
from .library import InstalledHack, delete_hack, filter_hacks, list_hacks
from .models import InstallReport, InstallRequest

__all__ = [
    "async_install_hack",
    "InstallerDependencies",
    "get_default_dependencies",
    "install_hack",
    "open_with_default_app",
    "open_with_selected_app",
    "play_hack",
    "InstalledHack",
    "delete_hack",
    "filter_hacks",
    "list_hacks",
    "InstallReport",
    "InstallRequest",
]
