"""Hack Downloader - install SNES ROM hacks from a URL or a local archive."""

from .version import load_version

__version__ = load_version()
