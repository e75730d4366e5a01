#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""Hack Downloader - configuration package."""

from .models import GameConfig, Settings
from .io import get_config_path, load_config, save_config

__all__ = [
    'GameConfig',
    'Settings',
    'get_config_path',
    'load_config',
    'save_config',
]
