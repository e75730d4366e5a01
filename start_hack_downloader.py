#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Hack Downloader - Startup Script

Installs SNES ROM hacks (download or local zip, extract, flatten, patch) and
manages the hacks already installed for a game.
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from hack_downloader.app import (
    InstallRequest,
    delete_hack,
    filter_hacks,
    install_hack,
    list_hacks,
    play_hack,
)
from hack_downloader.config import Settings, load_config
from hack_downloader.core import (
    sanitize_hack_name,
    validate_directory_path,
    validate_file_path,
    validate_hack_download_source,
    validate_hack_name_or_empty,
)
from hack_downloader.exceptions import BaseError, ConfigurationError
from hack_downloader.logging_config import setup_logging
from hack_downloader.utils.result import error_message, is_err
from hack_downloader.version import load_version

logger = logging.getLogger(__name__)

VALIDATORS = {
    "name": validate_hack_name_or_empty,
    "source": validate_hack_download_source,
    "directory": validate_directory_path,
    "file": validate_file_path,
}


def _add_game_arguments(parser: argparse.ArgumentParser, need_original: bool = False) -> None:
    parser.add_argument("--game", help="Game name from the settings file")
    parser.add_argument("--game-dir", help="Directory hacks are installed into")
    if need_original:
        parser.add_argument("--original", help="Original (unpatched) ROM the patches apply to")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses command line arguments."""
    parser = argparse.ArgumentParser(description="Hack Downloader - SNES ROM hack installer")
    parser.add_argument("--version", action="store_true", help="Show version information")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    parser.add_argument("--config", help="Settings file (JSON or YAML)")
    parser.add_argument("--log-dir", help="Also write a rotating log file into this directory")

    sub = parser.add_subparsers(dest="command")

    install = sub.add_parser("install", help="Download or unpack a hack and apply its patches")
    install.add_argument("source", help="http(s) URL or path of a local .zip")
    _add_game_arguments(install, need_original=True)
    install.add_argument("--name", default="", help="Hack folder name (derived from the source if empty)")
    install.add_argument("--cookie", help="Cookie header sent with the download")
    install.add_argument("--open", dest="open_after", action="store_true", default=None,
                         help="Open the hack folder when done")
    install.add_argument("--wait", action="store_true", help="Wait for the patcher and report each result")

    listing = sub.add_parser("list", help="List installed hacks")
    _add_game_arguments(listing)
    listing.add_argument("--filter", default="", help="Only hacks whose name contains this text")

    delete = sub.add_parser("delete", help="Delete an installed hack")
    _add_game_arguments(delete)
    delete.add_argument("hack", help="Hack folder name")
    delete.add_argument("--sfc", help="Only delete this .sfc file of the hack")

    play = sub.add_parser("play", help="Start an installed hack")
    _add_game_arguments(play)
    play.add_argument("hack", help="Hack folder name")
    play.add_argument("--sfc", help="ROM file to start (first one by default)")

    validate = sub.add_parser("validate", help="Check a value the way the installer does")
    validate.add_argument("kind", choices=sorted(VALIDATORS) + ["sanitize"])
    validate.add_argument("value")

    return parser.parse_args(argv)


def _game_paths(args: argparse.Namespace, settings: Settings) -> Tuple[str, str]:
    directory = getattr(args, "game_dir", None) or ""
    original = getattr(args, "original", None) or ""
    if args.game:
        game = settings.game(args.game)
        if game is None:
            raise ConfigurationError(f'Unknown game "{args.game}"')
        directory = directory or game.directory
        original = original or game.original_copy
    if not directory:
        raise ConfigurationError("No game directory given (use --game or --game-dir)")
    return directory, original


def _select(args: argparse.Namespace, game_directory: str):
    matches = [hack for hack in list_hacks(game_directory) if hack.name == args.hack]
    if args.sfc:
        matches = [hack for hack in matches if hack.sfc_name == args.sfc]
    if not matches:
        raise ConfigurationError(f'No installed hack "{args.hack}"')
    return matches


def run_install(args: argparse.Namespace, settings: Settings) -> int:
    game_directory, original = _game_paths(args, settings)
    if args.cookie is not None:
        settings = settings.model_copy(update={"cookie": args.cookie})
    if args.wait:
        settings = settings.model_copy(update={"wait_for_patches": True})

    request = InstallRequest.from_settings(
        settings,
        game_directory=game_directory,
        game_original_copy=original,
        hack_source=args.source,
        hack_name=args.name,
        open_after=args.open_after,
    )
    result = install_hack(request, settings=settings)
    if is_err(result):
        print(f"Error: {error_message(result)}")
        return 1

    report = result.value
    print(f"Installed {report.effective_name} into {report.install_directory}")
    for launch in report.launches:
        print(f"  {launch.job.patch_path.name} -> {launch.job.output_path.name}")
    for outcome in report.failed_patches:
        print(f"  FAILED {outcome.job.patch_path.name}: {outcome.error}")
    return 1 if report.failed_patches else 0


def run_list(args: argparse.Namespace, settings: Settings) -> int:
    game_directory, _ = _game_paths(args, settings)
    hacks = filter_hacks(list_hacks(game_directory), args.filter)
    for hack in hacks:
        print(f"{hack.name if hack.is_first_sfc else '':<40} {hack.sfc_name}")
    if not hacks:
        print("No hacks installed")
    return 0


def run_delete(args: argparse.Namespace, settings: Settings) -> int:
    game_directory, _ = _game_paths(args, settings)
    for hack in _select(args, game_directory):
        removed = delete_hack(hack)
        print(f"Deleted {hack.sfc_name}" + (f" and removed {hack.directory}" if removed else ""))
    return 0


def run_play(args: argparse.Namespace, settings: Settings) -> int:
    game_directory, _ = _game_paths(args, settings)
    hack = _select(args, game_directory)[0]
    result = play_hack(str(hack.sfc_path), settings)
    if is_err(result):
        print(f"Error: {error_message(result)}")
        return 1
    return 0


def run_validate(args: argparse.Namespace) -> int:
    if args.kind == "sanitize":
        print(sanitize_hack_name(args.value))
        return 0
    result = VALIDATORS[args.kind](args.value)
    if is_err(result):
        print(error_message(result))
        return 1
    print("OK")
    return 0


COMMANDS = {
    "install": run_install,
    "list": run_list,
    "delete": run_delete,
    "play": run_play,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to start the application."""
    args = parse_arguments(argv)

    if args.version:
        print(f"Hack Downloader v{load_version()}")
        return 0

    setup_logging(
        log_level="DEBUG" if args.debug else "WARNING",
        log_dir=args.log_dir,
        enable_file_logging=bool(args.log_dir),
    )
    logger.debug("Debug mode enabled")

    if args.command is None:
        print("No command given (see --help)")
        return 1
    if args.command == "validate":
        return run_validate(args)

    try:
        settings = load_config(args.config)
        return COMMANDS[args.command](args, settings)
    except BaseError as e:
        logger.debug("Command %s failed: %s", args.command, e.to_dict())
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
