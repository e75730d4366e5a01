from __future__ import annotations

import pytest

from hack_downloader.app.launcher import (
    build_emulator_command,
    open_with_default_app,
    open_with_selected_app,
    play_hack,
)
from hack_downloader.config.models import Settings
from hack_downloader.utils.result import error_message, is_ok


def test_build_emulator_command_substitutes_placeholder() -> None:
    command = build_emulator_command("/roms/hack.sfc", "/opt/snes9x", '--fullscreen "%1" --rom %1')

    assert command == ["/opt/snes9x", "--fullscreen", "/roms/hack.sfc", "--rom", "/roms/hack.sfc"]


def test_build_emulator_command_keeps_quoted_arguments() -> None:
    command = build_emulator_command("a.sfc", "emu", "--title 'My Game' %1")

    assert command == ["emu", "--title", "My Game", "a.sfc"]


def test_open_with_selected_app_spawns() -> None:
    commands = []

    result = open_with_selected_app("a.sfc", "emu", "%1", spawn=lambda cmd: commands.append(cmd) or "proc")

    assert is_ok(result)
    assert result.value == "proc"
    assert commands == [["emu", "a.sfc"]]


def test_open_with_selected_app_bad_arguments() -> None:
    result = open_with_selected_app("a.sfc", "emu", '"unterminated', spawn=pytest.fail)

    assert error_message(result) == "Failed to parse emulator arguments"


def test_open_with_selected_app_spawn_error() -> None:
    def spawn(command):
        raise FileNotFoundError(2, "No such file or directory")

    result = open_with_selected_app("a.sfc", "emu", "%1", spawn=spawn)

    assert "No such file or directory" in error_message(result)


def test_open_with_default_app() -> None:
    opened = []

    assert is_ok(open_with_default_app("/roms", opener=opened.append))
    assert opened == ["/roms"]

    def failing(path):
        raise OSError("no handler")

    assert error_message(open_with_default_app("/roms", opener=failing)) == "Failed to open path"


def test_play_hack_uses_configured_emulator() -> None:
    commands = []
    settings = Settings(emulator_path="emu", emulator_args="-f %1")

    result = play_hack("a.sfc", settings, spawn=commands.append)

    assert is_ok(result)
    assert commands == [["emu", "-f", "a.sfc"]]


def test_play_hack_without_emulator_uses_default_app(monkeypatch) -> None:
    opened = []
    monkeypatch.setattr("hack_downloader.app.launcher.open_path", opened.append)

    assert is_ok(play_hack("a.sfc", Settings()))
    assert opened == ["a.sfc"]
