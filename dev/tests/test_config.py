from __future__ import annotations

import json
from pathlib import Path

import pytest

from hack_downloader.config import GameConfig, Settings, get_config_path, load_config, save_config
from hack_downloader.exceptions import ConfigurationError


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    settings = load_config(tmp_path / "nope.json")

    assert settings.cookie == ""
    assert settings.emulator_args == "%1"
    assert settings.request_timeout == 300
    assert settings.wait_for_patches is False
    assert settings.games == {}


def test_load_json(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "cookie": "session=1",
        "games": {"smw": {"directory": "~/smw", "original_copy": "~/smw.sfc"}},
        "window_size": [800, 600],
    }))

    settings = load_config(path)

    assert settings.cookie == "session=1"
    assert settings.game("smw") == GameConfig(directory="~/smw", original_copy="~/smw.sfc")
    assert settings.game("other") is None


def test_load_yaml(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("emulator_path: /opt/snes9x\nwait_for_patches: true\n")

    settings = load_config(path)

    assert settings.emulator_path == "/opt/snes9x"
    assert settings.wait_for_patches is True


def test_empty_yaml_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("")

    assert load_config(path) == Settings()


@pytest.mark.parametrize(
    ("name", "content"),
    [
        ("config.json", "{not json"),
        ("config.json", "[1, 2]"),
        ("config.json", '{"request_timeout": -1}'),
        ("config.yaml", "games:\n  smw: {directory: x}\n"),
    ],
)
def test_invalid_config_raises(tmp_path: Path, name: str, content: str) -> None:
    path = tmp_path / name
    path.write_text(content)

    with pytest.raises(ConfigurationError) as excinfo:
        load_config(path)

    assert excinfo.value.details["file_path"] == str(path)


@pytest.mark.parametrize("name", ["config.json", "config.yaml"])
def test_save_and_reload(tmp_path: Path, name: str) -> None:
    settings = Settings(cookie="c", games={"smw": GameConfig(directory="d", original_copy="o")})

    path = save_config(settings, tmp_path / "nested" / name)

    assert load_config(path) == settings


def test_config_path_env_override(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HACK_DOWNLOADER_CONFIG", str(tmp_path / "custom.yaml"))

    assert get_config_path() == tmp_path / "custom.yaml"


def test_default_config_path(monkeypatch) -> None:
    monkeypatch.delenv("HACK_DOWNLOADER_CONFIG", raising=False)

    assert get_config_path().name == "config.json"
