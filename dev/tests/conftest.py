from __future__ import annotations

import sys
import zipfile
from pathlib import Path
from typing import Dict

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def pytest_configure() -> None:
    """Ensure pytest base temp directory exists for CI runs."""

    base_temp = ROOT / "temp" / "pytest"
    base_temp.mkdir(parents=True, exist_ok=True)


def build_zip(path: Path, members: Dict[str, bytes]) -> Path:
    """Write a zip holding ``members``; names ending in "/" become directories."""
    with zipfile.ZipFile(path, "w") as zf:
        for name, payload in members.items():
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, payload)
    return path


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content


class FakeHttp:
    """Stands in for ``requests.get`` and records every call."""

    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.calls = []

    def __call__(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        return self.response


class FakeProcess:
    def __init__(self, command, return_code: int = 0) -> None:
        self.command = command
        self.pid = 4242
        self.return_code = return_code

    def wait(self, timeout=None):
        return self.return_code


class FakeSpawn:
    """Records patcher commands instead of starting processes."""

    def __init__(self) -> None:
        self.commands = []

    def __call__(self, command):
        self.commands.append(list(command))
        return FakeProcess(command)


@pytest.fixture
def fake_spawn() -> FakeSpawn:
    return FakeSpawn()


@pytest.fixture
def patcher_file(tmp_path: Path) -> Path:
    patcher = tmp_path / "tools" / "flips"
    patcher.parent.mkdir()
    patcher.write_bytes(b"")
    return patcher


@pytest.fixture
def game(tmp_path: Path):
    """A game directory and its original ROM."""
    game_dir = tmp_path / "games" / "smw"
    game_dir.mkdir(parents=True)
    original = tmp_path / "smw.sfc"
    original.write_bytes(b"\x00" * 64)
    return game_dir, original
