from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from hack_downloader.exceptions import PatcherNotFoundError, PatchLaunchError
from hack_downloader.patching.patcher import (
    PatchFormat,
    PatcherPlatform,
    apply_patches,
    build_command,
    detect_platform,
    find_patch_files,
    locate_patcher,
    wait_for_patches,
)

FAKE_PATCHER = """
import shutil
import sys

_, flag, patch, base, output = sys.argv
assert flag == "--apply"
if patch.endswith("broken.bps"):
    sys.exit(3)
shutil.copyfile(base, output)
"""


@pytest.mark.parametrize(
    ("sys_platform", "expected"),
    [
        ("win32", PatcherPlatform.WINDOWS),
        ("cygwin", PatcherPlatform.WINDOWS),
        ("darwin", PatcherPlatform.MACOS),
        ("linux", PatcherPlatform.UNSUPPORTED),
    ],
)
def test_detect_platform(sys_platform: str, expected: PatcherPlatform) -> None:
    assert detect_platform(sys_platform) is expected


def test_locate_bundled_patcher(tmp_path: Path) -> None:
    bundled = tmp_path / "resources" / "flips.exe"
    bundled.parent.mkdir()
    bundled.write_bytes(b"")

    assert locate_patcher(resources_dir=str(tmp_path), platform=PatcherPlatform.WINDOWS) == bundled


def test_locate_patcher_unsupported_platform(tmp_path: Path) -> None:
    with pytest.raises(PatcherNotFoundError, match="Failed to locate patcher"):
        locate_patcher(resources_dir=str(tmp_path), platform=PatcherPlatform.UNSUPPORTED)


def test_locate_patcher_missing_executable(tmp_path: Path) -> None:
    with pytest.raises(PatcherNotFoundError) as excinfo:
        locate_patcher(resources_dir=str(tmp_path), platform=PatcherPlatform.MACOS)

    assert str(excinfo.value) == "Patcher not found"
    assert excinfo.value.details["patcher_path"] == str(tmp_path / "resources" / "multipatch")


def test_locate_patcher_override_wins(patcher_file: Path) -> None:
    assert locate_patcher(override=str(patcher_file), platform=PatcherPlatform.UNSUPPORTED) == patcher_file


def test_find_patch_files_is_case_sensitive(tmp_path: Path) -> None:
    for name in ("a.bps", "b.ips", "C.BPS", "readme.txt", "d.bps.txt"):
        (tmp_path / name).write_bytes(b"x")

    jobs = {job.patch_path.name: job for job in find_patch_files(tmp_path)}

    assert set(jobs) == {"a.bps", "b.ips"}
    assert jobs["a.bps"].format is PatchFormat.BPS
    assert jobs["a.bps"].output_path == tmp_path / "a.sfc"
    assert jobs["b.ips"].format is PatchFormat.IPS
    assert jobs["b.ips"].output_path == tmp_path / "b.sfc"


def test_apply_patches_launches_one_process_per_patch(tmp_path: Path, fake_spawn) -> None:
    (tmp_path / "p1.bps").write_bytes(b"x")
    (tmp_path / "p2.ips").write_bytes(b"x")
    base = tmp_path / "smw.sfc"

    launches = apply_patches("/opt/flips", find_patch_files(tmp_path), base, spawn=fake_spawn)

    assert len(launches) == 2
    assert sorted(fake_spawn.commands) == [
        ["/opt/flips", "--apply", str(tmp_path / "p1.bps"), str(base), str(tmp_path / "p1.sfc")],
        ["/opt/flips", "--apply", str(tmp_path / "p2.ips"), str(base), str(tmp_path / "p2.sfc")],
    ]
    assert all(launch.pid == 4242 for launch in launches)


def test_apply_patches_spawn_failure(tmp_path: Path) -> None:
    (tmp_path / "p1.bps").write_bytes(b"x")

    def failing_spawn(command):
        raise FileNotFoundError(command[0])

    with pytest.raises(PatchLaunchError) as excinfo:
        apply_patches(tmp_path / "flips", find_patch_files(tmp_path), tmp_path / "smw.sfc", spawn=failing_spawn)

    assert str(excinfo.value) == "Failed to launch patcher for p1.bps"
    assert excinfo.value.error_code == "PATCH_LAUNCH_ERROR"


def test_build_command_order(tmp_path: Path) -> None:
    (tmp_path / "p.bps").write_bytes(b"x")
    job = find_patch_files(tmp_path)[0]

    assert build_command("flips", job, "base.sfc") == ["flips", "--apply", str(job.patch_path), "base.sfc", str(job.output_path)]


@pytest.mark.integration
def test_wait_for_patches_collects_exit_status(tmp_path: Path) -> None:
    script = tmp_path / "fake_patcher.py"
    script.write_text(FAKE_PATCHER)
    hack_dir = tmp_path / "hack"
    hack_dir.mkdir()
    (hack_dir / "good.bps").write_bytes(b"x")
    (hack_dir / "broken.bps").write_bytes(b"x")
    base = tmp_path / "smw.sfc"
    base.write_bytes(b"ROM")

    def spawn(command):
        return subprocess.Popen([sys.executable, str(script)] + command[1:])

    launches = apply_patches("fake-patcher", find_patch_files(hack_dir), base, spawn=spawn)
    outcomes = {o.job.patch_path.name: o for o in wait_for_patches(launches, timeout=60)}

    assert outcomes["good.bps"].success
    assert (hack_dir / "good.sfc").read_bytes() == b"ROM"
    assert not outcomes["broken.bps"].success
    assert outcomes["broken.bps"].return_code == 3
    assert outcomes["broken.bps"].error == "patcher exited with code 3"
