"""Pytest configuration and shared fixtures for resourcefs tests."""

import zipfile
from pathlib import Path

import pytest


def write_archive(path: Path, entries: dict[str, bytes | None]) -> Path:
    """Write a zip-format archive. A None value creates a directory entry."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, data in entries.items():
            if data is None:
                archive.writestr(zipfile.ZipInfo(name), b"")
            else:
                archive.writestr(name, data)
    return path


@pytest.fixture
def resource_root(tmp_path: Path) -> Path:
    """
    Create a directory resource tree.

    Creates:
    - res/lang/en/hello.txt ("hi")
    - res/lang/en/bye.txt ("bye")
    - res/lang/en/extra/ (subdirectory, never listed)
    - res/common/missing.txt ("?")
    - res/data/config.json
    """
    root = tmp_path / "res"
    english = root / "lang" / "en"
    english.mkdir(parents=True)
    (english / "hello.txt").write_text("hi")
    (english / "bye.txt").write_text("bye")
    (english / "extra").mkdir()

    common = root / "common"
    common.mkdir()
    (common / "missing.txt").write_text("?")

    data = root / "data"
    data.mkdir()
    (data / "config.json").write_text('{"name": "demo", "size": 3}')

    return root


@pytest.fixture
def archive_root(tmp_path: Path) -> Path:
    """
    Create a directory of archives.

    Creates:
    - archives/pack.zip with sprites/ (dir entry), sprites/a.png, sprites/sub/b.png, readme.txt
    - archives/lib.jar with META-INF/MANIFEST.MF and assets/logo.txt
    """
    root = tmp_path / "archives"
    write_archive(
        root / "pack.zip",
        {
            "sprites/": None,
            "sprites/a.png": b"\x89PNG-a",
            "sprites/sub/b.png": b"\x89PNG-b",
            "readme.txt": b"pack readme",
        },
    )
    write_archive(
        root / "lib.jar",
        {
            "META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\r\nImplementation-Title: demo lib\r\n\r\n",
            "assets/logo.txt": b"LOGO",
        },
    )
    return root
