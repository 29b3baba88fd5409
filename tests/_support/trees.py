"""
Filesystem builders for module source trees, outputs and artifacts.
"""

from __future__ import annotations

import json
import os
import zipfile
from pathlib import Path


class ModuleTree:
    """A module laid out under ``root``: ``src/``, ``test/``, ``out/``."""

    def __init__(self, root: Path):
        self.root = root
        self.src = root / "src"
        self.test = root / "test"
        self.out = root / "out"
        self.src.mkdir(parents=True, exist_ok=True)

    def declare(self, name: str) -> Path:
        return self.source("module-info.java", f"module {name} {{\n}}\n")

    def source(self, rel: str, content: str = "class X {}\n") -> Path:
        path = self.src / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def test_source(self, rel: str, content: str = "class T {}\n") -> Path:
        path = self.test / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def backdate(self, mtime_ns: int = 1_000_000_000 * 10**9) -> None:
        """Pin every source mtime well before any output the test writes."""
        for root in (self.src, self.test):
            for path in root.rglob("*"):
                if path.is_file():
                    set_mtime(path, mtime_ns)


def touch(path: Path, mtime_ns: int | None = None, content: bytes = b"") -> Path:
    """Create ``path`` (and parents), optionally pinning its mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    if mtime_ns is not None:
        os.utime(path, ns=(mtime_ns, mtime_ns))
    return path


def set_mtime(path: Path, mtime_ns: int) -> None:
    os.utime(path, ns=(mtime_ns, mtime_ns))


def write_artifact(
    directory: Path,
    name: str,
    version: str | None,
    requires: list[tuple[str, str | None]] = (),
    *,
    filename: str | None = None,
    exploded: bool = False,
) -> Path:
    """Write a packaged (zip) or exploded artifact with a JSON descriptor."""
    descriptor: dict = {"name": name, "requires": [{"name": n, "version": v} for n, v in requires]}
    if version is not None:
        descriptor["version"] = version
    payload = json.dumps(descriptor)

    directory.mkdir(parents=True, exist_ok=True)
    if exploded:
        location = directory / (filename or f"{name}@{version}")
        location.mkdir(parents=True, exist_ok=True)
        (location / "module-info.json").write_text(payload)
        return location

    location = directory / (filename or f"{name}@{version}.jar")
    with zipfile.ZipFile(location, "w") as archive:
        archive.writestr("module-info.json", payload)
        archive.writestr(f"{name.replace('.', '/')}/Api.class", b"\xca\xfe\xba\xbe")
    return location


def write_zip(path: Path, entries: dict[str, bytes | None]) -> Path:
    """Write a zip with ``entries`` in order; ``None`` content marks a directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, b"" if content is None else content)
    return path


def zip_names(path: Path) -> list[str]:
    with zipfile.ZipFile(path) as archive:
        return archive.namelist()


def zip_read(path: Path, name: str) -> bytes:
    with zipfile.ZipFile(path) as archive:
        return archive.read(name)
