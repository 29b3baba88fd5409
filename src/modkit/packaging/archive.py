"""
Archive assembly: a base archive plus overrides and additions.

``ArchiveAssembler.extend`` writes a new zip archive holding every entry of a
base archive, with some entries replaced and new ones appended. The base is
only ever read.

Manifesto:
    Archive output must be predictable from its inputs alone:

    - **Validate first:** No output file exists until every input checks out
    - **Stable order:** Base entries keep their order, overrides keep their slot
    - **Append in given order:** Unmatched additions follow, in caller order
    - **Ambiguity is an error:** Two different sources for one path fail

Architecture:
    ::

        base.jar entries          adds (path → source)
        ─────────────────         ─────────────────────
        META-INF/                 META-INF/mod/          (new dir)
        META-INF/MANIFEST.MF  ◄── META-INF/MANIFEST.MF   (override)
        launcher/Main.class       META-INF/mod/a@1.jar   (new file)
                │
                ▼
        [header bytes] + zip:
        META-INF/, META-INF/MANIFEST.MF*, launcher/Main.class,
        META-INF/mod/, META-INF/mod/a@1.jar

Features:
    - **Directory entries:** paths ending in ``/`` with no source
    - **File entries:** any other path; timestamp taken from the source file
    - **Header:** optional bytes before the zip data (self-executing programs);
      offsets stay valid because they are absolute, as with ``zipapp``

Examples:
    >>> adds = [ArchiveAddSpec.directory("META-INF/mod/"),
    ...         ArchiveAddSpec.file(Path("out/a@1.jar"), "META-INF/mod/a@1.jar")]
    >>> ArchiveAssembler().extend(Path("base.jar"), Path("out/fat.jar"), adds)  # doctest: +SKIP
    ArchiveReport(output=PosixPath('out/fat.jar'), entries=5, ...)

Guardrails:
    ❌ DON'T: Point ``output`` at ``base``
    ✅ DO: Copy the base aside and extend the copy to update in place

Tags:
    archive, zip, packaging, override, modkit

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import os
import shutil
import zipfile
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from modkit.core.errors import ArchiveAssemblyError, DuplicateEntryError
from modkit.core.logging import get_logger

logger = get_logger(__name__)

# Earliest timestamp a zip entry can carry.
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArchiveAddSpec:
    """One addition: ``source`` written at ``path`` inside the archive.

    A ``path`` ending in ``/`` is a directory entry and has no source.
    """

    path: str
    source: Path | None = None

    def __post_init__(self) -> None:
        if not self.path or self.path.startswith("/"):
            raise ValueError(f"Invalid path in archive: {self.path!r}")
        if self.is_directory and self.source is not None:
            raise ValueError(f"Directory entry cannot have a source: {self.path}")
        if not self.is_directory and self.source is None:
            raise ValueError(f"File entry requires a source: {self.path}")

    @property
    def is_directory(self) -> bool:
        return self.path.endswith("/")

    @classmethod
    def directory(cls, path: str) -> ArchiveAddSpec:
        return cls(path if path.endswith("/") else path + "/")

    @classmethod
    def file(cls, source: Path, path: str) -> ArchiveAddSpec:
        return cls(path, Path(source))

    def normalized_source(self) -> str | None:
        if self.source is None:
            return None
        return os.path.normpath(os.path.abspath(self.source))


@dataclass(frozen=True)
class ArchiveReport:
    """What an ``extend`` or ``create`` call wrote."""

    output: Path
    entries: int
    overridden: tuple[str, ...] = ()
    appended: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "output": str(self.output),
            "entries": self.entries,
            "overridden": list(self.overridden),
            "appended": list(self.appended),
        }


def tree_specs(root: Path, prefix: str = "") -> list[ArchiveAddSpec]:
    """Directory and file additions for everything below ``root``, sorted."""
    specs: list[ArchiveAddSpec] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        rel = Path(dirpath).relative_to(root).as_posix()
        base = prefix if rel == "." else f"{prefix}{rel}/"
        if rel != ".":
            specs.append(ArchiveAddSpec.directory(base))
        for name in sorted(filenames):
            specs.append(ArchiveAddSpec.file(Path(dirpath, name), base + name))
    return specs


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------


class ArchiveAssembler:
    """Writes zip archives layered over a base archive."""

    def __init__(self, *, compression: int = zipfile.ZIP_DEFLATED) -> None:
        self._compression = compression

    def extend(
        self,
        base: Path,
        output: Path,
        adds: Sequence[ArchiveAddSpec],
        header: bytes | None = None,
    ) -> ArchiveReport:
        """Write ``output`` as ``base`` with ``adds`` overriding or appended.

        Raises:
            ArchiveAssemblyError: ``base`` or an added source is not a regular file
            DuplicateEntryError: two additions target one path with different sources
        """
        if not base.is_file():
            raise ArchiveAssemblyError(f"No such base archive: {base}").with_context(path=str(base))
        return self._assemble(base, output, adds, header)

    def create(
        self,
        output: Path,
        adds: Sequence[ArchiveAddSpec],
        header: bytes | None = None,
    ) -> ArchiveReport:
        """Write ``output`` holding exactly ``adds``, in order."""
        return self._assemble(None, output, adds, header)

    def update(self, archive: Path, adds: Sequence[ArchiveAddSpec]) -> ArchiveReport:
        """Extend ``archive`` in place by copying it aside and extending the copy."""
        if not archive.is_file():
            raise ArchiveAssemblyError(f"No such archive: {archive}").with_context(path=str(archive))
        aside = archive.with_name(archive.name + ".orig")
        shutil.copy2(archive, aside)
        try:
            return self.extend(aside, archive, adds)
        finally:
            aside.unlink()

    # -- internal helpers ----------------------------------------------------

    def _assemble(
        self,
        base: Path | None,
        output: Path,
        adds: Sequence[ArchiveAddSpec],
        header: bytes | None,
    ) -> ArchiveReport:
        pending = self._validate(adds)
        overridden: list[str] = []
        entries = 0

        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "wb") as fp:
            if header:
                fp.write(header)
            with zipfile.ZipFile(fp, "w", compression=self._compression, strict_timestamps=False) as dst:
                if base is not None:
                    with zipfile.ZipFile(base, "r") as src:
                        for info in src.infolist():
                            spec = pending.pop(info.filename, None)
                            if spec is None:
                                dst.writestr(_copy_info(info), src.read(info))
                            else:
                                self._write(dst, spec, info.date_time)
                                overridden.append(spec.path)
                            entries += 1

                appended = list(pending.values())
                for spec in appended:
                    self._write(dst, spec, _ZIP_EPOCH)
                    entries += 1

        report = ArchiveReport(
            output=output,
            entries=entries,
            overridden=tuple(overridden),
            appended=tuple(s.path for s in appended),
        )
        log = logger.bind(
            base=str(base) if base is not None else None,
            output=str(output),
            entries=entries,
            overridden=len(overridden),
            appended=len(appended),
        )
        log.info("archive.extended" if base is not None else "archive.created")
        return report

    @staticmethod
    def _validate(adds: Iterable[ArchiveAddSpec]) -> dict[str, ArchiveAddSpec]:
        by_path: dict[str, ArchiveAddSpec] = {}
        for spec in adds:
            previous = by_path.get(spec.path)
            if previous is not None:
                if previous.normalized_source() != spec.normalized_source():
                    raise DuplicateEntryError(
                        f"Ambiguous override of {spec.path}: {previous.source} and {spec.source}"
                    ).with_context(path=spec.path)
                continue
            if spec.source is not None and not spec.source.is_file():
                raise ArchiveAssemblyError(f"Not a regular file: {spec.source}").with_context(
                    path=str(spec.source)
                )
            by_path[spec.path] = spec
        return by_path

    def _write(self, dst: zipfile.ZipFile, spec: ArchiveAddSpec, date_time: tuple) -> None:
        if spec.source is None:
            info = zipfile.ZipInfo(spec.path, date_time)
            info.external_attr = (0o40755 << 16) | 0x10
            dst.writestr(info, b"", compress_type=zipfile.ZIP_STORED)
        else:
            dst.write(spec.source, arcname=spec.path, compress_type=self._compression)


def _copy_info(info: zipfile.ZipInfo) -> zipfile.ZipInfo:
    copied = zipfile.ZipInfo(info.filename, info.date_time)
    copied.compress_type = info.compress_type
    copied.external_attr = info.external_attr
    copied.create_system = info.create_system
    copied.comment = info.comment
    return copied


__all__ = ["ArchiveAddSpec", "ArchiveReport", "ArchiveAssembler", "tree_specs"]
