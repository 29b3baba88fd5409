"""Self-contained bundles and self-executing programs.

A bundle is the launcher runtime archive (``bundle_base``) with every
artifact of a module's closure stored under ``META-INF/mod/`` as
``<name>@<version>.jar``. A program is a launcher stub followed by the bundle
bytes, marked executable.
"""

from __future__ import annotations

import shutil
import stat
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from modkit.core.errors import UserError
from modkit.core.logging import get_logger
from modkit.core.settings import ModkitSettings
from modkit.packaging.archive import ArchiveAddSpec, ArchiveAssembler, ArchiveReport
from modkit.packaging.artifacts import ArtifactID, ArtifactInfo
from modkit.packaging.resolver import DependencyClosureResolver

logger = get_logger(__name__)

MODULE_DIRECTORY = "META-INF/mod/"


@dataclass(frozen=True)
class BundleReport:
    output: Path
    artifacts: tuple[ArtifactID, ...]
    archive: ArchiveReport

    def to_dict(self) -> dict:
        return {
            "output": str(self.output),
            "artifacts": [str(a) for a in self.artifacts],
            "archive": self.archive.to_dict(),
        }


class BundleAssembler:
    def __init__(
        self,
        settings: ModkitSettings,
        assembler: ArchiveAssembler,
        resolver: DependencyClosureResolver | None = None,
    ):
        self._settings = settings
        self._assembler = assembler
        self._resolver = resolver or DependencyClosureResolver(settings)

    def assemble(
        self,
        root: ArtifactID,
        search_path: Iterable[Path],
        output: Path,
        base: Path | None = None,
    ) -> BundleReport:
        """Resolve the closure of ``root`` and write the bundle to ``output``.

        Raises:
            UserError: no base archive given or configured
            DependencyResolutionError: the closure cannot be resolved
            ArchiveAssemblyError: a resolved artifact is not a packaged archive
        """
        base = base or self._settings.bundle_base
        if base is None:
            raise UserError("No bundle base archive configured (set MODKIT_BUNDLE_BASE)")

        closure = self._resolver.resolve(root, search_path)
        ordered = sorted(closure.values(), key=lambda info: str(info.id))

        adds = [ArchiveAddSpec.directory(MODULE_DIRECTORY)]
        adds += [ArchiveAddSpec.file(info.location, self.entry_path(info)) for info in ordered]
        archive = self._assembler.extend(base, output, adds)

        logger.info("bundle.assembled", root=str(root), output=str(output), artifacts=len(ordered))
        return BundleReport(output=output, artifacts=tuple(info.id for info in ordered), archive=archive)

    def entry_path(self, info: ArtifactInfo) -> str:
        return f"{MODULE_DIRECTORY}{info.id}{self._settings.archive_suffix}"

    def write_program(self, bundle: Path, program: Path, module: str, main_class: str) -> Path:
        """Write ``program`` as launcher stub + ``bundle`` and make it executable."""
        program.parent.mkdir(parents=True, exist_ok=True)
        with open(program, "wb") as out, open(bundle, "rb") as src:
            out.write(self._settings.render_launcher(module, main_class))
            shutil.copyfileobj(src, out)

        mode = program.stat().st_mode
        executable = mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
        if executable != mode:
            program.chmod(executable)

        logger.info("program.written", program=str(program), main_class=main_class)
        return program


__all__ = ["MODULE_DIRECTORY", "BundleReport", "BundleAssembler"]
