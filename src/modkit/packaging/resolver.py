"""Transitive dependency closure over a search path.

Breadth-first from the root artifact. Requirements on platform artifacts
are provided by the runtime and skipped; every other requirement must name a
version and be present on the search path.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from pathlib import Path

from modkit.core.errors import ArtifactNotFoundError, UnspecifiedVersionError
from modkit.core.logging import get_logger
from modkit.core.settings import ModkitSettings
from modkit.packaging.artifacts import ArtifactID, ArtifactInfo, index_search_path

logger = get_logger(__name__)


class DependencyClosureResolver:
    def __init__(self, settings: ModkitSettings):
        self._settings = settings

    def resolve(self, root: ArtifactID, search_path: Iterable[Path]) -> dict[ArtifactID, ArtifactInfo]:
        """
        Resolve every artifact ``root`` transitively requires, ``root`` included.

        Raises:
            ArtifactNotFoundError: ``root`` or a requirement is not on the search path
            UnspecifiedVersionError: a non-platform requirement has no version
        """
        index = index_search_path(search_path, self._settings)
        platform = self._settings.platform_artifacts

        resolved: dict[ArtifactID, ArtifactInfo] = {}
        unresolved: deque[ArtifactID] = deque([root])
        queued: set[ArtifactID] = {root}

        while unresolved:
            current = unresolved.popleft()
            info = index.get(current)
            if info is None:
                raise ArtifactNotFoundError(f"Artifact not found on search path: {current}").with_context(
                    artifact=str(current)
                )
            resolved[current] = info

            for requirement in info.requires:
                if requirement.name in platform:
                    continue
                if requirement.version is None:
                    raise UnspecifiedVersionError(
                        f"Artifact {current} requires {requirement.name} at an unspecified version"
                    ).with_context(artifact=str(current), requirement=requirement.name)
                if requirement not in queued:
                    queued.add(requirement)
                    unresolved.append(requirement)

        logger.info("closure.resolved", root=str(root), artifacts=len(resolved), indexed=len(index))
        return resolved


__all__ = ["DependencyClosureResolver"]
