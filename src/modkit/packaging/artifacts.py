"""
Artifact identities, descriptors, and search-path inspection.

An artifact is a named, optionally versioned unit of packaged output that
declares which other artifacts it requires. modkit never parses compiled
code; every artifact carries a JSON descriptor instead::

    {"name": "com.example.app", "version": "1.2.0",
     "requires": [{"name": "com.example.lib", "version": "2.0"},
                  {"name": "java.base"}]}

Search-path locations come in three shapes:

- **Packaged:** an archive file whose ``module-info.json`` entry holds the descriptor
- **Exploded:** a directory holding ``module-info.json``
- **Directory of packaged artifacts:** every archive directly inside it

Locations without a readable, valid descriptor are not artifacts and are
skipped silently.

Examples:
    >>> ArtifactID.parse("com.example.lib@2.0")
    ArtifactID(name='com.example.lib', version='2.0')
    >>> str(ArtifactID("java.base"))
    'java.base'

Tags:
    artifacts, descriptor, search-path, pydantic, modkit

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import zipfile
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from modkit.core.logging import get_logger
from modkit.core.settings import ModkitSettings

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArtifactID:
    """``(name, version)``; equality and hashing use both fields."""

    name: str
    version: str | None = None

    @classmethod
    def parse(cls, text: str) -> ArtifactID:
        name, sep, version = text.partition("@")
        if not name or (sep and not version):
            raise ValueError(f"Invalid artifact id: {text!r}")
        return cls(name, version or None)

    def __str__(self) -> str:
        return self.name if self.version is None else f"{self.name}@{self.version}"


@dataclass(frozen=True)
class ArtifactInfo:
    """An artifact found on disk and what it requires."""

    id: ArtifactID
    location: Path
    requires: tuple[ArtifactID, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "location": str(self.location),
            "requires": [str(r) for r in self.requires],
        }


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------


class Requirement(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    version: str | None = None


class ArtifactDescriptor(BaseModel):
    """The ``module-info.json`` document stored in every artifact."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    version: str | None = None
    requires: list[Requirement] = Field(default_factory=list)

    @property
    def id(self) -> ArtifactID:
        return ArtifactID(self.name, self.version)

    def requirement_ids(self) -> tuple[ArtifactID, ...]:
        return tuple(ArtifactID(r.name, r.version) for r in self.requires)

    def to_bytes(self) -> bytes:
        return self.model_dump_json(exclude_none=True, indent=2).encode("utf-8") + b"\n"


# ---------------------------------------------------------------------------
# Search path
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SearchPath:
    """Ordered artifact locations; earlier entries win on duplicates."""

    entries: tuple[Path, ...] = ()

    @classmethod
    def of(cls, entries: Iterable[Path | str]) -> SearchPath:
        return cls(tuple(Path(e) for e in entries))

    def with_entry(self, entry: Path) -> SearchPath:
        return SearchPath(self.entries + (entry,))

    def __iter__(self) -> Iterator[Path]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def read_descriptor(location: Path, settings: ModkitSettings) -> ArtifactDescriptor | None:
    """Descriptor of a packaged or exploded artifact, or None if it is not one."""
    entry = settings.descriptor_entry
    try:
        if location.is_dir():
            descriptor_file = location / entry
            if not descriptor_file.is_file():
                return None
            raw = descriptor_file.read_bytes()
        elif location.is_file():
            with zipfile.ZipFile(location) as archive:
                raw = archive.read(entry)
        else:
            return None
        return ArtifactDescriptor.model_validate_json(raw)
    except (zipfile.BadZipFile, KeyError, ValidationError) as e:
        logger.debug("artifact.not_an_artifact", location=str(location), reason=type(e).__name__)
        return None


def inspect_artifact(location: Path, settings: ModkitSettings) -> ArtifactInfo | None:
    descriptor = read_descriptor(location, settings)
    if descriptor is None:
        return None
    return ArtifactInfo(id=descriptor.id, location=location, requires=descriptor.requirement_ids())


def _candidates(entry: Path, settings: ModkitSettings) -> Iterator[Path]:
    if entry.is_dir() and not (entry / settings.descriptor_entry).is_file():
        for child in sorted(entry.iterdir()):
            if child.is_file() and child.name.endswith(settings.archive_suffix):
                yield child
    else:
        yield entry


def index_search_path(search_path: Iterable[Path], settings: ModkitSettings) -> dict[ArtifactID, ArtifactInfo]:
    """
    Map every artifact on ``search_path`` by its identity.

    The first location in search-path order wins when two locations carry
    the same identity. An empty search path gives an empty index.
    """
    index: dict[ArtifactID, ArtifactInfo] = {}
    for entry in search_path:
        for candidate in _candidates(entry, settings):
            info = inspect_artifact(candidate, settings)
            if info is None:
                continue
            if info.id in index:
                logger.debug(
                    "artifact.shadowed",
                    artifact=str(info.id),
                    location=str(candidate),
                    winner=str(index[info.id].location),
                )
                continue
            index[info.id] = info
    return index


__all__ = [
    "ArtifactID",
    "ArtifactInfo",
    "Requirement",
    "ArtifactDescriptor",
    "SearchPath",
    "read_descriptor",
    "inspect_artifact",
    "index_search_path",
]
