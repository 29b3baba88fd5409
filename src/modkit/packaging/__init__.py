"""Artifacts, closure resolution, archive assembly and bundles."""

from modkit.packaging.archive import ArchiveAddSpec, ArchiveAssembler, ArchiveReport
from modkit.packaging.artifacts import ArtifactDescriptor, ArtifactID, ArtifactInfo, SearchPath
from modkit.packaging.bundle import BundleAssembler, BundleReport
from modkit.packaging.resolver import DependencyClosureResolver

__all__ = [
    "ArchiveAddSpec",
    "ArchiveAssembler",
    "ArchiveReport",
    "ArtifactDescriptor",
    "ArtifactID",
    "ArtifactInfo",
    "SearchPath",
    "BundleAssembler",
    "BundleReport",
    "DependencyClosureResolver",
]
