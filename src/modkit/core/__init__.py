"""Shared primitives: errors, result envelope, logging, hashing, settings."""

from modkit.core.errors import (
    ArchiveAssemblyError,
    ArtifactNotFoundError,
    CompilationError,
    DependencyResolutionError,
    DuplicateEntryError,
    ErrorCategory,
    ErrorContext,
    InvariantViolation,
    ModkitError,
    UnspecifiedVersionError,
    UserError,
    categorize_error,
)
from modkit.core.result import Err, Ok, Result

__all__ = [
    "ArchiveAssemblyError",
    "ArtifactNotFoundError",
    "CompilationError",
    "DependencyResolutionError",
    "DuplicateEntryError",
    "ErrorCategory",
    "ErrorContext",
    "InvariantViolation",
    "ModkitError",
    "UnspecifiedVersionError",
    "UserError",
    "categorize_error",
    "Err",
    "Ok",
    "Result",
]
