"""
Structured error types for modkit.

Provides a small hierarchy of typed errors with metadata for categorization,
reporting and root cause analysis through error chaining.

Instead of generic exceptions that lose context, ModkitError and its
subclasses carry:
- **Category:** What kind of failure (user, compilation, dependency, archive)
- **Context:** Structured metadata (module, artifact, path, custom fields)
- **Cause:** Chained underlying exception for root cause analysis

None of these errors are retryable. A build either runs to completion or
stops at the first failure, and the caller turns the error into an exit code.

Manifesto:
    - **Typed Error Hierarchy:** One error type per failure domain
    - **Tagged, not stringly-typed:** ErrorCategory routes reporting
    - **Rich Context:** Errors carry metadata for logging
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       ModkitError                                │
        │  (category, context, cause)                                      │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  UserError         CompilationError   DependencyResolutionError  │
        │  (USER)            (COMPILATION)      (DEPENDENCY)               │
        │                                            │                     │
        │                                       ArtifactNotFoundError      │
        │                                       UnspecifiedVersionError    │
        │                                                                  │
        │  ArchiveAssemblyError                                            │
        │  (ARCHIVE)                                                       │
        │       │                                                          │
        │  DuplicateEntryError                                             │
        └─────────────────────────────────────────────────────────────────┘

        InvariantViolation (RuntimeError, INVARIANT) - internal defect,
        deliberately outside the ModkitError tree so that handlers catching
        ModkitError never swallow it.

        OSError (IO) - filesystem failures propagate untouched.

Examples:
    >>> error = UserError("No source directory")
    >>> error.category
    <ErrorCategory.USER: 'USER'>

    >>> error = ArtifactNotFoundError("Artifact not found on search path: a@1")
    >>> error.with_context(artifact="a@1").context.artifact
    'a@1'

Guardrails:
    ❌ DON'T: Catch InvariantViolation to keep a build going
    ✅ DO: Let it surface; it means module isolation was broken

    ❌ DON'T: Wrap OSError in a ModkitError
    ✅ DO: Let filesystem failures propagate as-is

Tags:
    error-handling, exception-hierarchy, error-context, modkit

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Error categories for classification and reporting.

    Every failure the build core can produce falls in exactly one of these
    categories. The orchestrating caller uses the category to pick the
    message and exit behavior.

    Attributes:
        USER: Invalid or missing configuration, foreign output directory
        COMPILATION: The external compiler reported failure
        DEPENDENCY: Missing artifact or unspecified dependency version
        ARCHIVE: Missing base archive, missing source, duplicate entry
        INVARIANT: Internal defect, module isolation broken
        IO: Unchecked filesystem failure
        UNKNOWN: Anything else
    """

    USER = "USER"
    COMPILATION = "COMPILATION"
    DEPENDENCY = "DEPENDENCY"
    ARCHIVE = "ARCHIVE"
    INVARIANT = "INVARIANT"
    IO = "IO"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Typed fields for the metadata the build core knows about, plus a free
    ``metadata`` dict. ``to_dict()`` serializes all non-None fields for
    structured logging.

    Examples:
        >>> ctx = ErrorContext(module="com.example.app", path="out/classes")
        >>> ctx.to_dict()
        {'module': 'com.example.app', 'path': 'out/classes'}

    Attributes:
        module: Name of the module being built
        artifact: Artifact identity (``name@version``)
        path: Filesystem path or path-in-archive involved
        metadata: Additional key-value pairs
    """

    module: str | None = None
    artifact: str | None = None
    path: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["module", "artifact", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ModkitError(Exception):
    """
    Base exception for all expected modkit failures.

    All ModkitError instances carry:
    - **category:** ErrorCategory for classification
    - **context:** ErrorContext with structured metadata
    - **cause:** Optional underlying exception for chaining

    Subclasses set ``default_category``.

    Examples:
        >>> error = ModkitError("Something went wrong")
        >>> error.category
        <ErrorCategory.UNKNOWN: 'UNKNOWN'>
        >>> error.to_dict()["message"]
        'Something went wrong'
    """

    default_category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ModkitError:
        """
        Add context to this error (fluent API).

        Usage:
            raise UserError("No such main class").with_context(
                module="com.example.app",
                path="out/classes/com/example/Main.class",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# USER ERRORS
# =============================================================================


class UserError(ModkitError):
    """
    Invalid or missing configuration.

    Terminal and never retried; does not corrupt persisted state.
    """

    default_category = ErrorCategory.USER


# =============================================================================
# COMPILATION ERRORS
# =============================================================================


class CompilationError(ModkitError):
    """
    The compiler reported failure.

    ``message`` is the full rendered transcript, which spans several lines.
    """

    default_category = ErrorCategory.COMPILATION

    def __init__(self, message: str, *, source_files: int = 0, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.source_files = source_files


# =============================================================================
# DEPENDENCY ERRORS
# =============================================================================


class DependencyResolutionError(ModkitError):
    """Closure resolution failed. Fatal to bundle assembly only."""

    default_category = ErrorCategory.DEPENDENCY


class ArtifactNotFoundError(DependencyResolutionError):
    """A required artifact is not on the search path."""


class UnspecifiedVersionError(DependencyResolutionError):
    """An artifact requires another without naming its version."""


# =============================================================================
# ARCHIVE ERRORS
# =============================================================================


class ArchiveAssemblyError(ModkitError):
    """Missing base archive, missing source file, or bad archive input."""

    default_category = ErrorCategory.ARCHIVE


class DuplicateEntryError(ArchiveAssemblyError):
    """Two additions target the same path-in-archive with different sources."""


# =============================================================================
# INVARIANT VIOLATIONS
# =============================================================================


class InvariantViolation(RuntimeError):
    """
    Internal defect signal.

    Not a ModkitError: ``except ModkitError`` must never catch it.
    """

    category = ErrorCategory.INVARIANT


# =============================================================================
# HELPERS
# =============================================================================


def categorize_error(error: BaseException) -> ErrorCategory:
    """
    Determine the category of any exception.

    Examples:
        >>> categorize_error(UserError("x"))
        <ErrorCategory.USER: 'USER'>
        >>> categorize_error(FileNotFoundError("x"))
        <ErrorCategory.IO: 'IO'>
    """
    if isinstance(error, ModkitError):
        return error.category
    if isinstance(error, InvariantViolation):
        return ErrorCategory.INVARIANT
    if isinstance(error, OSError):
        return ErrorCategory.IO
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ModkitError",
    "UserError",
    "CompilationError",
    "DependencyResolutionError",
    "ArtifactNotFoundError",
    "UnspecifiedVersionError",
    "ArchiveAssemblyError",
    "DuplicateEntryError",
    "InvariantViolation",
    "categorize_error",
]
