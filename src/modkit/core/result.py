"""
Result envelope for consistent success/failure handling.

``Ok[T]`` for success, ``Err[T]`` for failure. The orchestrator's ``run()``
entry point returns a ``Result`` so callers such as the CLI handle expected
build failures as values instead of wrapping every call in try/except.

Architecture:
    ::

        ┌─────────────────────────────────────────────┐
        │                 Result[T]                    │
        ├──────────────────────┬──────────────────────┤
        │       Ok[T]          │       Err[T]         │
        ├──────────────────────┼──────────────────────┤
        │ • value: T           │ • error: Exception   │
        │ • map()              │ • map_err()          │
        │ • flat_map()         │ • or_else()          │
        │ • unwrap()           │ • unwrap_or()        │
        └──────────────────────┴──────────────────────┘

Examples:
    >>> from modkit.core.result import Ok, Err
    >>> Ok(10).map(lambda x: x * 2).unwrap()
    20
    >>> Err(ValueError("oops")).map(lambda x: x * 2).unwrap_or(0)
    0

Guardrails:
    ❌ DON'T: Use unwrap() without checking is_ok() first
    ✅ DO: Use unwrap_or() or pattern matching for safe extraction

Tags:
    result-pattern, error-handling, modkit

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from modkit.core.errors import ModkitError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        return self

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    ``map()`` and ``flat_map()`` return the same Err unchanged so errors
    flow through a chain; ``unwrap()`` re-raises the wrapped exception.
    """

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the contained error."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[T], U]) -> Result[U]:
        return Err(self.error)

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        return Err(self.error)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform the error."""
        return Err(f(self.error))

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        """Recover from the error."""
        return f(self.error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, using ModkitError.to_dict() when available."""
        if isinstance(self.error, ModkitError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


__all__ = [
    "Result",
    "Ok",
    "Err",
]
