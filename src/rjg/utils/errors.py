"""Typed exceptions raised while compiling and resolving templates.

Every error raised by the engine derives from :class:`GenerationError`.  As an
error propagates out of nested resolution calls each level records where it
was (object key, directive, variable) via :meth:`GenerationError.add_context`,
so the final message localizes the fault, e.g.::

    undefined variable '$nmae' (in key 'user' > directive '$arr' > key 'name')
"""

from __future__ import annotations

from collections.abc import Sequence


class GenerationError(ValueError):
    """Base class for template compilation and resolution errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.trail: list[str] = []

    def add_context(self, segment: str) -> GenerationError:
        """Prepend ``segment`` to the trail and return ``self`` for re-raising."""

        self.trail.insert(0, segment)
        return self

    def __str__(self) -> str:
        if not self.trail:
            return self.message
        return f"{self.message} (in {' > '.join(self.trail)})"


class TemplateError(GenerationError):
    """Raised when template text is not JSON or an object is ambiguous."""


class MalformedParametersError(GenerationError):
    """Raised when a directive receives parameters of the wrong shape."""

    def __init__(self, directive: str, detail: str) -> None:
        super().__init__(f"{directive}: {detail}")
        self.directive = directive


class InvalidBoundError(MalformedParametersError):
    """Raised for missing, non-numeric or inconsistent numeric bounds."""


class UndefinedVariableError(GenerationError):
    """Raised when a prefixed token is neither a directive nor a variable."""

    def __init__(self, token: str) -> None:
        super().__init__(f"undefined variable {token!r}")
        self.token = token


class NonStringKeyError(GenerationError):
    """Raised when an object key resolves to something other than a string."""

    def __init__(self, key: str, resolved: object) -> None:
        super().__init__(
            f"key {key!r} must resolve to a string, got {type(resolved).__name__}"
        )
        self.key = key


class VariableCycleError(GenerationError):
    """Raised when a variable refers back to itself, directly or not."""

    def __init__(self, chain: Sequence[str]) -> None:
        super().__init__("variable cycle detected: " + " -> ".join(chain))
        self.chain = tuple(chain)


__all__ = [
    "GenerationError",
    "TemplateError",
    "MalformedParametersError",
    "InvalidBoundError",
    "UndefinedVariableError",
    "NonStringKeyError",
    "VariableCycleError",
]
