"""Error kinds raised while constructing a harness.
Every error aborts the current construction pass. Errors raised by a builder
carry the ConstructionStep that triggered them so the harness author can find
the offending line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pymemspec.core.regions import RegionIntent
    from pymemspec.core.types import SpecType


@dataclass(frozen=True)
class ConstructionStep:
    """The builder call that was running when an error was raised."""

    operation: str
    intent: RegionIntent | None = None
    spec_type: SpecType | None = None
    name: str | None = None

    def describe(self) -> str:
        parts = []
        if self.intent is not None:
            parts.append(self.intent.name)
        if self.spec_type is not None:
            parts.append(self.spec_type.describe())
        if self.name is not None:
            parts.append(repr(self.name))
        return f"{self.operation}({', '.join(parts)})"


class HarnessError(Exception):
    """Base class for harness construction failures."""

    kind = "harness"

    def __init__(self, message: str, step: ConstructionStep | None = None):
        self.message = message
        self.step = step
        if step is not None:
            message = f"{step.describe()}: {message}"
        super().__init__(message)


class PolicyViolation(HarnessError):
    """A value was bound into a region that is not allocated."""

    kind = "policy-violation"


class EmptyArrayError(HarnessError):
    """An array with fewer than one element was requested."""

    kind = "empty-array"


class UseBeforeResolve(HarnessError):
    """A field with no meaningful value was read."""

    kind = "use-before-resolve"


class CollaboratorError(HarnessError):
    """Failure reported by the symbolic backend."""

    kind = "collaborator"


class SpecTypeError(HarnessError):
    """A caller-supplied value does not fit the requested type."""

    kind = "type"


class LimitExceeded(HarnessError):
    """A configured harness limit was exceeded."""

    kind = "limit"

    def __init__(
        self,
        limit_name: str,
        current: Any,
        limit: Any,
        step: ConstructionStep | None = None,
    ):
        self.limit_name = limit_name
        self.current = current
        self.limit = limit
        super().__init__(f"{limit_name} limit exceeded: {current} > {limit}", step)


def error_kind(exc: BaseException) -> str:
    """Stable kind name for an exception, used by reporting and the CLI."""
    if isinstance(exc, HarnessError):
        return exc.kind
    return "internal"


__all__ = [
    "ConstructionStep",
    "HarnessError",
    "PolicyViolation",
    "EmptyArrayError",
    "UseBeforeResolve",
    "CollaboratorError",
    "SpecTypeError",
    "LimitExceeded",
    "error_kind",
]
