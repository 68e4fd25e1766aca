"""Fresh versus caller-supplied values.
Every builder resolves its value through ``resolve`` so it never needs to know
whether a sub-value is a new unconstrained symbol or something the caller
already has. Callers decide per call site and may mix both freely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pymemspec.core.errors import ConstructionStep, SpecTypeError, UseBeforeResolve
from pymemspec.core.terms import coerce
from pymemspec.core.types import SpecType
from pymemspec.logging import MemSpecLogger, get_logger

if TYPE_CHECKING:
    from pymemspec.core.backend import SymbolicBackend


@dataclass(frozen=True)
class Fresh:
    """Ask the backend for a new unconstrained symbol."""

    @property
    def expr(self) -> Any:
        raise UseBeforeResolve("a fresh value has no expression until it is resolved")

    def __repr__(self) -> str:
        return "Fresh"


@dataclass(frozen=True, eq=False)
class Stale:
    """Use ``expr`` as-is; no new symbol is introduced."""

    expr: Any

    def __repr__(self) -> str:
        return f"Stale({self.expr!r})"


Duality = Fresh | Stale

FRESH = Fresh()


def as_duality(value: Any) -> Fresh | Stale:
    """Lift a bare value into a duality; ``None`` means fresh."""
    if isinstance(value, (Fresh, Stale)):
        return value
    if value is None:
        return FRESH
    return Stale(value)


def resolve(
    backend: SymbolicBackend,
    name: str,
    spec_type: SpecType,
    duality: Fresh | Stale,
    logger: MemSpecLogger | None = None,
) -> tuple[Any, bool]:
    """Turn a duality into a symbolic expression.
    Fresh symbols are counted on ``logger``, the global logger by default.
    Returns:
        The expression and whether it was freshly created.
    """
    if isinstance(duality, Fresh):
        logger = logger or get_logger()
        expr = backend.fresh_symbol(name, spec_type)
        logger.count("fresh_symbols")
        logger.trace(f"fresh {name}: {spec_type.describe()}", category="duality")
        return expr, True
    if isinstance(duality, Stale):
        try:
            return coerce(duality.expr, spec_type), False
        except SpecTypeError as e:
            step = ConstructionStep("resolve", None, spec_type, name)
            raise SpecTypeError(e.message, step) from None
    raise TypeError(f"Expected Fresh or Stale, got {duality!r}")


__all__ = [
    "Fresh",
    "Stale",
    "Duality",
    "FRESH",
    "as_duality",
    "resolve",
]
