"""Struct builder: pack previously built values into one struct literal."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pymemspec.core.errors import ConstructionStep, SpecTypeError
from pymemspec.core.regions import Pointer
from pymemspec.core.values import (
    ArrayBinding,
    BoundValue,
    PointerValue,
    SpecValue,
    StructBinding,
    StructLiteral,
)
from pymemspec.logging import MemSpecLogger, get_logger


def as_field(value: Any) -> SpecValue:
    """The spec value a built object contributes as a struct field."""
    if isinstance(value, SpecValue):
        return value
    if isinstance(value, Pointer):
        return PointerValue(value)
    if isinstance(value, (BoundValue, StructBinding, ArrayBinding)):
        return value.spec_value
    raise SpecTypeError(
        f"struct fields must be spec values or built objects, got {value!r}",
        ConstructionStep("build_struct"),
    )


def build_struct(
    fields: Iterable[Any],
    logger: MemSpecLogger | None = None,
) -> StructBinding:
    """Pack ``fields`` in order into a struct value.
    The result is a literal, not an allocation: its pointer is NULL and it
    has no logical term.
    """
    literal = StructLiteral(tuple(as_field(f) for f in fields))
    (logger or get_logger()).trace(f"struct {literal.describe()}", category="struct")
    return StructBinding(spec_value=literal)


__all__ = ["as_field", "build_struct"]
