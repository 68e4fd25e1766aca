"""Array initializer.
Builds an array of ``n`` elements from a per-index constructor. Each call
produces the element's spec value and a bucket: any auxiliary payload the
author wants back, such as the logical term of a string the element points
to. Element values and buckets come back index-aligned, index 0 first, and
the whole array is bound in a single points-to fact.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, NamedTuple

from pymemspec.core.context import HarnessContext
from pymemspec.core.errors import (
    ConstructionStep,
    EmptyArrayError,
    LimitExceeded,
    PolicyViolation,
    SpecTypeError,
)
from pymemspec.core.regions import Pointer, RegionIntent, allocate
from pymemspec.core.terms import coerce
from pymemspec.core.types import PointerType, SpecType, array
from pymemspec.core.values import (
    ArrayBinding,
    ArrayInitResult,
    ArrayLiteral,
    BoundValue,
    PointerValue,
    SpecValue,
    StructBinding,
)


class ArrayElement(NamedTuple):
    """What a per-index constructor returns."""

    spec_value: Any
    bucket: Any = None


Constructor = Callable[[int, Any], Any]


def _element_value(ctx: HarnessContext, value: Any, elem_type: SpecType) -> SpecValue:
    if isinstance(value, SpecValue):
        return value
    if isinstance(elem_type, PointerType):
        if isinstance(value, (BoundValue, StructBinding, ArrayBinding)):
            if value.pointer.is_null:
                raise SpecTypeError(
                    "a pointer element needs an allocated object, got an unaddressed value"
                )
            return PointerValue(value.pointer)
        if isinstance(value, Pointer):
            return PointerValue(value)
    elif isinstance(value, (BoundValue, StructBinding, ArrayBinding)):
        return value.spec_value
    return ctx.backend.to_spec_value(coerce(value, elem_type))


def _unpack(result: Any) -> ArrayElement:
    if isinstance(result, ArrayElement):
        return result
    if isinstance(result, tuple) and len(result) == 2:
        return ArrayElement(*result)
    return ArrayElement(result)


def _check_length(
    ctx: HarnessContext,
    operation: str,
    intent: RegionIntent | None,
    n: int,
    elem_type: SpecType,
    name: str | None = None,
) -> None:
    step = ConstructionStep(operation, intent, elem_type, name)
    if n < 1:
        raise EmptyArrayError(f"arrays need at least one element, got {n}", step)
    limit = ctx.config.limits.max_array_elements
    if n > limit:
        raise LimitExceeded("max_array_elements", n, limit, step)


def collect_elements(
    ctx: HarnessContext,
    n: int,
    elem_type: SpecType,
    construct: Constructor,
    params: Any = None,
    *,
    intent: RegionIntent | None = None,
    name: str | None = None,
) -> ArrayInitResult:
    """Call ``construct(i, params)`` for every index and gather the results.
    Results are index-aligned, index 0 first; callers should not depend on
    the order of the ``construct`` calls themselves. An exception from any call
    propagates and no partial result is returned. ``intent`` and ``name`` only
    label the construction step of an error.
    """
    operation = "collect_elements" if intent is None else "init_array"
    _check_length(ctx, operation, intent, n, elem_type, name)
    spec_values: list[SpecValue] = []
    buckets: list[Any] = []
    for index in range(n):
        element = _unpack(construct(index, params))
        try:
            spec_values.append(_element_value(ctx, element.spec_value, elem_type))
        except SpecTypeError as e:
            raise SpecTypeError(
                f"element {index}: {e.message}",
                ConstructionStep(operation, intent, elem_type, name),
            ) from None
        buckets.append(element.bucket)
        ctx.logger.trace(f"element {index}: {spec_values[-1].describe()}", category="array")
    return ArrayInitResult(spec_values=tuple(spec_values), buckets=tuple(buckets))


def init_array(
    ctx: HarnessContext,
    intent: RegionIntent,
    n: int,
    elem_type: SpecType,
    construct: Constructor,
    params: Any = None,
    name: str = "array",
) -> ArrayBinding:
    """Allocate an ``n``-element array whose elements come from ``construct``.
    Args:
        ctx: Harness being built.
        intent: READ_ONLY or WRITABLE.
        n: Number of elements, at least 1.
        elem_type: Type of every element.
        construct: Called as ``construct(index, params)``; returns an
            ArrayElement, a ``(spec_value, bucket)`` pair, or a bare value.
            Any plain 2-tuple is read as such a pair, so an element that is
            itself a 2-tuple, e.g. a two-field struct, must be wrapped in
            ArrayElement.
        params: Passed unchanged to every ``construct`` call.
        name: Name of the array allocation.
    Returns:
        The array pointer, the array literal, and the element values and
        buckets in index order.
    Raises:
        EmptyArrayError: ``n`` is less than 1.
        PolicyViolation: ``intent`` is NOT_ALLOCATED.
    """
    _check_length(ctx, "init_array", intent, n, elem_type, name)
    array_type = array(n, elem_type)
    if not intent.is_allocated:
        raise PolicyViolation(
            "only read-only or writable regions can hold a bound value",
            ConstructionStep("init_array", intent, array_type, name),
        )
    elements = collect_elements(ctx, n, elem_type, construct, params, intent=intent, name=name)
    literal = ArrayLiteral(elements.spec_values)
    pointer = allocate(ctx.backend, intent, array_type, name, ctx.logger)
    ctx.backend.assert_points_to(pointer, literal)
    ctx.logger.debug(
        f"array {name}: {n} x {elem_type.describe()} ({intent.name.lower()})", category="array"
    )
    return ArrayBinding(pointer=pointer, spec_value=literal, elements=elements)


__all__ = [
    "ArrayElement",
    "Constructor",
    "collect_elements",
    "init_array",
]
