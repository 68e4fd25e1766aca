"""Allocation primitive: allocate a region and bind a value at its pointer.
``bind`` is the single place where region policy and value duality meet.
A region that is not allocated never receives a bound value.
"""

from __future__ import annotations

from typing import Any

from pymemspec.core.context import HarnessContext
from pymemspec.core.duality import FRESH, Fresh, Stale, resolve
from pymemspec.core.errors import ConstructionStep, PolicyViolation
from pymemspec.core.regions import NULL_POINTER, Pointer, RegionIntent, allocate
from pymemspec.core.types import SpecType
from pymemspec.core.values import BoundValue, SpecValue


def _check_policy(operation: str, intent: RegionIntent, spec_type: SpecType, name: str) -> None:
    if not intent.is_allocated:
        raise PolicyViolation(
            "only read-only or writable regions can hold a bound value",
            ConstructionStep(operation, intent, spec_type, name),
        )


def bind(
    ctx: HarnessContext,
    intent: RegionIntent,
    spec_type: SpecType,
    name: str,
    duality: Fresh | Stale,
) -> BoundValue:
    """Allocate a region of ``spec_type`` and bind a value at it.
    Args:
        ctx: Harness being built.
        intent: READ_ONLY or WRITABLE; NOT_ALLOCATED raises PolicyViolation.
        spec_type: Type of the region and of the value.
        name: Name of the allocation and of a fresh value.
        duality: FRESH for a new symbol, Stale(expr) for a caller value.
    Returns:
        The pointer, the bound spec value and the logical term.
    """
    term, was_fresh = resolve(ctx.backend, name, spec_type, duality, ctx.logger)
    _check_policy("bind", intent, spec_type, name)
    pointer = allocate(ctx.backend, intent, spec_type, name, ctx.logger)
    spec_value = ctx.backend.to_spec_value(term)
    ctx.backend.assert_points_to(pointer, spec_value)
    ctx.logger.debug(
        f"bind {name}: {spec_type.describe()} ({'fresh' if was_fresh else 'given'}, "
        f"{intent.name.lower()})",
        category="alloc",
    )
    return BoundValue(pointer=pointer, spec_value=spec_value, term=term)


def alloc_value(
    ctx: HarnessContext,
    intent: RegionIntent,
    spec_type: SpecType,
    spec_value: SpecValue,
    name: str,
) -> Pointer:
    """Allocate a region and point it at an already built spec value."""
    _check_policy("alloc_value", intent, spec_type, name)
    pointer = allocate(ctx.backend, intent, spec_type, name, ctx.logger)
    ctx.backend.assert_points_to(pointer, spec_value)
    ctx.logger.debug(f"alloc {name} -> {spec_value.describe()}", category="alloc")
    return pointer


def alloc_pointer(
    ctx: HarnessContext,
    intent: RegionIntent,
    spec_type: SpecType,
    name: str,
) -> Pointer:
    """Allocate without binding a value; NOT_ALLOCATED gives a fresh pointer."""
    return allocate(ctx.backend, intent, spec_type, name, ctx.logger)


def points_to(ctx: HarnessContext, pointer: Pointer, value: Any) -> None:
    """Record that an existing pointer holds ``value`` in the current phase."""
    if pointer.intent is RegionIntent.NOT_ALLOCATED:
        raise PolicyViolation(
            "only read-only or writable regions can hold a bound value",
            ConstructionStep("points_to", pointer.intent, pointer.target, pointer.name),
        )
    ctx.backend.assert_points_to(pointer, ctx.backend.to_spec_value(value))


def ptr_to_fresh(
    ctx: HarnessContext,
    name: str,
    spec_type: SpecType,
    intent: RegionIntent = RegionIntent.WRITABLE,
) -> BoundValue:
    return bind(ctx, intent, spec_type, name, FRESH)


def ptr_to_fresh_readonly(ctx: HarnessContext, name: str, spec_type: SpecType) -> BoundValue:
    return bind(ctx, RegionIntent.READ_ONLY, spec_type, name, FRESH)


def alloc_init(
    ctx: HarnessContext,
    spec_type: SpecType,
    value: Any,
    name: str = "init",
    intent: RegionIntent = RegionIntent.WRITABLE,
) -> BoundValue:
    return bind(ctx, intent, spec_type, name, Stale(value))


def alloc_init_readonly(
    ctx: HarnessContext,
    spec_type: SpecType,
    value: Any,
    name: str = "init",
) -> BoundValue:
    return bind(ctx, RegionIntent.READ_ONLY, spec_type, name, Stale(value))


def fresh_value(
    ctx: HarnessContext,
    name: str,
    spec_type: SpecType,
    duality: Fresh | Stale = FRESH,
) -> BoundValue:
    """A value that is never addressed; its pointer is NULL."""
    term, _ = resolve(ctx.backend, name, spec_type, duality, ctx.logger)
    return BoundValue(pointer=NULL_POINTER, spec_value=ctx.backend.to_spec_value(term), term=term)


__all__ = [
    "bind",
    "alloc_value",
    "alloc_pointer",
    "points_to",
    "ptr_to_fresh",
    "ptr_to_fresh_readonly",
    "alloc_init",
    "alloc_init_readonly",
    "fresh_value",
]
