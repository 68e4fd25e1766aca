"""Null-terminated strings.
A string of logical length ``size`` occupies ``size + 1`` bytes. Before the
call under test the author describes the content bytes and the terminator is
fixed by construction. After the call the whole buffer is fresh and the
terminator has to be asserted.
"""

from __future__ import annotations

from typing import Any

from pymemspec.core.context import HarnessContext
from pymemspec.core.duality import FRESH, Fresh, Stale, resolve
from pymemspec.core.errors import ConstructionStep, LimitExceeded, SpecTypeError
from pymemspec.core.regions import RegionIntent
from pymemspec.core.terms import byte_sequence
from pymemspec.core.types import array, char, string_type
from pymemspec.core.values import BoundValue
from pymemspec.builders.alloc import bind

TERMINATOR = 0


def _check_size(ctx: HarnessContext, operation: str, name: str, size: int) -> None:
    if size < 0:
        raise SpecTypeError(
            f"string length must be non-negative, got {size}",
            ConstructionStep(operation, name=name),
        )
    limit = ctx.config.limits.max_string_length
    if size > limit:
        raise LimitExceeded("max_string_length", size, limit, ConstructionStep(operation, name=name))


def fresh_string_pre(
    ctx: HarnessContext,
    name: str,
    size: int,
    intent: RegionIntent = RegionIntent.READ_ONLY,
    content: Fresh | Stale = FRESH,
) -> BoundValue:
    """String as the caller passes it in.
    Allocates ``size + 1`` bytes holding ``content # [0]``. The returned term
    is the ``size`` content bytes only; the spec value includes the terminator.
    """
    _check_size(ctx, "fresh_string_pre", name, size)
    text, _ = resolve(ctx.backend, name, array(size, char), content, ctx.logger)
    full = text + byte_sequence([TERMINATOR])
    bound = bind(ctx, intent, string_type(size), name, Stale(full))
    ctx.logger.debug(f"string {name}: {size} byte(s) + terminator", category="string")
    return BoundValue(pointer=bound.pointer, spec_value=bound.spec_value, term=text)


def fresh_string_post(ctx: HarnessContext, name: str, size: int) -> BoundValue:
    """String as the function under test must leave it.
    Allocates ``size + 1`` fresh read-only bytes and asserts that the last one
    is the terminator. The returned term is all ``size + 1`` bytes.
    """
    _check_size(ctx, "fresh_string_post", name, size)
    bound = bind(ctx, RegionIntent.READ_ONLY, string_type(size), name, FRESH)
    ctx.backend.assert_constraint(bound.term[size] == TERMINATOR, f"{name}[{size}] is NUL")
    ctx.logger.debug(f"string {name}: {size + 1} byte(s), terminator asserted", category="string")
    return bound


def alloc_string(
    ctx: HarnessContext,
    text: Any,
    name: str = "str",
    intent: RegionIntent = RegionIntent.READ_ONLY,
) -> BoundValue:
    """Concrete string; ``text`` is ``str`` or ``bytes`` without terminator."""
    if isinstance(text, str):
        text = text.encode("utf-8")
    return fresh_string_pre(ctx, name, len(text), intent=intent, content=Stale(text))


__all__ = [
    "TERMINATOR",
    "fresh_string_pre",
    "fresh_string_post",
    "alloc_string",
]
