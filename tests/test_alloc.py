"""Tests for the allocation primitive and its wrappers."""

import pytest
import z3

from pymemspec.builders.alloc import (
    alloc_init,
    alloc_init_readonly,
    alloc_pointer,
    alloc_value,
    bind,
    fresh_value,
    points_to,
    ptr_to_fresh,
    ptr_to_fresh_readonly,
)
from pymemspec.core.backend import AllocationFact, FreshSymbolFact, PointsToFact, Z3Backend
from pymemspec.core.context import HarnessContext
from pymemspec.core.duality import FRESH, Stale
from pymemspec.core.errors import CollaboratorError, PolicyViolation, SpecTypeError
from pymemspec.core.regions import NULL_POINTER, RegionIntent
from pymemspec.core.types import array, i8, i32, pointer, struct
from pymemspec.core.values import PointerValue, TermValue


class FailingBackend(Z3Backend):
    """Backend whose region allocator always fails."""

    def alloc_region(self, intent, spec_type, name):
        raise RuntimeError(f"out of regions for {name}")


class TestBind:
    def test_fresh_read_only_scalar(self, ctx):
        x = bind(ctx, RegionIntent.READ_ONLY, i32, "x", FRESH)
        assert x.pointer.is_allocated
        assert x.pointer.is_read_only
        assert x.pointer.target.size_bytes == 4
        assert z3.is_const(x.term) and not z3.is_bv_value(x.term)
        assert x.term.size() == 32
        assert isinstance(x.spec_value, TermValue)
        assert x.spec_value.term is x.term

    def test_fresh_bind_records_symbol_region_and_points_to(self, ctx):
        bind(ctx, RegionIntent.READ_ONLY, i32, "x", FRESH)
        kinds = [type(f) for f in ctx.facts]
        assert kinds == [FreshSymbolFact, AllocationFact, PointsToFact]

    def test_given_value_on_writable_region(self, ctx):
        y = bind(ctx, RegionIntent.WRITABLE, i32, "y", Stale(10))
        assert y.pointer.is_allocated
        assert not y.pointer.is_read_only
        assert y.term.as_long() == 10
        assert not ctx.backend.log.of_kind(FreshSymbolFact)

    def test_given_expression_keeps_identity(self, ctx):
        x = z3.BitVec("outer", 32)
        bound = bind(ctx, RegionIntent.WRITABLE, i32, "y", Stale(x + 1))
        assert bound.term.eq(x + 1)

    def test_points_to_holds_the_term(self, ctx):
        y = bind(ctx, RegionIntent.WRITABLE, i32, "y", Stale(7))
        (fact,) = ctx.backend.log.of_kind(PointsToFact)
        assert fact.pointer is y.pointer
        assert fact.value is y.spec_value

    @pytest.mark.parametrize(
        "spec_type,duality",
        [
            (i8, FRESH),
            (i8, Stale(z3.BitVec("v", 8))),
            (i32, FRESH),
            (i32, Stale(10)),
            (array(3, i8), FRESH),
            (array(3, i8), Stale(b"abc")),
            (struct(i8, i32), FRESH),
            (struct(i8, i32), Stale((1, 2))),
        ],
    )
    def test_not_allocated_is_always_rejected(self, ctx, spec_type, duality):
        with pytest.raises(PolicyViolation) as info:
            bind(ctx, RegionIntent.NOT_ALLOCATED, spec_type, "ghost", duality)
        assert info.value.step.intent is RegionIntent.NOT_ALLOCATED
        assert "bind(NOT_ALLOCATED" in str(info.value)
        assert not ctx.backend.log.of_kind(PointsToFact)

    def test_type_error_from_given_value(self, ctx):
        with pytest.raises(SpecTypeError):
            bind(ctx, RegionIntent.WRITABLE, i32, "y", Stale("ten"))

    def test_given_value_must_fit(self, ctx):
        with pytest.raises(SpecTypeError, match="300 does not fit"):
            bind(ctx, RegionIntent.WRITABLE, i8, "x", Stale(300))
        with pytest.raises(SpecTypeError):
            bind(ctx, RegionIntent.WRITABLE, array(2, i8), "y", Stale([256, 1]))
        assert not ctx.backend.log.of_kind(PointsToFact)

    def test_given_value_is_kept_exactly(self, ctx):
        y = bind(ctx, RegionIntent.WRITABLE, i8, "y", Stale(255))
        assert y.term.as_long() == 255

    def test_collaborator_failure_propagates_unchanged(self):
        ctx = HarnessContext(backend=FailingBackend())
        with pytest.raises(RuntimeError, match="out of regions for x"):
            bind(ctx, RegionIntent.WRITABLE, i32, "x", FRESH)

    def test_pointer_to_pointer(self, ctx):
        inner = ptr_to_fresh(ctx, "inner", i32)
        outer = bind(ctx, RegionIntent.WRITABLE, pointer(i32), "outer", Stale(inner.pointer))
        assert isinstance(outer.spec_value, PointerValue)
        assert outer.term is inner.pointer

    def test_fresh_pointer_value_is_refused(self, ctx):
        with pytest.raises(CollaboratorError):
            bind(ctx, RegionIntent.WRITABLE, pointer(i32), "p", FRESH)


class TestWrappers:
    def test_ptr_to_fresh(self, ctx):
        a = ptr_to_fresh(ctx, "a", i32)
        assert a.pointer.intent is RegionIntent.WRITABLE
        assert ptr_to_fresh_readonly(ctx, "b", i32).pointer.is_read_only

    def test_alloc_init(self, ctx):
        flags = alloc_init(ctx, i32, 3, name="flags")
        assert flags.term.as_long() == 3
        assert alloc_init_readonly(ctx, array(2, i8), b"ab").pointer.is_read_only

    def test_fresh_value_is_unaddressed(self, ctx):
        n = fresh_value(ctx, "n", i32)
        assert n.pointer is NULL_POINTER
        assert not ctx.backend.log.of_kind(AllocationFact)
        given = fresh_value(ctx, "m", i32, Stale(4))
        assert given.term.as_long() == 4


class TestAllocValue:
    def test_binds_built_value(self, ctx):
        value = TermValue(z3.BitVecVal(5, 32))
        ptr = alloc_value(ctx, RegionIntent.WRITABLE, i32, value, "five")
        assert ptr.is_allocated
        assert ctx.backend.log.of_kind(PointsToFact)[0].value is value

    def test_policy(self, ctx):
        with pytest.raises(PolicyViolation):
            alloc_value(ctx, RegionIntent.NOT_ALLOCATED, i32, TermValue(z3.BitVecVal(5, 32)), "x")

    def test_alloc_pointer_without_value(self, ctx):
        region = alloc_pointer(ctx, RegionIntent.WRITABLE, i32, "buf")
        loose = alloc_pointer(ctx, RegionIntent.NOT_ALLOCATED, i32, "maybe")
        assert region.is_allocated
        assert not loose.is_allocated
        assert not ctx.backend.log.of_kind(PointsToFact)


class TestPointsTo:
    def test_postcondition(self, ctx):
        x = ptr_to_fresh(ctx, "x", i32)
        ctx.execute(x.pointer)
        points_to(ctx, x.pointer, x.term + 1)
        facts = ctx.backend.log.of_kind(PointsToFact)
        assert len(facts) == 2
        assert facts[1].value.term.eq(x.term + 1)

    def test_unallocated_pointer(self, ctx):
        loose = alloc_pointer(ctx, RegionIntent.NOT_ALLOCATED, i32, "maybe")
        with pytest.raises(PolicyViolation):
            points_to(ctx, loose, 1)

    def test_unliftable_value(self, ctx):
        x = ptr_to_fresh(ctx, "x", i32)
        with pytest.raises(CollaboratorError):
            points_to(ctx, x.pointer, 1)
