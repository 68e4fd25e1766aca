"""Tests for null-terminated string builders."""

import pytest
import z3

from pymemspec.builders.strings import alloc_string, fresh_string_post, fresh_string_pre
from pymemspec.config import PyMemSpecConfig
from pymemspec.core.backend import ConstraintFact, Phase
from pymemspec.core.context import HarnessContext
from pymemspec.core.duality import Stale
from pymemspec.core.errors import LimitExceeded, PolicyViolation, SpecTypeError
from pymemspec.core.regions import RegionIntent
from pymemspec.core.solver import prove
from pymemspec.core.terms import SymbolicSequence
from pymemspec.core.types import string_type


class TestPrecondition:
    def test_three_byte_string(self, ctx):
        s = fresh_string_pre(ctx, "s", 3)
        assert s.pointer.target == string_type(3)
        assert s.pointer.target.size_bytes == 4
        assert len(s.term) == 3
        assert all(not z3.is_bv_value(b) for b in s.term)

    def test_bound_value_ends_with_terminator(self, ctx):
        s = fresh_string_pre(ctx, "s", 3)
        full = s.spec_value.term
        assert isinstance(full, SymbolicSequence)
        assert len(full) == 4
        assert full[3].as_long() == 0
        for i in range(3):
            assert full[i] is s.term[i]

    def test_default_is_read_only(self, ctx):
        assert fresh_string_pre(ctx, "s", 2).pointer.is_read_only
        assert not fresh_string_pre(ctx, "w", 2, intent=RegionIntent.WRITABLE).pointer.is_read_only

    def test_given_content(self, ctx):
        s = fresh_string_pre(ctx, "s", 2, content=Stale(b"hi"))
        assert s.term.as_bytes() == b"hi"
        assert s.spec_value.term.as_bytes() == b"hi\x00"

    def test_empty_string(self, ctx):
        s = fresh_string_pre(ctx, "empty", 0)
        assert len(s.term) == 0
        assert len(s.spec_value.term) == 1

    def test_not_allocated(self, ctx):
        with pytest.raises(PolicyViolation):
            fresh_string_pre(ctx, "s", 3, intent=RegionIntent.NOT_ALLOCATED)

    def test_negative_size(self, ctx):
        with pytest.raises(SpecTypeError):
            fresh_string_pre(ctx, "s", -1)

    def test_size_limit(self):
        config = PyMemSpecConfig()
        config.limits.max_string_length = 4
        ctx = HarnessContext(config=config)
        fresh_string_pre(ctx, "ok", 4)
        with pytest.raises(LimitExceeded) as info:
            fresh_string_pre(ctx, "long", 5)
        assert info.value.limit == 4
        assert info.value.current == 5

    def test_wrong_length_content(self, ctx):
        with pytest.raises(SpecTypeError):
            fresh_string_pre(ctx, "s", 3, content=Stale(b"toolong"))


class TestPostcondition:
    def test_length_and_terminator(self, ctx):
        ctx.execute()
        s = fresh_string_post(ctx, "out", 5)
        assert len(s.term) == 6
        assert s.pointer.is_read_only
        assert prove(s.term[5] == 0, ctx.backend.constraints(include_postconditions=True))

    def test_terminator_is_a_postcondition(self, ctx):
        ctx.execute()
        fresh_string_post(ctx, "out", 2)
        (fact,) = ctx.backend.log.of_kind(ConstraintFact)
        assert fact.phase is Phase.POST
        assert "out[2] is NUL" in fact.describe()

    def test_content_bytes_are_unconstrained(self, ctx):
        s = fresh_string_post(ctx, "out", 2)
        assert not prove(s.term[0] == 0, ctx.backend.constraints())


@pytest.mark.parametrize("size", [0, 1, 7, 32])
def test_pre_and_post_agree_on_length(ctx, size):
    pre = fresh_string_pre(ctx, "before", size)
    ctx.execute(pre.pointer)
    post = fresh_string_post(ctx, "after", size)
    assert len(pre.spec_value.term) == len(post.term) == size + 1
    assert pre.pointer.target == post.pointer.target


def test_alloc_string(ctx):
    s = alloc_string(ctx, "hello")
    assert s.term.as_bytes() == b"hello"
    assert s.pointer.target == string_type(5)
    assert alloc_string(ctx, b"\x01\x02", name="raw").term.as_ints() == [1, 2]
