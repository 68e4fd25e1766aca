"""Tests for fresh versus caller-supplied values."""

import pytest
import z3

from pymemspec.core.backend import FreshSymbolFact, Z3Backend
from pymemspec.core.duality import FRESH, Fresh, Stale, as_duality, resolve
from pymemspec.core.errors import SpecTypeError, UseBeforeResolve
from pymemspec.core.terms import SymbolicSequence
from pymemspec.core.types import array, i8, i32


class TestFresh:
    def test_fresh_has_no_expression(self):
        with pytest.raises(UseBeforeResolve):
            FRESH.expr

    def test_fresh_is_a_single_value(self):
        assert Fresh() == FRESH
        assert repr(FRESH) == "Fresh"

    def test_resolve_asks_backend(self):
        backend = Z3Backend()
        expr, was_fresh = resolve(backend, "x", i32, FRESH)
        assert was_fresh
        assert z3.is_const(expr) and not z3.is_bv_value(expr)
        assert expr.size() == 32
        assert len(backend.log.of_kind(FreshSymbolFact)) == 1

    def test_resolve_counts_symbols(self, quiet_logger):
        backend = Z3Backend()
        resolve(backend, "a", i8, FRESH)
        resolve(backend, "b", i8, FRESH)
        assert quiet_logger.get_count("fresh_symbols") == 2

    def test_fresh_array(self):
        expr, _ = resolve(Z3Backend(), "buf", array(3, i8), FRESH)
        assert isinstance(expr, SymbolicSequence)
        assert [str(e) for e in expr] == ["buf[0]", "buf[1]", "buf[2]"]


class TestStale:
    def test_expression_is_used_unchanged(self):
        backend = Z3Backend()
        x = z3.BitVec("given", 32)
        expr, was_fresh = resolve(backend, "x", i32, Stale(x))
        assert expr is x
        assert not was_fresh
        assert len(backend.log) == 0

    def test_plain_int_is_coerced(self):
        expr, _ = resolve(Z3Backend(), "y", i32, Stale(10))
        assert expr.as_long() == 10

    def test_type_error_names_the_value(self):
        with pytest.raises(SpecTypeError) as info:
            resolve(Z3Backend(), "y", i32, Stale("ten"))
        assert info.value.step.name == "y"
        assert "resolve(i32, 'y')" in str(info.value)

    def test_not_a_duality(self):
        with pytest.raises(TypeError):
            resolve(Z3Backend(), "y", i32, 10)


class TestAsDuality:
    def test_lifting(self):
        assert as_duality(None) is FRESH
        assert as_duality(FRESH) is FRESH
        stale = Stale(1)
        assert as_duality(stale) is stale
        lifted = as_duality(5)
        assert isinstance(lifted, Stale)
        assert lifted.expr == 5
