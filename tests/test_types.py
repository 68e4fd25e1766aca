"""Tests for the harness type model."""

import pytest

from pymemspec.core.types import (
    POINTER_SIZE,
    ArrayType,
    IntType,
    PointerType,
    StructType,
    array,
    char,
    compatible,
    i8,
    i16,
    i32,
    i64,
    pointer,
    size_of,
    string_type,
    struct,
)


class TestSizes:
    def test_integer_sizes(self):
        assert i8.size_bytes == 1
        assert i16.size_bytes == 2
        assert i32.size_bytes == 4
        assert i64.size_bytes == 8

    def test_odd_widths_round_up(self):
        assert IntType(1).size_bytes == 1
        assert IntType(12).size_bytes == 2

    def test_array_size(self):
        assert array(4, i32).size_bytes == 16
        assert array(0, i32).size_bytes == 0

    def test_struct_is_packed(self):
        assert struct(i8, i32, i64).size_bytes == 13

    def test_pointer_size(self):
        assert pointer(i32).size_bytes == POINTER_SIZE
        assert pointer().size_bytes == POINTER_SIZE

    def test_size_of_with_pointer_size(self):
        assert size_of(pointer(i32), 4) == 4
        assert size_of(array(3, pointer()), 4) == 12
        assert size_of(struct(i8, pointer(i8)), 4) == 5
        assert size_of(array(2, i32), 4) == 8
        assert size_of(pointer(i32)) == POINTER_SIZE

    def test_string_type_has_terminator_slot(self):
        assert string_type(5) == ArrayType(6, char)
        assert string_type(0).size_bytes == 1


class TestDescribe:
    def test_names(self):
        assert i32.describe() == "i32"
        assert array(4, i8).describe() == "[4]i8"
        assert struct(i32, i64).describe() == "{i32, i64}"
        assert pointer(i32).describe() == "*i32"
        assert pointer().describe() == "*void"
        assert str(pointer(array(2, i8))) == "*[2]i8"


class TestValidation:
    def test_zero_width_integer(self):
        with pytest.raises(ValueError):
            IntType(0)

    def test_negative_array_length(self):
        with pytest.raises(ValueError):
            ArrayType(-1, i8)


class TestCompatible:
    def test_structural_equality(self):
        assert compatible(array(3, i32), ArrayType(3, IntType(32)))
        assert compatible(struct(i8, i64), StructType((i8, i64)))

    def test_mismatches(self):
        assert not compatible(i32, i64)
        assert not compatible(array(3, i32), array(4, i32))
        assert not compatible(struct(i8), struct(i8, i8))
        assert not compatible(i64, pointer(i8))

    def test_untyped_pointer_matches_any_pointer(self):
        assert compatible(pointer(), pointer(i32))
        assert compatible(pointer(array(5, char)), PointerType(None))
        assert not compatible(pointer(i32), pointer(i64))

    def test_nested_pointer_arrays(self):
        assert compatible(array(2, pointer(string_type(3))), array(2, pointer(string_type(3))))
        assert not compatible(array(2, pointer(string_type(3))), array(2, pointer(string_type(4))))
