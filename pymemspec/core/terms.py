"""Symbolic expressions used as logical values in a harness.
Scalars are plain z3 bit-vectors. Arrays and structs are immutable tuples of
sub-terms so that their length and field order stay visible to the harness
author, e.g. a string's content bytes can be counted, indexed and
concatenated with its terminator.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Union

import z3

from pymemspec.core.errors import SpecTypeError
from pymemspec.core.regions import Pointer
from pymemspec.core.types import (
    POINTER_SIZE,
    ArrayType,
    IntType,
    PointerType,
    SpecType,
    StructType,
    compatible,
)


@dataclass(frozen=True, eq=False)
class SymbolicSequence:
    """Fixed-length sequence of terms of one element type."""

    elements: tuple[Any, ...]
    element_type: SpecType

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.elements)

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return SymbolicSequence(self.elements[index], self.element_type)
        return self.elements[index]

    def __add__(self, other: SymbolicSequence) -> SymbolicSequence:
        return self.concat(other)

    @property
    def spec_type(self) -> ArrayType:
        return ArrayType(len(self.elements), self.element_type)

    def concat(self, other: SymbolicSequence) -> SymbolicSequence:
        """Append ``other`` after this sequence."""
        if not compatible(self.element_type, other.element_type):
            raise SpecTypeError(
                f"Cannot concatenate {self.element_type.describe()} sequence "
                f"with {other.element_type.describe()} sequence"
            )
        return SymbolicSequence(self.elements + other.elements, self.element_type)

    def flatten(self, pointer_bits: int = POINTER_SIZE * 8) -> list[z3.ExprRef]:
        leaves: list[z3.ExprRef] = []
        for element in self.elements:
            leaves.extend(flatten_term(element, pointer_bits))
        return leaves

    def is_concrete(self) -> bool:
        return all(z3.is_bv_value(z3.simplify(e)) for e in self.flatten())

    def as_ints(self) -> list[int]:
        """Concrete element values; fails if any element is symbolic."""
        values = []
        for element in self.elements:
            simplified = z3.simplify(element)
            if not z3.is_bv_value(simplified):
                raise SpecTypeError(f"Element {element} is symbolic")
            values.append(simplified.as_long())
        return values

    def as_bytes(self) -> bytes:
        return bytes(self.as_ints())

    def __repr__(self) -> str:
        return f"SymbolicSequence({self.spec_type.describe()})"


@dataclass(frozen=True, eq=False)
class SymbolicRecord:
    """Struct term: one sub-term per field, in layout order."""

    fields: tuple[Any, ...]

    def __len__(self) -> int:
        return len(self.fields)

    def __getitem__(self, index: int) -> Any:
        return self.fields[index]

    def flatten(self, pointer_bits: int = POINTER_SIZE * 8) -> list[z3.ExprRef]:
        leaves: list[z3.ExprRef] = []
        for f in self.fields:
            leaves.extend(flatten_term(f, pointer_bits))
        return leaves

    def __repr__(self) -> str:
        return f"SymbolicRecord({len(self.fields)} fields)"


Term = Union[z3.ExprRef, SymbolicSequence, SymbolicRecord, Pointer]


def byte_sequence(values: bytes | list[int] | tuple[int, ...]) -> SymbolicSequence:
    """Concrete sequence of 8-bit values."""
    return SymbolicSequence(tuple(z3.BitVecVal(v, 8) for v in values), IntType(8))


def flatten_term(term: Any, pointer_bits: int = POINTER_SIZE * 8) -> list[z3.ExprRef]:
    """Scalar leaves of a term, in layout order."""
    if isinstance(term, (SymbolicSequence, SymbolicRecord)):
        return term.flatten(pointer_bits)
    if isinstance(term, Pointer):
        if term.address is None:
            return [z3.BitVecVal(0, pointer_bits)]
        return [term.address]
    return [term]


def term_type(term: Any) -> SpecType:
    """Infer the type of a symbolic expression."""
    if isinstance(term, SymbolicSequence):
        return term.spec_type
    if isinstance(term, SymbolicRecord):
        return StructType(tuple(term_type(f) for f in term.fields))
    if isinstance(term, Pointer):
        return PointerType(term.target)
    if isinstance(term, z3.BitVecRef):
        return IntType(term.size())
    raise SpecTypeError(f"Cannot infer a harness type for {term!r}")


def coerce(value: Any, spec_type: SpecType) -> Any:
    """Turn a caller-supplied value into a term of ``spec_type``.
    Terms that already have the right type are returned unchanged.
    """
    if isinstance(spec_type, IntType):
        return _coerce_int(value, spec_type)
    if isinstance(spec_type, ArrayType):
        return _coerce_array(value, spec_type)
    if isinstance(spec_type, StructType):
        return _coerce_struct(value, spec_type)
    if isinstance(spec_type, PointerType):
        if isinstance(value, Pointer) and (
            value.is_null or compatible(spec_type, PointerType(value.target))
        ):
            return value
        raise SpecTypeError(f"Expected a pointer for {spec_type.describe()}, got {value!r}")
    raise SpecTypeError(f"Unsupported type {spec_type!r}")


def _coerce_int(value: Any, spec_type: IntType) -> z3.BitVecRef:
    if isinstance(value, bool):
        return z3.BitVecVal(int(value), spec_type.bits)
    if isinstance(value, int):
        # Signed or unsigned readings are both accepted; anything wider is not.
        if not -(2 ** (spec_type.bits - 1)) <= value < 2**spec_type.bits:
            raise SpecTypeError(f"{value} does not fit in {spec_type.describe()}")
        return z3.BitVecVal(value, spec_type.bits)
    if isinstance(value, z3.BitVecRef):
        if value.size() != spec_type.bits:
            raise SpecTypeError(
                f"Expected {spec_type.describe()}, got a {value.size()}-bit expression"
            )
        return value
    raise SpecTypeError(f"Cannot use {value!r} as {spec_type.describe()}")


def _coerce_array(value: Any, spec_type: ArrayType) -> SymbolicSequence:
    if isinstance(value, SymbolicSequence):
        if not compatible(spec_type, value.spec_type):
            raise SpecTypeError(
                f"Expected {spec_type.describe()}, got {value.spec_type.describe()}"
            )
        return value
    if isinstance(value, str):
        value = value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, list, tuple)):
        if len(value) != spec_type.length:
            raise SpecTypeError(
                f"Expected {spec_type.length} elements for {spec_type.describe()}, "
                f"got {len(value)}"
            )
        elements = tuple(coerce(v, spec_type.element) for v in value)
        return SymbolicSequence(elements, spec_type.element)
    raise SpecTypeError(f"Cannot use {value!r} as {spec_type.describe()}")


def _coerce_struct(value: Any, spec_type: StructType) -> SymbolicRecord:
    if isinstance(value, SymbolicRecord):
        if not compatible(spec_type, term_type(value)):
            raise SpecTypeError(
                f"Expected {spec_type.describe()}, got {term_type(value).describe()}"
            )
        return value
    if isinstance(value, (list, tuple)):
        if len(value) != len(spec_type.fields):
            raise SpecTypeError(
                f"Expected {len(spec_type.fields)} fields for {spec_type.describe()}, "
                f"got {len(value)}"
            )
        return SymbolicRecord(tuple(coerce(v, t) for v, t in zip(value, spec_type.fields)))
    raise SpecTypeError(f"Cannot use {value!r} as {spec_type.describe()}")


__all__ = [
    "SymbolicSequence",
    "SymbolicRecord",
    "Term",
    "byte_sequence",
    "flatten_term",
    "term_type",
    "coerce",
]
