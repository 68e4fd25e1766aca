"""Type model for harness values.
Types describe the shape and byte size of regions and symbolic values:
fixed-width integers, fixed-length arrays, packed structs and pointers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import z3

POINTER_SIZE = 8


class SpecType(ABC):
    """Base class for all harness types."""

    @property
    @abstractmethod
    def size_bytes(self) -> int:
        """Number of bytes a value of this type occupies."""

    @abstractmethod
    def describe(self) -> str:
        """Compact human readable name."""

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class IntType(SpecType):
    """Fixed-width integer, modelled as a z3 bit-vector."""

    bits: int

    def __post_init__(self) -> None:
        if self.bits < 1:
            raise ValueError(f"Integer width must be positive, got {self.bits}")

    @property
    def size_bytes(self) -> int:
        return (self.bits + 7) // 8

    def sort(self) -> z3.BitVecSortRef:
        """The z3 sort of values of this type."""
        return z3.BitVecSort(self.bits)

    def describe(self) -> str:
        return f"i{self.bits}"


@dataclass(frozen=True)
class ArrayType(SpecType):
    """Fixed-length array of a single element type."""

    length: int
    element: SpecType

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError(f"Array length must be non-negative, got {self.length}")

    @property
    def size_bytes(self) -> int:
        return self.length * self.element.size_bytes

    def describe(self) -> str:
        return f"[{self.length}]{self.element.describe()}"


@dataclass(frozen=True)
class StructType(SpecType):
    """Packed struct; field order is layout order."""

    fields: tuple[SpecType, ...]

    @property
    def size_bytes(self) -> int:
        return sum(f.size_bytes for f in self.fields)

    def describe(self) -> str:
        return "{" + ", ".join(f.describe() for f in self.fields) + "}"


@dataclass(frozen=True)
class PointerType(SpecType):
    """Pointer to a value of ``target`` type; ``None`` means untyped."""

    target: SpecType | None = None

    @property
    def size_bytes(self) -> int:
        return POINTER_SIZE

    def describe(self) -> str:
        if self.target is None:
            return "*void"
        return f"*{self.target.describe()}"


def int_type(bits: int) -> IntType:
    return IntType(bits)


def array(length: int, element: SpecType) -> ArrayType:
    return ArrayType(length, element)


def struct(*fields: SpecType) -> StructType:
    return StructType(tuple(fields))


def pointer(target: SpecType | None = None) -> PointerType:
    return PointerType(target)


i1 = IntType(1)
i8 = IntType(8)
i16 = IntType(16)
i32 = IntType(32)
i64 = IntType(64)
char = i8
size_t = i64


def string_type(size: int) -> ArrayType:
    """Region type of a null-terminated string of ``size`` content bytes."""
    return ArrayType(size + 1, char)


def size_of(spec_type: SpecType, pointer_size: int = POINTER_SIZE) -> int:
    """Byte size of ``spec_type`` when pointers are ``pointer_size`` bytes wide."""
    if isinstance(spec_type, PointerType):
        return pointer_size
    if isinstance(spec_type, ArrayType):
        return spec_type.length * size_of(spec_type.element, pointer_size)
    if isinstance(spec_type, StructType):
        return sum(size_of(f, pointer_size) for f in spec_type.fields)
    return spec_type.size_bytes


def compatible(expected: SpecType | None, actual: SpecType | None) -> bool:
    """Check whether a value of type ``actual`` may be stored at ``expected``.
    Types match structurally. An untyped pointer on either side matches any
    pointer type.
    """
    if expected is None or actual is None:
        return expected is actual
    if isinstance(expected, PointerType) and isinstance(actual, PointerType):
        if expected.target is None or actual.target is None:
            return True
        return compatible(expected.target, actual.target)
    if isinstance(expected, ArrayType) and isinstance(actual, ArrayType):
        return expected.length == actual.length and compatible(expected.element, actual.element)
    if isinstance(expected, StructType) and isinstance(actual, StructType):
        return len(expected.fields) == len(actual.fields) and all(
            compatible(e, a) for e, a in zip(expected.fields, actual.fields)
        )
    return expected == actual


__all__ = [
    "POINTER_SIZE",
    "SpecType",
    "IntType",
    "ArrayType",
    "StructType",
    "PointerType",
    "int_type",
    "array",
    "struct",
    "pointer",
    "string_type",
    "compatible",
    "size_of",
    "i1",
    "i8",
    "i16",
    "i32",
    "i64",
    "char",
    "size_t",
]
