"""Backend-facing spec values and the records builders return.
A spec value is what gets bound into a precondition or postcondition. A
binding pairs it with the pointer it lives at and, for scalar and sequence
bindings, the logical term the author keeps using in later constraints.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pymemspec.core.errors import EmptyArrayError, SpecTypeError, UseBeforeResolve
from pymemspec.core.regions import NULL_POINTER, Pointer
from pymemspec.core.terms import SymbolicRecord, SymbolicSequence, flatten_term, term_type
from pymemspec.core.types import (
    POINTER_SIZE,
    ArrayType,
    PointerType,
    SpecType,
    StructType,
    compatible,
)


class SpecValue:
    """Base class of spec values."""

    def describe(self) -> str:
        raise NotImplementedError

    def leaves(self, pointer_bits: int = POINTER_SIZE * 8) -> list[Any]:
        """Scalar z3 leaves in layout order; NULL is a zero of ``pointer_bits``."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.describe()})"


@dataclass(frozen=True, eq=False, repr=False)
class TermValue(SpecValue):
    """A symbolic expression lifted into a spec value."""

    term: Any

    def describe(self) -> str:
        return _describe_term(self.term)

    def leaves(self, pointer_bits: int = POINTER_SIZE * 8) -> list[Any]:
        return flatten_term(self.term, pointer_bits)


@dataclass(frozen=True, eq=False, repr=False)
class PointerValue(SpecValue):
    """A pointer used as a value, e.g. an array element or struct field."""

    pointer: Pointer

    def describe(self) -> str:
        return self.pointer.describe()

    def leaves(self, pointer_bits: int = POINTER_SIZE * 8) -> list[Any]:
        return flatten_term(self.pointer, pointer_bits)


@dataclass(frozen=True, eq=False, repr=False)
class ArrayLiteral(SpecValue):
    """Array of spec values, index 0 first."""

    elements: tuple[SpecValue, ...]

    def __len__(self) -> int:
        return len(self.elements)

    def describe(self) -> str:
        return "[" + ", ".join(e.describe() for e in self.elements) + "]"

    def leaves(self, pointer_bits: int = POINTER_SIZE * 8) -> list[Any]:
        return [leaf for e in self.elements for leaf in e.leaves(pointer_bits)]


@dataclass(frozen=True, eq=False, repr=False)
class StructLiteral(SpecValue):
    """Struct of spec values in layout order."""

    fields: tuple[SpecValue, ...]

    def __len__(self) -> int:
        return len(self.fields)

    def describe(self) -> str:
        return "{" + ", ".join(f.describe() for f in self.fields) + "}"

    def leaves(self, pointer_bits: int = POINTER_SIZE * 8) -> list[Any]:
        return [leaf for f in self.fields for leaf in f.leaves(pointer_bits)]


def null_value() -> PointerValue:
    return PointerValue(NULL_POINTER)


def spec_value_type(value: SpecValue) -> SpecType:
    """Infer the type of a spec value."""
    if isinstance(value, TermValue):
        return term_type(value.term)
    if isinstance(value, PointerValue):
        return PointerType(value.pointer.target)
    if isinstance(value, StructLiteral):
        return StructType(tuple(spec_value_type(f) for f in value.fields))
    if isinstance(value, ArrayLiteral):
        if len(value.elements) == 0:
            raise SpecTypeError("Cannot infer the type of an empty array literal")
        element_type = spec_value_type(value.elements[0])
        for element in value.elements[1:]:
            other = spec_value_type(element)
            if not compatible(element_type, other):
                raise SpecTypeError(
                    f"Array literal mixes {element_type.describe()} and {other.describe()}"
                )
        return ArrayType(len(value.elements), element_type)
    raise SpecTypeError(f"Not a spec value: {value!r}")


def _describe_term(term: Any) -> str:
    if isinstance(term, Pointer):
        return term.describe()
    if isinstance(term, SymbolicSequence):
        return f"<{term.spec_type.describe()}>"
    if isinstance(term, SymbolicRecord):
        return "{" + ", ".join(_describe_term(f) for f in term.fields) + "}"
    return str(term)


@dataclass(frozen=True, eq=False)
class BoundValue:
    """A value bound at a pointer.
    Attributes:
        pointer: Where the value lives, NULL_POINTER for pure values.
        spec_value: Representation bound into the pre/postcondition.
        term: Logical term usable in further constraints.
    """

    pointer: Pointer
    spec_value: SpecValue
    term: Any


@dataclass(frozen=True, eq=False)
class StructBinding:
    """A packed struct value. It has no logical term of its own."""

    spec_value: StructLiteral
    pointer: Pointer = NULL_POINTER

    @property
    def term(self) -> Any:
        raise UseBeforeResolve("struct values have no logical term; use their fields")

    @property
    def fields(self) -> tuple[SpecValue, ...]:
        return self.spec_value.fields


@dataclass(frozen=True, eq=False)
class ArrayInitResult:
    """Element values and buckets of an initialized array, index-aligned."""

    spec_values: tuple[SpecValue, ...]
    buckets: tuple[Any, ...]

    def __post_init__(self) -> None:
        if len(self.spec_values) != len(self.buckets):
            raise ValueError(
                f"{len(self.spec_values)} element values but {len(self.buckets)} buckets"
            )
        if len(self.spec_values) < 1:
            raise EmptyArrayError("An initialized array has at least one element")

    def __len__(self) -> int:
        return len(self.spec_values)


@dataclass(frozen=True, eq=False)
class ArrayBinding:
    """An array allocated in one region and bound to one array literal."""

    pointer: Pointer
    spec_value: ArrayLiteral
    elements: ArrayInitResult

    @property
    def spec_values(self) -> tuple[SpecValue, ...]:
        return self.elements.spec_values

    @property
    def buckets(self) -> tuple[Any, ...]:
        return self.elements.buckets

    def __len__(self) -> int:
        return len(self.elements)


__all__ = [
    "SpecValue",
    "TermValue",
    "PointerValue",
    "ArrayLiteral",
    "StructLiteral",
    "null_value",
    "spec_value_type",
    "BoundValue",
    "StructBinding",
    "ArrayInitResult",
    "ArrayBinding",
]
