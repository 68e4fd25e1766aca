"""Boundary with the symbolic-execution backend.
Builders talk to the backend through ``SymbolicBackend`` only: allocate a
region, create a fresh pointer or symbol, record a points-to fact or a
constraint, and lift a term into a spec value. ``Z3Backend`` is the default
implementation. It records every call in an append-only log and can turn the
log into z3 constraints for a satisfiability check.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

import z3

from pymemspec.core.errors import CollaboratorError, ConstructionStep, SpecTypeError
from pymemspec.core.regions import Pointer, RegionIntent
from pymemspec.core.terms import SymbolicRecord, SymbolicSequence
from pymemspec.core.types import (
    ArrayType,
    IntType,
    PointerType,
    SpecType,
    StructType,
    compatible,
    size_of,
)
from pymemspec.core.values import PointerValue, SpecValue, TermValue, spec_value_type
from pymemspec.logging import MemSpecLogger, get_logger


class Phase(Enum):
    """Which side of the call under test a fact belongs to."""

    PRE = auto()
    POST = auto()


@dataclass
class Fact:
    """One entry of the constraint log."""

    phase: Phase
    index: int = field(default=0, init=False)

    kind = "fact"

    def describe(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "kind": self.kind,
            "phase": self.phase.name.lower(),
            "description": self.describe(),
        }


@dataclass
class AllocationFact(Fact):
    pointer: Pointer = None
    spec_type: SpecType = None

    kind = "alloc"

    def describe(self) -> str:
        if not self.pointer.is_allocated:
            return f"{self.pointer.name} = fresh pointer to {self.spec_type.describe()}"
        mode = "readonly" if self.pointer.is_read_only else "writable"
        return f"{self.pointer.name} = alloc {mode} {self.spec_type.describe()}"


@dataclass
class FreshSymbolFact(Fact):
    name: str = ""
    spec_type: SpecType = None

    kind = "fresh"

    def describe(self) -> str:
        return f"{self.name} : {self.spec_type.describe()}"


@dataclass
class PointsToFact(Fact):
    pointer: Pointer = None
    value: SpecValue = None

    kind = "points_to"

    def describe(self) -> str:
        return f"{self.pointer.describe()} -> {self.value.describe()}"


@dataclass
class ConstraintFact(Fact):
    condition: z3.BoolRef = None
    description: str = ""

    kind = "constraint"

    def describe(self) -> str:
        if self.description:
            return f"{self.condition}  ({self.description})"
        return str(self.condition)


@dataclass
class ExecuteFact(Fact):
    args: tuple[Any, ...] = ()

    kind = "execute"

    def describe(self) -> str:
        return "execute(" + ", ".join(_describe_arg(a) for a in self.args) + ")"


def _describe_arg(arg: Any) -> str:
    if isinstance(arg, (SpecValue, Pointer)):
        return arg.describe()
    return str(arg)


class ConstraintLog:
    """Append-only, ordered record of backend calls."""

    def __init__(self) -> None:
        self._facts: list[Fact] = []

    def append(self, fact: Fact) -> Fact:
        fact.index = len(self._facts)
        self._facts.append(fact)
        return fact

    def __iter__(self):
        return iter(self._facts)

    def __len__(self) -> int:
        return len(self._facts)

    def of_kind(self, fact_type: type[Fact]) -> list[Fact]:
        return [f for f in self._facts if isinstance(f, fact_type)]

    def in_phase(self, phase: Phase) -> list[Fact]:
        return [f for f in self._facts if f.phase is phase]


class SymbolicBackend(ABC):
    """The operations harness builders consume from the backend."""

    def __init__(self) -> None:
        self.phase = Phase.PRE

    @abstractmethod
    def alloc_region(self, intent: RegionIntent, spec_type: SpecType, name: str) -> Pointer:
        """Allocate a read-only or writable region."""

    @abstractmethod
    def fresh_pointer(self, spec_type: SpecType, name: str) -> Pointer:
        """Pointer that is NULL or an arbitrary unallocated address."""

    @abstractmethod
    def fresh_symbol(self, name: str, spec_type: SpecType) -> Any:
        """New unconstrained symbolic expression."""

    @abstractmethod
    def assert_points_to(self, pointer: Pointer, value: SpecValue) -> None:
        """Record that ``pointer`` holds ``value`` in the current phase."""

    @abstractmethod
    def assert_constraint(self, condition: Any, description: str = "") -> None:
        """Record a boolean condition in the current phase."""

    @abstractmethod
    def to_spec_value(self, expr: Any) -> SpecValue:
        """Lift a symbolic expression into a spec value."""

    @abstractmethod
    def constraints(self, include_postconditions: bool = False) -> list[z3.BoolRef]:
        """All recorded facts as z3 constraints."""

    @property
    @abstractmethod
    def facts(self) -> list[Fact]:
        """The ordered log of recorded facts."""

    def execute(self, args: tuple[Any, ...] = ()) -> None:
        """Mark the call of the function under test."""
        if self.phase is Phase.POST:
            raise CollaboratorError("the function under test was already executed")
        self.phase = Phase.POST


@dataclass
class _Region:
    pointer: Pointer
    spec_type: SpecType
    intent: RegionIntent
    bindings: dict[Phase, list[SpecValue]] = field(default_factory=dict)


class Z3Backend(SymbolicBackend):
    """Default backend: records facts and models them with z3.
    Allocated regions get a symbolic address that is non-null, does not wrap
    around, and does not overlap any other region. Fresh pointers get an
    unconstrained address that may be NULL.
    """

    def __init__(
        self,
        address_width: int = 64,
        check_types: bool = True,
        logger: MemSpecLogger | None = None,
    ):
        super().__init__()
        self.address_width = address_width
        self.check_types = check_types
        self.log = ConstraintLog()
        self._logger = logger
        self._regions: list[_Region] = []
        self._names: dict[str, int] = {}

    @property
    def logger(self) -> MemSpecLogger:
        return self._logger or get_logger()

    @property
    def pointer_size(self) -> int:
        return (self.address_width + 7) // 8

    def size_of(self, spec_type: SpecType) -> int:
        """Byte size of ``spec_type`` at this backend's pointer width."""
        return size_of(spec_type, self.pointer_size)

    @property
    def facts(self) -> list[Fact]:
        return list(self.log)

    @property
    def regions(self) -> list[Pointer]:
        return [r.pointer for r in self._regions]

    def _unique(self, name: str) -> str:
        seen = self._names.get(name, 0)
        self._names[name] = seen + 1
        if seen == 0:
            return name
        unique = f"{name}!{seen}"
        self.logger.debug(f"symbol {name!r} already used, renamed to {unique!r}", category="backend")
        return unique

    def alloc_region(self, intent: RegionIntent, spec_type: SpecType, name: str) -> Pointer:
        if not intent.is_allocated:
            raise CollaboratorError(
                "cannot allocate a region that is not allocated",
                ConstructionStep("alloc_region", intent, spec_type, name),
            )
        region_id = len(self._regions)
        address = z3.BitVec(self._unique(f"{name}@addr"), self.address_width)
        ptr = Pointer(name=name, target=spec_type, intent=intent, address=address, region_id=region_id)
        self._regions.append(_Region(pointer=ptr, spec_type=spec_type, intent=intent))
        self.log.append(AllocationFact(self.phase, pointer=ptr, spec_type=spec_type))
        return ptr

    def fresh_pointer(self, spec_type: SpecType, name: str) -> Pointer:
        address = z3.BitVec(self._unique(f"{name}@addr"), self.address_width)
        ptr = Pointer(
            name=name, target=spec_type, intent=RegionIntent.NOT_ALLOCATED, address=address
        )
        self.log.append(AllocationFact(self.phase, pointer=ptr, spec_type=spec_type))
        return ptr

    def fresh_symbol(self, name: str, spec_type: SpecType) -> Any:
        term = self._make_symbol(self._unique(name), spec_type, name)
        self.log.append(FreshSymbolFact(self.phase, name=name, spec_type=spec_type))
        return term

    def _make_symbol(self, label: str, spec_type: SpecType, name: str) -> Any:
        if isinstance(spec_type, IntType):
            return z3.BitVec(label, spec_type.bits)
        if isinstance(spec_type, ArrayType):
            return SymbolicSequence(
                tuple(
                    self._make_symbol(f"{label}[{i}]", spec_type.element, name)
                    for i in range(spec_type.length)
                ),
                spec_type.element,
            )
        if isinstance(spec_type, StructType):
            return SymbolicRecord(
                tuple(
                    self._make_symbol(f"{label}.{i}", f, name)
                    for i, f in enumerate(spec_type.fields)
                )
            )
        raise CollaboratorError(
            "pointer-typed symbols must be created with a fresh pointer",
            ConstructionStep("fresh_symbol", None, spec_type, name),
        )

    def assert_points_to(self, pointer: Pointer, value: SpecValue) -> None:
        if pointer.is_null:
            raise CollaboratorError("points-to on a NULL pointer")
        if not pointer.is_allocated:
            raise CollaboratorError(
                f"points-to on {pointer.name!r}, which is not an allocated region"
            )
        region = self._regions[pointer.region_id]
        if self.check_types:
            try:
                actual = spec_value_type(value)
            except SpecTypeError as e:
                raise CollaboratorError(
                    e.message,
                    ConstructionStep("points_to", region.intent, region.spec_type, pointer.name),
                ) from None
            if not compatible(region.spec_type, actual):
                raise CollaboratorError(
                    f"value of type {actual.describe()} does not fit the region",
                    ConstructionStep("points_to", region.intent, region.spec_type, pointer.name),
                )
        region.bindings.setdefault(self.phase, []).append(value)
        self.log.append(PointsToFact(self.phase, pointer=pointer, value=value))

    def assert_constraint(self, condition: Any, description: str = "") -> None:
        if isinstance(condition, bool):
            condition = z3.BoolVal(condition)
        if not z3.is_bool(condition):
            raise CollaboratorError(f"constraint is not a boolean expression: {condition!r}")
        self.log.append(ConstraintFact(self.phase, condition=condition, description=description))

    def to_spec_value(self, expr: Any) -> SpecValue:
        if isinstance(expr, SpecValue):
            return expr
        if isinstance(expr, Pointer):
            return PointerValue(expr)
        if isinstance(expr, (SymbolicSequence, SymbolicRecord, z3.BitVecRef)):
            return TermValue(expr)
        raise CollaboratorError(f"cannot lift {expr!r} into a spec value")

    def execute(self, args: tuple[Any, ...] = ()) -> None:
        super().execute(args)
        self.log.append(ExecuteFact(Phase.POST, args=tuple(args)))

    def constraints(self, include_postconditions: bool = False) -> list[z3.BoolRef]:
        phases = {Phase.PRE, Phase.POST} if include_postconditions else {Phase.PRE}
        regions = [r for r in self._regions if self._allocation_phase(r) in phases]
        result: list[z3.BoolRef] = []
        for region in regions:
            result.extend(self._region_constraints(region))
        for i, first in enumerate(regions):
            for second in regions[i + 1 :]:
                result.append(self._disjoint(first, second))
        for region in self._regions:
            for phase in phases:
                result.extend(self._binding_constraints(region.bindings.get(phase, [])))
        for fact in self.log.of_kind(ConstraintFact):
            if fact.phase in phases:
                result.append(fact.condition)
        return result

    def _allocation_phase(self, region: _Region) -> Phase:
        for fact in self.log.of_kind(AllocationFact):
            if fact.pointer is region.pointer:
                return fact.phase
        return Phase.PRE

    def _region_constraints(self, region: _Region) -> list[z3.BoolRef]:
        address = region.pointer.address
        size = max(self.size_of(region.spec_type), 1)
        limit = z3.BitVecVal(2**self.address_width - size, self.address_width)
        return [address != 0, z3.ULE(address, limit)]

    def _disjoint(self, first: _Region, second: _Region) -> z3.BoolRef:
        a = first.pointer.address
        b = second.pointer.address
        a_size = z3.BitVecVal(max(self.size_of(first.spec_type), 1), self.address_width)
        b_size = z3.BitVecVal(max(self.size_of(second.spec_type), 1), self.address_width)
        return z3.Or(z3.ULE(a + a_size, b), z3.ULE(b + b_size, a))

    def _binding_constraints(self, values: list[SpecValue]) -> list[z3.BoolRef]:
        if len(values) < 2:
            return []
        result = []
        first = values[0].leaves(self.address_width)
        for other in values[1:]:
            leaves = other.leaves(self.address_width)
            if len(leaves) != len(first):
                raise CollaboratorError(
                    f"conflicting points-to values: {values[0].describe()} vs {other.describe()}"
                )
            for lhs, rhs in zip(first, leaves):
                if lhs.sort() != rhs.sort():
                    raise CollaboratorError(
                        f"conflicting points-to values: {values[0].describe()} vs {other.describe()}"
                    )
                result.append(lhs == rhs)
        return result


__all__ = [
    "Phase",
    "Fact",
    "AllocationFact",
    "FreshSymbolFact",
    "PointsToFact",
    "ConstraintFact",
    "ExecuteFact",
    "ConstraintLog",
    "SymbolicBackend",
    "Z3Backend",
]
