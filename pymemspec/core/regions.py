"""Region policy: how a harness asks for memory.
A region is requested read-only, writable, or deliberately not allocated.
The first two become real allocations in the backend. A not-allocated
request yields a fresh pointer that may be NULL or any address, and must
never be treated as access to a real region.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

import z3

from pymemspec.core.types import SpecType
from pymemspec.logging import MemSpecLogger, get_logger

if TYPE_CHECKING:
    from pymemspec.core.backend import SymbolicBackend


class RegionIntent(Enum):
    """Allocation intent chosen by the harness author per call."""

    READ_ONLY = auto()
    WRITABLE = auto()
    NOT_ALLOCATED = auto()

    @property
    def is_allocated(self) -> bool:
        return self is not RegionIntent.NOT_ALLOCATED


@dataclass(frozen=True, eq=False)
class Pointer:
    """Opaque handle to a region, a fresh unallocated address, or NULL.
    Attributes:
        name: Name the harness gave the allocation.
        target: Type of the pointed-to region.
        intent: Intent the pointer was created with (None for NULL).
        address: Symbolic address, None only for the NULL sentinel.
        region_id: Backend region index, None unless allocated.
    """

    name: str
    target: SpecType | None = None
    intent: RegionIntent | None = None
    address: z3.BitVecRef | None = None
    region_id: int | None = None

    @property
    def is_null(self) -> bool:
        return self.address is None

    @property
    def is_allocated(self) -> bool:
        return self.region_id is not None

    @property
    def is_read_only(self) -> bool:
        return self.intent is RegionIntent.READ_ONLY

    def describe(self) -> str:
        if self.is_null:
            return "NULL"
        if not self.is_allocated:
            return f"&{self.name}?"
        return f"&{self.name}"

    def __repr__(self) -> str:
        return f"Pointer({self.describe()})"


NULL_POINTER = Pointer(name="NULL")


def allocate(
    backend: SymbolicBackend,
    intent: RegionIntent,
    spec_type: SpecType,
    name: str,
    logger: MemSpecLogger | None = None,
) -> Pointer:
    """Map an intent to the matching backend call."""
    logger = logger or get_logger()
    if intent is RegionIntent.NOT_ALLOCATED:
        ptr = backend.fresh_pointer(spec_type, name)
        logger.trace(f"fresh pointer {name}: {spec_type.describe()}", category="region")
        return ptr
    ptr = backend.alloc_region(intent, spec_type, name)
    logger.count("allocations")
    logger.trace(
        f"allocated {intent.name.lower()} {name}: {spec_type.describe()} "
        f"({spec_type.size_bytes} bytes)",
        category="region",
    )
    return ptr


__all__ = [
    "RegionIntent",
    "Pointer",
    "NULL_POINTER",
    "allocate",
]
