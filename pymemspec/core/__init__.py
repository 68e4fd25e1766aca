"""Core module for PyMemSpec.
Provides:
- Type model and symbolic terms
- Region policy and value duality
- Spec values and the records builders return
- The backend boundary and the default z3 backend
- The harness construction context
"""

from pymemspec.core.backend import (
    AllocationFact,
    ConstraintFact,
    ConstraintLog,
    ExecuteFact,
    Fact,
    FreshSymbolFact,
    Phase,
    PointsToFact,
    SymbolicBackend,
    Z3Backend,
)
from pymemspec.core.context import HarnessContext
from pymemspec.core.duality import FRESH, Duality, Fresh, Stale, as_duality, resolve
from pymemspec.core.errors import (
    CollaboratorError,
    ConstructionStep,
    EmptyArrayError,
    HarnessError,
    LimitExceeded,
    PolicyViolation,
    SpecTypeError,
    UseBeforeResolve,
    error_kind,
)
from pymemspec.core.regions import NULL_POINTER, Pointer, RegionIntent, allocate
from pymemspec.core.solver import SolverResult, check_constraints
from pymemspec.core.terms import SymbolicRecord, SymbolicSequence, byte_sequence, coerce
from pymemspec.core.types import (
    ArrayType,
    IntType,
    PointerType,
    SpecType,
    StructType,
    array,
    char,
    i1,
    i8,
    i16,
    i32,
    i64,
    int_type,
    pointer,
    size_t,
    string_type,
    struct,
)
from pymemspec.core.values import (
    ArrayBinding,
    ArrayInitResult,
    ArrayLiteral,
    BoundValue,
    PointerValue,
    SpecValue,
    StructBinding,
    StructLiteral,
    TermValue,
    null_value,
)

__all__ = [
    "AllocationFact",
    "ConstraintFact",
    "ConstraintLog",
    "ExecuteFact",
    "Fact",
    "FreshSymbolFact",
    "Phase",
    "PointsToFact",
    "SymbolicBackend",
    "Z3Backend",
    "HarnessContext",
    "FRESH",
    "Duality",
    "Fresh",
    "Stale",
    "as_duality",
    "resolve",
    "CollaboratorError",
    "ConstructionStep",
    "EmptyArrayError",
    "HarnessError",
    "LimitExceeded",
    "PolicyViolation",
    "SpecTypeError",
    "UseBeforeResolve",
    "error_kind",
    "NULL_POINTER",
    "Pointer",
    "RegionIntent",
    "allocate",
    "SolverResult",
    "check_constraints",
    "SymbolicRecord",
    "SymbolicSequence",
    "byte_sequence",
    "coerce",
    "ArrayType",
    "IntType",
    "PointerType",
    "SpecType",
    "StructType",
    "array",
    "char",
    "i1",
    "i8",
    "i16",
    "i32",
    "i64",
    "int_type",
    "pointer",
    "size_t",
    "string_type",
    "struct",
    "ArrayBinding",
    "ArrayInitResult",
    "ArrayLiteral",
    "BoundValue",
    "PointerValue",
    "SpecValue",
    "StructBinding",
    "StructLiteral",
    "TermValue",
    "null_value",
]
