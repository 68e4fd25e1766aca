"""PyMemSpec: memory-layout specifications for symbolic execution harnesses.
A harness describes what memory looks like before the function under test
runs and what it must look like afterwards. PyMemSpec provides the pieces
such a description is made of:
- Region policy: read-only, writable, or deliberately not allocated
- Value duality: a fresh symbol or a value the caller already has
- Builders for scalars, structs, null-terminated strings and arrays of
  arbitrarily nested elements
Example:
    >>> from pymemspec import HarnessContext, RegionIntent, Stale, bind, i32
    >>> ctx = HarnessContext()
    >>> y = bind(ctx, RegionIntent.WRITABLE, i32, "y", Stale(10))
    >>> y.term.as_long()
    10
"""

from pymemspec.api import HarnessResult, build_harness, build_harness_file, load_harness
from pymemspec.builders import (
    TERMINATOR,
    ArrayElement,
    alloc_init,
    alloc_init_readonly,
    alloc_pointer,
    alloc_string,
    alloc_value,
    bind,
    build_struct,
    collect_elements,
    fresh_string_post,
    fresh_string_pre,
    fresh_value,
    init_array,
    points_to,
    ptr_to_fresh,
    ptr_to_fresh_readonly,
)
from pymemspec.core import (
    FRESH,
    NULL_POINTER,
    ArrayBinding,
    ArrayInitResult,
    ArrayLiteral,
    ArrayType,
    BoundValue,
    CollaboratorError,
    EmptyArrayError,
    Fresh,
    HarnessContext,
    HarnessError,
    IntType,
    LimitExceeded,
    Phase,
    Pointer,
    PointerType,
    PointerValue,
    PolicyViolation,
    RegionIntent,
    SpecType,
    SpecTypeError,
    SpecValue,
    Stale,
    StructBinding,
    StructLiteral,
    StructType,
    SymbolicBackend,
    SymbolicSequence,
    TermValue,
    UseBeforeResolve,
    Z3Backend,
    array,
    char,
    i1,
    i8,
    i16,
    i32,
    i64,
    null_value,
    pointer,
    size_t,
    string_type,
    struct,
)

__version__ = "0.1.0"
__author__ = "PyMemSpec Team"
from pymemspec.config import PyMemSpecConfig, load_config
from pymemspec.logging import LogLevel, configure_logging, get_logger

__all__ = [
    "HarnessResult",
    "build_harness",
    "build_harness_file",
    "load_harness",
    "TERMINATOR",
    "ArrayElement",
    "alloc_init",
    "alloc_init_readonly",
    "alloc_pointer",
    "alloc_string",
    "alloc_value",
    "bind",
    "build_struct",
    "collect_elements",
    "fresh_string_post",
    "fresh_string_pre",
    "fresh_value",
    "init_array",
    "points_to",
    "ptr_to_fresh",
    "ptr_to_fresh_readonly",
    "FRESH",
    "NULL_POINTER",
    "ArrayBinding",
    "ArrayInitResult",
    "ArrayLiteral",
    "ArrayType",
    "BoundValue",
    "CollaboratorError",
    "EmptyArrayError",
    "Fresh",
    "HarnessContext",
    "HarnessError",
    "IntType",
    "LimitExceeded",
    "Phase",
    "Pointer",
    "PointerType",
    "PointerValue",
    "PolicyViolation",
    "RegionIntent",
    "SpecType",
    "SpecTypeError",
    "SpecValue",
    "Stale",
    "StructBinding",
    "StructLiteral",
    "StructType",
    "SymbolicBackend",
    "SymbolicSequence",
    "TermValue",
    "UseBeforeResolve",
    "Z3Backend",
    "array",
    "char",
    "i1",
    "i8",
    "i16",
    "i32",
    "i64",
    "null_value",
    "pointer",
    "size_t",
    "string_type",
    "struct",
    "PyMemSpecConfig",
    "load_config",
    "LogLevel",
    "configure_logging",
    "get_logger",
]
