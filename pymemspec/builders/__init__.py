"""Harness builders: allocation, structs, strings and arrays."""

from pymemspec.builders.alloc import (
    alloc_init,
    alloc_init_readonly,
    alloc_pointer,
    alloc_value,
    bind,
    fresh_value,
    points_to,
    ptr_to_fresh,
    ptr_to_fresh_readonly,
)
from pymemspec.builders.arrays import ArrayElement, collect_elements, init_array
from pymemspec.builders.strings import (
    TERMINATOR,
    alloc_string,
    fresh_string_post,
    fresh_string_pre,
)
from pymemspec.builders.structs import as_field, build_struct

__all__ = [
    "alloc_init",
    "alloc_init_readonly",
    "alloc_pointer",
    "alloc_value",
    "bind",
    "fresh_value",
    "points_to",
    "ptr_to_fresh",
    "ptr_to_fresh_readonly",
    "ArrayElement",
    "collect_elements",
    "init_array",
    "TERMINATOR",
    "alloc_string",
    "fresh_string_post",
    "fresh_string_pre",
    "as_field",
    "build_struct",
]
