"""
Example harnesses demonstrating PyMemSpec.
Each function receives a HarnessContext and describes memory before and
after a C function under test. Run one with:
    pymemspec check examples/example_harnesses.py -f swap_spec
"""

from pymemspec import (
    FRESH,
    ArrayElement,
    RegionIntent,
    alloc_init,
    alloc_value,
    bind,
    build_struct,
    fresh_string_post,
    fresh_string_pre,
    fresh_value,
    i32,
    i64,
    init_array,
    pointer,
    points_to,
    ptr_to_fresh,
    string_type,
    struct,
)


def swap_spec(ctx):
    """void swap(int32_t *a, int32_t *b)"""
    a = ptr_to_fresh(ctx, "a", i32)
    b = ptr_to_fresh(ctx, "b", i32)
    ctx.execute(a.pointer, b.pointer)
    points_to(ctx, a.pointer, b.term)
    points_to(ctx, b.pointer, a.term)
    return a, b


def strlen_spec(ctx):
    """size_t strlen(const char *s) for a 5 byte string."""
    s = fresh_string_pre(ctx, "s", 5)
    for i in range(5):
        ctx.backend.assert_constraint(s.term[i] != 0, f"s[{i}] is not NUL")
    ctx.execute(s.pointer)
    return s


def argv_spec(ctx):
    """int main(int argc, char **argv) with three 4 byte arguments."""

    def argument(index, size):
        arg = fresh_string_pre(ctx, f"argv{index}", size)
        return ArrayElement(arg.pointer, arg.term)

    argv = init_array(
        ctx, RegionIntent.READ_ONLY, 3, pointer(string_type(4)), argument, 4, name="argv"
    )
    argc = fresh_value(ctx, "argc", i32, FRESH)
    ctx.backend.assert_constraint(argc.term == 3, "argc matches argv")
    ctx.execute(argc.spec_value, argv.pointer)
    return argv


def pair_spec(ctx):
    """struct pair { int32_t key; int64_t value; } initialised by the caller."""
    key = fresh_value(ctx, "key", i32)
    value = fresh_value(ctx, "value", i64)
    pair = build_struct([key, value], ctx.logger)
    p = alloc_value(ctx, RegionIntent.WRITABLE, struct(i32, i64), pair.spec_value, "pair")
    ctx.execute(p)
    return pair


def version_spec(ctx):
    """const char *version(int32_t *flags) returns a 7 character string."""
    flags = alloc_init(ctx, i32, 0, name="flags")
    ctx.execute(flags.pointer)
    return fresh_string_post(ctx, "version", 7)


def contradictory_spec(ctx):
    """A precondition that can never hold."""
    x = ptr_to_fresh(ctx, "x", i32)
    ctx.backend.assert_constraint(x.term == 1)
    ctx.backend.assert_constraint(x.term == 2)
    return x


def unallocated_spec(ctx):
    """Binding a value to an unallocated region is rejected."""
    return bind(ctx, RegionIntent.NOT_ALLOCATED, i32, "ghost", FRESH)
