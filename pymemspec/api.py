"""Public API for PyMemSpec."""

from __future__ import annotations

import importlib.util
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pymemspec.config import PyMemSpecConfig
from pymemspec.core.backend import Fact, SymbolicBackend
from pymemspec.core.context import HarnessContext
from pymemspec.core.solver import SolverResult

HarnessFunction = Callable[[HarnessContext], Any]


@dataclass
class HarnessResult:
    """A finished harness-construction pass."""

    name: str
    context: HarnessContext
    value: Any
    elapsed_seconds: float
    source_file: str | None = None

    @property
    def facts(self) -> list[Fact]:
        return self.context.facts

    def check(self, include_postconditions: bool = False) -> SolverResult:
        return self.context.check(include_postconditions)

    def summary(self) -> dict[str, Any]:
        summary = self.context.summary()
        summary["elapsed_seconds"] = self.elapsed_seconds
        return summary


def build_harness(
    func: HarnessFunction,
    *,
    config: PyMemSpecConfig | None = None,
    backend: SymbolicBackend | None = None,
    name: str | None = None,
) -> HarnessResult:
    """
    Run a harness function against a fresh context.
    The function receives the HarnessContext and may return anything, usually
    the bindings later postconditions refer to. Harness errors propagate
    unchanged; there is no partial result.
    Example:
        >>> from pymemspec import build_harness, i32, ptr_to_fresh
        >>> def swap_spec(ctx):
        ...     a = ptr_to_fresh(ctx, "a", i32)
        ...     b = ptr_to_fresh(ctx, "b", i32)
        ...     ctx.execute(a.pointer, b.pointer)
        ...     return a, b
        >>> result = build_harness(swap_spec)
        >>> result.check().is_sat
        True
    """
    harness_name = name or getattr(func, "__name__", "harness")
    ctx = HarnessContext(backend=backend, config=config, name=harness_name)
    ctx.logger.verbose(f"building harness {harness_name}", category="api")
    start = time.perf_counter()
    value = func(ctx)
    elapsed = time.perf_counter() - start
    ctx.logger.verbose(
        f"built harness {harness_name}: {len(ctx.facts)} fact(s) in {elapsed:.3f}s",
        category="api",
    )
    return HarnessResult(name=harness_name, context=ctx, value=value, elapsed_seconds=elapsed)


def load_harness(path: str | Path, function: str) -> HarnessFunction:
    """Import ``function`` from the Python file at ``path``."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Harness file not found: {path}")
    spec = importlib.util.spec_from_file_location(f"_pymemspec_harness_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load harness file: {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    func = getattr(module, function, None)
    if not callable(func):
        raise AttributeError(f"{path} has no harness function {function!r}")
    return func


def build_harness_file(
    path: str | Path,
    function: str,
    *,
    config: PyMemSpecConfig | None = None,
) -> HarnessResult:
    """Load a harness function from a file and build it."""
    result = build_harness(load_harness(path, function), config=config, name=function)
    result.source_file = str(path)
    return result


__all__ = [
    "HarnessFunction",
    "HarnessResult",
    "build_harness",
    "load_harness",
    "build_harness_file",
]
