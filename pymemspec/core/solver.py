"""Z3 solver helpers for PyMemSpec.
Used to check that the constraints recorded while building a harness are
consistent, and to extract an example memory layout when they are.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import z3


@dataclass
class SolverResult:
    """Result of a satisfiability check."""

    is_sat: bool
    is_unsat: bool
    is_unknown: bool
    model: z3.ModelRef | None = None
    constraint_count: int = 0

    @staticmethod
    def sat(model: z3.ModelRef, constraint_count: int = 0) -> SolverResult:
        return SolverResult(
            is_sat=True,
            is_unsat=False,
            is_unknown=False,
            model=model,
            constraint_count=constraint_count,
        )

    @staticmethod
    def unsat(constraint_count: int = 0) -> SolverResult:
        return SolverResult(
            is_sat=False, is_unsat=True, is_unknown=False, constraint_count=constraint_count
        )

    @staticmethod
    def unknown(constraint_count: int = 0) -> SolverResult:
        return SolverResult(
            is_sat=False, is_unsat=False, is_unknown=True, constraint_count=constraint_count
        )

    @property
    def status(self) -> str:
        if self.is_sat:
            return "sat"
        if self.is_unsat:
            return "unsat"
        return "unknown"

    def model_values(self) -> dict[str, Any]:
        """Concrete values of the model as plain Python values."""
        if self.model is None:
            return {}
        values: dict[str, Any] = {}
        for decl in self.model.decls():
            value = self.model[decl]
            if z3.is_bv_value(value):
                values[decl.name()] = value.as_long()
            elif z3.is_true(value) or z3.is_false(value):
                values[decl.name()] = z3.is_true(value)
            else:
                values[decl.name()] = str(value)
        return dict(sorted(values.items()))


def check_constraints(constraints: list[z3.BoolRef], timeout_ms: int = 10000) -> SolverResult:
    """Check satisfiability of ``constraints``."""
    solver = z3.Solver()
    solver.set("timeout", timeout_ms)
    solver.add(constraints)
    result = solver.check()
    if result == z3.sat:
        return SolverResult.sat(solver.model(), len(constraints))
    if result == z3.unsat:
        return SolverResult.unsat(len(constraints))
    return SolverResult.unknown(len(constraints))


def prove(claim: z3.BoolRef, assumptions: list[z3.BoolRef] | None = None) -> bool:
    """Prove that ``claim`` holds under ``assumptions``."""
    solver = z3.Solver()
    solver.add(assumptions or [])
    solver.add(z3.Not(claim))
    return solver.check() == z3.unsat


__all__ = [
    "SolverResult",
    "check_constraints",
    "prove",
]
