"""Harness construction context.
A ``HarnessContext`` is passed explicitly to every builder. It owns the
backend that accumulates the constraint log, so independent harnesses can be
built side by side in one process.
"""

from __future__ import annotations

from typing import Any

from pymemspec.config import PyMemSpecConfig
from pymemspec.core.backend import Fact, Phase, SymbolicBackend, Z3Backend
from pymemspec.core.solver import SolverResult, check_constraints
from pymemspec.logging import MemSpecLogger, get_logger


class HarnessContext:
    """State of one harness-construction pass.
    Attributes:
        name: Harness name used in reports.
        config: Active configuration.
        backend: Collaborator receiving allocations and constraints.
    """

    def __init__(
        self,
        backend: SymbolicBackend | None = None,
        config: PyMemSpecConfig | None = None,
        name: str = "harness",
        logger: MemSpecLogger | None = None,
    ):
        self.name = name
        self.config = config or PyMemSpecConfig()
        if backend is None:
            backend = Z3Backend(
                address_width=self.config.backend.address_width,
                check_types=self.config.backend.check_types,
                logger=logger,
            )
        self.backend = backend
        self._logger = logger

    @property
    def logger(self) -> MemSpecLogger:
        return self._logger or get_logger()

    @property
    def phase(self) -> Phase:
        return self.backend.phase

    @property
    def in_postcondition(self) -> bool:
        return self.backend.phase is Phase.POST

    @property
    def facts(self) -> list[Fact]:
        return self.backend.facts

    def execute(self, *args: Any) -> None:
        """Record the call of the function under test.
        Everything recorded afterwards belongs to the postcondition.
        """
        self.backend.execute(tuple(args))
        self.logger.debug(f"{self.name}: execute with {len(args)} argument(s)", category="context")

    def check(self, include_postconditions: bool = False) -> SolverResult:
        """Check that the recorded constraints can all hold together."""
        with self.logger.timer(f"{self.name}: solver check", category="solver"):
            constraints = self.backend.constraints(include_postconditions)
            result = check_constraints(constraints, self.config.backend.solver_timeout_ms)
        self.logger.debug(
            f"{self.name}: {len(constraints)} constraint(s), {result.status}", category="solver"
        )
        return result

    def summary(self) -> dict[str, Any]:
        """Counts of recorded facts by kind and phase."""
        counts: dict[str, int] = {}
        for fact in self.facts:
            key = f"{fact.phase.name.lower()}.{fact.kind}"
            counts[key] = counts.get(key, 0) + 1
        return {
            "name": self.name,
            "phase": self.phase.name.lower(),
            "facts": len(self.facts),
            "by_kind": dict(sorted(counts.items())),
        }

    def __repr__(self) -> str:
        return f"HarnessContext({self.name!r}, phase={self.phase.name}, facts={len(self.facts)})"


__all__ = ["HarnessContext"]
