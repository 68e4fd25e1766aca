"""Output formatters for built harnesses."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from pymemspec.core.backend import Phase

if TYPE_CHECKING:
    from pymemspec.api import HarnessResult
    from pymemspec.core.solver import SolverResult


class Formatter(ABC):
    """Base class for output formatters."""

    name: str = "base"
    extension: str = ".txt"

    @abstractmethod
    def format(self, result: HarnessResult, check: SolverResult | None = None) -> str:
        """Format a harness result and, optionally, its solver check."""

    def save(self, result: HarnessResult, filepath: str, check: SolverResult | None = None) -> None:
        """Save formatted result to file."""
        content = self.format(result, check)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)


class TextFormatter(Formatter):
    """Plain text report: facts grouped by phase, then the solver verdict."""

    name = "text"
    extension = ".txt"

    STATUS_ICONS = {
        "sat": "✅ consistent",
        "unsat": "❌ contradictory",
        "unknown": "❔ unknown",
    }

    def __init__(self, show_facts: bool = True, show_constraints: bool = False):
        self.show_facts = show_facts
        self.show_constraints = show_constraints

    def format(self, result: HarnessResult, check: SolverResult | None = None) -> str:
        lines = []
        lines.append("")
        lines.append("╔" + "═" * 58 + "╗")
        lines.append("║" + f"  PyMemSpec - Harness {result.name}".center(58) + "║")
        lines.append("╚" + "═" * 58 + "╝")
        lines.append("")
        if result.source_file:
            lines.append(f"  File:      {result.source_file}")
        summary = result.summary()
        lines.append(f"  Facts:     {summary['facts']}")
        lines.append(f"  Phase:     {summary['phase']}")
        lines.append(f"  Time:      {result.elapsed_seconds:.3f}s")
        lines.append("")
        if self.show_facts:
            for phase, title in ((Phase.PRE, "Precondition"), (Phase.POST, "Postcondition")):
                facts = [f for f in result.facts if f.phase is phase]
                if not facts:
                    continue
                lines.append(f"┌─ {title} " + "─" * (55 - len(title)) + "┐")
                for fact in facts:
                    lines.append(f"│  [{fact.index:>3}] {fact.kind:<10} {fact.describe()}")
                lines.append("└" + "─" * 58 + "┘")
                lines.append("")
        if check is not None:
            lines.append(f"  Solver:    {self.STATUS_ICONS[check.status]}")
            lines.append(f"  Constraints checked: {check.constraint_count}")
            if self.show_constraints and check.is_sat:
                lines.append("  ↳ Example layout:")
                for name, value in check.model_values().items():
                    lines.append(f"      {name} = {value}")
            lines.append("")
        return "\n".join(lines)


class JSONFormatter(Formatter):
    """JSON report for tooling."""

    name = "json"
    extension = ".json"

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format(self, result: HarnessResult, check: SolverResult | None = None) -> str:
        data: dict[str, Any] = {
            "harness": result.name,
            "source_file": result.source_file,
            "summary": result.summary(),
            "facts": [fact.to_dict() for fact in result.facts],
        }
        if check is not None:
            data["check"] = {
                "status": check.status,
                "constraints": check.constraint_count,
                "model": check.model_values(),
            }
        return json.dumps(data, indent=self.indent)


FORMATTERS: dict[str, type[Formatter]] = {
    "text": TextFormatter,
    "json": JSONFormatter,
}


def get_formatter(name: str, **kwargs: Any) -> Formatter:
    """Look up a formatter by name."""
    try:
        return FORMATTERS[name](**kwargs)
    except KeyError:
        raise ValueError(f"Unknown format {name!r}; choose from {sorted(FORMATTERS)}") from None


def format_result(
    result: HarnessResult,
    format_type: str = "text",
    check: SolverResult | None = None,
    **kwargs: Any,
) -> str:
    """Format a harness result using the named formatter."""
    return get_formatter(format_type, **kwargs).format(result, check)


__all__ = [
    "Formatter",
    "TextFormatter",
    "JSONFormatter",
    "FORMATTERS",
    "get_formatter",
    "format_result",
]
