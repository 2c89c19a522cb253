"""Error types raised by the polytope generation engine."""

from __future__ import annotations

from typing import List, Sequence, Tuple, Union


class PolygenError(Exception):
    """Base class for every error raised by polygen."""


class DiagramSyntaxError(PolygenError, ValueError):
    """A Coxeter diagram string could not be parsed.

    Carries the original diagram, the offending character span and the list of
    reasons, so a caller can highlight the problem in the input.
    """

    def __init__(self, diagram: str, start: int, end: int, reasons: Union[str, Sequence[str]]):
        if isinstance(reasons, str):
            reasons = [reasons]
        self.diagram = diagram
        self.span: Tuple[int, int] = (start, end)
        self.reasons: List[str] = list(reasons)
        super().__init__(self._render())

    def _render(self) -> str:
        start, end = self.span
        left = self.diagram[:start]
        middle = self.diagram[start:end]
        right = self.diagram[end:]
        details = "\n- ".join(self.reasons)
        return f"Error parsing diagram at: {left}[{middle}]{right}\n- {details}"


class UnsupportedFeatureError(PolygenError, ValueError):
    """The diagram is valid but describes something the assembler cannot build."""


class IterationLimitExceeded(PolygenError, RuntimeError):
    """Coset enumeration did not finish within the iteration bound."""

    def __init__(self, max_iterations: int, coset_count: int):
        self.max_iterations = max_iterations
        self.coset_count = coset_count
        super().__init__(
            f"Iteration limit of {max_iterations} exceeded with {coset_count} cosets defined"
        )


class InvariantViolation(PolygenError, RuntimeError):
    """Internal consistency check failed (a logic defect, not bad input)."""


__all__ = [
    "PolygenError",
    "DiagramSyntaxError",
    "UnsupportedFeatureError",
    "IterationLimitExceeded",
    "InvariantViolation",
]
