"""Exceptions raised by the sampling and extraction pipeline."""

from __future__ import annotations

from typing import Mapping, Optional


class ImplicitPlotError(Exception):
    """Base exception for implicitplot."""


class PreconditionViolation(ImplicitPlotError, ValueError):
    """Raised when a window, fidelity or grid shape is rejected before any work."""


class EvaluatorContractViolation(ImplicitPlotError, TypeError):
    """Raised when an evaluator returns an unusable or inconsistent result kind."""

    def __init__(self, message: str, bindings: Optional[Mapping[str, float]] = None):
        super().__init__(message)
        self.bindings = dict(bindings or {})


class RenderingBackendFailure(ImplicitPlotError, RuntimeError):
    """Raised by a drawable backend when a draw or display call fails."""


class ImpossibleConfiguration(ImplicitPlotError, AssertionError):
    """Raised when a packed corner configuration falls outside its case table."""

    def __init__(self, index: int, cases: int):
        super().__init__(f"configuration index {index} outside 0..{cases - 1}")
        self.index = index


__all__ = [
    "ImplicitPlotError",
    "PreconditionViolation",
    "EvaluatorContractViolation",
    "RenderingBackendFailure",
    "ImpossibleConfiguration",
]
