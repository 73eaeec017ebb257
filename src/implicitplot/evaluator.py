"""Evaluator results and helpers for building scalar fields.

An evaluator is any callable taking a mapping of named coordinates
(``{"x": .., "y": .. [, "z": ..]}``) and returning either a boolean
("the predicate holds here") or a real residual (signed value, zero on the
solution set).  Plain ``bool``/``float`` returns are classified with
:func:`classify`; evaluators may also return :class:`Predicate` or
:class:`Residual` directly.

One sampling pass must see a single result kind.  Mixing kinds is a bug in
the evaluator and is reported as :class:`EvaluatorContractViolation`.
"""

from __future__ import annotations

import importlib
import math
import numbers
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Union

import numpy as np

from implicitplot.errors import EvaluatorContractViolation

PREDICATE = "predicate"
RESIDUAL = "residual"


@dataclass(frozen=True)
class Predicate:
    value: bool
    kind = PREDICATE


@dataclass(frozen=True)
class Residual:
    value: float
    kind = RESIDUAL


Result = Union[Predicate, Residual]
Bindings = Mapping[str, float]
Evaluator = Callable[[Bindings], object]


def classify(raw, bindings: Bindings | None = None) -> Result:
    """Return the tagged form of an evaluator's return value."""

    if isinstance(raw, Predicate):
        if not isinstance(raw.value, (bool, np.bool_)):
            raise EvaluatorContractViolation(
                f"Predicate holds {type(raw.value).__name__} {raw.value!r}; "
                "expected a boolean", bindings)
        return raw
    if isinstance(raw, Residual):
        if isinstance(raw.value, (bool, np.bool_)) or not isinstance(raw.value, numbers.Real):
            raise EvaluatorContractViolation(
                f"Residual holds {type(raw.value).__name__} {raw.value!r}; "
                "expected a real number", bindings)
        return raw
    # bool is an int subclass, so it must be tested first
    if isinstance(raw, (bool, np.bool_)):
        return Predicate(bool(raw))
    if isinstance(raw, numbers.Real):
        return Residual(float(raw))
    raise EvaluatorContractViolation(
        f"evaluator returned {type(raw).__name__} {raw!r}; "
        "expected a boolean or a real number", bindings)


def equation(lhs: Evaluator, rhs: Evaluator) -> Evaluator:
    """Turn ``lhs = rhs`` into the residual evaluator ``lhs - rhs``."""

    def residual(bindings: Bindings) -> Residual:
        left = classify(lhs(bindings), bindings)
        right = classify(rhs(bindings), bindings)
        if left.kind != RESIDUAL or right.kind != RESIDUAL:
            raise EvaluatorContractViolation(
                "both sides of an equation must be real", bindings)
        return Residual(left.value - right.value)

    return residual


## built-in demonstration fields, addressable by name from the CLI

def _circle(b):
    return b["x"] ** 2 + b["y"] ** 2 - 0.5


def _disk(b):
    return b["x"] ** 2 + b["y"] ** 2 < 0.5


def _hyperbola(b):
    return b["x"] * b["y"] - 0.1


def _parabola(b):
    return b["x"] ** 2 - b["y"]


def _wave(b):
    # one-variable curve, usable for explicit plots along either axis
    t = b["x"] if "x" in b else b["y"]
    return 0.5 * math.sin(3.0 * t)


def _sphere(b):
    return b["x"] ** 2 + b["y"] ** 2 + b["z"] ** 2 - 0.5


def _ball(b):
    return b["x"] ** 2 + b["y"] ** 2 + b["z"] ** 2 < 0.5


def _torus(b):
    ring = math.hypot(b["x"], b["y"]) - 0.6
    return ring ** 2 + b["z"] ** 2 - 0.25 ** 2


BUILTIN_FIELDS: Dict[str, Evaluator] = {
    "circle": _circle,
    "disk": _disk,
    "hyperbola": _hyperbola,
    "parabola": _parabola,
    "wave": _wave,
    "sphere": _sphere,
    "ball": _ball,
    "torus": _torus,
}


def resolve(name: str) -> Evaluator:
    """Look up a built-in field, or import ``package.module:function``."""

    if name in BUILTIN_FIELDS:
        return BUILTIN_FIELDS[name]
    if ":" not in name:
        raise ValueError(
            f"unknown field {name!r}; use one of {sorted(BUILTIN_FIELDS)} "
            "or 'module:function'")
    module_name, _, attr = name.partition(":")
    module = importlib.import_module(module_name)
    try:
        func = getattr(module, attr)
    except AttributeError as exc:
        raise ValueError(f"{module_name} has no attribute {attr!r}") from exc
    if not callable(func):
        raise ValueError(f"{name} is not callable")
    return func


__all__ = [
    "BUILTIN_FIELDS",
    "Bindings",
    "Evaluator",
    "PREDICATE",
    "Predicate",
    "RESIDUAL",
    "Residual",
    "Result",
    "classify",
    "equation",
    "resolve",
]
