"""Index to domain-coordinate mapping for sampled grids.

A grid axis with fidelity ``f`` holds ``2*f + 1`` samples at the integer
indices ``-f..f``.  Index ``i`` maps to ``(i / f) * (hi - lo) / 2``, so the
samples span the width of the window centred on the origin.  Extractors see
the same axis as indices ``0..size-1`` and use :func:`lattice_coordinate` to
land on the coordinates the sampler used.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from implicitplot.errors import PreconditionViolation

Interval = Tuple[float, float]

DEFAULT_INTERVAL: Interval = (-1.0, 1.0)


def check_fidelity(fidelity: int) -> int:
    """Return ``fidelity`` as an int, rejecting values below one."""

    if isinstance(fidelity, bool) or int(fidelity) != fidelity:
        raise PreconditionViolation(f"fidelity must be an integer, got {fidelity!r}")
    if fidelity < 1:
        raise PreconditionViolation(f"fidelity must be >= 1, got {fidelity}")
    return int(fidelity)


def check_interval(lo: float, hi: float) -> Interval:
    if not lo < hi:
        raise PreconditionViolation(f"window min must be below max, got ({lo}, {hi})")
    return float(lo), float(hi)


def grid_size(fidelity: int) -> int:
    """Number of samples on an axis of the given fidelity."""

    return 2 * check_fidelity(fidelity) + 1


def coordinate(i: float, fidelity: int, lo: float, hi: float) -> float:
    """Map sample index ``i`` in ``[-fidelity, fidelity]`` to a domain coordinate."""

    if fidelity < 1:
        raise PreconditionViolation(f"fidelity must be >= 1, got {fidelity}")
    return (i / fidelity) * (hi - lo) / 2.0


def axis_coordinates(fidelity: int, lo: float, hi: float) -> List[float]:
    """All sample coordinates of one axis, lowest index first."""

    fidelity = check_fidelity(fidelity)
    return [coordinate(i, fidelity, lo, hi) for i in range(-fidelity, fidelity + 1)]


def lattice_coordinate(index: float, size: int, lo: float, hi: float) -> float:
    """Map a grid index in ``0..size-1`` onto the sampler's coordinate.

    ``index`` may be fractional; edge midpoints use ``k + 0.5``.  ``size``
    need not be odd, in which case the half resolution is fractional.
    """

    half = (size - 1) / 2.0
    return ((index - half) / half) * (hi - lo) / 2.0


@dataclass(frozen=True)
class SimulationWindow:
    """Per-axis ``(min, max)`` bounds in domain coordinates."""

    x: Interval = DEFAULT_INTERVAL
    y: Interval = DEFAULT_INTERVAL
    z: Interval | None = None

    def __post_init__(self):
        check_interval(*self.x)
        check_interval(*self.y)
        if self.z is not None:
            check_interval(*self.z)

    @property
    def dimensions(self) -> int:
        return 2 if self.z is None else 3

    @property
    def axes(self) -> Tuple[Interval, ...]:
        if self.z is None:
            return (self.x, self.y)
        return (self.x, self.y, self.z)

    @classmethod
    def from_bounds(cls, bounds: Sequence[float]) -> "SimulationWindow":
        """Build from a flat ``(xmin, xmax, ymin, ymax[, zmin, zmax])`` tuple."""

        if len(bounds) not in (4, 6):
            raise PreconditionViolation(
                f"expected 4 or 6 window bounds, got {len(bounds)}")
        x = (float(bounds[0]), float(bounds[1]))
        y = (float(bounds[2]), float(bounds[3]))
        z = None
        if len(bounds) == 6:
            z = (float(bounds[4]), float(bounds[5]))
        return cls(x=x, y=y, z=z)


__all__ = [
    "DEFAULT_INTERVAL",
    "Interval",
    "SimulationWindow",
    "axis_coordinates",
    "check_fidelity",
    "check_interval",
    "coordinate",
    "grid_size",
    "lattice_coordinate",
]
