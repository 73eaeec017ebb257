"""Marching squares contour extraction at the zero level set.

Each cell of a ``width x height`` grid is classified by the signs of its
four corners (``value < 0`` is inside)::

    a ---- b        a = (x,   y)      b = (x+1, y)
    |      |        c = (x,   y+1)    d = (x+1, y+1)
    c ---- d

and packed as ``index = c + 2*d + 4*b + 8*a``.  The index selects an entry
of :data:`SQUARE_CASES`, whose segments join the midpoints of the crossing
edges.  The crossing is never interpolated toward the true zero.

Both saddles (5 and 10) use the same pair of segments, so a configuration
and its complement always produce the same geometry.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from implicitplot.coords import (
    DEFAULT_INTERVAL,
    Interval,
    SimulationWindow,
    check_interval,
    lattice_coordinate,
)
from implicitplot.errors import ImpossibleConfiguration, PreconditionViolation

logger = logging.getLogger(__name__)

Point2D = Tuple[float, float]
Segment = Tuple[Point2D, Point2D]

## edge midpoints in cell units, y growing from row a-b toward row c-d
LEFT = (0.0, 0.5)
TOP = (0.5, 0.0)
RIGHT = (1.0, 0.5)
BOTTOM = (0.5, 1.0)

_SADDLE = ((LEFT, TOP), (BOTTOM, RIGHT))

SQUARE_CASES: Tuple[Tuple[Tuple[Point2D, Point2D], ...], ...] = (
    (),                      # 0b0000
    ((LEFT, BOTTOM),),       # 0b0001  c
    ((BOTTOM, RIGHT),),      # 0b0010  d
    ((LEFT, RIGHT),),        # 0b0011  c d
    ((TOP, RIGHT),),         # 0b0100  b
    _SADDLE,                 # 0b0101  b c
    ((TOP, BOTTOM),),        # 0b0110  b d
    ((LEFT, TOP),),          # 0b0111  b c d
    ((LEFT, TOP),),          # 0b1000  a
    ((TOP, BOTTOM),),        # 0b1001  a c
    _SADDLE,                 # 0b1010  a d
    ((TOP, RIGHT),),         # 0b1011  a c d
    ((LEFT, RIGHT),),        # 0b1100  a b
    ((BOTTOM, RIGHT),),      # 0b1101  a b c
    ((LEFT, BOTTOM),),       # 0b1110  a b d
    (),                      # 0b1111
)


def configuration_index(a: bool, b: bool, c: bool, d: bool) -> int:
    """Pack the four corner flags of a cell into its case index."""

    return int(bool(c)) + 2 * int(bool(d)) + 4 * int(bool(b)) + 8 * int(bool(a))


def cell_segments(index: int) -> Tuple[Tuple[Point2D, Point2D], ...]:
    """Return the unit-cell segments for configuration ``index``."""

    if not 0 <= index < len(SQUARE_CASES):
        raise ImpossibleConfiguration(index, len(SQUARE_CASES))
    return SQUARE_CASES[index]


def check_grid(dims: Sequence[int], grid) -> np.ndarray:
    """Validate grid dimensions and length, returning the values as an array."""

    for size in dims:
        if size < 2:
            raise PreconditionViolation(
                f"every grid dimension must be >= 2, got {tuple(dims)}")
    values = np.asarray(grid, dtype=np.float64).ravel()
    expected = int(np.prod(dims))
    if values.size != expected:
        raise PreconditionViolation(
            f"grid of shape {tuple(dims)} needs {expected} values, got {values.size}")
    return values


def window_intervals(window, count: int) -> List[Interval]:
    """Normalise an optional window into ``count`` ``(min, max)`` pairs."""

    if window is None:
        return [DEFAULT_INTERVAL] * count
    if isinstance(window, SimulationWindow):
        intervals = list(window.axes)
    else:
        intervals = [tuple(w) for w in window]
    if len(intervals) < count:
        raise PreconditionViolation(
            f"window has {len(intervals)} axes, extraction needs {count}")
    return [check_interval(*w) for w in intervals[:count]]


def extract_contours(width: int, height: int, grid,
                     window: Optional[Union[SimulationWindow, Sequence[Interval]]] = None
                     ) -> List[Segment]:
    """Return the zero-level contour of a sampled 2D field as segments.

    ``grid`` is a flat sequence of ``width * height`` values, x fastest.
    Endpoints are mapped to the coordinates the sampler used for the same
    window; without a window both axes span ``[-1, 1]``.
    """

    values = check_grid((width, height), grid)
    (xlo, xhi), (ylo, yhi) = window_intervals(window, 2)

    inside = (values < 0.0).reshape(height, width).astype(np.int64)
    a = inside[:-1, :-1]
    b = inside[:-1, 1:]
    c = inside[1:, :-1]
    d = inside[1:, 1:]
    indices = c + 2 * d + 4 * b + 8 * a

    def mx(v):
        return lattice_coordinate(v, width, xlo, xhi)

    def my(v):
        return lattice_coordinate(v, height, ylo, yhi)

    segments: List[Segment] = []
    rows, cols = np.nonzero((indices != 0) & (indices != 15))
    for y, x in zip(rows.tolist(), cols.tolist()):
        for (u0, v0), (u1, v1) in cell_segments(int(indices[y, x])):
            segments.append(((mx(x + u0), my(y + v0)),
                             (mx(x + u1), my(y + v1))))

    logger.debug("marching squares: %dx%d grid -> %d segments",
                 width, height, len(segments))
    return segments


__all__ = [
    "BOTTOM",
    "LEFT",
    "RIGHT",
    "SQUARE_CASES",
    "TOP",
    "Segment",
    "cell_segments",
    "check_grid",
    "configuration_index",
    "extract_contours",
    "window_intervals",
]
