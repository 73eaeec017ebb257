"""Grid sampling of implicit fields.

:func:`sample` walks a regular 2D or 3D index grid, maps each index to a
domain coordinate and calls the evaluator once per point.  Real residuals
are packed into a flat :class:`ValueGrid` (x fastest, then y, then z).
Boolean results never reach the grid: where the predicate holds the
drawable is asked to plot a pixel instead.

The outermost axis can be split into contiguous ranges and sampled on a
thread pool.  Each range writes a disjoint slice of the grid, and pixel
requests are buffered per range and replayed in range order once every
worker is done, so the drawable only ever sees one caller.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from implicitplot.coords import (
    Interval,
    SimulationWindow,
    axis_coordinates,
    check_fidelity,
    check_interval,
    coordinate,
)
from implicitplot.errors import EvaluatorContractViolation, PreconditionViolation
from implicitplot.evaluator import PREDICATE, RESIDUAL, Evaluator, classify

logger = logging.getLogger(__name__)

AXIS_NAMES = ("x", "y", "z")

## RGBA used for points where a boolean predicate holds
DIRECT_DRAW_COLOR = (0, 0, 0, 0.4)

Point = Tuple[float, ...]


@dataclass
class ValueGrid:
    """Dense, flat, row-major grid of sampled residuals.

    ``shape`` is ``(width, height)`` or ``(width, height, depth)``.
    ``kind`` records the result kind seen during the pass; for a
    ``"predicate"`` pass ``values`` stays zero and ``hits`` counts the
    points where the predicate held.
    """

    shape: Tuple[int, ...]
    values: np.ndarray
    kind: str = RESIDUAL
    hits: int = 0

    @property
    def width(self) -> int:
        return self.shape[0]

    @property
    def height(self) -> int:
        return self.shape[1]

    @property
    def depth(self) -> int:
        return self.shape[2] if len(self.shape) > 2 else 1

    def index(self, x: int, y: int, z: int = 0) -> int:
        """Flat offset of grid point ``(x, y[, z])``."""

        return x + y * self.width + z * self.width * self.height

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, offset):
        return self.values[offset]

    def __iter__(self):
        return iter(self.values)


def partition_ranges(count: int, parts: int) -> List[Tuple[int, int]]:
    """Split ``range(count)`` into at most ``parts`` contiguous ``(start, stop)`` ranges."""

    if parts < 1:
        raise PreconditionViolation(f"partition count must be >= 1, got {parts}")
    parts = min(parts, count)
    base, extra = divmod(count, parts)
    ranges = []
    start = 0
    for k in range(parts):
        stop = start + base + (1 if k < extra else 0)
        ranges.append((start, stop))
        start = stop
    return ranges


def _axes_from(windows: Union[SimulationWindow, Sequence[Interval]],
               fidelities: Sequence[int]) -> List[List[float]]:
    if isinstance(windows, SimulationWindow):
        intervals = list(windows.axes)
    else:
        intervals = [check_interval(*w) for w in windows]
    if len(intervals) not in (2, 3):
        raise PreconditionViolation(
            f"sampling needs 2 or 3 axes, got {len(intervals)}")
    if len(fidelities) != len(intervals):
        raise PreconditionViolation(
            f"{len(intervals)} window axes but {len(fidelities)} fidelities")
    fids = [check_fidelity(f) for f in fidelities]
    return [axis_coordinates(f, lo, hi) for f, (lo, hi) in zip(fids, intervals)]


@dataclass
class _RangeResult:
    kind: Optional[str] = None
    hits: int = 0
    pixels: Optional[List[Point]] = None


def _sample_range(evaluator: Evaluator, axes: List[List[float]],
                  start: int, stop: int, values: np.ndarray,
                  emit: Optional[Callable[[Point], None]]) -> _RangeResult:
    sizes = [len(a) for a in axes]
    stride = 1
    for size in sizes[:-1]:
        stride *= size
    names = AXIS_NAMES[:len(axes)]
    outer_axis = axes[-1]

    result = _RangeResult()
    for outer in range(start, stop):
        outer_value = outer_axis[outer]
        for inner in range(stride):
            rem = inner
            coords = []
            for axis, size in zip(axes[:-1], sizes[:-1]):
                coords.append(axis[rem % size])
                rem //= size
            coords.append(outer_value)
            bindings = dict(zip(names, coords))

            res = classify(evaluator(bindings), bindings)
            if result.kind is None:
                result.kind = res.kind
            elif res.kind != result.kind:
                raise EvaluatorContractViolation(
                    f"evaluator switched from {result.kind} to {res.kind} "
                    "results within one sampling pass", bindings)

            if res.kind == RESIDUAL:
                values[outer * stride + inner] = res.value
            elif res.value:
                result.hits += 1
                if emit is not None:
                    emit(tuple(coords))
    return result


def sample(windows: Union[SimulationWindow, Sequence[Interval]],
           fidelities: Sequence[int],
           evaluator: Evaluator,
           drawable=None,
           *,
           workers: int = 1,
           partitions: Optional[int] = None) -> ValueGrid:
    """Sample ``evaluator`` over the window and return the value grid.

    ``windows`` is a :class:`SimulationWindow` or a sequence of ``(min, max)``
    pairs, one per axis; ``fidelities`` gives the half resolution of each
    axis.  ``drawable`` receives ``draw_pixel`` calls for points where a
    boolean evaluator holds; exceptions it raises abort the pass unchanged.

    ``partitions`` (default ``workers``) splits the outermost axis into
    contiguous ranges sampled by a pool of ``workers`` threads.
    """

    axes = _axes_from(windows, fidelities)
    if workers < 1:
        raise PreconditionViolation(f"workers must be >= 1, got {workers}")
    shape = tuple(len(a) for a in axes)
    total = int(np.prod(shape))
    values = np.zeros(total, dtype=np.float64)
    ranges = partition_ranges(shape[-1], partitions or workers)

    logger.debug("sampling %s grid (%d points) in %d range(s) on %d worker(s)",
                 "x".join(str(s) for s in shape), total, len(ranges), workers)

    def draw(point: Point) -> None:
        drawable.draw_pixel(point, DIRECT_DRAW_COLOR)

    if len(ranges) == 1:
        emit = draw if drawable is not None else None
        results = [_sample_range(evaluator, axes, 0, shape[-1], values, emit)]
    else:
        results = _sample_parallel(evaluator, axes, ranges, values,
                                   workers, drawable is not None)

    kinds = {r.kind for r in results if r.kind is not None}
    if len(kinds) > 1:
        raise EvaluatorContractViolation(
            "evaluator returned both boolean and real results in one pass")
    kind = kinds.pop() if kinds else RESIDUAL

    if drawable is not None and len(ranges) > 1:
        for r in results:
            for point in r.pixels:
                draw(point)

    hits = sum(r.hits for r in results)
    if kind == PREDICATE:
        logger.debug("predicate held at %d of %d points", hits, total)
    return ValueGrid(shape=shape, values=values, kind=kind, hits=hits)


def _sample_parallel(evaluator, axes, ranges, values, workers, buffered):
    def run(start, stop):
        pixels: List[Point] = []
        result = _sample_range(evaluator, axes, start, stop, values,
                               pixels.append if buffered else None)
        result.pixels = pixels
        return result

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(run, start, stop) for start, stop in ranges]
        try:
            return [f.result() for f in futures]
        except BaseException:
            for f in futures:
                f.cancel()
            raise


def sample_curve(axis: str, window: Interval, fidelity: int,
                 evaluator: Evaluator) -> List[Tuple[float, float]]:
    """Sample an explicit function of one named axis as a polyline.

    For ``axis="x"`` the evaluator computes ``y = f(x)`` and the points are
    ``(x, f(x))``; for ``axis="y"`` it computes ``x = f(y)`` and the points
    are ``(f(y), y)``.
    """

    if axis not in ("x", "y"):
        raise PreconditionViolation(f"explicit curves run along x or y, not {axis!r}")
    lo, hi = check_interval(*window)
    fidelity = check_fidelity(fidelity)

    points = []
    for i in range(-fidelity, fidelity + 1):
        t = coordinate(i, fidelity, lo, hi)
        bindings = {axis: t}
        res = classify(evaluator(bindings), bindings)
        if res.kind != RESIDUAL:
            raise EvaluatorContractViolation(
                "explicit curves need real results", bindings)
        points.append((t, res.value) if axis == "x" else (res.value, t))
    return points


__all__ = [
    "AXIS_NAMES",
    "DIRECT_DRAW_COLOR",
    "ValueGrid",
    "partition_ranges",
    "sample",
    "sample_curve",
]
