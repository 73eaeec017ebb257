"""End-to-end plot pipelines: sample, extract, draw.

Each pipeline takes an evaluator, :class:`GraphSettings` and a drawable,
and returns a :class:`PlotResult` summary.  Rendering failures raised by
the drawable are not caught here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from implicitplot.config import GraphSettings
from implicitplot.evaluator import PREDICATE, RESIDUAL, Evaluator
from implicitplot.marching_cubes import extract_isosurface
from implicitplot.marching_squares import extract_contours
from implicitplot.sampling import sample, sample_curve

logger = logging.getLogger(__name__)


@dataclass
class PlotResult:
    mode: str
    samples: int
    kind: str
    pixels: int = 0
    segments: int = 0
    triangles: int = 0


def plot(evaluator: Evaluator, settings: GraphSettings, drawable) -> PlotResult:
    """Plot an implicit 2D equation; one sample per pixel on each side of zero."""

    fx = settings.fidelity(settings.image_width, "2d")
    fy = settings.fidelity(settings.image_height, "2d")
    window = settings.window(2)

    grid = sample(window, (fx, fy), evaluator, drawable, workers=settings.workers)
    result = PlotResult(mode="2d", samples=len(grid), kind=grid.kind, pixels=grid.hits)
    if grid.kind == PREDICATE:
        return result

    segments = extract_contours(grid.width, grid.height, grid.values, window)
    drawable.draw_segments(segments)
    result.segments = len(segments)
    logger.info("2d plot: %d samples, %d segments", result.samples, result.segments)
    return result


def plot_3d(evaluator: Evaluator, settings: GraphSettings, drawable) -> PlotResult:
    """Plot an implicit 3D equation as an isosurface; z reuses the x resolution."""

    fx = settings.fidelity(settings.image_width, "3d")
    fy = settings.fidelity(settings.image_height, "3d")
    window = settings.window(3)

    grid = sample(window, (fx, fy, fx), evaluator, drawable, workers=settings.workers)
    result = PlotResult(mode="3d", samples=len(grid), kind=grid.kind, pixels=grid.hits)
    if grid.kind == PREDICATE:
        return result

    triangles = extract_isosurface(grid.width, grid.height, grid.depth,
                                   grid.values, window)
    drawable.draw_triangles(triangles)
    result.triangles = len(triangles)
    logger.info("3d plot: %d samples, %d triangles", result.samples, result.triangles)
    return result


def plot_x(evaluator: Evaluator, settings: GraphSettings, drawable) -> PlotResult:
    """Plot the explicit curve ``y = f(x)``."""

    fidelity = settings.fidelity(settings.image_width, "x")
    points = sample_curve("x", settings.x_window, fidelity, evaluator)
    drawable.draw_polyline(points)
    return PlotResult(mode="x", samples=len(points), kind=RESIDUAL,
                      segments=len(points) - 1)


def plot_y(evaluator: Evaluator, settings: GraphSettings, drawable) -> PlotResult:
    """Plot the explicit curve ``x = f(y)``."""

    fidelity = settings.fidelity(settings.image_height, "y")
    points = sample_curve("y", settings.y_window, fidelity, evaluator)
    drawable.draw_polyline(points)
    return PlotResult(mode="y", samples=len(points), kind=RESIDUAL,
                      segments=len(points) - 1)


PIPELINES = {
    "2d": plot,
    "3d": plot_3d,
    "x": plot_x,
    "y": plot_y,
}


def run(evaluator: Evaluator, settings: GraphSettings, drawable) -> PlotResult:
    """Run the pipeline selected by ``settings.mode`` and render the drawable."""

    result = PIPELINES[settings.mode](evaluator, settings, drawable)
    drawable.display()
    return result


__all__ = ["PIPELINES", "PlotResult", "plot", "plot_3d", "plot_x", "plot_y", "run"]
