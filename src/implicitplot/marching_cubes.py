"""Marching cubes isosurface extraction at the zero level set.

Each cell of a ``width x height x depth`` grid packs the inside flags of
its eight corners (``value < 0``) into an 8-bit configuration using the
corner numbering of :mod:`implicitplot.mc_tables`.  The canonical
triangulation table maps the configuration to 0-5 triangles whose vertices
sit at the midpoints of the crossing edges, the same placement the 2D
extractor uses.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from implicitplot.coords import Interval, SimulationWindow, lattice_coordinate
from implicitplot.errors import ImpossibleConfiguration
from implicitplot.marching_squares import check_grid, window_intervals
from implicitplot.mc_tables import CORNERS, EDGES, TRI_TABLE

logger = logging.getLogger(__name__)

Point3D = Tuple[float, float, float]
Triangle3D = Tuple[Point3D, Point3D, Point3D]

EDGE_MIDPOINTS: Tuple[Point3D, ...] = tuple(
    tuple((CORNERS[p][k] + CORNERS[q][k]) / 2.0 for k in range(3))
    for p, q in EDGES
)


def _unit_triangles(edges: Sequence[int]) -> Tuple[Triangle3D, ...]:
    return tuple(
        (EDGE_MIDPOINTS[edges[i]], EDGE_MIDPOINTS[edges[i + 1]], EDGE_MIDPOINTS[edges[i + 2]])
        for i in range(0, len(edges), 3)
    )


CUBE_CASES: Tuple[Tuple[Triangle3D, ...], ...] = tuple(
    _unit_triangles(entry) for entry in TRI_TABLE)


def cube_index(corners: Sequence[bool]) -> int:
    """Pack eight corner inside flags, in table order, into a configuration."""

    if len(corners) != 8:
        raise ValueError(f"a cube has 8 corners, got {len(corners)}")
    index = 0
    for bit, inside in enumerate(corners):
        if inside:
            index |= 1 << bit
    return index


def cube_triangles(index: int) -> Tuple[Triangle3D, ...]:
    """Return the triangles of configuration ``index`` in unit-cube coordinates."""

    if not 0 <= index < len(CUBE_CASES):
        raise ImpossibleConfiguration(index, len(CUBE_CASES))
    return CUBE_CASES[index]


def extract_isosurface(width: int, height: int, depth: int, grid,
                       window: Optional[Union[SimulationWindow, Sequence[Interval]]] = None
                       ) -> List[Triangle3D]:
    """Return the zero isosurface of a sampled 3D field as triangles.

    ``grid`` holds ``width * height * depth`` values with x fastest, then
    y, then z.  Without a window every axis spans ``[-1, 1]``.
    """

    values = check_grid((width, height, depth), grid)
    (xlo, xhi), (ylo, yhi), (zlo, zhi) = window_intervals(window, 3)

    inside = (values < 0.0).reshape(depth, height, width).astype(np.int64)
    indices = np.zeros((depth - 1, height - 1, width - 1), dtype=np.int64)
    for bit, (dx, dy, dz) in enumerate(CORNERS):
        corner = inside[dz:dz + depth - 1, dy:dy + height - 1, dx:dx + width - 1]
        indices |= corner << bit

    triangles: List[Triangle3D] = []
    zs, ys, xs = np.nonzero((indices != 0) & (indices != 255))
    for z, y, x in zip(zs.tolist(), ys.tolist(), xs.tolist()):
        for tri in cube_triangles(int(indices[z, y, x])):
            triangles.append(tuple(
                (lattice_coordinate(x + u, width, xlo, xhi),
                 lattice_coordinate(y + v, height, ylo, yhi),
                 lattice_coordinate(z + w, depth, zlo, zhi))
                for u, v, w in tri))

    logger.debug("marching cubes: %dx%dx%d grid -> %d triangles",
                 width, height, depth, len(triangles))
    return triangles


__all__ = [
    "CUBE_CASES",
    "EDGE_MIDPOINTS",
    "Triangle3D",
    "cube_index",
    "cube_triangles",
    "extract_isosurface",
]
