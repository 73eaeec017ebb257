import math

import pytest

from implicitplot.coords import SimulationWindow
from implicitplot.errors import ImpossibleConfiguration, PreconditionViolation
from implicitplot.marching_cubes import (
    CUBE_CASES,
    EDGE_MIDPOINTS,
    cube_index,
    cube_triangles,
    extract_isosurface,
)
from implicitplot.mc_tables import CORNERS, EDGE_TABLE, EDGES, TRI_TABLE
from implicitplot.sampling import sample


def _cube(index):
    """2x2x2 grid whose corners realise configuration ``index``."""
    grid = [1.0] * 8
    for bit, (dx, dy, dz) in enumerate(CORNERS):
        if index & (1 << bit):
            grid[dx + dy * 2 + dz * 4] = -1.0
    return grid


def test_tables_are_exhaustive():
    assert len(TRI_TABLE) == 256
    assert len(EDGE_TABLE) == 256
    assert len(CUBE_CASES) == 256
    for entry in TRI_TABLE:
        assert len(entry) % 3 == 0
        assert len(entry) // 3 <= 5


@pytest.mark.parametrize("index", range(256))
def test_triangles_use_exactly_the_crossing_edges(index):
    used = set(TRI_TABLE[index])
    crossing = {k for k in range(12) if EDGE_TABLE[index] & (1 << k)}
    assert used == crossing


def test_edge_midpoints():
    assert EDGE_MIDPOINTS[0] == (0.5, 0.0, 0.0)
    assert EDGE_MIDPOINTS[3] == (0.0, 0.5, 0.0)
    assert EDGE_MIDPOINTS[8] == (0.0, 0.0, 0.5)
    for (p, q), mid in zip(EDGES, EDGE_MIDPOINTS):
        for k in range(3):
            assert mid[k] == (CORNERS[p][k] + CORNERS[q][k]) / 2


@pytest.mark.parametrize("value", [1.0, -1.0])
def test_uniform_cube_has_no_triangles(value):
    assert extract_isosurface(2, 2, 2, [value] * 8) == []


def test_single_inside_corner_matches_table_entry():
    triangles = extract_isosurface(2, 2, 2, _cube(1))
    assert len(triangles) == 1
    assert triangles[0] == ((0.0, -1.0, -1.0), (-1.0, -1.0, 0.0), (-1.0, 0.0, -1.0))


@pytest.mark.parametrize("corner", range(8))
def test_each_single_corner_gives_one_triangle_around_it(corner):
    index = 1 << corner
    triangles = extract_isosurface(2, 2, 2, _cube(index))
    assert len(triangles) == len(TRI_TABLE[index]) // 3 == 1

    cx, cy, cz = (2.0 * c - 1.0 for c in CORNERS[corner])
    for x, y, z in triangles[0]:
        # each vertex is the midpoint of an edge leaving the corner
        assert abs(x - cx) + abs(y - cy) + abs(z - cz) == pytest.approx(1.0)


@pytest.mark.parametrize("index", range(256))
def test_cell_triangle_count_matches_table(index):
    assert len(extract_isosurface(2, 2, 2, _cube(index))) == len(TRI_TABLE[index]) // 3


def test_cube_index_packing():
    assert cube_index([True] + [False] * 7) == 1
    assert cube_index([False] * 7 + [True]) == 128
    assert cube_index([True] * 8) == 255
    with pytest.raises(ValueError):
        cube_index([True] * 4)


@pytest.mark.parametrize("index", [-1, 256])
def test_out_of_table_configuration_is_a_fault(index):
    with pytest.raises(ImpossibleConfiguration):
        cube_triangles(index)


def test_precondition_failures():
    with pytest.raises(PreconditionViolation):
        extract_isosurface(2, 2, 1, [1.0] * 4)
    with pytest.raises(PreconditionViolation):
        extract_isosurface(2, 2, 2, [1.0] * 7)


def test_window_scales_output():
    window = SimulationWindow(x=(-2.0, 2.0), y=(-1.0, 1.0), z=(-4.0, 4.0))
    triangles = extract_isosurface(2, 2, 2, _cube(1), window)
    assert triangles[0] == ((0.0, -1.0, -4.0), (-2.0, -1.0, 0.0), (-2.0, 0.0, -4.0))


def test_sampled_sphere_isosurface():
    window = SimulationWindow(z=(-1.0, 1.0))
    grid = sample(window, (4, 4, 4),
                  lambda b: b["x"] ** 2 + b["y"] ** 2 + b["z"] ** 2 - 0.5)
    assert grid.shape == (9, 9, 9)
    triangles = extract_isosurface(grid.width, grid.height, grid.depth,
                                   grid.values, window)
    assert len(triangles) > 24

    radius = math.sqrt(0.5)
    for tri in triangles:
        for x, y, z in tri:
            assert abs(math.sqrt(x * x + y * y + z * z) - radius) <= 0.13
