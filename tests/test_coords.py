import pytest

from implicitplot.coords import (
    SimulationWindow,
    axis_coordinates,
    check_fidelity,
    coordinate,
    grid_size,
    lattice_coordinate,
)
from implicitplot.errors import PreconditionViolation


def test_coordinate_spans_window_width():
    assert coordinate(0, 4, -1.0, 1.0) == 0.0
    assert coordinate(4, 4, -1.0, 1.0) == 1.0
    assert coordinate(-4, 4, -1.0, 1.0) == -1.0
    assert coordinate(1, 2, -3.0, 3.0) == 1.5


def test_coordinate_is_centred_on_origin():
    # only the width of the window matters
    assert coordinate(2, 2, 0.0, 4.0) == 2.0
    assert coordinate(-2, 2, 0.0, 4.0) == -2.0


@pytest.mark.parametrize("fidelity", [1, 2, 3, 7, 10])
def test_coordinate_antisymmetry(fidelity):
    for i in range(-fidelity, fidelity + 1):
        assert coordinate(-i, fidelity, -2.5, 2.5) == -coordinate(i, fidelity, -2.5, 2.5)


def test_fidelity_zero_rejected():
    with pytest.raises(PreconditionViolation):
        coordinate(0, 0, -1.0, 1.0)
    with pytest.raises(PreconditionViolation):
        check_fidelity(0)
    with pytest.raises(PreconditionViolation):
        grid_size(-1)


def test_fidelity_must_be_integral():
    with pytest.raises(PreconditionViolation):
        check_fidelity(1.5)
    assert check_fidelity(3.0) == 3


def test_precondition_violation_is_value_error():
    with pytest.raises(ValueError):
        check_fidelity(0)


def test_grid_size():
    assert grid_size(1) == 3
    assert grid_size(300) == 601


def test_axis_coordinates():
    assert axis_coordinates(2, -1.0, 1.0) == [-1.0, -0.5, 0.0, 0.5, 1.0]
    assert len(axis_coordinates(5, -1.0, 1.0)) == grid_size(5)


def test_lattice_coordinate_matches_sampler():
    fidelity = 3
    size = grid_size(fidelity)
    for k in range(size):
        assert lattice_coordinate(k, size, -2.0, 2.0) == pytest.approx(
            coordinate(k - fidelity, fidelity, -2.0, 2.0))


def test_lattice_coordinate_midpoints():
    assert lattice_coordinate(0.5, 2, -1.0, 1.0) == 0.0
    assert lattice_coordinate(0, 2, -1.0, 1.0) == -1.0
    assert lattice_coordinate(1, 2, -1.0, 1.0) == 1.0


def test_window_requires_min_below_max():
    with pytest.raises(PreconditionViolation):
        SimulationWindow(x=(1.0, 1.0))
    with pytest.raises(PreconditionViolation):
        SimulationWindow(y=(2.0, -2.0))
    with pytest.raises(PreconditionViolation):
        SimulationWindow(z=(0.0, 0.0))


def test_window_from_bounds():
    win = SimulationWindow.from_bounds((-1, 1, -2, 2))
    assert win.dimensions == 2
    assert win.axes == ((-1.0, 1.0), (-2.0, 2.0))

    win3 = SimulationWindow.from_bounds((-1, 1, -2, 2, -3, 3))
    assert win3.dimensions == 3
    assert win3.z == (-3.0, 3.0)

    with pytest.raises(PreconditionViolation):
        SimulationWindow.from_bounds((0, 1, 2))


def test_window_is_immutable():
    win = SimulationWindow()
    with pytest.raises(Exception):
        win.x = (0.0, 2.0)
