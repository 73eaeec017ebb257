import numpy as np
import pytest

from implicitplot.coords import SimulationWindow, axis_coordinates
from implicitplot.drawable import Drawable
from implicitplot.errors import (
    EvaluatorContractViolation,
    PreconditionViolation,
    RenderingBackendFailure,
)
from implicitplot.evaluator import PREDICATE, RESIDUAL, Predicate, Residual
from implicitplot.sampling import (
    DIRECT_DRAW_COLOR,
    partition_ranges,
    sample,
    sample_curve,
)


class RecordingDraw(Drawable):
    def __init__(self):
        super().__init__()
        self.pixels = []

    def draw_pixel(self, p, color):
        self.pixels.append((p, color))


class FailingDraw(Drawable):
    def __init__(self):
        super().__init__()
        self.calls = 0

    def draw_pixel(self, p, color):
        self.calls += 1
        raise RenderingBackendFailure("surface gone")


def _linear(b):
    return b["x"] + 10.0 * b["y"]


def _linear3(b):
    return b["x"] + 10.0 * b["y"] + 100.0 * b["z"]


def _disk(b):
    return b["x"] ** 2 + b["y"] ** 2 < 0.3


def test_grid_shape_and_length():
    grid = sample(SimulationWindow(), (2, 3), _linear)
    assert grid.shape == (5, 7)
    assert len(grid) == 35
    assert grid.kind == RESIDUAL
    assert grid.width == 5 and grid.height == 7 and grid.depth == 1


def test_evaluator_called_once_per_point_in_order():
    calls = []

    def recorder(b):
        calls.append(dict(b))
        return 1.0

    sample([(-1.0, 1.0), (-1.0, 1.0)], (2, 1), recorder)
    assert len(calls) == 5 * 3
    assert calls[0] == {"x": -1.0, "y": -1.0}
    assert calls[1] == {"x": -0.5, "y": -1.0}
    assert calls[5] == {"x": -1.0, "y": 0.0}
    assert calls[-1] == {"x": 1.0, "y": 1.0}


def test_values_land_at_canonical_offsets():
    window = SimulationWindow(x=(-1.0, 1.0), y=(-2.0, 2.0))
    grid = sample(window, (2, 3), _linear)
    xs = axis_coordinates(2, -1.0, 1.0)
    ys = axis_coordinates(3, -2.0, 2.0)
    for j, y in enumerate(ys):
        for i, x in enumerate(xs):
            assert grid[grid.index(i, j)] == pytest.approx(x + 10.0 * y)
            assert grid.index(i, j) == i + j * 5


def test_3d_iterates_z_outermost():
    calls = []

    def recorder(b):
        calls.append((b["x"], b["y"], b["z"]))
        return 0.5

    grid = sample(SimulationWindow(z=(-1.0, 1.0)), (1, 1, 1), recorder)
    assert grid.shape == (3, 3, 3)
    assert len(calls) == 27
    assert all(z == -1.0 for _, _, z in calls[:9])
    assert all(z == 1.0 for _, _, z in calls[18:])
    assert [x for x, _, _ in calls[:3]] == [-1.0, 0.0, 1.0]


def test_3d_offsets():
    grid = sample([(-1, 1), (-1, 1), (-1, 1)], (1, 2, 1), _linear3)
    xs = axis_coordinates(1, -1, 1)
    ys = axis_coordinates(2, -1, 1)
    zs = axis_coordinates(1, -1, 1)
    for l, z in enumerate(zs):
        for j, y in enumerate(ys):
            for i, x in enumerate(xs):
                offset = i + j * 3 + l * 3 * 5
                assert grid.index(i, j, l) == offset
                assert grid[offset] == pytest.approx(x + 10 * y + 100 * z)


def test_predicate_results_draw_instead_of_store():
    draw = RecordingDraw()
    grid = sample(SimulationWindow(), (4, 4), _disk, draw)
    assert grid.kind == PREDICATE
    assert not np.any(grid.values)
    assert grid.hits == len(draw.pixels) > 0
    for (x, y), color in draw.pixels:
        assert x * x + y * y < 0.3
        assert color == DIRECT_DRAW_COLOR


def test_predicate_without_drawable_counts_hits():
    grid = sample(SimulationWindow(), (4, 4), _disk)
    assert grid.kind == PREDICATE
    assert grid.hits > 0


def test_mixed_kinds_rejected():
    state = {"n": 0}

    def fickle(b):
        state["n"] += 1
        return True if state["n"] == 1 else 0.5

    with pytest.raises(EvaluatorContractViolation):
        sample(SimulationWindow(), (2, 2), fickle)


def test_mixed_kinds_rejected_across_partitions():
    def split(b):
        return b["y"] < 0 if b["y"] < 0 else b["y"]

    with pytest.raises(EvaluatorContractViolation):
        sample(SimulationWindow(), (3, 3), split, workers=2, partitions=3)


def test_unrecognised_result_rejected():
    with pytest.raises(EvaluatorContractViolation):
        sample(SimulationWindow(), (1, 1), lambda b: None)


@pytest.mark.parametrize("tagged", [Predicate("no"), Residual(complex(-1, 5)), Residual("abc")])
def test_tagged_result_with_bad_contents_rejected(tagged):
    draw = RecordingDraw()
    with pytest.raises(EvaluatorContractViolation):
        sample(SimulationWindow(), (1, 1), lambda b: tagged, draw)
    assert draw.pixels == []


def test_rendering_failure_propagates_and_aborts():
    draw = FailingDraw()
    with pytest.raises(RenderingBackendFailure):
        sample(SimulationWindow(), (3, 3), lambda b: True, draw)
    assert draw.calls == 1


def test_rendering_failure_propagates_from_parallel_pass():
    with pytest.raises(RenderingBackendFailure):
        sample(SimulationWindow(), (3, 3), lambda b: True, FailingDraw(),
               workers=3)


@pytest.mark.parametrize("partitions", [1, 2, 3, 4, 7, 50])
@pytest.mark.parametrize("workers", [1, 4])
def test_partitioned_sampling_matches_sequential(partitions, workers):
    def field(b):
        return np.sin(3 * b["x"]) * np.cos(2 * b["y"]) - 0.1

    window = SimulationWindow(x=(-2.0, 2.0), y=(-1.0, 1.0))
    sequential = sample(window, (6, 5), field)
    parallel = sample(window, (6, 5), field, workers=workers, partitions=partitions)
    assert parallel.shape == sequential.shape
    assert np.array_equal(parallel.values, sequential.values)


def test_partitioned_3d_sampling_matches_sequential():
    window = SimulationWindow(z=(-1.0, 1.0))
    sequential = sample(window, (2, 3, 4), _linear3)
    parallel = sample(window, (2, 3, 4), _linear3, workers=3)
    assert np.array_equal(parallel.values, sequential.values)


def test_partitioned_pixels_replay_in_scan_order():
    seq = RecordingDraw()
    par = RecordingDraw()
    sample(SimulationWindow(), (5, 5), _disk, seq)
    sample(SimulationWindow(), (5, 5), _disk, par, workers=3, partitions=4)
    assert par.pixels == seq.pixels


def test_partition_ranges():
    assert partition_ranges(10, 3) == [(0, 4), (4, 7), (7, 10)]
    assert partition_ranges(5, 1) == [(0, 5)]
    assert partition_ranges(2, 5) == [(0, 1), (1, 2)]
    with pytest.raises(PreconditionViolation):
        partition_ranges(4, 0)


def test_sampling_preconditions():
    with pytest.raises(PreconditionViolation):
        sample(SimulationWindow(), (0, 2), _linear)
    with pytest.raises(PreconditionViolation):
        sample(SimulationWindow(), (2,), _linear)
    with pytest.raises(PreconditionViolation):
        sample([(1.0, -1.0), (-1.0, 1.0)], (2, 2), _linear)
    with pytest.raises(PreconditionViolation):
        sample([(-1.0, 1.0)], (2,), lambda b: b["x"])
    with pytest.raises(PreconditionViolation):
        sample(SimulationWindow(), (2, 2), _linear, workers=0)


def test_preconditions_checked_before_any_call():
    calls = []
    with pytest.raises(PreconditionViolation):
        sample(SimulationWindow(), (2, 0), lambda b: calls.append(b) or 1.0)
    assert calls == []


def test_sample_curve_along_x():
    points = sample_curve("x", (-1.0, 1.0), 2, lambda b: b["x"] ** 2)
    assert points == [(-1.0, 1.0), (-0.5, 0.25), (0.0, 0.0), (0.5, 0.25), (1.0, 1.0)]


def test_sample_curve_along_y():
    points = sample_curve("y", (-2.0, 2.0), 1, lambda b: 2 * b["y"])
    assert points == [(-4.0, -2.0), (0.0, 0.0), (4.0, 2.0)]


def test_sample_curve_rejects_predicates_and_bad_axes():
    with pytest.raises(EvaluatorContractViolation):
        sample_curve("x", (-1.0, 1.0), 2, lambda b: b["x"] > 0)
    with pytest.raises(PreconditionViolation):
        sample_curve("z", (-1.0, 1.0), 2, lambda b: b["z"])
    with pytest.raises(PreconditionViolation):
        sample_curve("x", (-1.0, 1.0), 0, lambda b: b["x"])
