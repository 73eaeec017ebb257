"""Plot settings and their loading from YAML or JSON files."""

from __future__ import annotations

import json
import numbers
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from implicitplot.coords import SimulationWindow, check_interval
from implicitplot.errors import PreconditionViolation

MODES = ("2d", "3d", "x", "y")

## fidelity divisors applied to the image size, per plot mode
FIDELITY_DIVISORS = {"2d": 1, "3d": 20, "x": 8, "y": 8}


def _whole_number(name: str, value) -> int:
    # bool is an Integral, but "image_width: true" is a typo, not a size
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise PreconditionViolation(f"{name} must be an integer, got {value!r}")
    return int(value)


def _bounds(name: str, value, count: int) -> Tuple[float, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise PreconditionViolation(f"{name} must be a list of {count} numbers, got {value!r}")
    if len(value) != count:
        raise PreconditionViolation(f"{name} needs {count} bounds, got {len(value)}")
    for v in value:
        if isinstance(v, bool) or not isinstance(v, numbers.Real):
            raise PreconditionViolation(f"{name} bounds must be numbers, got {v!r}")
    return tuple(float(v) for v in value)


@dataclass
class GraphSettings:
    """Everything a plot pipeline needs besides the evaluator and drawable."""

    path: str = "images/graph.dxf"
    image_width: int = 600
    image_height: int = 600
    sim_window: Tuple[float, float, float, float] = (-1.0, 1.0, -1.0, 1.0)
    z_window: Optional[Tuple[float, float]] = None
    mode: str = "2d"
    workers: int = 1
    equation: str = "circle"

    def __post_init__(self):
        for name in ("path", "mode", "equation"):
            if not isinstance(getattr(self, name), str):
                raise PreconditionViolation(
                    f"{name} must be a string, got {getattr(self, name)!r}")
        for name in ("image_width", "image_height", "workers"):
            setattr(self, name, _whole_number(name, getattr(self, name)))
        self.sim_window = _bounds("sim_window", self.sim_window, 4)
        check_interval(self.sim_window[0], self.sim_window[1])
        check_interval(self.sim_window[2], self.sim_window[3])
        if self.z_window is not None:
            self.z_window = check_interval(*_bounds("z_window", self.z_window, 2))
        if self.mode not in MODES:
            raise PreconditionViolation(f"mode must be one of {MODES}, got {self.mode!r}")
        if self.image_width < 1 or self.image_height < 1:
            raise PreconditionViolation(
                f"image size must be positive, got {self.image_width}x{self.image_height}")
        if self.workers < 1:
            raise PreconditionViolation(f"workers must be >= 1, got {self.workers}")

    @property
    def x_window(self) -> Tuple[float, float]:
        return self.sim_window[0], self.sim_window[1]

    @property
    def y_window(self) -> Tuple[float, float]:
        return self.sim_window[2], self.sim_window[3]

    def window(self, dimensions: int = 2) -> SimulationWindow:
        """Window for a 2D or 3D pass; z falls back to the x bounds."""

        if dimensions == 2:
            return SimulationWindow(x=self.x_window, y=self.y_window)
        z = self.z_window if self.z_window is not None else self.x_window
        return SimulationWindow(x=self.x_window, y=self.y_window, z=z)

    def fidelity(self, size: int, mode: Optional[str] = None) -> int:
        """Half resolution derived from an image size in pixels."""

        divisor = FIDELITY_DIVISORS[mode or self.mode]
        value = size // divisor
        if value < 1:
            raise PreconditionViolation(
                f"image size {size} is too small for {mode or self.mode} plots "
                f"(needs at least {divisor} pixels)")
        return value

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphSettings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown settings: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def load(cls, path: Path | str) -> "GraphSettings":
        """Read settings from a ``.json`` file or a YAML document."""

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"settings file not found: {path}")
        with path.open("r", encoding="utf-8") as fp:
            if path.suffix == ".json":
                data = json.load(fp)
            else:
                import yaml
                data = yaml.safe_load(fp) or {}
        if not isinstance(data, dict):
            raise ValueError(f"settings file {path} must hold a mapping")
        return cls.from_dict(data)

    def save(self, path: Path | str) -> None:
        import yaml

        path = Path(path)
        data = self.to_dict()
        data["sim_window"] = list(self.sim_window)
        if self.z_window is not None:
            data["z_window"] = list(self.z_window)
        with path.open("w", encoding="utf-8") as fp:
            yaml.safe_dump(data, fp, sort_keys=False)


__all__ = ["FIDELITY_DIVISORS", "GraphSettings", "MODES"]
