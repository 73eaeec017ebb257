"""Command line entry point: plot an implicit equation to DXF or STL.

Example
=======

.. code-block:: bash

    implicitplot -e circle -p images/circle.dxf
    implicitplot -m 3d -e torus -w 800 -H 800 -p images/torus.stl
    implicitplot -e mypkg.fields:heart -x -2 -X 2 -y -2 -Y 2

Prints the absolute path of the written file on success.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from implicitplot.config import MODES, GraphSettings
from implicitplot.errors import ImplicitPlotError
from implicitplot.evaluator import resolve
from implicitplot.logging_config import setup_logging
from implicitplot.plot import run

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="implicitplot",
        description="Sample an implicit equation and write its zero contour or isosurface.")
    parser.add_argument("-w", "--width", type=int, help="image width in pixels (default 600)")
    parser.add_argument("-H", "--height", type=int, help="image height in pixels (default 600)")
    parser.add_argument("-x", "--xmin", type=float, help="minimum X of the simulation window")
    parser.add_argument("-X", "--xmax", type=float, help="maximum X of the simulation window")
    parser.add_argument("-y", "--ymin", type=float, help="minimum Y of the simulation window")
    parser.add_argument("-Y", "--ymax", type=float, help="maximum Y of the simulation window")
    parser.add_argument("--zmin", type=float, help="minimum Z (3d mode, defaults to xmin)")
    parser.add_argument("--zmax", type=float, help="maximum Z (3d mode, defaults to xmax)")
    parser.add_argument("-e", "--equation",
                        help="built-in field name or 'module:function' (default circle)")
    parser.add_argument("-p", "--path", help="output file, .dxf or .stl (default images/graph.dxf)")
    parser.add_argument("-m", "--mode", choices=MODES, help="plot mode (default 2d)")
    parser.add_argument("-j", "--workers", type=int, help="sampling threads (default 1)")
    parser.add_argument("-c", "--config", type=Path, help="YAML or JSON settings file")
    parser.add_argument("--ascii", action="store_true", help="write ASCII instead of binary STL")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    parser.add_argument("--log-file", help="also write the log to this file")
    return parser


def settings_from_args(args: argparse.Namespace) -> GraphSettings:
    """Merge defaults, an optional settings file and explicit options."""

    settings = GraphSettings.load(args.config) if args.config else GraphSettings()

    overrides = {}
    for option, key in (("width", "image_width"), ("height", "image_height"),
                        ("equation", "equation"), ("path", "path"),
                        ("mode", "mode"), ("workers", "workers")):
        value = getattr(args, option)
        if value is not None:
            overrides[key] = value

    bounds = list(settings.sim_window)
    for k, option in enumerate(("xmin", "xmax", "ymin", "ymax")):
        value = getattr(args, option)
        if value is not None:
            bounds[k] = value
    overrides["sim_window"] = tuple(bounds)

    if args.zmin is not None or args.zmax is not None:
        zlo, zhi = settings.z_window or settings.x_window
        overrides["z_window"] = (args.zmin if args.zmin is not None else zlo,
                                 args.zmax if args.zmax is not None else zhi)

    return replace(settings, **overrides)


def make_drawable(path: Path, *, ascii_stl: bool = False):
    """Pick a backend from the output suffix; unknown suffixes become ``.dxf``."""

    if path.suffix.lower() == ".stl":
        from implicitplot.stl_drawable import stlDraw
        return path, stlDraw(str(path), binary=not ascii_stl)

    from implicitplot.ezdxf_drawable import ezdxfDraw
    if path.suffix.lower() != ".dxf":
        path = path.with_suffix(".dxf")
    return path, ezdxfDraw(str(path))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        settings = settings_from_args(args)
        evaluator = resolve(settings.equation)
        path, drawable = make_drawable(Path(settings.path), ascii_stl=args.ascii)
        path.parent.mkdir(parents=True, exist_ok=True)
        result = run(evaluator, settings, drawable)
    except (ImplicitPlotError, ValueError, OSError, ImportError) as exc:
        logger.error("%s", exc)
        return 1

    logger.info("%s plot of %s: %d samples, %d segments, %d triangles, %d pixels",
                result.mode, settings.equation, result.samples, result.segments,
                result.triangles, result.pixels)
    print(path.resolve())
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
