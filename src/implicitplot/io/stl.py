"""STL export of isosurface triangles."""

from __future__ import annotations

import math
import struct
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Sequence, Tuple

Vec3 = Tuple[float, float, float]

_HEADER_SIZE = 80
_STRUCT_TRIANGLE = struct.Struct('<12fH')


def facet_normal(v0: Sequence[float], v1: Sequence[float], v2: Sequence[float]) -> Vec3:
    """Unit normal of a facet, or ``(0, 0, 0)`` if it is degenerate."""

    ax, ay, az = v1[0] - v0[0], v1[1] - v0[1], v1[2] - v0[2]
    bx, by, bz = v2[0] - v0[0], v2[1] - v0[1], v2[2] - v0[2]
    nx, ny, nz = ay * bz - az * by, az * bx - ax * bz, ax * by - ay * bx
    length = math.sqrt(nx * nx + ny * ny + nz * nz)
    if length == 0.0:
        return (0.0, 0.0, 0.0)
    return (nx / length, ny / length, nz / length)


def write_stl(triangles: Iterable[Sequence[Sequence[float]]], path_or_file, *,
              binary: bool = True, name: str = 'implicitplot') -> int:
    """Write ``triangles`` (three XYZ vertices each) to STL.

    ``path_or_file`` can be a filesystem path or an open binary/text stream.
    Returns the number of facets written.
    """

    facets = [(facet_normal(*tri), tuple(tri[0]), tuple(tri[1]), tuple(tri[2]))
              for tri in triangles]
    if binary:
        with _target(path_or_file, 'wb') as stream:
            stream.write(_binary_header(name, len(facets)))
            for normal, v0, v1, v2 in facets:
                stream.write(_STRUCT_TRIANGLE.pack(*normal, *v0, *v1, *v2, 0))
    else:
        with _target(path_or_file, 'w') as stream:
            stream.writelines(line + '\n' for line in _ascii_lines(facets, name))
    return len(facets)


@contextmanager
def _target(path_or_file, mode: str):
    """Yield a writable stream; paths are opened and closed here, streams are left open."""

    if hasattr(path_or_file, 'write'):
        yield path_or_file
        return
    encoding = None if 'b' in mode else 'ascii'
    with open(path_or_file, mode, encoding=encoding) as stream:
        yield stream


def _binary_header(name: str, count: int) -> bytes:
    label = name[:_HEADER_SIZE].encode('ascii', errors='replace').ljust(_HEADER_SIZE, b' ')
    return label + struct.pack('<I', count)


def _ascii_lines(facets: List, name: str) -> Iterator[str]:
    def xyz(v):
        return ' '.join(f'{c:.6e}' for c in v)

    yield f'solid {name}'
    for normal, *vertices in facets:
        yield f'  facet normal {xyz(normal)}'
        yield '    outer loop'
        for v in vertices:
            yield f'      vertex {xyz(v)}'
        yield '    endloop'
        yield '  endfacet'
    yield f'endsolid {name}'


__all__ = ["facet_normal", "write_stl"]
