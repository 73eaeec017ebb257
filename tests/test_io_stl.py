import io
import struct

import pytest

from implicitplot.io.stl import facet_normal, write_stl

TRIANGLES = [
    ((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)),
    ((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)),
]


def test_facet_normal():
    assert facet_normal(*TRIANGLES[0]) == (0.0, 0.0, 1.0)
    assert facet_normal(*TRIANGLES[1]) == (1.0, 0.0, 0.0)
    assert facet_normal((0, 0, 0), (1, 1, 1), (2, 2, 2)) == (0.0, 0.0, 0.0)


def test_write_stl_binary(tmp_path):
    path = tmp_path / 'tri.stl'
    assert write_stl(TRIANGLES, path, binary=True, name='test') == 2

    data = path.read_bytes()
    assert len(data) == 80 + 4 + 2 * 50
    assert data[0:4] == b'test'
    assert struct.unpack('<I', data[80:84])[0] == 2
    values = struct.unpack('<12fH', data[84:134])
    assert values[:3] == pytest.approx((0.0, 0.0, 1.0))
    assert values[3:12] == pytest.approx((0, 0, 0, 1, 0, 0, 0, 1, 0))


def test_write_stl_binary_stream():
    buf = io.BytesIO()
    write_stl(TRIANGLES[:1], buf)
    assert len(buf.getvalue()) == 80 + 4 + 50
    assert not buf.closed


def test_write_stl_ascii():
    buf = io.StringIO()
    write_stl(TRIANGLES, buf, binary=False, name='ascii_test')

    text = buf.getvalue()
    assert text.startswith('solid ascii_test')
    assert text.count('facet normal') == 2
    assert text.count('vertex') == 6
    assert text.strip().endswith('endsolid ascii_test')


def test_write_stl_empty(tmp_path):
    path = tmp_path / 'empty.stl'
    assert write_stl([], path) == 0
    assert path.stat().st_size == 84


def test_write_stl_ascii_path(tmp_path):
    path = tmp_path / 'tri.stl'
    assert write_stl(TRIANGLES[:1], path, binary=False) == 1
    lines = path.read_text(encoding='ascii').splitlines()
    assert lines[0] == 'solid implicitplot'
    assert lines[2] == '    outer loop'
    assert len(lines) == 9
