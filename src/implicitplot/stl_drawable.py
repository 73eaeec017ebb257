## STL rendering backend for implicitplot isosurfaces.
## Copyright (c) 2026 implicitplot contributors
## All rights reserved

import logging

import implicitplot.drawable as drawable
from implicitplot.errors import RenderingBackendFailure
from implicitplot.io.stl import write_stl

logger = logging.getLogger(__name__)


## collects triangles and writes them as one STL solid on display().
## STL carries facets only, so points and lines are refused.
class stlDraw(drawable.Drawable):

    def __init__(self, filename="implicitplot-out.stl", binary=True):
        super().__init__()
        self.__filename = filename
        self.__binary = binary
        self.__triangles = []

    def __repr__(self):
        return 'an instance of stlDraw'

    @property
    def filename(self):
        return self.__filename

    @property
    def triangles(self):
        return list(self.__triangles)

    def draw_pixel(self, p, color):
        raise RenderingBackendFailure('STL output cannot hold points')

    def draw_line(self, p1, p2):
        raise RenderingBackendFailure('STL output cannot hold line segments')

    def draw_triangle(self, v0, v1, v2):
        if len(v0) < 3 or len(v1) < 3 or len(v2) < 3:
            raise RenderingBackendFailure('STL facets need 3D vertices')
        self.__triangles.append((tuple(v0), tuple(v1), tuple(v2)))

    def display(self):
        try:
            count = write_stl(self.__triangles, self.__filename,
                              binary=self.__binary)
        except OSError as exc:
            raise RenderingBackendFailure(
                f'cannot write {self.__filename}: {exc}') from exc
        logger.info("wrote %d facets to %s", count, self.__filename)
        return True
