## DXF rendering backend for implicitplot using the ezdxf package.
## Copyright (c) 2026 implicitplot contributors
## All rights reserved

import logging

import ezdxf
from ezdxf import colors
from ezdxf.lldxf.const import DXFError

import implicitplot.drawable as drawable
from implicitplot.errors import RenderingBackendFailure

logger = logging.getLogger(__name__)


## class to provide dxf drawing functionality
class ezdxfDraw(drawable.Drawable):

    def __init__(self, filename="implicitplot-out.dxf"):
        super().__init__()

        self.__doc = ezdxf.new(dxfversion='R2010', setup=False)
        self.__doc.layers.new('CONTOURS', dxfattribs={'color': 7})  # white
        self.__doc.layers.new('SURFACE', dxfattribs={'color': 4})  # aqua
        self.__doc.layers.new('POINTS', dxfattribs={'color': 8})  # gray
        self.__msp = self.__doc.modelspace()
        self.__filename = filename
        self.layerlist = [False, '0', 'CONTOURS', 'SURFACE', 'POINTS']

    def __repr__(self):
        return 'an instance of ezdxfDraw'

    @property
    def filename(self):
        return self.__filename

    @filename.setter
    def filename(self, name):
        if not isinstance(name, str):
            raise ValueError('bad (non-string) filename: ' + str(name))
        self.__filename = name

    @property
    def modelspace(self):
        return self.__msp

    def _attribs(self, default_layer, color):
        layer = self.layer
        if layer == False:
            layer = default_layer
        r, g, b, alpha = self.thing2rgba(color)
        attribs = {'layer': layer,
                   'true_color': colors.rgb2int((r, g, b))}
        if alpha < 1.0:
            attribs['transparency'] = colors.float2transparency(1.0 - alpha)
        return attribs

    @staticmethod
    def _xyz(p):
        return (float(p[0]), float(p[1]), float(p[2]) if len(p) > 2 else 0.0)

    ## Overload virtual implicitplot.drawable base class drawing methods

    def draw_pixel(self, p, color):
        try:
            self.__msp.add_point(self._xyz(p),
                                 dxfattribs=self._attribs('POINTS', color))
        except DXFError as exc:
            raise RenderingBackendFailure(f'cannot add DXF point: {exc}') from exc

    def draw_line(self, p1, p2):
        try:
            self.__msp.add_line(self._xyz(p1), self._xyz(p2),
                                dxfattribs=self._attribs('CONTOURS', self.linecolor))
        except DXFError as exc:
            raise RenderingBackendFailure(f'cannot add DXF line: {exc}') from exc

    def draw_triangle(self, v0, v1, v2):
        try:
            self.__msp.add_3dface([self._xyz(v0), self._xyz(v1), self._xyz(v2)],
                                  dxfattribs=self._attribs('SURFACE', self.linecolor))
        except DXFError as exc:
            raise RenderingBackendFailure(f'cannot add DXF face: {exc}') from exc

    def display(self):
        try:
            self.__doc.saveas(self.filename)
        except (OSError, DXFError) as exc:
            raise RenderingBackendFailure(
                f'cannot write {self.filename}: {exc}') from exc
        logger.info("wrote %d entities to %s", len(self.__msp), self.filename)
        return True
