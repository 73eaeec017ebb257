## base class of drawable for implicitplot
## Copyright (c) 2026 implicitplot contributors
## All rights reserved

import logging

logger = logging.getLogger(__name__)

## Generic drawing functions -- assumed to use current drawing pen
## (color, line weight, layer).  Coordinates are domain coordinates,
## as 2-tuples for planar plots or 3-tuples for isosurfaces.


def ispoint(x):
    return isinstance(x, (tuple, list)) and len(x) in (2, 3) and \
        all(isinstance(c, (int, float)) and not isinstance(c, bool) for c in x)


def issegment(x):
    return isinstance(x, (tuple, list)) and len(x) == 2 and \
        ispoint(x[0]) and ispoint(x[1])


def istriangle(x):
    return isinstance(x, (tuple, list)) and len(x) == 3 and \
        all(ispoint(p) for p in x)


class Drawable:
    """Base class for implicitplot rendering backends"""

    ## pure virtual functions -- override for specific rendering
    ## system
    def draw_pixel(self, p, color):
        print("pure virtual draw_pixel called: {}, {}".format(p, color))
        return

    def draw_line(self, p1, p2):
        print("pure virtual draw_line called: {}, {}".format(p1, p2))
        return

    def draw_triangle(self, v0, v1, v2):
        """Draw one isosurface facet; the base class draws its outline."""
        self.draw_line(v0, v1)
        self.draw_line(v1, v2)
        self.draw_line(v2, v0)

    ## batch functions, one call per extracted geometry list.  The first
    ## failure raised by the backend aborts the rest of the batch.
    def draw_segments(self, segments):
        count = 0
        for p1, p2 in segments:
            self.draw_line(p1, p2)
            count += 1
        logger.debug("%r drew %d segments", self, count)
        return count

    def draw_triangles(self, triangles):
        count = 0
        for v0, v1, v2 in triangles:
            self.draw_triangle(v0, v1, v2)
            count += 1
        logger.debug("%r drew %d triangles", self, count)
        return count

    def draw_polyline(self, points):
        for i in range(1, len(points)):
            self.draw_line(points[i-1], points[i])

    def __init__(self):
        self.__linewidth = 2
        self.__linecolor = 'black'
        self.__layer = False
        self.__layerlist = [False, 'default']

    ## Various property functions

    @property
    def layerlist(self):
        return self.__layerlist

    def _set_layerlist(self, lst):
        self.__layerlist = lst

    @layerlist.setter
    def layerlist(self, lst):
        if isinstance(lst, list):
            self._set_layerlist(lst)
        else:
            raise ValueError('bad layer list ' + str(lst))

    @property
    def layer(self):
        return self.__layer

    def _set_layer(self, lyr):
        self.__layer = lyr

    @layer.setter
    def layer(self, lyr=False):
        if lyr in self.layerlist:
            self._set_layer(lyr)
        else:
            raise ValueError('bad layer: ' + str(lyr))

    @property
    def linewidth(self):
        return self.__linewidth

    def _set_linewidth(self, lw):
        self.__linewidth = lw

    @linewidth.setter
    def linewidth(self, lw=False):
        if not isinstance(lw, (int, float)):
            raise ValueError('invalid linewidth ' + str(lw))
        if isinstance(lw, bool) and lw == False:
            lw = 2
        elif lw <= 0:
            raise ValueError('linewidth must be positive, got ' + str(lw))
        self._set_linewidth(lw)

    ## color can be set as a standard color name, an RGB byte triple,
    ## or an RGBA tuple with a float alpha (intensity)

    def __checkcolor(self, c):
        def isbyte(x):
            return isinstance(x, int) and not isinstance(x, bool) and 0 <= x <= 255
        if isinstance(c, str):
            return c in self.colordict
        if isinstance(c, (list, tuple)) and len(c) in (3, 4):
            if not all(isbyte(v) for v in c[:3]):
                return False
            if len(c) == 4:
                return isinstance(c[3], (int, float)) and 0.0 <= c[3] <= 1.0
            return True
        return False

    @property
    def linecolor(self):
        return self.__linecolor

    def _set_linecolor(self, c):
        self.__linecolor = c

    @linecolor.setter
    def linecolor(self, c):
        if self.__checkcolor(c):
            self._set_linecolor(c)
        else:
            raise ValueError('bad linecolor ' + str(c))

    def thing2rgba(self, thing):
        """Return ``thing`` as an ``(r, g, b, alpha)`` tuple."""
        if not self.__checkcolor(thing):
            raise ValueError('bad color ' + str(thing))
        if isinstance(thing, str):
            rgb = self.colordict[thing]
            return (rgb[0], rgb[1], rgb[2], 1.0)
        alpha = float(thing[3]) if len(thing) == 4 else 1.0
        return (thing[0], thing[1], thing[2], alpha)

    ## non-property methods

    def __repr__(self):
        return 'an abstract Drawable instance'

    def draw(self, x):
        if issegment(x):
            self.draw_line(x[0], x[1])
        elif istriangle(x):
            self.draw_triangle(x[0], x[1], x[2])
        elif ispoint(x):
            self.draw_pixel(x, self.linecolor)
        elif isinstance(x, list):
            for e in x:
                self.draw(e)
        else:
            raise ValueError(f'bad argument to Drawable.draw(): {x}')

    ## cause drawing page to be rendered -- pure virtual in base class
    def display(self):
        print('pure virtual display function called')
        return True

    colordict = {
        'black': (0, 0, 0),
        'white': (255, 255, 255),
        'red': (255, 0, 0),
        'green': (0, 128, 0),
        'blue': (0, 0, 255),
        'yellow': (255, 255, 0),
        'cyan': (0, 255, 255),
        'magenta': (255, 0, 255),
        'gray': (128, 128, 128),
    }
