# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

# Value types shared with the native library. Field order and widths
# must match the C declarations exactly.

import ctypes
import math
from enum import Enum

from .errors import PreconditionError

# Bounds of the native "infinite" integer rectangle.
MIN_INF_RECT = -0x80000000
MAX_INF_RECT = 0x7fffff80


class _Value(ctypes.Structure):

    def astuple(self):
        return tuple(getattr(self, name) for name, _ in self._fields_)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.astuple() == other.astuple()

    def __repr__(self):
        fields = ', '.join(f'{name}={getattr(self, name)!r}' for name, _ in self._fields_)
        return f'{type(self).__name__}({fields})'

    def copy(self):
        return type(self).from_buffer_copy(self)


class Point(_Value):
    _fields_ = [('x', ctypes.c_float),
                ('y', ctypes.c_float)]

    def transform(self, m):
        return Point(self.x * m.a + self.y * m.c + m.e,
                     self.x * m.b + self.y * m.d + m.f)


class Rect(_Value):
    _fields_ = [('x0', ctypes.c_float),
                ('y0', ctypes.c_float),
                ('x1', ctypes.c_float),
                ('y1', ctypes.c_float)]

    @property
    def width(self):
        return self.x1 - self.x0

    @property
    def height(self):
        return self.y1 - self.y0

    def is_empty(self):
        return self.x0 >= self.x1 or self.y0 >= self.y1

    def contains(self, x, y):
        return self.x0 <= x < self.x1 and self.y0 <= y < self.y1

    def round(self):
        return IRect(math.floor(self.x0), math.floor(self.y0),
                     math.ceil(self.x1), math.ceil(self.y1))


class IRect(_Value):
    _fields_ = [('x0', ctypes.c_int),
                ('y0', ctypes.c_int),
                ('x1', ctypes.c_int),
                ('y1', ctypes.c_int)]

    @classmethod
    def infinite(cls):
        return cls(MIN_INF_RECT, MIN_INF_RECT, MAX_INF_RECT, MAX_INF_RECT)

    def is_infinite(self):
        return self.astuple() == (MIN_INF_RECT, MIN_INF_RECT, MAX_INF_RECT, MAX_INF_RECT)

    @property
    def width(self):
        return self.x1 - self.x0

    @property
    def height(self):
        return self.y1 - self.y0


class Matrix(_Value):
    _fields_ = [('a', ctypes.c_float),
                ('b', ctypes.c_float),
                ('c', ctypes.c_float),
                ('d', ctypes.c_float),
                ('e', ctypes.c_float),
                ('f', ctypes.c_float)]

    @classmethod
    def identity(cls):
        return cls(1, 0, 0, 1, 0, 0)

    @classmethod
    def scale(cls, sx, sy=None):
        return cls(sx, 0, 0, sx if sy is None else sy, 0, 0)

    @classmethod
    def translate(cls, tx, ty):
        return cls(1, 0, 0, 1, tx, ty)

    @classmethod
    def rotate(cls, degrees):
        rad = math.radians(degrees)
        s = math.sin(rad)
        c = math.cos(rad)
        return cls(c, s, -s, c, 0, 0)

    def concat(self, other):
        return Matrix(self.a * other.a + self.b * other.c,
                      self.a * other.b + self.b * other.d,
                      self.c * other.a + self.d * other.c,
                      self.c * other.b + self.d * other.d,
                      self.e * other.a + self.f * other.c + other.e,
                      self.e * other.b + self.f * other.d + other.f)


class Quad(_Value):
    _fields_ = [('ul', Point),
                ('ur', Point),
                ('ll', Point),
                ('lr', Point)]

    def astuple(self):
        return (self.ul.astuple(), self.ur.astuple(), self.ll.astuple(), self.lr.astuple())

    def is_zero(self):
        return all(v == 0 for p in self.astuple() for v in p)

    @property
    def rect(self):
        xs = (self.ul.x, self.ur.x, self.ll.x, self.lr.x)
        ys = (self.ul.y, self.ur.y, self.ll.y, self.lr.y)
        return Rect(min(xs), min(ys), max(xs), max(ys))


class Location(_Value):
    _fields_ = [('chapter', ctypes.c_int),
                ('page', ctypes.c_int)]

    def is_valid(self):
        return self.chapter >= 0 and self.page >= 0


class LinkDestType(Enum):
    Fit = 0
    FitB = 1
    FitH = 2
    FitBH = 3
    FitV = 4
    FitBV = 5
    FitR = 6
    XYZ = 7


class LinkDest(_Value):
    _fields_ = [('loc', Location),
                ('type', ctypes.c_int),
                ('x', ctypes.c_float),
                ('y', ctypes.c_float),
                ('w', ctypes.c_float),
                ('h', ctypes.c_float),
                ('zoom', ctypes.c_float)]

    def astuple(self):
        return (self.loc.astuple(), self.type, self.x, self.y, self.w, self.h, self.zoom)

    @property
    def dest_type(self):
        return LinkDestType(self.type)


class RenderingIntent(Enum):
    Perceptual = 0
    RelativeColorimetric = 1
    Saturation = 2
    AbsoluteColorimetric = 3


class ColorParams(_Value):
    _fields_ = [('ri', ctypes.c_uint8),
                ('bp', ctypes.c_uint8),
                ('op', ctypes.c_uint8),
                ('opm', ctypes.c_uint8)]

    @classmethod
    def default(cls):
        return cls(RenderingIntent.RelativeColorimetric.value, 1, 0, 0)


def _coerce(cls, value, what):
    if isinstance(value, cls):
        return value
    if isinstance(value, (list, tuple)) and len(value) == len(cls._fields_):
        try:
            return cls(*value)
        except TypeError:
            pass
    raise PreconditionError(f'{what} must be a {cls.__name__} or a {len(cls._fields_)}-tuple.')


def as_point(value, what='Point'):
    return _coerce(Point, value, what)


def as_rect(value, what='Rectangle'):
    return _coerce(Rect, value, what)


def as_irect(value, what='Rectangle'):
    return _coerce(IRect, value, what)


def as_matrix(value, what='Matrix'):
    if value is None:
        return Matrix.identity()
    return _coerce(Matrix, value, what)
