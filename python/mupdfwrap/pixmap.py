# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import ctypes

from .buffer import Buffer
from .colorspace import Colorspace
from .errors import PreconditionError
from .geometry import IRect
from .handles import Handle, Kind
from .native import libfile
from .options import ImageFormat
from .shim import ffi_try, ffi_call, to_c_int, to_float, to_bytepath, check_enum, check_instance

PROP_X = 0
PROP_Y = 1
PROP_W = 2
PROP_H = 3
PROP_N = 4
PROP_ALPHA = 5
PROP_STRIDE = 6


class Pixmap(Handle):
    kind = Kind.PIXMAP

    def __init__(self, colorspace, x, y, w, h, alpha=False):
        check_instance(colorspace, Colorspace, 'Colorspace', optional=True)
        for v, what in ((x, 'X origin'), (y, 'Y origin'), (w, 'Width'), (h, 'Height')):
            to_c_int(v, what)
        if w < 0 or h < 0:
            raise PreconditionError('Pixmap size must not be negative.')
        self._init_owned(ffi_try(libfile.mupdf_new_pixmap, colorspace, x, y, w, h, bool(alpha)))

    def _property(self, which):
        return ffi_call(libfile.mupdf_pixmap_property, self, which)

    @property
    def x(self):
        return self._property(PROP_X)

    @property
    def y(self):
        return self._property(PROP_Y)

    @property
    def width(self):
        return self._property(PROP_W)

    @property
    def height(self):
        return self._property(PROP_H)

    @property
    def n(self):
        return self._property(PROP_N)

    @property
    def alpha(self):
        return bool(self._property(PROP_ALPHA))

    @property
    def stride(self):
        return self._property(PROP_STRIDE)

    @property
    def rect(self):
        x = self.x
        y = self.y
        return IRect(x, y, x + self.width, y + self.height)

    @property
    def samples(self):
        ptr = ffi_call(libfile.mupdf_pixmap_samples, self)
        if not ptr:
            return b''
        return ctypes.string_at(ptr, self.stride * self.height)

    @property
    def colorspace(self):
        ptr = ffi_call(libfile.mupdf_pixmap_colorspace, self)
        if not ptr:
            return None
        return Colorspace.adopt(ptr)

    def copy(self):
        return Pixmap.from_owned(ffi_try(libfile.mupdf_clone_pixmap, self))

    def clear(self, value=None):
        if value is None:
            ffi_try(libfile.mupdf_clear_pixmap, self)
        else:
            ffi_try(libfile.mupdf_clear_pixmap_with_value, self, to_c_int(value, 'Clear value'))

    def invert(self):
        ffi_try(libfile.mupdf_invert_pixmap, self)

    def gamma(self, gamma):
        ffi_try(libfile.mupdf_gamma_pixmap, self, to_float(gamma, 'Gamma'))

    def tint(self, black, white):
        ffi_try(libfile.mupdf_tint_pixmap, self, to_c_int(black, 'Black'), to_c_int(white, 'White'))

    def save_as(self, filename, fmt=ImageFormat.PNG):
        value = check_enum(fmt, ImageFormat, 'Image format')
        ffi_try(libfile.mupdf_save_pixmap_as, self, to_bytepath(filename), value)

    def image_data(self, fmt=ImageFormat.PNG):
        value = check_enum(fmt, ImageFormat, 'Image format')
        return Buffer.from_owned(ffi_try(libfile.mupdf_pixmap_get_image_data, self, value))

    def to_bitmap(self):
        return Bitmap.from_pixmap(self)

    def __repr__(self):
        if self.closed:
            return super().__repr__()
        return f'<Pixmap {self.width}x{self.height} n={self.n}>'


class Bitmap(Handle):
    kind = Kind.BITMAP

    @classmethod
    def from_pixmap(cls, pixmap):
        check_instance(pixmap, Pixmap, 'Pixmap')
        return cls.from_owned(ffi_try(libfile.mupdf_new_bitmap_from_pixmap, pixmap))

    @property
    def width(self):
        return ffi_call(libfile.mupdf_bitmap_property, self, 0)

    @property
    def height(self):
        return ffi_call(libfile.mupdf_bitmap_property, self, 1)

    @property
    def n(self):
        return ffi_call(libfile.mupdf_bitmap_property, self, 2)

    @property
    def stride(self):
        return ffi_call(libfile.mupdf_bitmap_property, self, 3)
