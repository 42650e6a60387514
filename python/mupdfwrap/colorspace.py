# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import ctypes
from enum import Enum

from .errors import PreconditionError
from .geometry import ColorParams
from .handles import Handle, Kind
from .native import libfile
from .shim import ffi_try, ffi_call, borrowed_string, to_float_array, check_instance


class DeviceColorspace(Enum):
    Gray = 0
    RGB = 1
    BGR = 2
    CMYK = 3


class Colorspace(Handle):
    kind = Kind.COLORSPACE

    @classmethod
    def device(cls, which):
        if not isinstance(which, DeviceColorspace):
            raise PreconditionError('Argument must be a DeviceColorspace.')
        return cls.adopt(ffi_try(libfile.mupdf_device_colorspace, which.value))

    @classmethod
    def device_gray(cls):
        return cls.device(DeviceColorspace.Gray)

    @classmethod
    def device_rgb(cls):
        return cls.device(DeviceColorspace.RGB)

    @classmethod
    def device_bgr(cls):
        return cls.device(DeviceColorspace.BGR)

    @classmethod
    def device_cmyk(cls):
        return cls.device(DeviceColorspace.CMYK)

    @property
    def n(self):
        return ffi_call(libfile.mupdf_colorspace_n, self)

    @property
    def name(self):
        return borrowed_string(ffi_call(libfile.mupdf_colorspace_name, self))

    def convert_color(self, values, dest, params=None, proof=None):
        """Convert ``values`` in this colorspace to a tuple in ``dest``."""
        check_instance(dest, Colorspace, 'Destination colorspace')
        check_instance(proof, Colorspace, 'Proof colorspace', optional=True)
        if params is None:
            params = ColorParams.default()
        check_instance(params, ColorParams, 'Color parameters')
        src, n = to_float_array(values, 'Color')
        if n != self.n:
            raise PreconditionError(f'Color has {n} components, colorspace expects {self.n}.')
        out = (ctypes.c_float * dest.n)()
        ffi_try(libfile.mupdf_convert_color, self, src, dest, out, proof, params)
        return tuple(out)

    def __repr__(self):
        if self.closed:
            return super().__repr__()
        return f'<Colorspace {self.name}>'


def color_argument(colorspace, color):
    """Marshal an optional fill color into (colorspace, float array)."""
    check_instance(colorspace, Colorspace, 'Colorspace')
    values, n = to_float_array(color, 'Color')
    if n != colorspace.n:
        raise PreconditionError(f'Color has {n} components, colorspace expects {colorspace.n}.')
    return values
