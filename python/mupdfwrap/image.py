# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

from .handles import Handle, Kind, check_kind
from .native import libfile
from .pixmap import Pixmap
from .shim import ffi_try, ffi_call, to_bytepath, to_finite_float, check_instance


class Image(Handle):
    kind = Kind.IMAGE

    @classmethod
    def from_pixmap(cls, pixmap):
        check_instance(pixmap, Pixmap, 'Pixmap')
        return cls.from_owned(ffi_try(libfile.mupdf_new_image_from_pixmap, pixmap))

    @classmethod
    def from_file(cls, filename):
        return cls.from_owned(ffi_try(libfile.mupdf_new_image_from_file, to_bytepath(filename)))

    @classmethod
    def from_display_list(cls, display_list, w, h):
        check_kind(display_list, Kind.DISPLAY_LIST, 'Display list')
        return cls.from_owned(ffi_try(libfile.mupdf_new_image_from_display_list, display_list,
                                      to_finite_float(w, 'Width'), to_finite_float(h, 'Height')))

    def to_pixmap(self):
        return Pixmap.from_owned(ffi_try(libfile.mupdf_get_pixmap_from_image, self))

    @property
    def width(self):
        return ffi_call(libfile.mupdf_image_property, self, 0)

    @property
    def height(self):
        return ffi_call(libfile.mupdf_image_property, self, 1)

    @property
    def n(self):
        return ffi_call(libfile.mupdf_image_property, self, 2)

    @property
    def bpc(self):
        return ffi_call(libfile.mupdf_image_property, self, 3)
