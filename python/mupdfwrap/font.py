# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

from .buffer import Buffer
from .errors import PreconditionError
from .geometry import as_matrix
from .handles import Handle, Kind
from .native import libfile
from .path import Path
from .shim import ffi_try, ffi_call, to_c_int, to_cstr, borrowed_string, check_instance


class Font(Handle):
    kind = Kind.FONT

    def __init__(self, name, index=0):
        # Base 14 names are looked up first, anything else is a file name.
        self._init_owned(ffi_try(libfile.mupdf_new_font, to_cstr(name, 'Font name'),
                                 to_c_int(index, 'Font index')))

    @classmethod
    def from_buffer(cls, buffer, name='', index=0):
        check_instance(buffer, Buffer, 'Font data')
        return cls.from_owned(ffi_try(libfile.mupdf_new_font_from_buffer, to_cstr(name, 'Font name'),
                                      to_c_int(index, 'Font index'), buffer))

    @classmethod
    def from_bytes(cls, data, name='', index=0):
        with Buffer.from_bytes(data) as buffer:
            return cls.from_buffer(buffer, name, index)

    @property
    def name(self):
        return borrowed_string(ffi_call(libfile.mupdf_font_name, self))

    def encode_character(self, unicode):
        if isinstance(unicode, str):
            if len(unicode) != 1:
                raise PreconditionError('Expected a single character.')
            unicode = ord(unicode)
        return ffi_try(libfile.mupdf_encode_character, self, to_c_int(unicode, 'Code point'))

    def advance_glyph(self, glyph, vertical=False):
        return ffi_try(libfile.mupdf_advance_glyph, self, to_c_int(glyph, 'Glyph id'), bool(vertical))

    def outline_glyph(self, glyph, ctm=None):
        ptr = ffi_try(libfile.mupdf_outline_glyph, self, to_c_int(glyph, 'Glyph id'), as_matrix(ctm))
        if not ptr:
            # Glyphs without an outline, such as the space, have no path.
            return None
        return Path.from_owned(ptr)

    def __repr__(self):
        if self.closed:
            return super().__repr__()
        return f'<Font {self.name}>'
