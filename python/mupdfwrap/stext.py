# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

import ctypes

from .buffer import Buffer
from .geometry import Quad, as_point, as_rect
from .handles import Handle, Kind
from .native import libfile
from .options import TextFormat
from .shim import ffi_try, to_c_int, to_cstr, to_float, check_enum, take_quads

SEARCH_HIT_MAX = 16


def search_quads(func, target, needle, hit_max):
    """Run one of the native search entry points and copy out the hits."""
    needle = to_cstr(needle, 'Search string')
    to_c_int(hit_max, 'Maximum hit count')
    count = ctypes.c_int(0)
    quads = ffi_try(func, target, needle, hit_max, ctypes.pointer(count))
    return take_quads(quads, count.value)


class StextPage(Handle):
    kind = Kind.STEXT_PAGE

    def __init__(self, mediabox):
        self._init_owned(ffi_try(libfile.mupdf_new_stext_page, as_rect(mediabox, 'Media box')))

    def search(self, needle, hit_max=SEARCH_HIT_MAX):
        return search_quads(libfile.mupdf_search_stext_page, self, needle, hit_max)

    def highlight_selection(self, a, b, max_quads=SEARCH_HIT_MAX):
        to_c_int(max_quads, 'Maximum quad count')
        quads = (Quad * max(max_quads, 0))()
        n = ffi_try(libfile.mupdf_highlight_selection, self, as_point(a), as_point(b), quads, max_quads)
        return [quads[i].copy() for i in range(n)]

    def to_buffer(self, fmt, scale=1.0):
        value = check_enum(fmt, TextFormat, 'Text format')
        return Buffer.from_owned(ffi_try(libfile.mupdf_stext_page_to_buffer, self, value, to_float(scale, 'Scale')))

    def _serialize(self, fmt, scale=1.0):
        with self.to_buffer(fmt, scale) as buf:
            return buf.to_str()

    def to_text(self):
        return self._serialize(TextFormat.Text)

    def to_html(self):
        return self._serialize(TextFormat.HTML)

    def to_xhtml(self):
        return self._serialize(TextFormat.XHTML)

    def to_xml(self):
        return self._serialize(TextFormat.XML)

    def to_json(self, scale=1.0):
        return self._serialize(TextFormat.JSON, scale)
