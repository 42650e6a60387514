# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

from .buffer import Buffer
from .colorspace import Colorspace
from .cookie import Cookie
from .geometry import Rect, MIN_INF_RECT, MAX_INF_RECT, as_matrix, as_rect
from .handles import Handle, Kind, check_kind
from .native import libfile
from .options import StextFlags
from .pixmap import Pixmap
from .shim import ffi_try, check_instance
from .stext import StextPage, search_quads, SEARCH_HIT_MAX


def infinite_rect():
    return Rect(MIN_INF_RECT, MIN_INF_RECT, MAX_INF_RECT, MAX_INF_RECT)


class DisplayList(Handle):
    kind = Kind.DISPLAY_LIST

    def __init__(self, mediabox):
        self._init_owned(ffi_try(libfile.mupdf_new_display_list, as_rect(mediabox, 'Media box')))

    def bound(self):
        return ffi_try(libfile.mupdf_bound_display_list, self)

    def to_pixmap(self, ctm=None, colorspace=None, alpha=False):
        if colorspace is None:
            with Colorspace.device_rgb() as rgb:
                return self.to_pixmap(ctm, rgb, alpha)
        check_instance(colorspace, Colorspace, 'Colorspace')
        return Pixmap.from_owned(ffi_try(libfile.mupdf_display_list_to_pixmap, self, as_matrix(ctm),
                                         colorspace, bool(alpha)))

    def to_svg(self, ctm=None, cookie=None):
        check_instance(cookie, Cookie, 'Cookie', optional=True)
        with Buffer.from_owned(ffi_try(libfile.mupdf_display_list_to_svg, self, as_matrix(ctm), cookie)) as buf:
            return buf.to_str()

    def to_stext_page(self, flags=StextFlags(0)):
        return StextPage.from_owned(ffi_try(libfile.mupdf_display_list_to_text_page, self, int(flags)))

    def run(self, device, ctm=None, area=None, cookie=None):
        check_kind(device, Kind.DEVICE, 'Device')
        check_instance(cookie, Cookie, 'Cookie', optional=True)
        area = infinite_rect() if area is None else as_rect(area, 'Area')
        ffi_try(libfile.mupdf_display_list_run, self, device, as_matrix(ctm), area, cookie)

    def search(self, needle, hit_max=SEARCH_HIT_MAX):
        return search_quads(libfile.mupdf_search_display_list, self, needle, hit_max)
