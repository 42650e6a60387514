# SPDX-License-Identifier: Apache-2.0
# Copyright 2024 The mupdfwrap developers

from enum import Enum

from .buffer import Buffer
from .colorspace import Colorspace
from .cookie import Cookie
from .display_list import DisplayList
from .geometry import as_matrix
from .handles import Handle, Kind, check_kind
from .native import libfile
from .options import StextFlags
from .pixmap import Pixmap
from .shim import ffi_try, ffi_call, borrowed_string, check_enum, check_instance
from .stext import StextPage, search_quads, SEARCH_HIT_MAX


class RunMode(Enum):
    All = 0
    Contents = 1
    Annotations = 2
    Widgets = 3


class Link(Handle):
    kind = Kind.LINK

    @property
    def rect(self):
        return ffi_call(libfile.mupdf_link_rect, self)

    @property
    def uri(self):
        return borrowed_string(ffi_call(libfile.mupdf_link_uri, self))

    @property
    def next(self):
        ptr = ffi_call(libfile.mupdf_link_next, self)
        if not ptr:
            return None
        return Link.adopt(ptr)

    def __repr__(self):
        if self.closed:
            return super().__repr__()
        return f'<Link {self.uri!r}>'


class Separations(Handle):
    kind = Kind.SEPARATIONS

    def __len__(self):
        return ffi_call(libfile.mupdf_count_separations, self)


class Page(Handle):
    kind = Kind.PAGE

    def bounds(self):
        return ffi_try(libfile.mupdf_bound_page, self)

    def to_pixmap(self, ctm=None, colorspace=None, alpha=False, show_extras=True):
        if colorspace is None:
            with Colorspace.device_rgb() as rgb:
                return self.to_pixmap(ctm, rgb, alpha, show_extras)
        check_instance(colorspace, Colorspace, 'Colorspace')
        return Pixmap.from_owned(ffi_try(libfile.mupdf_page_to_pixmap, self, as_matrix(ctm), colorspace,
                                         bool(alpha), bool(show_extras)))

    def to_svg(self, ctm=None, cookie=None):
        check_instance(cookie, Cookie, 'Cookie', optional=True)
        with Buffer.from_owned(ffi_try(libfile.mupdf_page_to_svg, self, as_matrix(ctm), cookie)) as buf:
            return buf.to_str()

    def to_stext_page(self, flags=StextFlags(0)):
        return StextPage.from_owned(ffi_try(libfile.mupdf_page_to_text_page, self, int(flags)))

    def to_display_list(self, annotations=True):
        return DisplayList.from_owned(ffi_try(libfile.mupdf_page_to_display_list, self, bool(annotations)))

    def to_text(self):
        with self.to_stext_page() as stext:
            return stext.to_text()

    def run(self, device, ctm=None, cookie=None, mode=RunMode.All):
        check_kind(device, Kind.DEVICE, 'Device')
        check_instance(cookie, Cookie, 'Cookie', optional=True)
        which = check_enum(mode, RunMode, 'Run mode')
        ffi_try(libfile.mupdf_run_page, self, device, as_matrix(ctm), which, cookie)

    def run_contents(self, device, ctm=None, cookie=None):
        self.run(device, ctm, cookie, RunMode.Contents)

    def run_annotations(self, device, ctm=None, cookie=None):
        self.run(device, ctm, cookie, RunMode.Annotations)

    def run_widgets(self, device, ctm=None, cookie=None):
        self.run(device, ctm, cookie, RunMode.Widgets)

    def links(self):
        ptr = ffi_try(libfile.mupdf_load_links, self)
        result = []
        link = Link.from_owned(ptr) if ptr else None
        while link is not None:
            result.append(link)
            link = link.next
        return result

    def separations(self):
        ptr = ffi_try(libfile.mupdf_page_separations, self)
        if not ptr:
            return None
        return Separations.from_owned(ptr)

    def search(self, needle, hit_max=SEARCH_HIT_MAX):
        return search_quads(libfile.mupdf_search_page, self, needle, hit_max)
